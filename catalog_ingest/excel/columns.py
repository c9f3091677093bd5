from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from ..models.column_map import (
    BARCODE,
    CASE_COST,
    DESCRIPTION,
    MARGIN,
    RETAIL_PRICE,
    UNIT_COST,
    UNIT_PROFIT,
    UNITS_PER_CASE,
    ColumnMap,
)

"""Column classifier.

Maps header labels to semantic fields with an ordered rule table. Rules are
tried in order for each header cell; the first rule whose predicate matches
consumes the cell, even if its field is already taken by an earlier column
(a field always keeps the first column that matched it).

Typical labels seen in supplier sheets:

    "Item Description" | "Barcode" | "Unit Cost" | "Unités - Units"
    "Average market retail" | "Unit Profit" | "Marge / Margin"
"""

__all__ = [
    "ColumnRule",
    "COLUMN_RULES",
    "classify_columns",
    "classify_label",
    "normalize_label",
]

Predicate = Callable[[str], bool]


@dataclass(frozen=True)
class ColumnRule:
    field: str
    predicate: Predicate

    def matches(self, label: str) -> bool:
        return self.predicate(label)


def _has_all(*words: str) -> Predicate:
    return lambda label: all(w in label for w in words)


def _has_any(*words: str) -> Predicate:
    return lambda label: any(w in label for w in words)


def _not_sales(label: str) -> bool:
    return "sales" not in label and "forecast" not in label


def _is_description(label: str) -> bool:
    return ("item" in label and "description" in label) or label == "description" or "produto" in label


def _is_units_per_case(label: str) -> bool:
    return ("unités" in label or "units" in label) and _not_sales(label)


def _is_unit_cost(label: str) -> bool:
    return "cost" in label and "unit" in label and "case" not in label


def _is_retail_price(label: str) -> bool:
    return (
        ("average" in label and "retail" in label)
        or ("retail" in label and "price" in label)
        or ("market" in label and "retail" in label)
    )


def _is_retail_fallback(label: str) -> bool:
    return label in ("retail", "price") and _not_sales(label)


# 優先順 (上から評価)
COLUMN_RULES: tuple[ColumnRule, ...] = (
    ColumnRule(DESCRIPTION, _is_description),
    ColumnRule(BARCODE, _has_any("barcode", "upc", "gtin")),
    ColumnRule(UNITS_PER_CASE, _is_units_per_case),
    ColumnRule(UNIT_COST, _is_unit_cost),
    ColumnRule(CASE_COST, _has_all("cost", "case")),
    ColumnRule(RETAIL_PRICE, _is_retail_price),
    ColumnRule(UNIT_PROFIT, _has_all("profit", "unit")),
    ColumnRule(MARGIN, _has_any("margin", "marge")),
)


def normalize_label(cell: Any) -> str:
    if cell is None:
        return ""
    return str(cell).lower().strip()


def classify_label(label: str) -> str | None:
    """Return the field of the first rule matching an already-normalized label."""
    for rule in COLUMN_RULES:
        if rule.matches(label):
            return rule.field
    return None


def classify_columns(header_row: Sequence[Any]) -> ColumnMap:
    """Build the ColumnMap for one sheet from its header row.

    Fields that never match are left out of the map. If no column matched
    retailPrice, a bare "retail" / "price" column is used as a fallback.
    """
    column_map: ColumnMap = {}
    retail_fallback: int | None = None

    for index, cell in enumerate(header_row):
        label = normalize_label(cell)
        if not label:
            continue
        field = classify_label(label)
        if field is not None:
            if field not in column_map:
                column_map[field] = index
            continue
        if retail_fallback is None and _is_retail_fallback(label):
            retail_fallback = index

    if RETAIL_PRICE not in column_map and retail_fallback is not None:
        column_map[RETAIL_PRICE] = retail_fallback

    return column_map
