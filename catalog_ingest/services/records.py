from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from typing import Any

from ..excel.coerce import cell_text, coerce_amount, coerce_count, is_blank, parse_number, round_half_up
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
    cell_at,
)
from ..models.ingestion_result import SheetRecords
from ..models.product import ProductRecord, build_file_name, format_number

"""Record builder: data rows of one sheet -> ProductRecord list.

Derivation rules (applied per row once the description is present):

- caseCost   = explicit cell, else unitCost * unitsPerCase
- unitProfit = explicit cell, else retailPrice - unitCost
- margin     = explicit cell (|v| < 1 is a fraction, else a percentage),
               else unitProfit / unitCost * 100 when unitCost > 0, else 0

An explicit cell only counts when its column was classified, the cell is not
empty and it holds a number. Nothing in here raises for bad cell content.
Derived amounts that overflow to inf (e.g. "1e308" * 12) become 0.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "build_sheet_records",
    "build_record",
    "explicit_amount",
    "interpret_margin",
]

# 先頭数件のみ DEBUG 出力
_DEBUG_SAMPLE_ROWS = 3


def explicit_amount(row: Sequence[Any], column_map: ColumnMap, field: str) -> float | None:
    """Return the parsed cell for ``field`` if mapped, non-empty and numeric."""
    cell = cell_at(row, column_map, field)
    if is_blank(cell):
        return None
    return parse_number(cell)


def interpret_margin(raw: float) -> int:
    """0.27 and 27 both mean 27%."""
    if abs(raw) < 1:
        return round_half_up(raw * 100)
    return round_half_up(raw)


def _finite(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def _derive_margin(explicit: float | None, unit_profit: float, unit_cost: float) -> int:
    if explicit is not None:
        return interpret_margin(explicit)
    if unit_cost > 0:
        return round_half_up(unit_profit / unit_cost * 100)
    return 0


def build_record(
    row: Sequence[Any], column_map: ColumnMap, category: str, number: int
) -> ProductRecord | None:
    """Build one record, or None when the row has no description."""
    if not row:
        return None
    description = cell_text(cell_at(row, column_map, DESCRIPTION))
    if not description:
        return None

    unit_cost = coerce_amount(cell_at(row, column_map, UNIT_COST)).value
    retail_price = coerce_amount(cell_at(row, column_map, RETAIL_PRICE)).value
    units_per_case = coerce_count(cell_at(row, column_map, UNITS_PER_CASE)).value

    case_cost = explicit_amount(row, column_map, CASE_COST)
    if case_cost is None:
        case_cost = _finite(unit_cost * units_per_case)

    unit_profit = explicit_amount(row, column_map, UNIT_PROFIT)
    if unit_profit is None:
        unit_profit = _finite(retail_price - unit_cost)

    margin = _derive_margin(explicit_amount(row, column_map, MARGIN), unit_profit, unit_cost)

    display_number = format_number(number)
    return ProductRecord(
        number=display_number,
        name=description,
        description=description,
        barcode=cell_text(cell_at(row, column_map, BARCODE)),
        category=category,
        units_per_case=units_per_case,
        unit_cost=unit_cost,
        case_cost=case_cost,
        retail_price=retail_price,
        unit_profit=unit_profit,
        margin=margin,
        file_name=build_file_name(display_number, description),
    )


def build_sheet_records(
    column_map: ColumnMap,
    rows: Iterable[Sequence[Any]],
    category: str,
    next_number: int,
    header_row: int | None = None,
) -> SheetRecords:
    """Turn the rows below a sheet's header into records.

    ``next_number`` is the display number the first record of this sheet
    gets; the returned SheetRecords carries the value for the next sheet.
    Rows without a description consume no number.
    """
    records: list[ProductRecord] = []
    skipped = 0
    number = next_number
    for row in rows:
        record = build_record(row, column_map, category, number)
        if record is None:
            skipped += 1
            continue
        if len(records) < _DEBUG_SAMPLE_ROWS:
            logger.debug(
                "sheet=%s product=%s name=%r units_per_case=%d unit_cost=%.2f case_cost=%.2f "
                "retail=%.2f unit_profit=%.2f margin=%d%%",
                category,
                record.number,
                record.name,
                record.units_per_case,
                record.unit_cost,
                record.case_cost,
                record.retail_price,
                record.unit_profit,
                record.margin,
            )
        records.append(record)
        number += 1

    return SheetRecords(
        sheet_name=category,
        records=tuple(records),
        next_number=number,
        header_row=header_row,
        skipped_rows=skipped,
    )
