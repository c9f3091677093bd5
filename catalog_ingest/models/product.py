from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

"""ProductRecord model for the catalog ingestion pipeline.

A ProductRecord is the durable output unit of one workbook ingestion. Records
are created once by the record builder; photo enrichment returns copies and
the catalog store persists them as-is (consumers never re-derive margin,
unit profit or case cost).

Amounts are kept as float internally and serialized fixed to 2 decimals.
"""

__all__ = [
    "ProductRecord",
    "format_number",
    "slugify",
    "build_file_name",
]

NUMBER_WIDTH = 3

_NON_SLUG = re.compile(r"[^a-z0-9]")
_UNDERSCORE_RUN = re.compile(r"_+")


def format_number(value: int, width: int = NUMBER_WIDTH) -> str:
    """Zero-pad a display number (minimum ``width`` digits, never truncated)."""
    return str(value).zfill(width)


def slugify(text: str) -> str:
    """Lowercase, map every char outside [a-z0-9] to '_', collapse runs, trim '_'.

    >>> slugify("Cola 2L - Zero!")
    'cola_2l_zero'
    """
    slug = _NON_SLUG.sub("_", text.lower())
    slug = _UNDERSCORE_RUN.sub("_", slug)
    return slug.strip("_")


def build_file_name(number: str, description: str) -> str:
    return f"{number}_{slugify(description)}.html"


def _money(value: float) -> str:
    return f"{value:.2f}"


@dataclass(frozen=True)
class ProductRecord:
    """One normalized catalog item.

    Attributes:
        number: Zero-padded sequential display id ("003", "004", ...)
        name: Trimmed description text (display name)
        description: Same text as name, kept separately for the viewer contract
        barcode: Barcode text or "" when absent
        category: Name of the sheet the row came from
        units_per_case: Positive integer, 1 when missing
        unit_cost / case_cost / retail_price / unit_profit: Amounts
        margin: Integer percentage (not clamped)
        file_name: Display key ``{number}_{slug}.html`` (never persisted as a file)
        photo_url: Only set by photo enrichment
    """
    number: str
    name: str
    description: str
    barcode: str
    category: str
    units_per_case: int
    unit_cost: float
    case_cost: float
    retail_price: float
    unit_profit: float
    margin: int
    file_name: str
    photo_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the catalog viewer's camelCase keys."""
        data: dict[str, Any] = {
            "number": self.number,
            "name": self.name,
            "description": self.description,
            "barcode": self.barcode,
            "category": self.category,
            "unitsPerCase": self.units_per_case,
            "unitCost": _money(self.unit_cost),
            "caseCost": _money(self.case_cost),
            "retailPrice": _money(self.retail_price),
            "unitProfit": _money(self.unit_profit),
            "margin": self.margin,
            "fileName": self.file_name,
        }
        if self.photo_url is not None:
            data["photoUrl"] = self.photo_url
        return data

    @staticmethod
    def from_dict(data: dict[str, Any]) -> ProductRecord:
        """Inverse of to_dict (used when a stored catalog is read back)."""
        return ProductRecord(
            number=str(data["number"]),
            name=data["name"],
            description=data.get("description", data["name"]),
            barcode=data.get("barcode") or "",
            category=data["category"],
            units_per_case=int(data["unitsPerCase"]),
            unit_cost=float(data["unitCost"]),
            case_cost=float(data["caseCost"]),
            retail_price=float(data["retailPrice"]),
            unit_profit=float(data["unitProfit"]),
            margin=int(data["margin"]),
            file_name=data["fileName"],
            photo_url=data.get("photoUrl"),
        )
