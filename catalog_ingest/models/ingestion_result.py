from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .product import ProductRecord

"""Result models for one workbook ingestion.

SheetRecords is the per-sheet output of the record builder (records plus the
counter value to hand to the next sheet). IngestionResult is what
process_workbook returns to the caller.
"""

__all__ = [
    "NO_HEADER_FOUND",
    "SkippedSheet",
    "SheetRecords",
    "IngestionResult",
]

NO_HEADER_FOUND = "NO_HEADER_FOUND"


@dataclass(frozen=True)
class SkippedSheet:
    """A sheet that contributed zero records because it could not be interpreted."""
    sheet_name: str
    reason: str  # UPPER_SNAKE


@dataclass(frozen=True)
class SheetRecords:
    sheet_name: str
    records: tuple[ProductRecord, ...]
    next_number: int  # 次シートへ引き継ぐ採番値
    header_row: int | None = None
    skipped_rows: int = 0  # description 空で読み飛ばした行数


@dataclass(frozen=True)
class IngestionResult:
    """Final output of one ingestion call.

    A readable workbook with no usable rows is still a success: ``is_empty``
    lets the caller show a distinct empty state instead of an error.
    """
    products: tuple[ProductRecord, ...]
    categories: tuple[str, ...]
    skipped_sheets: tuple[SkippedSheet, ...] = field(default_factory=tuple)

    @property
    def total_products(self) -> int:
        return len(self.products)

    @property
    def is_empty(self) -> bool:
        return not self.products

    def to_dict(self) -> dict[str, Any]:
        return {
            "products": [p.to_dict() for p in self.products],
            "totalProducts": self.total_products,
            "categories": list(self.categories),
        }
