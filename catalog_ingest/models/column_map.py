from __future__ import annotations

from typing import Any

"""Column map for one sheet: semantic field name -> zero-based column index.

The key set is closed (COLUMN_FIELDS). A field that was never classified is
simply absent; the record builder treats that as "column not found".
"""

__all__ = [
    "ColumnMap",
    "COLUMN_FIELDS",
    "DESCRIPTION",
    "BARCODE",
    "UNITS_PER_CASE",
    "UNIT_COST",
    "CASE_COST",
    "RETAIL_PRICE",
    "UNIT_PROFIT",
    "MARGIN",
    "cell_at",
]

DESCRIPTION = "description"
BARCODE = "barcode"
UNITS_PER_CASE = "unitsPerCase"
UNIT_COST = "unitCost"
CASE_COST = "caseCost"
RETAIL_PRICE = "retailPrice"
UNIT_PROFIT = "unitProfit"
MARGIN = "margin"

COLUMN_FIELDS: tuple[str, ...] = (
    DESCRIPTION,
    BARCODE,
    UNITS_PER_CASE,
    UNIT_COST,
    CASE_COST,
    RETAIL_PRICE,
    UNIT_PROFIT,
    MARGIN,
)

ColumnMap = dict[str, int]


def cell_at(row: tuple[Any, ...] | list[Any], column_map: ColumnMap, field: str) -> Any:
    """Return the raw cell for ``field`` or None (field unmapped / row too short)."""
    index = column_map.get(field)
    if index is None or index >= len(row):
        return None
    return row[index]
