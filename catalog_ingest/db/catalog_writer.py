from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from psycopg2.extras import execute_values

from ..models.product import ProductRecord
from ..services.photos import PhotoRef

"""PostgreSQL catalog persistence (live mode).

Transaction boundaries (BEGIN / COMMIT / ROLLBACK) belong to the
orchestrator; everything here runs on the cursor it is handed.

Expected tables:

    catalog_products(owner_id, catalog, number, name, description, barcode,
                     category, units_per_case, unit_cost, case_cost,
                     retail_price, unit_profit, margin, file_name, photo_url)
    product_photos(owner_id, product_number, barcode, product_name, photo_url)
"""

__all__ = [
    "CatalogWriteError",
    "WriteResult",
    "PRODUCT_COLUMNS",
    "save_catalog",
    "load_photos",
]

PRODUCTS_TABLE = "catalog_products"
PHOTOS_TABLE = "product_photos"

PRODUCT_COLUMNS: tuple[str, ...] = (
    "owner_id",
    "catalog",
    "number",
    "name",
    "description",
    "barcode",
    "category",
    "units_per_case",
    "unit_cost",
    "case_cost",
    "retail_price",
    "unit_profit",
    "margin",
    "file_name",
    "photo_url",
)


class CatalogWriteError(Exception):
    pass


@dataclass(frozen=True)
class WriteResult:
    deleted_rows: int
    inserted_rows: int


def _row(owner_id: str, catalog: str, p: ProductRecord) -> tuple[Any, ...]:
    # 金額は表示と同じ 2 桁で保存
    return (
        owner_id,
        catalog,
        p.number,
        p.name,
        p.description,
        p.barcode,
        p.category,
        p.units_per_case,
        round(p.unit_cost, 2),
        round(p.case_cost, 2),
        round(p.retail_price, 2),
        round(p.unit_profit, 2),
        p.margin,
        p.file_name,
        p.photo_url,
    )


def save_catalog(
    cursor: Any,
    owner_id: str,
    catalog: str,
    products: Iterable[ProductRecord],
    page_size: int = 1000,
) -> WriteResult:
    """Replace the owner's rows for ``catalog`` with ``products``."""
    rows = [_row(owner_id, catalog, p) for p in products]
    cols_sql = ",".join(f'"{c}"' for c in PRODUCT_COLUMNS)
    try:
        cursor.execute(
            f"DELETE FROM {PRODUCTS_TABLE} WHERE owner_id = %s AND catalog = %s",
            (owner_id, catalog),
        )
        deleted = max(getattr(cursor, "rowcount", 0) or 0, 0)
        if rows:
            execute_values(
                cursor,
                f"INSERT INTO {PRODUCTS_TABLE} ({cols_sql}) VALUES %s",
                rows,
                page_size=page_size,
            )
    except Exception as e:
        raise CatalogWriteError(str(e)) from e
    return WriteResult(deleted_rows=deleted, inserted_rows=len(rows))


def load_photos(cursor: Any, owner_id: str) -> list[PhotoRef]:
    """Fetch the owner's uploaded photo references."""
    try:
        cursor.execute(
            f"SELECT product_number, barcode, product_name, photo_url FROM {PHOTOS_TABLE} "
            "WHERE owner_id = %s",
            (owner_id,),
        )
        fetched = cursor.fetchall()
    except Exception as e:
        raise CatalogWriteError(f"failed loading photos: {e}") from e
    return [
        PhotoRef.from_mapping(
            {"product_number": n, "barcode": b, "product_name": name, "photo_url": url}
        )
        for n, b, name, url in fetched
        if url
    ]
