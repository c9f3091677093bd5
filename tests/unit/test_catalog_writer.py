from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from catalog_ingest import process_workbook
from catalog_ingest.db.catalog_writer import (
    PRODUCT_COLUMNS,
    CatalogWriteError,
    load_photos,
    save_catalog,
)
from catalog_ingest.services.photos import PhotoRef


def test_save_catalog_deletes_then_inserts(make_workbook, two_sheet_workbook):
    products = process_workbook(make_workbook(two_sheet_workbook)).products
    cur = MagicMock()
    cur.rowcount = 5
    with patch("catalog_ingest.db.catalog_writer.execute_values") as ev:
        result = save_catalog(cur, "store-42", "prices", products, page_size=50)

    delete_sql, delete_params = cur.execute.call_args[0]
    assert delete_sql.startswith("DELETE FROM catalog_products")
    assert delete_params == ("store-42", "prices")

    ev.assert_called_once()
    args, kwargs = ev.call_args
    assert args[0] is cur
    assert "INSERT INTO catalog_products" in args[1]
    rows = args[2]
    assert len(rows) == 2
    assert len(rows[0]) == len(PRODUCT_COLUMNS)
    assert rows[0][:4] == ("store-42", "prices", "003", "Cola 2L")
    assert rows[0][PRODUCT_COLUMNS.index("case_cost")] == 18.0
    assert rows[1][PRODUCT_COLUMNS.index("margin")] == 0
    assert kwargs["page_size"] == 50

    assert result.deleted_rows == 5
    assert result.inserted_rows == 2


def test_save_catalog_without_products_only_deletes():
    cur = MagicMock()
    cur.rowcount = 0
    with patch("catalog_ingest.db.catalog_writer.execute_values") as ev:
        result = save_catalog(cur, "o", "c", [])
    ev.assert_not_called()
    assert result.inserted_rows == 0


def test_save_catalog_wraps_driver_errors():
    cur = MagicMock()
    cur.execute.side_effect = RuntimeError("relation does not exist")
    with pytest.raises(CatalogWriteError, match="relation does not exist"):
        save_catalog(cur, "o", "c", [])


def test_load_photos_skips_rows_without_url():
    cur = MagicMock()
    cur.fetchall.return_value = [
        ("003", None, None, "a.jpg"),
        (None, "789", "Cola", "b.jpg"),
        ("005", None, None, None),
    ]
    photos = load_photos(cur, "o")
    assert photos == [
        PhotoRef("a.jpg", product_number="003"),
        PhotoRef("b.jpg", barcode="789", product_name="Cola"),
    ]
    assert cur.execute.call_args[0][1] == ("o",)


def test_load_photos_wraps_errors():
    cur = MagicMock()
    cur.execute.side_effect = RuntimeError("boom")
    with pytest.raises(CatalogWriteError, match="failed loading photos"):
        load_photos(cur, "o")
