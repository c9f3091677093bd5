from __future__ import annotations

import pandas as pd
import pytest

from catalog_ingest.excel.reader import (
    IngestError,
    UnreadableWorkbookError,
    grid_from_frame,
    read_workbook,
)


def test_read_workbook_preserves_sheet_order_and_cells(make_workbook):
    data = make_workbook(
        {
            "Zeta": [["Description", "Retail"], ["Chips", 3.5]],
            "Alpha": [["Item Description"], ["Cola"]],
        }
    )
    wb = read_workbook(data)
    assert wb.sheet_names == ("Zeta", "Alpha")
    assert wb.sheets["Zeta"][0] == ("Description", "Retail")
    assert wb.sheets["Zeta"][1][0] == "Chips"
    assert wb.sheets["Zeta"][1][1] == pytest.approx(3.5)
    assert [name for name, _ in wb] == ["Zeta", "Alpha"]


def test_read_workbook_maps_empty_cells_to_none(make_workbook):
    data = make_workbook(
        {
            "S": [
                ["Description", "Barcode", "Retail"],
                ["Cola", None, "2.99"],
            ]
        }
    )
    grid = read_workbook(data).sheets["S"]
    assert grid[1] == ("Cola", None, "2.99")


def test_read_workbook_default_treats_na_as_empty(make_workbook):
    data = make_workbook({"S": [["Description"], ["NA"], ["Chips"]]})
    grid = read_workbook(data).sheets["S"]
    assert grid[1][0] is None
    assert grid[2][0] == "Chips"


def test_read_workbook_keep_na_strings_preserves_na(make_workbook):
    data = make_workbook({"S": [["Description", "Retail"], ["NA", None]]})
    grid = read_workbook(data, keep_na_strings=["NA"]).sheets["S"]
    assert grid[1][0] == "NA"
    # 空セルは keep_na_strings 指定時も None のまま
    assert grid[1][1] is None


@pytest.mark.parametrize(
    "payload",
    [
        b"",
        b"this is not a spreadsheet",
        b"PK\x03\x04 truncated zip archive",
    ],
)
def test_read_workbook_unreadable(payload):
    with pytest.raises(UnreadableWorkbookError):
        read_workbook(payload)


def test_unreadable_workbook_is_ingest_error():
    assert issubclass(UnreadableWorkbookError, IngestError)


def test_grid_from_frame_is_immutable_tuple_grid():
    df = pd.DataFrame([["a", float("nan")], [1, 2.5]])
    grid = grid_from_frame(df)
    assert grid == (("a", None), (1, 2.5))
    assert isinstance(grid, tuple) and all(isinstance(r, tuple) for r in grid)
