from __future__ import annotations

import io
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import pandas as pd

"""Workbook reader.

Decodes the uploaded bytes into ordered sheet names and one RawGrid per
sheet. Sheets are read header-less (row 0 is the first physical row); header
detection happens later in excel.header.

Cells come out as str, numbers, datetimes or None. pandas' NaN is mapped to
None here so nothing downstream has to know about pandas.
"""

__all__ = [
    "IngestError",
    "UnreadableWorkbookError",
    "RawGrid",
    "Workbook",
    "read_workbook",
    "grid_from_frame",
]

RawGrid = tuple[tuple[Any, ...], ...]


class IngestError(Exception):
    """Base class for errors that abort a whole ingestion call."""


class UnreadableWorkbookError(IngestError):
    """Raised when the bytes cannot be decoded as a supported workbook."""


@dataclass(frozen=True)
class Workbook:
    sheet_names: tuple[str, ...]
    sheets: dict[str, RawGrid]

    def __iter__(self):
        for name in self.sheet_names:
            yield name, self.sheets[name]


def _na_options(keep_na_strings: Iterable[str] | None) -> tuple[bool, list[str] | None]:
    # pandas 既定の NA 文字列集合から keep_na_strings を除外する
    import pandas._libs.parsers as parsers

    if not keep_na_strings:
        return True, None
    custom_na = parsers.STR_NA_VALUES - set(keep_na_strings)
    return False, list(custom_na)


def _clean_cell(value: Any) -> Any:
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):  # pragma: no cover - array-like cell
        return value
    return value


def grid_from_frame(df: pd.DataFrame) -> RawGrid:
    """Convert a header-less DataFrame into an immutable RawGrid."""
    return tuple(
        tuple(_clean_cell(v) for v in row)
        for row in df.itertuples(index=False, name=None)
    )


def read_workbook(data: bytes, keep_na_strings: Iterable[str] | None = None) -> Workbook:
    """Read every sheet of a workbook given as raw bytes.

    Parameters
    ----------
    data: workbook file content (xlsx)
    keep_na_strings: strings to exclude from pandas' default NaN conversion

    Raises
    ------
    UnreadableWorkbookError: corrupt file, wrong format or empty input.
    No partial workbook is ever returned.
    """
    if not data:
        raise UnreadableWorkbookError("workbook is empty (0 bytes)")

    keep_default_na, na_values = _na_options(keep_na_strings)
    try:
        with pd.ExcelFile(io.BytesIO(data)) as xls:
            names = [str(n) for n in xls.sheet_names]
            sheets: dict[str, RawGrid] = {}
            for raw_name, name in zip(xls.sheet_names, names, strict=True):
                df = xls.parse(
                    raw_name, header=None, keep_default_na=keep_default_na, na_values=na_values
                )
                sheets[name] = grid_from_frame(df)
    except Exception as e:  # zip/xml/format errors surface as many exception types
        raise UnreadableWorkbookError(f"cannot read workbook: {e}") from e

    return Workbook(sheet_names=tuple(names), sheets=sheets)
