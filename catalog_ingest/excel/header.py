from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ..models.config_models import DEFAULT_HEADER_SCAN_ROWS

"""Header row locator.

Product sheets usually carry a title block or supplier banner above the real
column labels, so the header row is searched for instead of assumed.
"""

__all__ = [
    "HEADER_KEYWORDS",
    "locate_header_row",
    "is_header_row",
]

HEADER_KEYWORDS: tuple[str, ...] = ("description", "item", "produto", "units", "unités")


def is_header_row(row: Sequence[Any] | None) -> bool:
    """True if any non-empty cell, lower-cased, contains a header keyword."""
    if not row:
        return False
    for cell in row:
        if cell is None:
            continue
        text = str(cell).lower()
        if any(keyword in text for keyword in HEADER_KEYWORDS):
            return True
    return False


def locate_header_row(
    grid: Sequence[Sequence[Any]], max_rows: int = DEFAULT_HEADER_SCAN_ROWS
) -> int | None:
    """Return the index of the first header-looking row within ``max_rows``.

    None means no header was found; the caller skips the sheet.
    """
    for index, row in enumerate(grid[:max_rows]):
        if is_header_row(row):
            return index
    return None
