from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from ..excel.columns import classify_columns
from ..excel.header import locate_header_row
from ..excel.reader import RawGrid, read_workbook
from ..models.config_models import DEFAULT_HEADER_SCAN_ROWS, IngestionSettings
from ..models.ingestion_result import NO_HEADER_FOUND, IngestionResult, SheetRecords, SkippedSheet
from ..models.product import ProductRecord
from .records import build_sheet_records

"""Workbook ingestion: bytes -> numbered product list.

process_workbook is a pure function of the input bytes and the settings: the
display-number counter is threaded through the sheets as a plain int (fold),
so two calls on the same bytes always produce the same records.

Only UnreadableWorkbookError escapes. A sheet without a recognizable header
is reported in IngestionResult.skipped_sheets and contributes nothing.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "process_workbook",
    "process_sheet",
    "aggregate",
]


def _log_column_map(sheet_name: str, header: Sequence[Any], column_map: dict[str, int], sample: Any) -> None:
    if not logger.isEnabledFor(logging.DEBUG):
        return
    logger.debug("sheet=%s headers=%s column_map=%s", sheet_name, list(header), column_map)
    if sample:
        for field, index in column_map.items():
            value = sample[index] if index < len(sample) else None
            logger.debug("sheet=%s sample %s: column %d = %r", sheet_name, field, index, value)


def process_sheet(
    sheet_name: str,
    grid: RawGrid,
    next_number: int,
    header_scan_rows: int = DEFAULT_HEADER_SCAN_ROWS,
) -> SheetRecords | SkippedSheet:
    """Header locator -> column classifier -> record builder for one sheet."""
    header_index = locate_header_row(grid, max_rows=header_scan_rows)
    if header_index is None:
        logger.warning("sheet=%s header row not found in first %d rows; skipped", sheet_name, header_scan_rows)
        return SkippedSheet(sheet_name=sheet_name, reason=NO_HEADER_FOUND)

    header = grid[header_index]
    data_rows = grid[header_index + 1:]
    column_map = classify_columns(header)
    _log_column_map(sheet_name, header, column_map, data_rows[0] if data_rows else None)

    sheet_records = build_sheet_records(
        column_map, data_rows, sheet_name, next_number, header_row=header_index
    )
    logger.info(
        "sheet=%s header_row=%d products=%d",
        sheet_name,
        header_index + 1,
        len(sheet_records.records),
    )
    return sheet_records


def aggregate(
    sheet_results: Iterable[SheetRecords | SkippedSheet],
) -> IngestionResult:
    """Concatenate per-sheet records in workbook order and collect categories."""
    products: list[ProductRecord] = []
    categories: list[str] = []
    skipped: list[SkippedSheet] = []
    for result in sheet_results:
        if isinstance(result, SkippedSheet):
            skipped.append(result)
            continue
        products.extend(result.records)
        for record in result.records:
            if record.category not in categories:
                categories.append(record.category)
    return IngestionResult(
        products=tuple(products),
        categories=tuple(categories),
        skipped_sheets=tuple(skipped),
    )


def process_workbook(data: bytes, settings: IngestionSettings | None = None) -> IngestionResult:
    """Parse an uploaded workbook into numbered product records.

    Args:
        data: Raw workbook bytes
        settings: Header window / number seed / NA handling (defaults if None)

    Returns:
        IngestionResult (possibly empty; check ``is_empty``)

    Raises:
        UnreadableWorkbookError: the bytes are not a readable workbook
    """
    settings = settings or IngestionSettings()
    workbook = read_workbook(data, keep_na_strings=settings.keep_na_strings)

    results: list[SheetRecords | SkippedSheet] = []
    next_number = settings.number_seed
    for sheet_name, grid in workbook:
        result = process_sheet(sheet_name, grid, next_number, settings.header_scan_rows)
        if isinstance(result, SheetRecords):
            next_number = result.next_number
        results.append(result)

    ingestion = aggregate(results)
    logger.info(
        "workbook sheets=%d products=%d skipped_sheets=%d",
        len(workbook.sheet_names),
        ingestion.total_products,
        len(ingestion.skipped_sheets),
    )
    return ingestion
