from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from ..db.catalog_writer import CatalogWriteError, load_photos, save_catalog
from ..excel.reader import IngestError, UnreadableWorkbookError
from ..logging.error_log import FILE_LEVEL, ErrorLogBuffer, ErrorRecord
from ..models.config_models import CatalogConfig, IngestionSettings
from ..models.ingestion_result import IngestionResult
from ..models.processing_result import FileStat, ProcessingResult
from ..models.product import ProductRecord
from ..models.workbook_file import FileStatus, WorkbookFile
from .catalog_store import CatalogPublication, CatalogStore
from .ingestion import process_workbook
from .photos import PhotoRef, enrich_products_with_photos, load_photos_file
from .progress import ProgressTracker

"""Batch orchestration: a directory of uploaded workbooks -> saved catalogs.

For each workbook:
1. ingest (with an optional timeout around the whole call)
2. record skipped sheets in the error log
3. attach photos
4. save the catalog (JSON catalog store; in live mode also the database,
   with the store write inside the transaction)

A readable workbook without products is reported as EMPTY and nothing is
saved for it, so an earlier catalog of the same name is left alone.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "ProcessingError",
    "IngestTimeoutError",
    "scan_workbooks",
    "ingest_with_timeout",
    "process_all",
]

WORKBOOK_SUFFIX = ".xlsx"


class ProcessingError(Exception):
    """Fatal error that prevents the batch run from starting."""


class IngestTimeoutError(IngestError):
    """Raised when one workbook ingestion exceeds the configured timeout."""


def scan_workbooks(directory: Path) -> list[Path]:
    """List .xlsx files in ``directory`` (non-recursive, sorted by name).

    Office lock files (``~$name.xlsx``) are ignored.

    Raises:
        ProcessingError: directory missing, not a directory or unreadable
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")

    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")

    try:
        return sorted(
            p
            for p in directory.iterdir()
            if p.is_file() and p.suffix == WORKBOOK_SUFFIX and not p.name.startswith("~$")
        )
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def ingest_with_timeout(
    data: bytes, settings: IngestionSettings, timeout_seconds: float | None = None
) -> IngestionResult:
    """Run process_workbook, giving up after ``timeout_seconds`` (None = no limit).

    The worker thread is not interrupted on timeout; its result is discarded.
    """
    if not timeout_seconds:
        return process_workbook(data, settings)

    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="ingest")
    future = executor.submit(process_workbook, data, settings)
    try:
        return future.result(timeout=timeout_seconds)
    except FutureTimeoutError as e:
        raise IngestTimeoutError(f"ingestion exceeded {timeout_seconds}s") from e
    finally:
        executor.shutdown(wait=False, cancel_futures=True)


def _load_photo_refs(config: CatalogConfig, cursor: Any) -> list[PhotoRef]:
    """Photos come from the database in live mode, else from photos_file."""
    if cursor is not None:
        try:
            return load_photos(cursor, config.owner_id)
        except CatalogWriteError as e:
            logger.warning("photos: %s (continuing without photos)", e)
            try:
                cursor.execute("ROLLBACK")
            except Exception:  # pragma: no cover
                logger.debug("rollback after photo load failure failed", exc_info=True)
            return []
    if config.photos_file:
        path = Path(config.photos_file)
        try:
            return load_photos_file(path)
        except (OSError, ValueError, KeyError) as e:
            logger.warning("photos: cannot read %s: %s (continuing without photos)", path, e)
    return []


def _save_catalog(
    cursor: Any,
    store: CatalogStore,
    owner_id: str,
    catalog: str,
    products: Sequence[ProductRecord],
) -> CatalogPublication:
    """Save to the JSON store, and in live mode to the database as well.

    Live mode runs one transaction per workbook. The JSON document is written
    before COMMIT, so a failed store write rolls the database rows back too.
    """
    if cursor is None:
        return store.save(owner_id, catalog, products)

    try:
        cursor.execute("BEGIN")
        result = save_catalog(cursor, owner_id, catalog, products)
        publication = store.save(owner_id, catalog, products)
        cursor.execute("COMMIT")
    except Exception as e:
        try:
            cursor.execute("ROLLBACK")
        except Exception:
            logger.debug("rollback failed catalog=%s", catalog, exc_info=True)
        if isinstance(e, (CatalogWriteError, OSError)):
            raise
        raise CatalogWriteError(f"transaction failed: {e}") from e
    logger.debug(
        "db catalog=%s deleted=%d inserted=%d", catalog, result.deleted_rows, result.inserted_rows
    )
    return publication


def _failed(file_path: Path, start_time: datetime, error: str) -> WorkbookFile:
    return WorkbookFile(
        path=file_path,
        name=file_path.name,
        start_time=start_time,
        end_time=datetime.now(UTC),
        status=FileStatus.FAILED,
        error=error,
    )


def _process_single_file(
    file_path: Path,
    config: CatalogConfig,
    store: CatalogStore,
    photos: list[PhotoRef],
    cursor: Any,
    error_log: ErrorLogBuffer,
) -> WorkbookFile:
    start_time = datetime.now(UTC)
    name = file_path.name

    try:
        data = file_path.read_bytes()
        ingestion = ingest_with_timeout(data, config.ingestion, config.timeout_seconds)
    except OSError as e:
        error_log.append(ErrorRecord.create(name, FILE_LEVEL, -1, "FILE_READ_ERROR", str(e)))
        logger.error("file=%s read failed: %s", name, e)
        return _failed(file_path, start_time, f"read failed: {e}")
    except IngestError as e:
        error_type = "UNREADABLE_WORKBOOK" if isinstance(e, UnreadableWorkbookError) else "INGEST_TIMEOUT"
        error_log.append(ErrorRecord.create(name, FILE_LEVEL, -1, error_type, str(e)))
        logger.error("file=%s %s", name, e)
        return _failed(file_path, start_time, str(e))
    except Exception as e:
        error_log.append(ErrorRecord.create(name, FILE_LEVEL, -1, "UNEXPECTED_ERROR", str(e)))
        logger.error("file=%s unexpected error: %s", name, e, exc_info=True)
        return _failed(file_path, start_time, f"unexpected error: {e}")

    for skipped in ingestion.skipped_sheets:
        error_log.append(
            ErrorRecord.create(name, skipped.sheet_name, -1, skipped.reason, "header row not found")
        )

    if ingestion.is_empty:
        logger.warning("file=%s readable but no products found; catalog not saved", name)
        return WorkbookFile(
            path=file_path,
            name=name,
            start_time=start_time,
            end_time=datetime.now(UTC),
            status=FileStatus.EMPTY,
            skipped_sheets=len(ingestion.skipped_sheets),
        )

    products: list[ProductRecord] = list(ingestion.products)
    if photos:
        products = enrich_products_with_photos(products, photos)

    catalog_name = file_path.stem
    try:
        publication = _save_catalog(cursor, store, config.owner_id, catalog_name, products)
    except (CatalogWriteError, OSError) as e:
        error_log.append(ErrorRecord.create(name, FILE_LEVEL, -1, "CATALOG_SAVE_ERROR", str(e)))
        logger.error("file=%s catalog save failed: %s", name, e)
        return _failed(file_path, start_time, f"catalog save failed: {e}")

    logger.info(
        "file=%s products=%d categories=%s catalog=%s",
        name,
        publication.total_products,
        list(ingestion.categories),
        publication.path,
    )
    return WorkbookFile(
        path=file_path,
        name=name,
        categories=ingestion.categories,
        start_time=start_time,
        end_time=datetime.now(UTC),
        status=FileStatus.SUCCESS,
        total_products=publication.total_products,
        skipped_sheets=len(ingestion.skipped_sheets),
        catalog_path=publication.path,
    )


def process_all(
    config: CatalogConfig, cursor: Any = None, error_log: ErrorLogBuffer | None = None
) -> ProcessingResult:
    """Ingest every workbook in ``config.source_directory``.

    Args:
        config: Catalog configuration
        cursor: Database cursor (None = mock mode, JSON catalog store only)
        error_log: Buffer for error records (a fresh one if None)

    Returns:
        ProcessingResult with per-file stats

    Raises:
        ProcessingError: source directory missing or unreadable
    """
    start_time = datetime.now(UTC)
    error_log = error_log if error_log is not None else ErrorLogBuffer()

    file_paths = scan_workbooks(Path(config.source_directory))
    store = CatalogStore(Path(config.output_directory))
    photos = _load_photo_refs(config, cursor) if file_paths else []

    file_stats: list[FileStat] = []
    success_count = 0
    failed_count = 0
    empty_count = 0
    total_products = 0
    total_skipped_sheets = 0

    with ProgressTracker(file_paths) as progress:
        for file_path in file_paths:
            progress.begin(file_path)
            file_result = _process_single_file(
                file_path, config, store, photos, cursor, error_log
            )
            if file_result.status == FileStatus.SUCCESS:
                success_count += 1
                total_products += file_result.total_products
            elif file_result.status == FileStatus.EMPTY:
                empty_count += 1
            else:
                failed_count += 1
            total_skipped_sheets += file_result.skipped_sheets

            progress.record(file_result.status, file_result.total_products)

            elapsed = 0.0
            if file_result.start_time and file_result.end_time:
                elapsed = (file_result.end_time - file_result.start_time).total_seconds()
            file_stats.append(
                FileStat(
                    file_name=file_path.name,
                    status=file_result.status.value,
                    products=file_result.total_products,
                    elapsed_seconds=elapsed,
                    skipped_sheets=file_result.skipped_sheets,
                )
            )

    try:
        log_path = error_log.flush()
        if log_path is not None:
            logger.info("error log written: %s", log_path)
    except OSError as e:
        logger.warning("error log flush failed: %s", e)

    end_time = datetime.now(UTC)
    elapsed_seconds = (end_time - start_time).total_seconds()
    throughput = total_products / elapsed_seconds if elapsed_seconds > 0 else 0.0

    return ProcessingResult(
        success_files=success_count,
        failed_files=failed_count,
        total_products=total_products,
        skipped_sheets=total_skipped_sheets,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=elapsed_seconds,
        throughput_products_per_sec=throughput,
        empty_files=empty_count,
        file_stats=file_stats,
    )
