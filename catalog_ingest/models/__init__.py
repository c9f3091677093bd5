"""Domain models for the catalog ingestion tool.

This package contains the product record and ingestion result types returned
by process_workbook, plus the batch-run models used by the orchestrator.
"""

from .column_map import COLUMN_FIELDS, ColumnMap
from .config_models import CatalogConfig, DatabaseConfig, IngestionSettings
from .error_record import ErrorRecord
from .ingestion_result import IngestionResult, SheetRecords, SkippedSheet
from .processing_result import FileStat, ProcessingResult
from .product import ProductRecord
from .workbook_file import FileStatus, WorkbookFile

__all__ = [
    # Configuration models
    "CatalogConfig",
    "DatabaseConfig",
    "IngestionSettings",
    # Ingestion models
    "COLUMN_FIELDS",
    "ColumnMap",
    "ProductRecord",
    "SheetRecords",
    "SkippedSheet",
    "IngestionResult",
    # Batch models
    "ErrorRecord",
    "FileStat",
    "FileStatus",
    "ProcessingResult",
    "WorkbookFile",
]
