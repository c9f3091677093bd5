"""Spreadsheet -> product catalog ingestion.

    >>> from catalog_ingest import process_workbook
    >>> result = process_workbook(Path("products.xlsx").read_bytes())  # doctest: +SKIP
    >>> result.to_dict()["totalProducts"]  # doctest: +SKIP
"""

from .excel.reader import IngestError, UnreadableWorkbookError
from .models.config_models import IngestionSettings
from .models.ingestion_result import IngestionResult, SkippedSheet
from .models.product import ProductRecord
from .services.ingestion import process_workbook

__all__ = [
    "IngestError",
    "IngestionResult",
    "IngestionSettings",
    "ProductRecord",
    "SkippedSheet",
    "UnreadableWorkbookError",
    "process_workbook",
]

__version__ = "0.1.0"
