from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path

"""WorkbookFile model and FileStatus enum for batch ingestion.

A WorkbookFile tracks one uploaded workbook through the batch run, from
discovery to its final status.
"""


class FileStatus(Enum):
    """Status of a workbook in the batch run.

    State transitions: pending → processing → (success | empty | failed)

    - EMPTY: workbook was readable but no sheet produced a product. This is
      not a failure; the catalog viewer shows it as its own empty state.
    """
    PENDING = "pending"
    PROCESSING = "processing"
    SUCCESS = "success"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass(frozen=True)
class WorkbookFile:
    """Processing context for a single workbook."""
    path: Path
    name: str
    categories: tuple[str, ...] = ()
    start_time: datetime | None = None  # UTC
    end_time: datetime | None = None  # UTC
    status: FileStatus = FileStatus.PENDING
    total_products: int = 0
    skipped_sheets: int = 0  # ヘッダ未検出シート数
    catalog_path: Path | None = None
    error: str | None = None  # Failure reason summary
