from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Batch processing result models.

ProcessingResult aggregates every workbook of one batch run and feeds the
SUMMARY output line.
"""


@dataclass(frozen=True)
class FileStat:
    """Per-workbook statistics."""
    file_name: str
    status: str  # success/empty/failed
    products: int
    elapsed_seconds: float
    skipped_sheets: int = 0


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results of a batch run."""
    success_files: int
    failed_files: int
    total_products: int
    skipped_sheets: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    throughput_products_per_sec: float
    empty_files: int = 0  # 読めたが商品 0 件 (success とは別集計)
    file_stats: list[FileStat] | None = None

    @property
    def total_files(self) -> int:
        return self.success_files + self.empty_files + self.failed_files
