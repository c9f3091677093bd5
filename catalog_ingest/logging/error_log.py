from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from ..models.error_record import FILE_LEVEL, ErrorRecord

"""Error log buffering.

Records are collected in memory during a batch run and written once as JSON
Lines to ``logs/errors-YYYYMMDD-HHMMSS.log`` (UTC). Nothing is written when
the run produced no error records.
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
    "FILE_LEVEL",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class ErrorLogBuffer:
    """In-memory buffer for error records. Not thread safe (serial batch run)."""

    def __init__(self, logs_dir: Path | None = None) -> None:
        self._records: list[ErrorRecord] = []
        self._file_path: Path | None = None
        self._logs_dir = logs_dir or LOGS_DIR

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"errors-{stamp}.log"
        return self._file_path

    @property
    def records(self) -> tuple[ErrorRecord, ...]:
        return tuple(self._records)

    def append(self, record: ErrorRecord) -> None:
        self._records.append(record)

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path | None:
        """Append buffered records to the log file; None when there was nothing."""
        if not self._records:
            return None
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
