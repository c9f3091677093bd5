from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the JSON Lines error log.

Soft failures (sheets without a header row) and hard failures (unreadable
workbook, timeout, catalog save errors) are both recorded here. row=-1 is the
sentinel for sheet- or file-level entries where no single row applies.
"""

__all__ = [
    "ErrorRecord",
    "FILE_LEVEL",
]

FILE_LEVEL = "<FILE_LEVEL>"


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Workbook filename being ingested
        sheet: Sheet name, or FILE_LEVEL for workbook-wide errors
        row: Row number (1-based). -1 when no single row applies
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Human readable description
    """
    timestamp: str  # ISO8601 UTC
    file: str
    sheet: str
    row: int
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(file: str, sheet: str, row: int, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            sheet=sheet,
            row=row,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        # dataclass -> dict のみ (追加キー禁止)
        return json.dumps(asdict(self), ensure_ascii=False)
