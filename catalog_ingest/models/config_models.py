from __future__ import annotations

from dataclasses import dataclass

"""Config dataclasses for the catalog ingestion tool.

IngestionSettings is the only part the pure ingestion pipeline sees; the rest
is consumed by the batch orchestrator and the CLI.
"""

DEFAULT_HEADER_SCAN_ROWS = 10
DEFAULT_NUMBER_SEED = 3


@dataclass(frozen=True)
class IngestionSettings:
    """Tunables for process_workbook.

    header_scan_rows: how many leading rows the header locator inspects
    number_seed: display number of the first record ("003" for 3)
    keep_na_strings: strings pandas must NOT turn into NaN (e.g. "NA")
    """
    header_scan_rows: int = DEFAULT_HEADER_SCAN_ROWS
    number_seed: int = DEFAULT_NUMBER_SEED
    keep_na_strings: tuple[str, ...] | None = None


@dataclass(frozen=True)
class DatabaseConfig:
    """Database connection fallback (environment variables take precedence)."""
    host: str | None
    port: int | None
    user: str | None
    password: str | None
    database: str | None
    dsn: str | None


@dataclass(frozen=True)
class CatalogConfig:
    """Root configuration of a batch run."""
    source_directory: str  # Directory scanned for .xlsx workbooks
    owner_id: str  # Catalog owner identifier
    output_directory: str
    ingestion: IngestionSettings
    database: DatabaseConfig
    photos_file: str | None = None
    timeout_seconds: float | None = None
