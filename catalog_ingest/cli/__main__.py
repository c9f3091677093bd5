from __future__ import annotations

import argparse
import logging
import os
import sys
from contextlib import contextmanager
from pathlib import Path

from dotenv import load_dotenv

from catalog_ingest.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from catalog_ingest.logging.init import log_summary, setup_logging
from catalog_ingest.models.config_models import CatalogConfig
from catalog_ingest.models.processing_result import ProcessingResult
from catalog_ingest.services.orchestrator import ProcessingError, process_all, scan_workbooks
from catalog_ingest.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env (overrides process env) and config/catalog.yml
- Ingest every .xlsx in source_directory into a catalog per workbook
- Save to PostgreSQL when a connection is available (live), JSON store always
- Print one SUMMARY line; exit code reflects failures
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


@contextmanager
def _db_connection(cfg: CatalogConfig):  # pragma: no cover (thin wrapper; tested via mocks)
    """Provide a psycopg2 cursor.

    Resolution order for connection parameters:
        1. DATABASE_URL / PGDSN (whole DSN) or config dsn
        2. PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE
        3. config database section
    """
    import psycopg2

    db_cfg = cfg.database
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if not dsn:
        host = os.getenv("PGHOST", db_cfg.host or "localhost")
        port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
        user = os.getenv("PGUSER", db_cfg.user or "postgres")
        password = os.getenv("PGPASSWORD", db_cfg.password or "")
        database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
        dsn = f"host={host} port={port} user={user} dbname={database}"
        if password:
            dsn += f" password={password}"

    conn = psycopg2.connect(dsn)
    try:
        # orchestrator が BEGIN/COMMIT を明示発行する
        conn.autocommit = True
        cur = conn.cursor()
        try:
            yield cur
        finally:
            cur.close()
    finally:
        conn.close()


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env; its values win over the existing environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="catalog-ingest", description="Spreadsheet -> product catalog ingestion"
    )
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Config YAML path")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument(
        "--inspect-data",
        action="store_true",
        help="Print detected header row & column map per sheet then exit",
    )
    return p.parse_args(argv)


def _inspect_data(cfg: CatalogConfig) -> int:
    from catalog_ingest.excel.columns import classify_columns
    from catalog_ingest.excel.header import locate_header_row
    from catalog_ingest.excel.reader import UnreadableWorkbookError, read_workbook

    try:
        files = scan_workbooks(Path(cfg.source_directory))
    except ProcessingError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    if not files:
        print("inspect: no .xlsx files")
        return EXIT_SUCCESS_ALL

    scan_rows = cfg.ingestion.header_scan_rows
    for f in files:
        print(f"FILE: {f.name}")
        try:
            workbook = read_workbook(f.read_bytes(), keep_na_strings=cfg.ingestion.keep_na_strings)
        except (OSError, UnreadableWorkbookError) as e:
            print(f"  read_error: {e}")
            continue
        for sheet_name, grid in workbook:
            header_index = locate_header_row(grid, max_rows=scan_rows)
            if header_index is None:
                print(f"  SHEET: {sheet_name} header=not found (first {scan_rows} rows)")
                continue
            column_map = classify_columns(grid[header_index])
            print(f"  SHEET: {sheet_name} header_row={header_index + 1} columns={list(grid[header_index])}")
            print(f"    column_map={column_map}")
            sample = grid[header_index + 1:header_index + 4]
            print(f"    sample_rows={[list(r) for r in sample]}")
    return EXIT_SUCCESS_ALL


def _run_batch(cfg: CatalogConfig, logger: logging.Logger) -> tuple[ProcessingResult, str]:
    """Run live when a connection opens, mock otherwise. Returns (result, mode).

    Raises:
        ProcessingError: the batch could not start (source directory problems)
    """
    # DISABLE_DB_CONNECT=1 で DB 接続を完全に無効化 (mock モード)
    if os.getenv("DISABLE_DB_CONNECT") == "1":
        logger.debug("DB connect disabled via DISABLE_DB_CONNECT=1 -> mock mode")
        return process_all(cfg, cursor=None), "mock"

    try:
        with _db_connection(cfg) as cur:
            return process_all(cfg, cursor=cur), "live"
    except ProcessingError:
        raise
    except Exception as db_e:
        report = logger.debug if os.getenv("SUPPRESS_DB_WARNING") == "1" else logger.info
        report(f"DB connection failed -> fallback to mock mode: {db_e}")
    return process_all(cfg, cursor=None), "mock"


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # argv=[] (テストからの呼び出し) で sys.argv を読まないよう None のときのみ参照
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    _load_env_file(Path(".env"), override=True)

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.debug:
        logger.setLevel(logging.DEBUG)
        for h in logger.handlers:
            h.setLevel(logging.DEBUG)
        logger.debug("debug mode enabled")

    source = Path(cfg.source_directory)
    if not source.exists():
        logger.error(f"directory not found: {source}")
        return EXIT_FATAL
    logger.info(f"Ingesting workbooks from: {source} owner={cfg.owner_id}")

    if args.inspect_data:
        return _inspect_data(cfg)

    try:
        result, db_mode = _run_batch(cfg, logger)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    logger.info(f"mode={db_mode} total_products={result.total_products}")
    # log_summary が "SUMMARY " を付与するので本文のみ渡す
    log_summary(render_summary_line(result.total_files, result).removeprefix("SUMMARY "))

    return EXIT_PARTIAL_FAILURE if result.failed_files else EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
