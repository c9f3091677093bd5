# Shared pytest fixtures
from __future__ import annotations

import io
import tempfile
from collections.abc import Callable
from pathlib import Path

import pandas as pd
import pytest

from catalog_ingest.logging.init import reset_logging

Sheets = dict[str, list[list[object]]]


def _workbook_bytes(sheets: Sheets) -> bytes:
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        for sheet, rows in sheets.items():
            df = pd.DataFrame(rows)
            df.to_excel(writer, sheet_name=sheet, header=False, index=False)
    return buf.getvalue()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture(autouse=True)
def _fresh_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
owner_id: store-42
output_directory: ./catalogs
ingestion:
  header_scan_rows: 10
  number_seed: 3
database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: appdb
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "catalog.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def make_workbook() -> Callable[[Sheets], bytes]:
    """Build xlsx bytes from {sheet name: rows}; rows are written header-less."""
    return _workbook_bytes


@pytest.fixture()
def write_workbook(temp_workdir: Path) -> Callable[[str, Sheets], Path]:
    def _write(name: str, sheets: Sheets) -> Path:
        path = temp_workdir / "data" / name
        path.write_bytes(_workbook_bytes(sheets))
        return path

    return _write


@pytest.fixture()
def two_sheet_workbook() -> Sheets:
    """Beverages (title row above the header) + Snacks (bare description/retail)."""
    return {
        "Beverages": [
            ["Supplier price list 2024"],
            ["Item Description", "Barcode", "Unit Cost", "Units - Units", "Average market retail"],
            ["Cola 2L", "7891234567890", "1.50", "12", "2.99"],
        ],
        "Snacks": [
            ["Description", "Retail"],
            ["Chips", "3.50"],
        ],
    }


@pytest.fixture()
def no_db(monkeypatch):
    monkeypatch.setenv("DISABLE_DB_CONNECT", "1")
