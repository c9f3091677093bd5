from __future__ import annotations

from pathlib import Path

import pytest

from catalog_ingest.config.loader import ConfigError, load_config


def test_load_config_ok(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.source_directory == "./data"
    assert cfg.owner_id == "store-42"
    assert cfg.output_directory == "./catalogs"
    assert cfg.ingestion.header_scan_rows == 10
    assert cfg.ingestion.number_seed == 3
    assert cfg.ingestion.keep_na_strings is None
    assert cfg.database.host == "localhost"
    assert cfg.database.port == 5432
    assert cfg.database.dsn is None
    assert cfg.photos_file is None
    assert cfg.timeout_seconds is None


def test_defaults_applied(temp_workdir: Path):
    p = temp_workdir / "config" / "catalog.yml"
    p.write_text("source_directory: ./data\nowner_id: o1\n", encoding="utf-8")
    cfg = load_config(p)
    assert cfg.output_directory == "./catalogs"
    assert cfg.ingestion.header_scan_rows == 10
    assert cfg.ingestion.number_seed == 3
    assert cfg.database.host is None


def test_optional_keys(temp_workdir: Path):
    p = temp_workdir / "config" / "catalog.yml"
    p.write_text(
        "source_directory: ./data\n"
        "owner_id: o1\n"
        "photos_file: ./photos.json\n"
        "timeout_seconds: 2.5\n"
        "ingestion:\n"
        "  header_scan_rows: 20\n"
        "  number_seed: 1\n"
        "  keep_na_strings: [NA, N/A]\n",
        encoding="utf-8",
    )
    cfg = load_config(p)
    assert cfg.photos_file == "./photos.json"
    assert cfg.timeout_seconds == 2.5
    assert cfg.ingestion.header_scan_rows == 20
    assert cfg.ingestion.number_seed == 1
    assert cfg.ingestion.keep_na_strings == ("NA", "N/A")


def test_missing_file(temp_workdir: Path):
    with pytest.raises(ConfigError, match="config file not found"):
        load_config(temp_workdir / "config" / "nope.yml")


def test_invalid_yaml(temp_workdir: Path):
    p = temp_workdir / "config" / "catalog.yml"
    p.write_text("source_directory: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid yaml"):
        load_config(p)


def test_root_must_be_mapping(temp_workdir: Path):
    p = temp_workdir / "config" / "catalog.yml"
    p.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="mapping"):
        load_config(p)


@pytest.mark.parametrize(
    "body",
    [
        "source_directory: ./data\n",
        "owner_id: o1\n",
        "source_directory: ./data\nowner_id: o1\nunknown_key: 1\n",
        "source_directory: ./data\nowner_id: o1\ningestion:\n  header_scan_rows: 0\n",
        "source_directory: ./data\nowner_id: o1\ningestion:\n  number_seed: -1\n",
        "source_directory: ./data\nowner_id: o1\ntimeout_seconds: 0\n",
        "source_directory: ./data\nowner_id: o1\ndatabase:\n  port: not-a-port\n",
    ],
)
def test_schema_violations(temp_workdir: Path, body: str):
    p = temp_workdir / "config" / "catalog.yml"
    p.write_text(body, encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(p)
