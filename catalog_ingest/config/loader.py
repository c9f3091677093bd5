from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    DEFAULT_HEADER_SCAN_ROWS,
    DEFAULT_NUMBER_SEED,
    CatalogConfig,
    DatabaseConfig,
    IngestionSettings,
)

"""Config loader.

Responsibilities:
- Load YAML config/catalog.yml
- Validate against config_schema.json (shipped next to this module)
- Apply defaults (output_directory=./catalogs, header window 10, seed 3)
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/catalog.yml")
DEFAULT_OUTPUT_DIRECTORY = "./catalogs"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing / not JSON, or the config violates it
            (missing required keys, wrong types, unknown keys).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _ingestion_settings(raw: dict[str, Any]) -> IngestionSettings:
    keep_na = raw.get("keep_na_strings")
    return IngestionSettings(
        header_scan_rows=raw.get("header_scan_rows", DEFAULT_HEADER_SCAN_ROWS),
        number_seed=raw.get("number_seed", DEFAULT_NUMBER_SEED),
        keep_na_strings=tuple(keep_na) if keep_na else None,
    )


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> CatalogConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    db_raw = data.get("database") or {}
    db = DatabaseConfig(
        host=db_raw.get("host"),
        port=db_raw.get("port"),
        user=db_raw.get("user"),
        password=db_raw.get("password"),
        database=db_raw.get("database"),
        dsn=db_raw.get("dsn"),
    )
    return CatalogConfig(
        source_directory=data["source_directory"],
        owner_id=data["owner_id"],
        output_directory=data.get("output_directory", DEFAULT_OUTPUT_DIRECTORY),
        ingestion=_ingestion_settings(data.get("ingestion") or {}),
        database=db,
        photos_file=data.get("photos_file"),
        timeout_seconds=data.get("timeout_seconds"),
    )
