from __future__ import annotations

import json
from pathlib import Path

from catalog_ingest.cli import main as cli_main


def test_keep_na_strings_from_config(write_config, no_db, write_workbook, temp_workdir: Path):
    text = write_config.read_text(encoding="utf-8").replace(
        "  number_seed: 3\n", "  number_seed: 3\n  keep_na_strings: [NA]\n"
    )
    write_config.write_text(text, encoding="utf-8")
    write_workbook("na.xlsx", {"S": [["Description", "Barcode"], ["NA", "NA"], ["Tea", None]]})

    assert cli_main([]) == 0
    doc = json.loads((temp_workdir / "catalogs" / "store_42" / "na.json").read_text(encoding="utf-8"))
    assert [(p["name"], p["barcode"]) for p in doc["products"]] == [("NA", "NA"), ("Tea", "")]
