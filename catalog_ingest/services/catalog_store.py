from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from ..models.product import ProductRecord, slugify

"""File-based catalog store.

One JSON document per (owner, catalog) so the viewer page can be
materialized later from the owner id alone:

    {output_directory}/{owner_id}/{catalog_name}.json

Saving replaces the previous catalog of the same name (a fresh upload
supersedes the old one).
"""

__all__ = [
    "ALL_CATEGORIES",
    "CatalogPublication",
    "CatalogStore",
    "filter_by_category",
]

ALL_CATEGORIES = "all"


@dataclass(frozen=True)
class CatalogPublication:
    path: Path
    files: tuple[str, ...]  # 各商品の fileName (表示キー)
    total_products: int


def filter_by_category(
    products: Iterable[ProductRecord], category: str | None
) -> list[ProductRecord]:
    """Select the records of one category for export; None / "all" keeps everything."""
    if category is None or category == ALL_CATEGORIES:
        return list(products)
    return [p for p in products if p.category == category]


class CatalogStore:
    def __init__(self, output_directory: Path) -> None:
        self.output_directory = Path(output_directory)

    def catalog_path(self, owner_id: str, catalog_name: str) -> Path:
        owner_dir = slugify(owner_id) or "_"
        name = slugify(catalog_name) or "catalog"
        return self.output_directory / owner_dir / f"{name}.json"

    def save(
        self, owner_id: str, catalog_name: str, products: Iterable[ProductRecord]
    ) -> CatalogPublication:
        """Write (or replace) the owner's catalog and return where it went."""
        records = list(products)
        generated_at = datetime.now(UTC)
        categories: list[str] = []
        for r in records:
            if r.category not in categories:
                categories.append(r.category)
        document: dict[str, Any] = {
            "userId": owner_id,
            "catalog": catalog_name,
            "generatedAt": generated_at.isoformat().replace("+00:00", "Z"),
            "timestamp": int(generated_at.timestamp() * 1000),
            "totalProducts": len(records),
            "categories": categories,
            "products": [r.to_dict() for r in records],
        }
        path = self.catalog_path(owner_id, catalog_name)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(json.dumps(document, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp.replace(path)
        return CatalogPublication(
            path=path,
            files=tuple(r.file_name for r in records),
            total_products=len(records),
        )

    def load(self, owner_id: str, catalog_name: str) -> list[ProductRecord]:
        """Read a saved catalog back. Raises FileNotFoundError if never saved."""
        path = self.catalog_path(owner_id, catalog_name)
        document = json.loads(path.read_text(encoding="utf-8"))
        return [ProductRecord.from_dict(p) for p in document.get("products", [])]
