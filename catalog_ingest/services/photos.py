from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from ..models.product import ProductRecord

"""Photo enrichment for ingested products.

Photos are uploaded separately and tagged with a product number, a barcode
and/or a product name. Matching order per product:

1. product number ("003")
2. barcode
3. partial name match: the first 20 chars of the product name,
   case-insensitive, contained in the photo's product name

Records are never mutated; enriched copies are returned.
"""

__all__ = [
    "PhotoRef",
    "PhotoIndex",
    "enrich_products_with_photos",
    "load_photos_file",
]

NAME_MATCH_CHARS = 20


@dataclass(frozen=True)
class PhotoRef:
    photo_url: str
    product_number: str | None = None
    barcode: str | None = None
    product_name: str | None = None

    @staticmethod
    def from_mapping(row: Mapping[str, Any]) -> PhotoRef:
        return PhotoRef(
            photo_url=str(row["photo_url"]),
            product_number=_opt_str(row.get("product_number")),
            barcode=_opt_str(row.get("barcode")),
            product_name=_opt_str(row.get("product_name")),
        )


def _opt_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class PhotoIndex:
    """Lookup tables built once per enrichment call."""

    def __init__(self, photos: Iterable[PhotoRef]) -> None:
        self._by_number: dict[str, str] = {}
        self._by_barcode: dict[str, str] = {}
        self._named: list[tuple[str, str]] = []
        for photo in photos:
            # 同一キーは最初の写真を優先
            if photo.product_number:
                self._by_number.setdefault(photo.product_number, photo.photo_url)
            if photo.barcode:
                self._by_barcode.setdefault(photo.barcode, photo.photo_url)
            if photo.product_name:
                self._named.append((photo.product_name.lower(), photo.photo_url))

    def find(self, product: ProductRecord) -> str | None:
        if product.number and product.number in self._by_number:
            return self._by_number[product.number]
        if product.barcode and product.barcode in self._by_barcode:
            return self._by_barcode[product.barcode]
        if product.name:
            needle = product.name[:NAME_MATCH_CHARS].lower()
            for name, url in self._named:
                if needle in name:
                    return url
        return None


def enrich_products_with_photos(
    products: Iterable[ProductRecord], photos: Iterable[PhotoRef]
) -> list[ProductRecord]:
    """Return copies of ``products`` with photo_url set (None when unmatched)."""
    index = PhotoIndex(photos)
    return [replace(p, photo_url=index.find(p)) for p in products]


def load_photos_file(path: Path) -> list[PhotoRef]:
    """Read photo rows from a JSON list of objects with a ``photo_url`` key."""
    rows = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(rows, list):
        raise ValueError(f"photos file must contain a JSON list: {path}")
    return [PhotoRef.from_mapping(r) for r in rows]
