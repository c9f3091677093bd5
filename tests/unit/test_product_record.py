from __future__ import annotations

import dataclasses

import pytest

from catalog_ingest.models.product import ProductRecord, build_file_name, format_number, slugify


def _record(**overrides) -> ProductRecord:
    values = dict(
        number="003",
        name="Cola 2L",
        description="Cola 2L",
        barcode="7891234567890",
        category="Beverages",
        units_per_case=12,
        unit_cost=1.5,
        case_cost=18.0,
        retail_price=2.99,
        unit_profit=2.99 - 1.5,
        margin=99,
        file_name="003_cola_2l.html",
    )
    values.update(overrides)
    return ProductRecord(**values)


@pytest.mark.parametrize(
    "text,slug",
    [
        ("Cola 2L", "cola_2l"),
        ("  Café -- Crème!! ", "caf_cr_me"),
        ("___x___", "x"),
        ("ABC/def 100%", "abc_def_100"),
        ("!!!", ""),
    ],
)
def test_slugify(text, slug):
    assert slugify(text) == slug


def test_format_number_pads_to_three_digits():
    assert format_number(3) == "003"
    assert format_number(42) == "042"
    assert format_number(1234) == "1234"


def test_build_file_name():
    assert build_file_name("004", "Chips") == "004_chips.html"


def test_to_dict_uses_viewer_keys_and_two_decimals():
    data = _record().to_dict()
    assert data == {
        "number": "003",
        "name": "Cola 2L",
        "description": "Cola 2L",
        "barcode": "7891234567890",
        "category": "Beverages",
        "unitsPerCase": 12,
        "unitCost": "1.50",
        "caseCost": "18.00",
        "retailPrice": "2.99",
        "unitProfit": "1.49",
        "margin": 99,
        "fileName": "003_cola_2l.html",
    }


def test_to_dict_includes_photo_only_when_set():
    assert "photoUrl" not in _record().to_dict()
    assert _record(photo_url="https://cdn/x.jpg").to_dict()["photoUrl"] == "https://cdn/x.jpg"


def test_from_dict_round_trip():
    original = _record(photo_url="p.jpg")
    restored = ProductRecord.from_dict(original.to_dict())
    assert restored.to_dict() == original.to_dict()


def test_records_are_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        _record().margin = 5  # type: ignore[misc]
