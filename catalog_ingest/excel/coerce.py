from __future__ import annotations

import math
import numbers
import re
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

"""Defensive cell coercion.

Supplier sheets mix real numbers, numbers typed as text ("1.50", "$2.99",
"1,234.00") and junk ("n/a", "-", "see note"). Every helper here returns a
Coerced value that says whether the default was applied, so the record
builder can tell "cell said 0" apart from "cell was unusable".
"""

__all__ = [
    "Coerced",
    "is_blank",
    "parse_number",
    "coerce_amount",
    "coerce_count",
    "cell_text",
    "round_half_up",
]

T = TypeVar("T")

# 先頭の数値部分のみ採用 ("12 pcs" -> 12)
_LEADING_NUMBER = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_THOUSANDS = re.compile(r"^[+-]?\d{1,3}(?:,\d{3})+(?:\.\d+)?")
_CURRENCY_PREFIXES = ("R$", "$", "€", "£")


@dataclass(frozen=True)
class Coerced(Generic[T]):
    value: T
    defaulted: bool = False


def is_blank(cell: Any) -> bool:
    """None, NaN and whitespace-only strings count as empty cells."""
    if cell is None:
        return True
    if isinstance(cell, str):
        return cell.strip() == ""
    if isinstance(cell, float) and math.isnan(cell):
        return True
    return False


def _strip_currency(text: str) -> str:
    sign = ""
    if text[:1] in "+-":
        sign, text = text[0], text[1:].lstrip()
    for prefix in _CURRENCY_PREFIXES:
        if text.startswith(prefix):
            text = text[len(prefix):].lstrip()
            break
    return sign + text


def parse_number(cell: Any) -> float | None:
    """Parse a cell as a finite float, or return None when it is unusable."""
    if is_blank(cell) or isinstance(cell, bool):
        return None
    if isinstance(cell, numbers.Real):
        value = float(cell)
        return value if math.isfinite(value) else None
    if not isinstance(cell, str):
        return None

    text = _strip_currency(cell.strip())
    grouped = _THOUSANDS.match(text)
    if grouped:
        text = grouped.group(0).replace(",", "")
    match = _LEADING_NUMBER.match(text)
    if not match:
        return None
    value = float(match.group(0))
    return value if math.isfinite(value) else None


def coerce_amount(cell: Any, default: float = 0.0) -> Coerced[float]:
    value = parse_number(cell)
    if value is None:
        return Coerced(default, defaulted=True)
    return Coerced(value)


def coerce_count(cell: Any, default: int = 1) -> Coerced[int]:
    """Parse a positive whole count; fractions are truncated, <= 0 gives the default."""
    value = parse_number(cell)
    if value is None:
        return Coerced(default, defaulted=True)
    count = int(value)
    if count <= 0:
        return Coerced(default, defaulted=True)
    return Coerced(count)


def cell_text(cell: Any) -> str:
    """Render a cell as trimmed text; integer-valued floats lose their '.0'.

    Barcodes read from numeric columns arrive as floats (7891234567890.0).
    """
    if is_blank(cell):
        return ""
    if isinstance(cell, bool):
        return str(cell)
    if isinstance(cell, numbers.Integral):
        return str(int(cell))
    if isinstance(cell, numbers.Real):
        value = float(cell)
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    return str(cell).strip()


def round_half_up(value: float) -> int:
    """Round .5 toward +inf (2.5 -> 3, -2.5 -> -2). inf and NaN give 0."""
    if not math.isfinite(value):
        return 0
    return math.floor(value + 0.5)
