"""Normalization helpers.

Centralizes the numeric-literal rule used by every command: a field is
numeric when it reads as a decimal number literal, otherwise it stays a
string.
"""

from __future__ import annotations

import math
import re
from typing import Any

_NUMBER_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_INTEGER_RE = re.compile(r"[+-]?\d+")


def to_number(value: Any) -> int | float | None:
    """Parse *value* as a finite number, or return ``None``.

    Integer literals stay ``int``; anything with a fraction or exponent
    becomes ``float``.  ``bool`` is not treated as a number.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not _NUMBER_RE.fullmatch(text):
        return None
    if _INTEGER_RE.fullmatch(text):
        return int(text)
    result = float(text)
    if not math.isfinite(result):
        return None
    return result


def coerce_number(value: Any) -> Any:
    """Return the numeric form of *value* when it has one, else *value* unchanged."""
    parsed = to_number(value)
    return value if parsed is None else parsed


def to_index(value: Any) -> int | None:
    """Strict integer parse used for list positions."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INTEGER_RE.fullmatch(value.strip()):
        return int(value.strip())
    return None
