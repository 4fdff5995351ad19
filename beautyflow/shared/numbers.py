"""Defensive numeric coercion - unparsable input becomes 0"""

import math
from typing import Any


def to_number(value: Any, default: float = 0.0) -> float:
    """
    Coerce form input to a float.

    Accepts ints, floats and strings using either "." or "," as decimal
    separator. None, blanks, NaN and anything unparsable return `default`.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return default if math.isnan(value) else float(value)
    text = str(value).strip().replace(",", ".")
    if not text:
        return default
    try:
        number = float(text)
    except ValueError:
        return default
    return default if math.isnan(number) else number


def to_int(value: Any, default: int = 0) -> int:
    """Like to_number, truncated to int (parseInt semantics for durations)"""
    return int(to_number(value, default))


def round_money(value: float) -> float:
    return round(value, 2)
