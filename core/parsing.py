"""
Numeric parsing helpers applied at data-ingestion boundaries.

Catalog files, HTTP payloads and caller-supplied trait arrays are all
loosely typed. Everything passes through these helpers once, so the scoring
code downstream only ever sees finite numbers.
"""
from __future__ import annotations

import math
from typing import Any, List, Union

from core.constants import TRAIT_COUNT, TRAIT_MAX, TRAIT_MIN

Number = Union[int, float]


def parse_finite_number(value: Any, default: Number = 0) -> Number:
    """
    Parse a value into a finite number.

    Accepts ints, floats and numeric strings. Booleans, None, NaN,
    infinities and anything unparsable return ``default``. Integral floats
    come back as ints so trait math stays in integers.

    Examples:
        >>> parse_finite_number("42")
        42
        >>> parse_finite_number(float("nan"))
        0
        >>> parse_finite_number(None, default=-1)
        -1
    """
    if value is None or isinstance(value, bool):
        return default

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return default
        try:
            number: Number = float(text)
        except ValueError:
            return default
    elif isinstance(value, (int, float)):
        number = value
    else:
        return default

    if isinstance(number, float):
        if not math.isfinite(number):
            return default
        if number.is_integer():
            return int(number)
    return number


def is_finite_number(value: Any) -> bool:
    """True for real ints/floats that are finite (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def normalize_traits(values: Any, length: int = TRAIT_COUNT) -> List[Number]:
    """
    Coerce a trait array into exactly ``length`` finite numbers.

    Missing slots and non-finite entries become 0; extra entries are dropped.
    """
    if not isinstance(values, (list, tuple)):
        return [0] * length

    normalized: List[Number] = []
    for i in range(length):
        raw = values[i] if i < len(values) else None
        normalized.append(parse_finite_number(raw))
    return normalized


def is_complete_trait_vector(values: Any, length: int = TRAIT_COUNT) -> bool:
    """True when ``values`` has exactly ``length`` finite numbers."""
    return (
        isinstance(values, (list, tuple))
        and len(values) == length
        and all(is_finite_number(v) for v in values)
    )


def clamp_trait(value: Number, low: Number = TRAIT_MIN, high: Number = TRAIT_MAX) -> Number:
    """Clamp a trait value to the inclusive [low, high] range."""
    return max(low, min(high, value))
