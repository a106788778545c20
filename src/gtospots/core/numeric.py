"""Numeric guards shared across subsystems."""

from __future__ import annotations

import math
from typing import Any

__all__ = ["is_number", "round2", "round4", "round_half_up"]


def is_number(value: Any) -> bool:
    """Return True for finite ints/floats; JSON booleans are not numbers."""

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def round_half_up(value: float, digits: int) -> float:
    """Round ties toward +inf at ``digits`` decimals (0.125 -> 0.13).

    Stored records use half-up rounding, so :func:`round` (banker's) is not
    interchangeable here.
    """

    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale


def round2(value: float) -> float:
    return round_half_up(value, 2)


def round4(value: float) -> float:
    return round_half_up(value, 4)
