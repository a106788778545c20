from __future__ import annotations

import re
from collections.abc import Iterable

__all__ = ["format_spot_id", "next_spot_id", "parse_spot_id"]

_SPOT_ID = re.compile(r"^s(\d+)$")


def parse_spot_id(spot_id: str) -> int:
    match = _SPOT_ID.match(spot_id) if isinstance(spot_id, str) else None
    if match is None:
        raise ValueError(f"Invalid spot id: {spot_id!r}")
    return int(match.group(1))


def format_spot_id(number: int) -> str:
    if number < 0:
        raise ValueError(f"Spot id number must be non-negative, got {number}")
    return f"s{number:03d}"


def next_spot_id(existing: Iterable[str], *, start: int = 1) -> str:
    """Return the id after the highest well-formed id in ``existing``."""

    highest = start - 1
    for spot_id in existing:
        try:
            highest = max(highest, parse_spot_id(spot_id))
        except ValueError:
            continue
    return format_spot_id(highest + 1)
