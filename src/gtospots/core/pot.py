"""Pot arithmetic shared by the validator and the repair engine.

Blinds are always posted (SB=0.5, BB=1.0) and every contributing history
entry carries its exact chip amount as the fourth tuple element.  The helpers
here never raise on malformed entries; shape problems are reported by the
grammar validator instead.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Final

from .numeric import is_number

__all__ = [
    "BLINDS",
    "CONTRIBUTING_CODES",
    "STREET_MARKER",
    "STREET_ORDER",
    "action_contribution",
    "is_street_marker",
    "pot_from_history",
    "starting_pot",
]

BLINDS: Final = {"SB": 0.5, "BB": 1.0}
CONTRIBUTING_CODES: Final = frozenset({"c", "b", "r", "a"})
STREET_ORDER: Final = ("p", "f", "t", "r")
STREET_MARKER: Final = "-"


def starting_pot() -> float:
    return BLINDS["SB"] + BLINDS["BB"]


def is_street_marker(entry: Any) -> bool:
    return (
        isinstance(entry, (list, tuple))
        and len(entry) == 2
        and entry[0] == STREET_MARKER
        and entry[1] in STREET_ORDER
    )


def action_contribution(entry: Any) -> float:
    """Chips added to the pot by a single history entry (0 when unknown)."""

    if not isinstance(entry, (list, tuple)) or len(entry) < 2:
        return 0.0
    if entry[0] == STREET_MARKER:
        return 0.0
    if not isinstance(entry[1], str) or entry[1] not in CONTRIBUTING_CODES:
        return 0.0
    exact = entry[3] if len(entry) > 3 else None
    return float(exact) if is_number(exact) else 0.0


def pot_from_history(history: Iterable[Any]) -> float:
    """Return SB + BB plus every c/b/r/a exact amount in ``history``.

    No rounding happens inside the loop; callers round for storage.
    """

    pot = starting_pot()
    for entry in history:
        pot += action_contribution(entry)
    return pot
