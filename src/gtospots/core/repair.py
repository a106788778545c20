"""Arithmetic repair for spots whose pot or bet sizes drifted after edits.

Only ``data.pot`` and the exact amount of well-formed percent-sized bets are
rewritten; positions, codes, tuple lengths and the number of actions/options
never change.  The repair is a two-pass fixed point: percent sizes depend
only on the pot at or before the action, so re-syncing the pot after rewriting
history settles every value.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any

from .numeric import is_number, round4
from .pot import STREET_MARKER, pot_from_history, starting_pot

__all__ = ["repair_history", "repair_options", "repair_spot"]

logger = logging.getLogger(__name__)


def _is_percent_bet_option(option: Any) -> bool:
    return isinstance(option, list) and len(option) == 3 and option[0] == "b" and is_number(option[1])


def repair_options(options: list[Any], pot: float) -> list[Any]:
    """Resize percent bet options against ``pot``; other options pass through."""

    repaired: list[Any] = []
    for option in options:
        if _is_percent_bet_option(option):
            pct = option[1]
            repaired.append(["b", pct, round4((pct / 100) * pot)])
        else:
            repaired.append(option)
    return repaired


def repair_history(history: list[Any]) -> list[Any]:
    """Re-walk ``history`` recomputing percent bets from the running pot."""

    running = starting_pot()
    repaired: list[Any] = []
    for entry in history:
        if not isinstance(entry, list) or len(entry) < 2 or entry[0] == STREET_MARKER:
            repaired.append(entry)
            continue
        code = entry[1]
        if code == "b" and len(entry) == 4 and is_number(entry[2]):
            pct = entry[2]
            exact = round4((pct / 100) * running)
            repaired.append([entry[0], "b", pct, exact])
            running += exact
            continue
        if code in ("b", "c", "r", "a"):
            exact = entry[3] if len(entry) > 3 else None
            if is_number(exact):
                running += exact
        repaired.append(entry)
    return repaired


def repair_spot(spot: Any) -> Any:
    """Return a repaired copy of ``spot``; the input is never mutated.

    Unrecognisable payloads come back as an unchanged copy so callers can
    always apply or discard the result atomically.
    """

    fixed = copy.deepcopy(spot)
    if not isinstance(fixed, Mapping):
        return fixed
    data = fixed.get("data")
    if not isinstance(data, dict):
        return fixed
    history = data.get("hist")
    options = data.get("opts")
    if not isinstance(history, list):
        logger.debug("Spot %s has no history list; skipping repair", fixed.get("id"))
        return fixed

    before = data.get("pot")
    pot = round4(pot_from_history(history))
    data["pot"] = pot
    if isinstance(options, list):
        data["opts"] = repair_options(options, pot)

    data["hist"] = repair_history(history)

    pot = round4(pot_from_history(data["hist"]))
    data["pot"] = pot
    if isinstance(options, list):
        data["opts"] = repair_options(data["opts"], pot)

    if before != pot:
        logger.debug("Repaired spot %s pot %s -> %s", fixed.get("id"), before, pot)
    return fixed
