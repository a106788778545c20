"""Fallback action frequencies for spots without solver output.

Vectors align with the option menu: passive action first, ascending
aggression.  The table is sparse; :func:`lookup_frequencies` degrades through
a fixed chain (exact entry, same turn, blank turn, uniform) and resizes
whatever it finds to the requested menu length.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Final

import numpy as np

from ..core.models import HandIntent, NodeIntent, TurnType
from ..core.numeric import round2

__all__ = [
    "BASE_FREQ_TABLE",
    "NODE_INTENT_PRIORITY",
    "lookup_frequencies",
    "resize_frequencies",
    "uniform_frequencies",
]

logger = logging.getLogger(__name__)

FreqVector = tuple[float, ...]

BASE_FREQ_TABLE: Final[Mapping[HandIntent, Mapping[TurnType, Mapping[NodeIntent, FreqVector]]]] = {
    "made_value": {
        "blank_turn": {"value": (0.15, 0.40, 0.45), "pressure": (0.25, 0.45, 0.30)},
        "overcard_turn": {"value": (0.35, 0.45, 0.20), "pressure": (0.40, 0.40, 0.20)},
        "straight_completer": {"value": (0.45, 0.40, 0.15), "pressure": (0.50, 0.35, 0.15)},
        "flush_completer": {"value": (0.50, 0.35, 0.15), "pressure": (0.55, 0.30, 0.15)},
        "paired_turn": {"value": (0.35, 0.45, 0.20), "pressure": (0.40, 0.40, 0.20)},
    },
    "thin_value": {
        "blank_turn": {"value": (0.30, 0.50, 0.20), "pressure": (0.35, 0.45, 0.20)},
        "overcard_turn": {"value": (0.45, 0.40, 0.15), "pressure": (0.50, 0.35, 0.15)},
        "straight_completer": {"value": (0.50, 0.35, 0.15), "pressure": (0.55, 0.30, 0.15)},
        "flush_completer": {"value": (0.55, 0.30, 0.15), "pressure": (0.60, 0.28, 0.12)},
        "paired_turn": {"value": (0.45, 0.40, 0.15), "pressure": (0.50, 0.35, 0.15)},
    },
    "combo_draw": {
        "blank_turn": {"semi_bluff": (0.20, 0.45, 0.35), "pressure": (0.25, 0.40, 0.35)},
        "overcard_turn": {"semi_bluff": (0.25, 0.45, 0.30), "pressure": (0.30, 0.40, 0.30)},
        "straight_completer": {
            "semi_bluff": (0.15, 0.50, 0.35),
            "pressure": (0.20, 0.45, 0.35),
            "value": (0.15, 0.40, 0.45),
        },
        "flush_completer": {
            "semi_bluff": (0.30, 0.45, 0.25),
            "pressure": (0.35, 0.40, 0.25),
            "value": (0.15, 0.40, 0.45),
        },
        "paired_turn": {"semi_bluff": (0.30, 0.45, 0.25), "pressure": (0.35, 0.40, 0.25)},
    },
    "draw": {
        "blank_turn": {"semi_bluff": (0.35, 0.45, 0.20), "pressure": (0.40, 0.40, 0.20)},
        "overcard_turn": {"semi_bluff": (0.45, 0.40, 0.15), "pressure": (0.50, 0.35, 0.15)},
        "straight_completer": {"semi_bluff": (0.30, 0.50, 0.20), "value": (0.20, 0.45, 0.35)},
        "flush_completer": {"semi_bluff": (0.35, 0.45, 0.20), "value": (0.20, 0.40, 0.40)},
        "paired_turn": {"semi_bluff": (0.45, 0.40, 0.15), "pressure": (0.50, 0.35, 0.15)},
    },
    "pure_bluff": {
        "blank_turn": {"pressure": (0.55, 0.30, 0.15), "semi_bluff": (0.60, 0.28, 0.12)},
        "overcard_turn": {"pressure": (0.40, 0.35, 0.25), "semi_bluff": (0.45, 0.35, 0.20)},
        "straight_completer": {"pressure": (0.45, 0.35, 0.20), "semi_bluff": (0.50, 0.35, 0.15)},
        "flush_completer": {"pressure": (0.50, 0.30, 0.20), "semi_bluff": (0.55, 0.30, 0.15)},
        "paired_turn": {"pressure": (0.60, 0.25, 0.15), "semi_bluff": (0.65, 0.25, 0.10)},
    },
}

# Order used when the requested node intent has no entry for a turn.
NODE_INTENT_PRIORITY: Final[Mapping[HandIntent, tuple[NodeIntent, ...]]] = {
    "made_value": ("value", "pressure"),
    "thin_value": ("value", "pressure"),
    "combo_draw": ("semi_bluff", "pressure", "value"),
    "draw": ("semi_bluff", "pressure", "value"),
    "pure_bluff": ("pressure", "semi_bluff"),
    "give_up": (),
}


def uniform_frequencies(num_options: int) -> list[float]:
    if num_options <= 0:
        return []
    if num_options == 1:
        return [1.0]
    return [round2(1 / num_options)] * num_options


def resize_frequencies(source: Sequence[float], target: int) -> list[float]:
    """Resize ``source`` to ``target`` slots keeping its skew, then renormalize.

    Shrinking integrates the source (as a step function over
    ``[0, len(source))``) across ``target`` equal-width bins; expanding samples
    it by linear interpolation.  Each component is rounded to two decimals, so
    the sum may land a cent off 1.0.
    """

    if len(source) == target:
        return list(source)
    if target <= 0:
        return []
    if target == 1:
        return [1.0]

    values = np.asarray(source, dtype=np.float64)
    length = values.size
    if length == 0:
        return uniform_frequencies(target)

    if target < length:
        ratio = length / target
        lower = np.arange(length, dtype=np.float64)
        resized = np.empty(target, dtype=np.float64)
        for i in range(target):
            start, end = i * ratio, (i + 1) * ratio
            overlap = np.clip(np.minimum(end, lower + 1) - np.maximum(start, lower), 0.0, None)
            resized[i] = float(np.dot(values, overlap))
    else:
        positions = np.arange(target, dtype=np.float64) / (target - 1) * (length - 1)
        resized = np.interp(positions, np.arange(length, dtype=np.float64), values)

    total = float(np.sum(resized))
    if total <= 0:
        return uniform_frequencies(target)
    return [round2(float(value)) for value in resized / total]


def _fit(vector: FreqVector, num_options: int) -> list[float]:
    return list(vector) if len(vector) == num_options else resize_frequencies(vector, num_options)


def _first_by_priority(entry: Mapping[NodeIntent, FreqVector], hand_intent: HandIntent) -> FreqVector | None:
    for node_intent in NODE_INTENT_PRIORITY.get(hand_intent, ()):
        if node_intent in entry:
            return entry[node_intent]
    return None


def lookup_frequencies(
    hand_intent: HandIntent,
    turn_type: TurnType,
    node_intent: NodeIntent,
    num_options: int,
) -> list[float]:
    """Frequency vector of length ``num_options`` for the given situation."""

    if num_options <= 1:
        return uniform_frequencies(num_options)

    by_turn = BASE_FREQ_TABLE.get(hand_intent)
    if by_turn:
        for turn in (turn_type, "blank_turn"):
            entry = by_turn.get(turn)
            if not entry:
                continue
            found = entry.get(node_intent) or _first_by_priority(entry, hand_intent)
            if found is not None:
                if turn != turn_type or node_intent not in entry:
                    logger.debug(
                        "Frequency fallback for %s/%s/%s -> %s",
                        hand_intent,
                        turn_type,
                        node_intent,
                        turn,
                    )
                return _fit(found, num_options)

    logger.debug("No frequency prior for %s/%s/%s; using uniform", hand_intent, turn_type, node_intent)
    return uniform_frequencies(num_options)
