"""Turn texture classification: how the fourth card changes the flop."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from itertools import combinations

from ..core.models import TurnType
from .cards import RANKS, ClassifierError, check_cards, rank_of, rank_values, straight_exists, suit_of, value_of_rank

__all__ = ["classify_turn", "turn_completes_straight"]


def turn_completes_straight(flop: Sequence[str], turn: str) -> bool:
    """True when some two-rank holding has a straight with the turn but not on the flop."""

    flop_values = rank_values(flop)
    turn_value = value_of_rank(rank_of(turn))
    for low, high in combinations(RANKS, 2):
        holding = {value_of_rank(low), value_of_rank(high)}
        if straight_exists(flop_values | holding):
            continue
        if straight_exists(flop_values | holding | {turn_value}):
            return True
    return False


def classify_turn(flop: Sequence[str], turn: str | None) -> TurnType:
    if turn is None:
        return "blank_turn"
    flop = check_cards(flop)
    (turn,) = check_cards([turn])
    if len(flop) != 3:
        raise ClassifierError(f"flop must have 3 cards, got {len(flop)}")

    if any(rank_of(card) == rank_of(turn) for card in flop):
        return "paired_turn"

    suit_counts = Counter(suit_of(card) for card in flop)
    two_tone = next((suit for suit, count in suit_counts.items() if count == 2), None)
    if two_tone is not None and suit_of(turn) == two_tone:
        return "flush_completer"

    if value_of_rank(rank_of(turn)) > max(rank_values(flop)):
        return "overcard_turn"

    if turn_completes_straight(flop, turn):
        return "straight_completer"

    return "blank_turn"
