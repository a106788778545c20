from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass

from ..core.models import StraightDraw
from .cards import RANKS, check_cards, rank_of, rank_values, straight_exists, suit_of, value_of_rank

__all__ = ["HandFeatures", "compute_hand_features", "straight_draw_type"]

_WHEEL = (14, 2, 3, 4, 5)


@dataclass(frozen=True, slots=True)
class HandFeatures:
    has_pair: bool
    pair_rank: str | None
    has_flush_draw: bool
    is_nut_flush_draw: bool
    straight_draw: StraightDraw
    combo_draw: bool
    # Pair plus any draw; distinct from the flush+straight combo draw.
    has_pair_plus_draw: bool
    has_straight: bool
    is_wheel_straight: bool
    # Coarse 0..0.85 proxy, used for teaching labels only.
    equity_proxy: float

    @property
    def has_draw(self) -> bool:
        return self.has_flush_draw or self.straight_draw != "none"


def straight_draw_type(hand: Sequence[str], board: Sequence[str]) -> StraightDraw:
    """Count single-rank completions; a made straight has no draw."""

    base = rank_values([*board, *hand])
    if straight_exists(base):
        return "none"
    outs = sum(1 for rank in RANKS if straight_exists(base | {value_of_rank(rank)}))
    if outs >= 2:
        return "oesd"
    if outs == 1:
        return "gutshot"
    return "none"


def _hero_straight(hero_values: set[int], board_values: set[int]) -> tuple[bool, bool]:
    """Return (has straight, is wheel) counting only straights hero contributes to."""

    combined = hero_values | board_values
    contributes = hero_values - board_values
    wheel = all(value in combined for value in _WHEEL) and any(value in contributes for value in _WHEEL)
    if wheel:
        return True, True
    for high in range(14, 5, -1):
        run = range(high, high - 5, -1)
        if all(value in combined for value in run) and any(value in contributes for value in run):
            return True, False
    return False, False


def compute_hand_features(hand: Sequence[str], board: Sequence[str]) -> HandFeatures:
    hand = check_cards(hand)
    board = check_cards(board)
    hero_ranks = [rank_of(card) for card in hand]
    board_ranks = [rank_of(card) for card in board]

    pocket = hero_ranks[0] == hero_ranks[1]
    has_pair = pocket or any(rank in board_ranks for rank in hero_ranks)
    if pocket:
        pair_rank: str | None = hero_ranks[0]
    else:
        pair_rank = next((rank for rank in hero_ranks if rank in board_ranks), None)

    suit_counts = Counter(suit_of(card) for card in [*hand, *board])
    flush_suit = next((suit for suit, count in suit_counts.items() if count == 4), None)
    has_flush_draw = max(suit_counts.values()) == 4
    is_nut_flush_draw = has_flush_draw and any(suit_of(card) == flush_suit and rank_of(card) == "A" for card in hand)

    draw = straight_draw_type(hand, board)
    combo_draw = has_flush_draw and draw in ("oesd", "gutshot")
    has_pair_plus_draw = has_pair and (has_flush_draw or draw != "none")

    equity = 0.15
    if has_pair:
        equity += 0.18
    if has_flush_draw:
        equity += 0.28 if is_nut_flush_draw else 0.22
    if draw == "gutshot":
        equity += 0.10
    if draw == "oesd":
        equity += 0.18
    if combo_draw:
        equity += 0.05
    if has_pair_plus_draw:
        equity += 0.08
    equity = min(equity, 0.85)

    has_straight, is_wheel = _hero_straight(rank_values(hand), rank_values(board))

    return HandFeatures(
        has_pair=has_pair,
        pair_rank=pair_rank,
        has_flush_draw=has_flush_draw,
        is_nut_flush_draw=is_nut_flush_draw,
        straight_draw=draw,
        combo_draw=combo_draw,
        has_pair_plus_draw=has_pair_plus_draw,
        has_straight=has_straight,
        is_wheel_straight=is_wheel,
        equity_proxy=round(equity, 3),
    )
