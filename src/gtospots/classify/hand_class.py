"""Coarse strength class of hero's holding on the current board.

Made flushes, straights, full houses and quads come from the ``treys``
evaluator; pair-based classes apply the pair-quality downgrades (bottom pair
and underpairs are never strong on dangerous turns).
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from typing import Final

from treys import Card, Evaluator

from ..core.models import HeroHandClass, TurnType
from .cards import ClassifierError, check_cards, rank_of, value_of_rank
from .pair_quality import classify_pair_quality

__all__ = ["classify_hero_hand", "made_hand_rank_class"]

_EVALUATOR: Final = Evaluator()
# treys rank classes: 1 straight flush, 2 quads, 3 full house, 4 flush, 5 straight.
_MONSTER_RANK_CLASS: Final = 5
_DANGEROUS_FOR_WEAK_PAIRS: Final = frozenset({"straight_completer", "paired_turn", "flush_completer"})


def made_hand_rank_class(hand: Sequence[str], board: Sequence[str]) -> int | None:
    """Return the treys rank class, or None when fewer than five cards are known."""

    if len(board) < 3:
        return None
    try:
        score = _EVALUATOR.evaluate([Card.new(card) for card in hand], [Card.new(card) for card in board])
    except KeyError as exc:
        raise ClassifierError(f"Cannot evaluate {list(hand)} on {list(board)}") from exc
    return _EVALUATOR.get_rank_class(score)


def classify_hero_hand(hand: Sequence[str], board: Sequence[str], turn_type: TurnType | None = None) -> HeroHandClass:
    hand = check_cards(hand)
    board = check_cards(board)
    if len(set(hand) | set(board)) != len(hand) + len(board):
        raise ClassifierError(f"Duplicate cards in {hand} / {board}")

    rank_class = made_hand_rank_class(hand, board)
    if rank_class is not None and rank_class <= _MONSTER_RANK_CLASS:
        return "monster"

    hero_ranks = [rank_of(card) for card in hand]
    board_ranks = [rank_of(card) for card in board]
    all_counts = Counter(hero_ranks + board_ranks)
    board_counts = Counter(board_ranks)
    quality = classify_pair_quality(hand, board)
    dangerous = turn_type in _DANGEROUS_FOR_WEAK_PAIRS
    pocket = hero_ranks[0] == hero_ranks[1]
    top_board = max((value_of_rank(rank) for rank in board_ranks), default=0)

    trips = [rank for rank, count in all_counts.items() if count >= 3]
    pairs = [rank for rank, count in all_counts.items() if count >= 2]
    if trips and len(pairs) >= 2:
        return "monster"
    if trips and trips[0] in hero_ranks:
        return "monster"

    if len(pairs) >= 2:
        board_pairs = [rank for rank, count in board_counts.items() if count >= 2]
        hero_on_board = [rank for rank in hero_ranks if rank in board_ranks]
        if board_pairs and len(hero_on_board) == 1:
            if quality == "bottom_pair" and dangerous:
                return "weak"
            return "medium"
        if len(hero_on_board) == 2 and not pocket:
            return "strong_value"
        if pocket and board_pairs and hero_ranks[0] not in board_pairs:
            return "strong_value" if value_of_rank(hero_ranks[0]) > top_board else "medium"
        return "strong_value"

    paired_on_board = [rank for rank in hero_ranks if rank in board_ranks]
    if paired_on_board:
        if quality == "bottom_pair":
            return "weak" if dangerous else "medium"
        best = max(value_of_rank(rank) for rank in paired_on_board)
        return "strong_value" if best == top_board else "medium"

    if pocket:
        return "strong_value" if value_of_rank(hero_ranks[0]) > top_board else "weak"

    return "air"
