"""Where hero's pair ranks relative to the board.

Bottom pairs and underpairs matter most here: on dangerous turns they are
check/fold hands, not protection bets.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from ..core.models import PairQuality
from .cards import check_cards, rank_of, value_of_rank

__all__ = ["classify_pair_quality"]


def classify_pair_quality(hand: Sequence[str], board: Sequence[str]) -> PairQuality:
    hand = check_cards(hand)
    board = check_cards(board)
    hero_ranks = [rank_of(card) for card in hand]
    board_ranks = [rank_of(card) for card in board]

    distinct = sorted({value_of_rank(rank) for rank in board_ranks}, reverse=True)
    if not distinct:
        return "overpair" if hero_ranks[0] == hero_ranks[1] else "no_pair"
    highest, lowest = distinct[0], distinct[-1]

    if hero_ranks[0] == hero_ranks[1] and hero_ranks[0] not in board_ranks:
        return "overpair" if value_of_rank(hero_ranks[0]) > highest else "underpair"

    paired = next((rank for rank in hero_ranks if rank in board_ranks), None)
    if paired is not None:
        value = value_of_rank(paired)
        if value == highest:
            return "top_pair"
        if value == lowest:
            return "bottom_pair"
        if len(distinct) >= 2 and value == distinct[1]:
            return "second_pair"
        return "middle_pair"

    if any(count >= 2 for count in Counter(board_ranks).values()):
        return "board_pair_only"
    return "no_pair"
