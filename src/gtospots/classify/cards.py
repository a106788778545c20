from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Final

__all__ = [
    "RANKS",
    "RANK_VALUES",
    "SUITS",
    "ClassifierError",
    "check_cards",
    "rank_of",
    "rank_values",
    "straight_exists",
    "suit_of",
    "value_of_rank",
]

RANKS: Final = "23456789TJQKA"
SUITS: Final = "shdc"
RANK_VALUES: Final = {rank: idx + 2 for idx, rank in enumerate(RANKS)}
_WHEEL: Final = frozenset({14, 2, 3, 4, 5})


class ClassifierError(ValueError):
    """Raised when cards cannot be classified (malformed or inconsistent)."""


def check_cards(cards: Sequence[object]) -> list[str]:
    """Return ``cards`` as strings, raising :class:`ClassifierError` if malformed."""

    checked: list[str] = []
    for card in cards:
        if not isinstance(card, str) or len(card) != 2 or card[0] not in RANK_VALUES or card[1] not in SUITS:
            raise ClassifierError(f"Unknown card: {card!r}")
        checked.append(card)
    return checked


def rank_of(card: str) -> str:
    return card[0]


def suit_of(card: str) -> str:
    return card[1]


def value_of_rank(rank: str) -> int:
    try:
        return RANK_VALUES[rank]
    except KeyError as exc:
        raise ClassifierError(f"Unknown rank: {rank!r}") from exc


def rank_values(cards: Iterable[str]) -> set[int]:
    return {value_of_rank(rank_of(card)) for card in cards}


def straight_exists(values: set[int]) -> bool:
    if _WHEEL <= values:
        return True
    return any(all(x in values for x in range(high, high - 5, -1)) for high in range(14, 5, -1))
