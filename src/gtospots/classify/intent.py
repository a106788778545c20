"""Hand and node intent inference.

Hand intent uses pair quality and turn texture: bottom pairs and underpairs
on any non-blank turn are ``give_up`` (check/fold), never thin value.  Node
intent is inferred from data already on the spot (street, concepts, and bet
sizes), never from a stored field.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final

from ..core.grammar import bet_option_sizes
from ..core.models import HandIntent, HeroHandClass, NodeIntent, PairQuality, TurnType
from .features import HandFeatures

__all__ = ["CONCEPT_NODE_INTENTS", "classify_hand_intent", "infer_node_intent", "size_buckets"]

_WEAK_PAIRS: Final = frozenset({"bottom_pair", "underpair"})
_DANGEROUS_TURNS: Final = frozenset({"straight_completer", "paired_turn", "flush_completer", "overcard_turn"})

LARGE_SIZE_PCT: Final = 75
SMALL_SIZE_PCT: Final = 50

# First match wins, in this order.
CONCEPT_NODE_INTENTS: Final[tuple[tuple[str, NodeIntent], ...]] = (
    ("value-max", "value"),
    ("value-bet", "value"),
    ("protection-bet", "value"),
    ("trap", "value"),
    ("slowplay", "value"),
    ("high-equity-combo-draw", "semi_bluff"),
    ("semi-bluff", "semi_bluff"),
    ("pot-control", "bluffcatch"),
    ("showdown-value", "bluffcatch"),
)


def classify_hand_intent(
    hero_class: HeroHandClass,
    features: HandFeatures,
    pair_quality: PairQuality,
    turn_type: TurnType,
) -> HandIntent:
    if hero_class in ("monster", "strong_value"):
        return "made_value"
    if features.combo_draw or features.has_pair_plus_draw:
        return "combo_draw"
    if pair_quality in _WEAK_PAIRS and turn_type in _DANGEROUS_TURNS:
        return "give_up"
    if features.has_pair and hero_class in ("medium", "weak"):
        if pair_quality in _WEAK_PAIRS and turn_type != "blank_turn":
            return "give_up"
        return "thin_value"
    if features.has_draw:
        return "draw"
    if hero_class in ("medium", "weak"):
        return "thin_value"
    return "pure_bluff"


def size_buckets(sizes: list[float]) -> tuple[bool, bool]:
    """Return (has_large, has_small): any size >= 75% / any size in (0, 50]%."""

    has_large = any(size >= LARGE_SIZE_PCT for size in sizes)
    has_small = any(0 < size <= SMALL_SIZE_PCT for size in sizes)
    return has_large, has_small


def infer_node_intent(spot: Mapping[str, Any]) -> NodeIntent:
    data = spot.get("data") if isinstance(spot, Mapping) else None
    data = data if isinstance(data, Mapping) else {}
    options = data.get("opts") if isinstance(data.get("opts"), list) else []

    if data.get("str") == "r" and any(isinstance(option, list) and option[:1] == ["c"] for option in options):
        return "bluffcatch"

    meta = data.get("meta") if isinstance(data.get("meta"), Mapping) else {}
    concepts = meta.get("concept") if isinstance(meta.get("concept"), list) else []
    for concept, intent in CONCEPT_NODE_INTENTS:
        if concept in concepts:
            return intent

    has_large, has_small = size_buckets(bet_option_sizes(options))
    if has_small and not has_large:
        return "semi_bluff"
    return "pressure"
