"""Hand/board classifier consumed by the intent-policy checker and generators."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from ..core.models import HandIntent, HeroHandClass, NodeIntent, PairQuality, TurnType
from .cards import ClassifierError
from .features import HandFeatures, compute_hand_features
from .hand_class import classify_hero_hand
from .intent import classify_hand_intent, infer_node_intent
from .pair_quality import classify_pair_quality
from .turn import classify_turn

__all__ = [
    "Classifier",
    "ClassifierError",
    "HandFeatures",
    "HandReading",
    "RuleClassifier",
    "read_hand",
]


class Classifier(Protocol):
    def classify_turn(self, flop: Sequence[str], turn: str | None) -> TurnType: ...

    def hero_hand_class(self, hand: Sequence[str], board: Sequence[str], turn_type: TurnType) -> HeroHandClass: ...

    def hand_features(self, hand: Sequence[str], board: Sequence[str]) -> HandFeatures: ...

    def pair_quality(self, hand: Sequence[str], board: Sequence[str]) -> PairQuality: ...

    def classify_hand_intent(
        self,
        hero_class: HeroHandClass,
        features: HandFeatures,
        pair_quality: PairQuality,
        turn_type: TurnType,
    ) -> HandIntent: ...

    def infer_node_intent(self, spot: Mapping[str, Any]) -> NodeIntent: ...


class RuleClassifier:
    """Deterministic rule-based classifier (no solver, no sampling)."""

    def classify_turn(self, flop: Sequence[str], turn: str | None) -> TurnType:
        return classify_turn(flop, turn)

    def hero_hand_class(self, hand: Sequence[str], board: Sequence[str], turn_type: TurnType) -> HeroHandClass:
        return classify_hero_hand(hand, board, turn_type)

    def hand_features(self, hand: Sequence[str], board: Sequence[str]) -> HandFeatures:
        return compute_hand_features(hand, board)

    def pair_quality(self, hand: Sequence[str], board: Sequence[str]) -> PairQuality:
        return classify_pair_quality(hand, board)

    def classify_hand_intent(
        self,
        hero_class: HeroHandClass,
        features: HandFeatures,
        pair_quality: PairQuality,
        turn_type: TurnType,
    ) -> HandIntent:
        return classify_hand_intent(hero_class, features, pair_quality, turn_type)

    def infer_node_intent(self, spot: Mapping[str, Any]) -> NodeIntent:
        return infer_node_intent(spot)


@dataclass(frozen=True, slots=True)
class HandReading:
    turn_type: TurnType
    hero_class: HeroHandClass
    pair_quality: PairQuality
    hand_intent: HandIntent


def read_hand(classifier: Classifier, hand: Sequence[str], board: Sequence[str]) -> HandReading:
    """Run the classifier chain for ``hand`` on a board of at least three cards."""

    if len(board) < 3:
        raise ClassifierError(f"board needs at least 3 cards, got {len(board)}")
    turn = board[3] if len(board) > 3 else None
    turn_type = classifier.classify_turn(list(board[:3]), turn)
    hero_class = classifier.hero_hand_class(hand, board, turn_type)
    features = classifier.hand_features(hand, board)
    pair_quality = classifier.pair_quality(hand, board)
    hand_intent = classifier.classify_hand_intent(hero_class, features, pair_quality, turn_type)
    return HandReading(
        turn_type=turn_type,
        hero_class=hero_class,
        pair_quality=pair_quality,
        hand_intent=hand_intent,
    )
