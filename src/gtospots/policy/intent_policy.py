"""Cross-check hero's hand intent against the shape of the offered menu.

The policy table is closed and hand-authored:

* ``give_up`` hands belong only in ``bluffcatch`` nodes;
* ``value`` nodes need ``made_value`` or ``thin_value``;
* ``semi_bluff`` nodes need a draw, or thin value with small-only sizing
  outside a barrel line;
* under ``pressure``, thin value never gets >= 75% sizes and pure bluffs get
  neither large nor small-only barrels (checking dominates).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from ..classify import Classifier, ClassifierError, read_hand
from ..classify.intent import size_buckets
from ..core import feature_flags
from ..core.grammar import bet_option_sizes
from ..core.models import HandIntent, NodeIntent

__all__ = [
    "GIVE_UP_NOT_BLUFFCATCH",
    "IntentPolicyChecker",
    "PURE_BLUFF_LARGE",
    "PURE_BLUFF_SMALL_ONLY",
    "SEMI_BLUFF_MISMATCH",
    "THIN_VALUE_LARGE",
    "VALUE_MISMATCH",
    "policy_violations",
]

logger = logging.getLogger(__name__)

GIVE_UP_NOT_BLUFFCATCH = "Intent mismatch: give_up hand should have bluffcatch nodeIntent, got {node_intent}"
VALUE_MISMATCH = "Intent mismatch: nodeIntent=value but handIntent={hand_intent}"
SEMI_BLUFF_MISMATCH = "Intent mismatch: nodeIntent=semi_bluff but handIntent={hand_intent}"
THIN_VALUE_LARGE = "Intent mismatch: thin_value hand cannot use >=75% sizing (protection/pot-control only)"
PURE_BLUFF_LARGE = "Intent mismatch: large barrel options with pure_bluff hand (no draw/pair) are disallowed"
PURE_BLUFF_SMALL_ONLY = "Intent mismatch: small-barrel-only node with pure_bluff hand is disallowed (prefer check)"


def policy_violations(
    hand_intent: HandIntent,
    node_intent: NodeIntent,
    sizes: list[float],
    tags: list[Any],
) -> list[str]:
    """Apply the policy table; one distinct error string per violated rule."""

    has_large, has_small = size_buckets(sizes)
    errors: list[str] = []

    if hand_intent == "give_up" and node_intent != "bluffcatch":
        errors.append(GIVE_UP_NOT_BLUFFCATCH.format(node_intent=node_intent))

    if node_intent == "value" and hand_intent not in ("made_value", "thin_value"):
        errors.append(VALUE_MISMATCH.format(hand_intent=hand_intent))

    if node_intent == "semi_bluff" and hand_intent not in ("combo_draw", "draw"):
        small_probe = hand_intent == "thin_value" and has_small and not has_large and "barrel" not in tags
        if not small_probe:
            errors.append(SEMI_BLUFF_MISMATCH.format(hand_intent=hand_intent))

    if node_intent == "pressure":
        if hand_intent == "thin_value" and has_large:
            errors.append(THIN_VALUE_LARGE)
        if hand_intent == "pure_bluff" and has_large:
            errors.append(PURE_BLUFF_LARGE)
        if hand_intent == "pure_bluff" and has_small and not has_large:
            errors.append(PURE_BLUFF_SMALL_ONLY)

    return errors


class IntentPolicyChecker:
    """Policy pass appended to grammar validation.

    The classifier is injected; without one (or when it cannot read the
    cards, or its backend fails) the checker reports nothing rather than
    failing the run.
    """

    def __init__(self, classifier: Classifier | None) -> None:
        self.classifier = classifier

    def check(self, spot: Mapping[str, Any]) -> list[str]:
        if self.classifier is None or feature_flags.is_enabled(feature_flags.SKIP_INTENT_POLICY):
            return []
        data = spot.get("data") if isinstance(spot, Mapping) else None
        if not isinstance(data, Mapping):
            return []
        board = data.get("brd")
        hero = data.get("hero")
        hand = hero.get("hand") if isinstance(hero, Mapping) else None
        if not isinstance(board, list) or len(board) < 3:
            return []
        if not isinstance(hand, list) or len(hand) != 2:
            return []

        try:
            reading = read_hand(self.classifier, hand, board)
            node_intent = self.classifier.infer_node_intent(spot)
        except ClassifierError as exc:
            logger.debug("Skipping intent policy for %s: %s", spot.get("id"), exc)
            return []
        except Exception:
            logger.debug("Classifier unavailable for %s; skipping intent policy", spot.get("id"), exc_info=True)
            return []

        tags = spot.get("tags") if isinstance(spot.get("tags"), list) else []
        return policy_violations(reading.hand_intent, node_intent, bet_option_sizes(data.get("opts")), tags)
