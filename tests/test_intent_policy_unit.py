from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from gtospots.classify import ClassifierError, RuleClassifier
from gtospots.core import feature_flags
from gtospots.core.grammar import validate_spot
from gtospots.policy.intent_policy import (
    GIVE_UP_NOT_BLUFFCATCH,
    PURE_BLUFF_LARGE,
    PURE_BLUFF_SMALL_ONLY,
    THIN_VALUE_LARGE,
    IntentPolicyChecker,
    policy_violations,
)

from spot_factory import bluff_spot, make_spot


def test_value_hand_under_pressure_is_coherent() -> None:
    checker = IntentPolicyChecker(RuleClassifier())
    assert checker.check(make_spot()) == []


def test_pure_bluff_with_large_barrel_is_rejected() -> None:
    checker = IntentPolicyChecker(RuleClassifier())
    assert checker.check(bluff_spot()) == [PURE_BLUFF_LARGE]

    result = validate_spot(bluff_spot(), policy_checker=checker)
    assert not result.ok
    assert result.errors == (PURE_BLUFF_LARGE,)


def test_pure_bluff_with_small_only_barrel_under_pressure() -> None:
    errors = policy_violations("pure_bluff", "pressure", [33.0], [])
    assert errors == [PURE_BLUFF_SMALL_ONLY]


def test_thin_value_cannot_size_large() -> None:
    assert policy_violations("thin_value", "pressure", [33.0, 75.0], []) == [THIN_VALUE_LARGE]
    assert policy_violations("thin_value", "pressure", [66.0], []) == []


def test_give_up_belongs_to_bluffcatch_nodes() -> None:
    assert policy_violations("give_up", "bluffcatch", [], []) == []
    assert policy_violations("give_up", "pressure", [75.0], []) == [GIVE_UP_NOT_BLUFFCATCH.format(node_intent="pressure")]


def test_value_node_requires_value_hand() -> None:
    assert policy_violations("made_value", "value", [75.0], []) == []
    assert policy_violations("thin_value", "value", [33.0], []) == []
    assert policy_violations("draw", "value", [75.0], []) == [
        "Intent mismatch: nodeIntent=value but handIntent=draw"
    ]


def test_semi_bluff_node_allows_small_probe_with_thin_value() -> None:
    assert policy_violations("combo_draw", "semi_bluff", [33.0], []) == []
    assert policy_violations("thin_value", "semi_bluff", [33.0], ["turn"]) == []
    assert policy_violations("thin_value", "semi_bluff", [33.0], ["barrel"]) == [
        "Intent mismatch: nodeIntent=semi_bluff but handIntent=thin_value"
    ]
    assert policy_violations("thin_value", "semi_bluff", [33.0, 75.0], []) == [
        "Intent mismatch: nodeIntent=semi_bluff but handIntent=thin_value"
    ]
    assert policy_violations("pure_bluff", "semi_bluff", [33.0], []) == [
        "Intent mismatch: nodeIntent=semi_bluff but handIntent=pure_bluff"
    ]


def test_give_up_in_value_node_reports_both_rules() -> None:
    errors = policy_violations("give_up", "value", [75.0], [])
    assert errors == [
        "Intent mismatch: give_up hand should have bluffcatch nodeIntent, got value",
        "Intent mismatch: nodeIntent=value but handIntent=give_up",
    ]


def test_no_classifier_means_no_policy_errors() -> None:
    assert IntentPolicyChecker(None).check(bluff_spot()) == []


def test_preflop_and_malformed_hands_are_skipped() -> None:
    checker = IntentPolicyChecker(RuleClassifier())
    assert checker.check(bluff_spot(board=("Ks", "8d"))) == []
    spot = bluff_spot()
    spot["data"]["hero"]["hand"] = ["Qh"]
    assert checker.check(spot) == []
    assert checker.check({"id": "s9"}) == []


def test_classifier_failure_degrades_to_no_errors() -> None:
    class _Broken(RuleClassifier):
        def classify_turn(self, flop: Sequence[str], turn: str | None) -> Any:
            raise ClassifierError("boom")

    assert IntentPolicyChecker(_Broken()).check(bluff_spot()) == []
    # Unknown cards surface as classifier errors too.
    assert IntentPolicyChecker(RuleClassifier()).check(bluff_spot(hand=("Zz", "Jd"))) == []


def test_unavailable_classifier_backend_does_not_fail_validation() -> None:
    class _Offline(RuleClassifier):
        def classify_turn(self, flop: Sequence[str], turn: str | None) -> Any:
            raise RuntimeError("classifier backend unavailable")

    checker = IntentPolicyChecker(_Offline())
    assert checker.check(bluff_spot()) == []

    result = validate_spot(make_spot(), policy_checker=checker)
    assert result.ok, result.errors


def test_skip_flag_disables_policy_pass() -> None:
    checker = IntentPolicyChecker(RuleClassifier())
    with feature_flags.override(enable={feature_flags.SKIP_INTENT_POLICY}):
        assert checker.check(bluff_spot()) == []
    assert checker.check(bluff_spot()) == [PURE_BLUFF_LARGE]


def test_checker_uses_injected_classifier() -> None:
    class _Scripted(RuleClassifier):
        def classify_hand_intent(self, *args: Any) -> Any:
            return "thin_value"

        def infer_node_intent(self, spot: Mapping[str, Any]) -> Any:
            return "pressure"

    assert IntentPolicyChecker(_Scripted()).check(make_spot()) == [THIN_VALUE_LARGE]
