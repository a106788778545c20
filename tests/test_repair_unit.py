from __future__ import annotations

import copy
import math
from typing import Any

from gtospots.core.grammar import validate_spot
from gtospots.core.repair import repair_history, repair_options, repair_spot

from spot_factory import make_spot


def _numbers(value: Any) -> list[float]:
    if isinstance(value, bool):
        return []
    if isinstance(value, (int, float)):
        return [float(value)]
    if isinstance(value, dict):
        return [n for key in sorted(value) for n in _numbers(value[key])]
    if isinstance(value, list):
        return [n for item in value for n in _numbers(item)]
    return []


def test_drifted_pot_and_options_are_resynced() -> None:
    spot = make_spot(pot=10, options=[["x"], ["b", 33, 3.3], ["b", 75, 7.5]])
    assert not validate_spot(spot).ok

    fixed = repair_spot(spot)

    assert fixed["data"]["pot"] == 13.0
    assert fixed["data"]["opts"] == [["x"], ["b", 33, 4.29], ["b", 75, 9.75]]
    assert validate_spot(fixed).ok


def test_repair_does_not_mutate_input() -> None:
    spot = make_spot(pot=10)
    snapshot = copy.deepcopy(spot)
    repair_spot(spot)
    assert spot == snapshot


def test_history_bets_recomputed_from_running_pot() -> None:
    spot = make_spot()
    hist = spot["data"]["hist"]
    hist[4] = ["BTN", "b", 50, 2.0]  # stale exact: 50% of 6.5 is 3.25
    spot["data"]["pot"] = 11.75

    fixed = repair_spot(spot)

    assert fixed["data"]["hist"][4] == ["BTN", "b", 50, 3.25]
    # Calls keep their stored amount.
    assert fixed["data"]["hist"][5] == ["BB", "c", None, 3.25]
    assert fixed["data"]["pot"] == 13.0
    assert validate_spot(fixed).ok


def test_repair_of_valid_spot_is_identity() -> None:
    spot = make_spot()
    assert repair_spot(spot) == spot


def test_repair_is_idempotent() -> None:
    spot = make_spot(pot=42, options=[["x"], ["b", 66, 1.0], ["b", 125, 2.0]])
    spot["data"]["hist"][4] = ["BTN", "b", 50, 9.99]

    once = repair_spot(spot)
    twice = repair_spot(once)

    assert validate_spot(once).ok
    for a, b in zip(_numbers(once), _numbers(twice), strict=True):
        assert math.isclose(a, b, abs_tol=1e-4)


def test_structure_is_preserved() -> None:
    spot = make_spot(pot=1, options=[["x"], ["b", "pot", 5.0], ["b", 50, 1.0], ["a", "AI", 80.0]])
    fixed = repair_spot(spot)
    assert len(fixed["data"]["opts"]) == 4
    assert [opt[0] for opt in fixed["data"]["opts"]] == ["x", "b", "b", "a"]
    assert fixed["data"]["opts"][1] == ["b", "pot", 5.0]
    assert fixed["data"]["opts"][3] == ["a", "AI", 80.0]
    assert [entry[:2] for entry in fixed["data"]["hist"]] == [entry[:2] for entry in spot["data"]["hist"]]


def test_pot_literal_bet_counts_toward_running_pot() -> None:
    history = [
        ["-", "f"],
        ["BTN", "b", "pot", 1.5],
        ["BB", "c", None, 1.5],
        ["-", "t"],
        ["BB", "b", 50, 0.0],
    ]
    repaired = repair_history(history)
    assert repaired[1] == ["BTN", "b", "pot", 1.5]
    assert repaired[4] == ["BB", "b", 50, 2.25]


def test_repair_options_leaves_non_percent_entries() -> None:
    options = [["x"], ["c", None, 3.0], ["b", 50, 0.0], ["r", "3x", 9.0]]
    assert repair_options(options, 10.0) == [["x"], ["c", None, 3.0], ["b", 50, 5.0], ["r", "3x", 9.0]]


def test_unrecognisable_payloads_come_back_unchanged() -> None:
    assert repair_spot(None) is None
    assert repair_spot([1, 2]) == [1, 2]
    assert repair_spot({"id": "s1", "data": "nope"}) == {"id": "s1", "data": "nope"}
    broken = {"id": "s1", "data": {"pot": 3, "hist": None, "opts": [["b", 50, 0]]}}
    assert repair_spot(broken) == broken


def test_unhashable_action_codes_pass_through_repair() -> None:
    spot = make_spot(pot=10)
    spot["data"]["hist"].extend([["BB", ["c"], None, 1.0], ["BB", {"c": 1}, None, 1.0]])

    fixed = repair_spot(spot)

    assert fixed["data"]["pot"] == 13.0
    assert fixed["data"]["hist"][-2:] == [["BB", ["c"], None, 1.0], ["BB", {"c": 1}, None, 1.0]]


def test_short_bet_tuples_keep_their_arity() -> None:
    history = [["-", "f"], ["BTN", "b", 50], ["BB", "b", 50, 0.0]]
    repaired = repair_history(history)
    assert repaired[1] == ["BTN", "b", 50]
    assert repaired[2] == ["BB", "b", 50, 0.75]

    options = [["b", 50], ["b", 50, 0.0, "extra"], ["b", 50, 0.0]]
    assert repair_options(options, 10.0) == [["b", 50], ["b", 50, 0.0, "extra"], ["b", 50, 5.0]]
