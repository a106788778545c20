"""Deterministic grammar and arithmetic validator for training spots.

The validator never raises: every defect becomes a string in the returned
error list, and errors accumulate so a single call surfaces everything wrong
with a record.

Conventions:

* blinds are posted (SB=0.5, BB=1.0);
* ``exact`` amounts are unrounded chip math (the UI rounds separately);
* percent bet options are sized against ``data.pot`` at the decision point.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any, Final, Protocol

from .labels import MAX_CONCEPTS, MAX_TAGS
from .models import ValidationResult
from .numeric import is_number
from .pot import STREET_MARKER, STREET_ORDER, pot_from_history

__all__ = [
    "POT_TOLERANCE",
    "SIZING_TOLERANCE",
    "PolicyCheck",
    "bet_option_sizes",
    "validate_spot",
]

logger = logging.getLogger(__name__)

POT_TOLERANCE: Final = 1e-6
SIZING_TOLERANCE: Final = 1e-3
SOLVER_NOTES_RANGE: Final = (2, 4)


class PolicyCheck(Protocol):
    def check(self, spot: Mapping[str, Any]) -> list[str]: ...


def _dump(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=repr)


def _is_seq(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _is_str_list(value: Any) -> bool:
    return _is_seq(value) and all(isinstance(item, str) for item in value)


def _non_negative(value: Any) -> bool:
    return is_number(value) and value >= 0


def bet_option_sizes(options: Any) -> list[float]:
    """Numeric percent sizes of every ``b`` option (``"pot"`` excluded)."""

    sizes: list[float] = []
    if not _is_seq(options):
        return sizes
    for option in options:
        if _is_seq(option) and len(option) >= 2 and option[0] == "b" and is_number(option[1]):
            sizes.append(float(option[1]))
    return sizes


# ---------------------------------------------------------------------------
# Tuple grammar


def _check_street_marker(entry: Sequence[Any], current: int, errors: list[str]) -> int:
    code = entry[1] if len(entry) > 1 else None
    if len(entry) != 2 or code not in STREET_ORDER:
        errors.append(f"Invalid street marker: {_dump(entry)}")
        return current
    index = STREET_ORDER.index(code)
    if index < current:
        errors.append(f"Street marker goes backwards: {_dump(entry)}")
        return current
    return index


def _check_action(entry: Any, errors: list[str]) -> None:
    text = _dump(entry)
    if not isinstance(entry[0], str) or not entry[0]:
        errors.append(f"Invalid position in action: {text}")
    code = entry[1] if len(entry) > 1 else None
    if not isinstance(code, str):
        errors.append(f"Invalid action code type: {text}")
        return

    if code in ("x", "f"):
        if len(entry) != 2:
            errors.append(f"Action {code} must be length-2: {text}")
        return

    size_ref = entry[2] if len(entry) > 2 else None
    exact = entry[3] if len(entry) > 3 else None

    if code == "c":
        if len(entry) != 4:
            errors.append(f'Call must be [pos,"c",null,exact]: {text}')
        if size_ref is not None:
            errors.append(f"Call sizeRef must be null: {text}")
        if not _non_negative(exact):
            errors.append(f"Call exact must be >=0: {text}")
        return
    if code == "b":
        if len(entry) != 4:
            errors.append(f'Bet must be [pos,"b",sizeRef,exact]: {text}')
        if not ((is_number(size_ref) and size_ref > 0) or size_ref == "pot"):
            errors.append(f"Bet sizeRef invalid: {text}")
        if not _non_negative(exact):
            errors.append(f"Bet exact must be >=0: {text}")
        return
    if code == "r":
        if len(entry) != 4:
            errors.append(f'Raise must be [pos,"r",sizeRef,exact]: {text}')
        if not (isinstance(size_ref, str) and size_ref):
            errors.append(f"Raise sizeRef must be string: {text}")
        if not _non_negative(exact):
            errors.append(f"Raise exact must be >=0: {text}")
        return
    if code == "a":
        if len(entry) != 4:
            errors.append(f'All-in must be [pos,"a","AI"|null,exact]: {text}')
        if size_ref not in ("AI", None):
            errors.append(f'All-in sizeRef must be "AI" or null: {text}')
        if not _non_negative(exact):
            errors.append(f"All-in exact must be >=0: {text}")
        return

    errors.append(f'Unknown action code "{code}" in hist: {text}')


def _check_history(history: Sequence[Any], errors: list[str]) -> None:
    current = -1
    for entry in history:
        if not _is_seq(entry) or not entry:
            errors.append(f"Non-array hist action: {_dump(entry)}")
            continue
        if entry[0] == STREET_MARKER:
            current = _check_street_marker(entry, current, errors)
            continue
        _check_action(entry, errors)


def _check_option(option: Any, errors: list[str]) -> None:
    if not _is_seq(option) or len(option) < 1:
        errors.append(f"Invalid option: {_dump(option)}")
        return
    text = _dump(option)
    code = option[0]
    if code in ("x", "f"):
        if len(option) != 1:
            errors.append(f"Option {code} must be length-1: {text}")
        return

    size_ref = option[1] if len(option) > 1 else None
    exact = option[2] if len(option) > 2 else None

    if code == "c":
        if not (len(option) == 3 and size_ref is None and _non_negative(exact)):
            errors.append(f'Call option must be ["c",null,exact]: {text}')
        return
    if code == "b":
        if len(option) != 3:
            errors.append(f'Bet option must be ["b",sizeRef,exact]: {text}')
        if not ((is_number(size_ref) and size_ref > 0) or size_ref == "pot"):
            errors.append(f"Bet option sizeRef invalid: {text}")
        if not _non_negative(exact):
            errors.append(f"Bet option exact invalid: {text}")
        return
    if code == "r":
        if not (len(option) == 3 and isinstance(size_ref, str) and size_ref):
            errors.append(f'Raise option must be ["r",sizeRef,exact]: {text}')
        if not _non_negative(exact):
            errors.append(f"Raise option exact invalid: {text}")
        return
    if code == "a":
        if not (len(option) == 3 and size_ref in ("AI", None)):
            errors.append(f'All-in option must be ["a","AI"|null,exact]: {text}')
        if not _non_negative(exact):
            errors.append(f"All-in option exact invalid: {text}")
        return

    errors.append(f'Unknown option code "{code}": {text}')


# ---------------------------------------------------------------------------
# Arithmetic


def _check_pot(data: Mapping[str, Any], errors: list[str]) -> None:
    history = data.get("hist")
    pot = data.get("pot")
    if not _is_seq(history) or not is_number(pot):
        return
    computed = pot_from_history(history)
    if abs(computed - pot) >= POT_TOLERANCE:
        errors.append(f"data.pot mismatch: expected {computed} got {pot}")


def _check_sizing(data: Mapping[str, Any], errors: list[str]) -> None:
    pot = data.get("pot")
    options = data.get("opts")
    if not is_number(pot) or pot <= 0 or not _is_seq(options):
        return
    for option in options:
        if not _is_seq(option) or len(option) < 3 or option[0] != "b":
            continue
        size_ref, exact = option[1], option[2]
        if not is_number(size_ref) or not is_number(exact):
            continue
        expected = (size_ref / 100) * pot
        if abs(exact - expected) >= SIZING_TOLERANCE:
            errors.append(
                f"Option bet sizing mismatch: sizeRef={size_ref}% pot={pot} expected={expected} got={exact}"
            )


# ---------------------------------------------------------------------------
# Solution / meta


def _check_solution(data: Mapping[str, Any], errors: list[str]) -> None:
    solution = data.get("sol")
    if not isinstance(solution, Mapping) or not is_number(solution.get("b")) or not _is_seq(solution.get("ev")):
        errors.append("data.sol must have b and ev[]")
        return
    options = data.get("opts")
    if not _is_seq(options):
        return
    best = solution["b"]
    if best != int(best) or not 0 <= best < len(options):
        errors.append(f"data.sol.b out of range: {_dump(best)} for {len(options)} options")
    ev = solution["ev"]
    if len(ev) != len(options):
        errors.append(f"data.sol.ev length {len(ev)} does not match {len(options)} options")
    elif not all(is_number(value) for value in ev):
        errors.append(f"data.sol.ev must be number[]: {_dump(ev)}")


def _check_meta(data: Mapping[str, Any], errors: list[str]) -> None:
    if "meta" not in data or data["meta"] is None:
        return
    meta = data["meta"]
    if not isinstance(meta, Mapping):
        errors.append("data.meta must be object")
        return

    concepts = meta.get("concept")
    if not _is_str_list(concepts):
        errors.append("meta.concept must be string[]")
    elif len(concepts) > MAX_CONCEPTS:
        errors.append(f"meta.concept must be <= {MAX_CONCEPTS} items")

    if "solverNotes" in meta:
        notes = meta["solverNotes"]
        low, high = SOLVER_NOTES_RANGE
        if not _is_str_list(notes):
            errors.append("meta.solverNotes must be string[]")
        elif not low <= len(notes) <= high:
            errors.append(f"meta.solverNotes should be {low}–{high} bullets")

    if "summary" in meta and not isinstance(meta["summary"], str):
        errors.append("meta.summary must be string")

    if "freq" in meta:
        freq = meta["freq"]
        options = data.get("opts")
        if not _is_seq(freq) or not all(is_number(value) for value in freq):
            errors.append("meta.freq must be number[]")
        elif _is_seq(options) and len(freq) != len(options):
            errors.append(f"meta.freq length {len(freq)} does not match {len(options)} options")


# ---------------------------------------------------------------------------
# Entry point


def _check_data_shape(data: Mapping[str, Any], errors: list[str]) -> None:
    for key in ("id", "fmt", "str"):
        if not isinstance(data.get(key), str):
            errors.append(f"data.{key} must be string")
    stack = data.get("st")
    if not (is_number(stack) and stack > 0):
        errors.append("data.st must be positive number")

    hero = data.get("hero")
    hero = hero if isinstance(hero, Mapping) else {}
    if not isinstance(hero.get("pos"), str):
        errors.append("data.hero.pos must be string")
    hand = hero.get("hand")
    if not (_is_seq(hand) and len(hand) == 2):
        errors.append("data.hero.hand must be [c1,c2]")

    villains = data.get("v")
    if not _is_seq(villains):
        errors.append("data.v must be string[]")
    elif not villains:
        errors.append("data.v must not be empty")
    if not _is_seq(data.get("brd")):
        errors.append("data.brd must be string[]")
    elif len(data["brd"]) > 5:
        errors.append("data.brd must have at most 5 cards")
    if not _non_negative(data.get("pot")):
        errors.append("data.pot must be number")
    if not _is_seq(data.get("hist")):
        errors.append("data.hist must be array")
    if not _is_seq(data.get("opts")):
        errors.append("data.opts must be array")


def validate_spot(spot: Any, *, policy_checker: PolicyCheck | None = None) -> ValidationResult:
    """Validate ``spot`` and return every defect found.

    ``policy_checker`` runs last as an independent pass; its errors are
    appended to the grammar/arithmetic errors.
    """

    errors: list[str] = []
    if not isinstance(spot, Mapping):
        errors.append("Spot must be an object")
        return ValidationResult.from_errors(errors)

    if not isinstance(spot.get("id"), str):
        errors.append("spot.id must be string")
    if not isinstance(spot.get("fmt"), str):
        errors.append("spot.fmt must be string")
    if not isinstance(spot.get("str"), str):
        errors.append("spot.str must be string")
    if not is_number(spot.get("difficulty")):
        errors.append("spot.difficulty must be number")
    tags = spot.get("tags")
    if not _is_seq(tags):
        errors.append("spot.tags must be string[]")
    elif len(tags) > MAX_TAGS:
        errors.append(f"spot.tags must be <= {MAX_TAGS} items")

    data = spot.get("data")
    if not isinstance(data, Mapping):
        errors.append("spot.data must be object")
        return ValidationResult.from_errors(errors)

    _check_data_shape(data, errors)
    if _is_seq(data.get("hist")):
        _check_history(data["hist"], errors)
    if _is_seq(data.get("opts")):
        for option in data["opts"]:
            _check_option(option, errors)
    _check_solution(data, errors)
    _check_pot(data, errors)
    _check_sizing(data, errors)
    _check_meta(data, errors)

    if policy_checker is not None:
        errors.extend(policy_checker.check(spot))

    if errors:
        logger.debug("Spot %s failed validation with %d error(s)", spot.get("id"), len(errors))
    return ValidationResult.from_errors(errors)
