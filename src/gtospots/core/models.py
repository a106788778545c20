from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Literal

HandIntent = Literal["made_value", "thin_value", "combo_draw", "draw", "pure_bluff", "give_up"]
NodeIntent = Literal["value", "pressure", "semi_bluff", "bluffcatch"]
TurnType = Literal["blank_turn", "overcard_turn", "straight_completer", "flush_completer", "paired_turn"]
PairQuality = Literal[
    "top_pair",
    "second_pair",
    "middle_pair",
    "bottom_pair",
    "underpair",
    "overpair",
    "board_pair_only",
    "no_pair",
]
HeroHandClass = Literal["monster", "strong_value", "medium", "weak", "air"]
StraightDraw = Literal["none", "gutshot", "oesd"]

# Spots travel as JSON-compatible dicts so tuple arity and nulls survive untouched.
Spot = dict[str, Any]


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation pass; ``ok`` iff no errors accumulated."""

    errors: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors

    @classmethod
    def from_errors(cls, errors: Sequence[str]) -> ValidationResult:
        return cls(errors=tuple(errors))

    def to_dict(self) -> dict[str, Any]:
        return {"ok": self.ok, "errors": list(self.errors)}


@dataclass(frozen=True)
class SpotFailure:
    spot_id: str
    errors: tuple[str, ...]


@dataclass(frozen=True)
class BatchReport:
    """Aggregate validation outcome for a collection of spots."""

    total: int
    ok: int
    bad: int
    failures: tuple[SpotFailure, ...] = field(default_factory=tuple)

    @property
    def exit_code(self) -> int:
        return 1 if self.bad > 0 else 0

    def counts(self) -> dict[str, int]:
        return {"total": self.total, "ok": self.ok, "bad": self.bad}
