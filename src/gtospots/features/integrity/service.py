from __future__ import annotations

import logging
import os
import threading
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ...classify import RuleClassifier
from ...core.grammar import PolicyCheck, validate_spot
from ...core.labels import sanitize_labels
from ...core.models import BatchReport, HandIntent, NodeIntent, Spot, SpotFailure, TurnType, ValidationResult
from ...core.repair import repair_spot
from ...policy.frequencies import lookup_frequencies
from ...policy.intent_policy import IntentPolicyChecker
from ...store.json_store import SpotStore
from .concurrency import run_blocking

__all__ = [
    "DEFAULT_STORE_PATH",
    "IntegrityConfig",
    "IntegrityService",
    "STORE_ENV_VAR",
    "SpotRejected",
]

logger = logging.getLogger(__name__)

STORE_ENV_VAR = "GTOSPOTS_STORE"
DEFAULT_STORE_PATH = Path("data") / "spots.json"


class SpotRejected(ValueError):
    """A spot failed validation on its way into the store."""

    def __init__(self, spot_id: str | None, errors: Sequence[str]) -> None:
        self.spot_id = spot_id
        self.errors = tuple(errors)
        super().__init__(f"spot {spot_id or '<unnamed>'} rejected with {len(self.errors)} error(s)")


@dataclass(frozen=True)
class IntegrityConfig:
    """Where the spot document lives."""

    store_path: Path = DEFAULT_STORE_PATH

    @classmethod
    def from_env(cls) -> IntegrityConfig:
        raw = (os.getenv(STORE_ENV_VAR) or "").strip()
        return cls(store_path=Path(raw) if raw else DEFAULT_STORE_PATH)


def _label(spot: Any, index: int) -> str:
    spot_id = spot.get("id") if isinstance(spot, Mapping) else None
    return spot_id if isinstance(spot_id, str) and spot_id else f"#{index}"


class IntegrityService:
    """Validate, repair and persist spots against one store."""

    def __init__(self, store: SpotStore | None = None, checker: PolicyCheck | None = None) -> None:
        self.store = store if store is not None else SpotStore(IntegrityConfig.from_env().store_path)
        self.checker = checker if checker is not None else IntentPolicyChecker(RuleClassifier())
        self._lock = threading.Lock()

    # ---------------------------------------------------------------- spots
    def validate(self, spot: Any) -> ValidationResult:
        return validate_spot(spot, policy_checker=self.checker)

    async def validate_async(self, spot: Any) -> ValidationResult:
        return await run_blocking(self.validate, spot)

    def validate_collection(self, spots: Iterable[Any]) -> BatchReport:
        total = 0
        failures: list[SpotFailure] = []
        for index, spot in enumerate(spots):
            total += 1
            result = self.validate(spot)
            if not result.ok:
                failures.append(SpotFailure(spot_id=_label(spot, index), errors=result.errors))
        return BatchReport(total=total, ok=total - len(failures), bad=len(failures), failures=tuple(failures))

    def repair(self, spot: Any) -> Any:
        return repair_spot(spot)

    async def repair_async(self, spot: Any) -> Any:
        return await run_blocking(self.repair, spot)

    def repair_collection(self, spots: Iterable[Any]) -> tuple[list[Any], int]:
        """Repair only the spots that fail validation; valid ones pass through as-is."""

        out: list[Any] = []
        repaired = 0
        for spot in spots:
            if self.validate(spot).ok:
                out.append(spot)
                continue
            fixed = self.repair(spot)
            if fixed != spot:
                repaired += 1
            out.append(fixed)
        return out, repaired

    def frequencies(
        self,
        hand_intent: HandIntent,
        turn_type: TurnType,
        node_intent: NodeIntent,
        num_options: int,
    ) -> list[float]:
        return lookup_frequencies(hand_intent, turn_type, node_intent, num_options)

    # ---------------------------------------------------------------- store
    def validate_store(self) -> BatchReport:
        report = self.validate_collection(self.store.load())
        logger.debug("Validated store %s: %s", self.store.path, report.counts())
        return report

    async def validate_store_async(self) -> BatchReport:
        return await run_blocking(self.validate_store)

    def repair_store(self) -> tuple[int, int]:
        """Repair failing spots in place; returns (repaired, total)."""

        with self._lock:
            spots = self.store.load()
            fixed, repaired = self.repair_collection(spots)
            if repaired:
                self.store.replace_all(fixed)
        logger.debug("Repaired %d of %d spots in %s", repaired, len(spots), self.store.path)
        return repaired, len(spots)

    async def repair_store_async(self) -> tuple[int, int]:
        return await run_blocking(self.repair_store)

    def find(self, spot_id: str) -> Spot:
        spot = self.store.find(spot_id)
        if spot is None:
            raise KeyError(f"spot '{spot_id}' not found")
        return spot

    async def find_async(self, spot_id: str) -> Spot:
        return await run_blocking(self.find, spot_id)

    def commit(self, spot: Any) -> str:
        """Sanitize labels, validate and append ``spot``; returns its id.

        A spot without an id gets the next free one.  Invalid spots raise
        :class:`SpotRejected` and leave the store untouched.
        """

        if not isinstance(spot, Mapping):
            raise SpotRejected(None, self.validate(spot).errors)
        with self._lock:
            candidate = sanitize_labels(spot)
            if not candidate.get("id"):
                spot_id = self.store.next_spot_id()
                candidate["id"] = spot_id
                data = candidate.get("data")
                if isinstance(data, dict) and not data.get("id"):
                    data["id"] = spot_id
            result = self.validate(candidate)
            if not result.ok:
                raise SpotRejected(candidate.get("id"), result.errors)
            self.store.append([candidate])
        logger.debug("Committed spot %s to %s", candidate["id"], self.store.path)
        return candidate["id"]

    async def commit_async(self, spot: Any) -> str:
        return await run_blocking(self.commit, spot)
