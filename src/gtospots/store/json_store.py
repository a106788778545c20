from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from ..core.ids import next_spot_id
from ..core.models import Spot

__all__ = ["SpotStore", "StoreError"]

logger = logging.getLogger(__name__)


class StoreError(RuntimeError):
    """Raised when the spot document cannot be read or updated."""


class SpotStore:
    """Spots persisted as one JSON array in a data file."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)

    def load(self) -> list[Spot]:
        if not self.path.exists():
            return []
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                payload = json.load(fh)
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreError(f"Cannot read spot store {self.path}: {exc}") from exc
        if not isinstance(payload, list):
            raise StoreError(f"Spot store {self.path} must hold a JSON array")
        return payload

    def replace_all(self, spots: Iterable[Mapping[str, Any]]) -> None:
        """Rewrite the whole document; readers never observe a partial file."""

        records = [dict(spot) for spot in spots]
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(records, fh, indent=2, ensure_ascii=False)
                fh.write("\n")
            os.replace(tmp_name, self.path)
        except Exception:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise
        logger.debug("Wrote %d spots to %s", len(records), self.path)

    def find(self, spot_id: str) -> Spot | None:
        for spot in self.load():
            if isinstance(spot, dict) and spot.get("id") == spot_id:
                return spot
        return None

    def append(self, spots: Iterable[Mapping[str, Any]]) -> list[str]:
        """Append ``spots``; any id already present (or repeated) is rejected."""

        existing = self.load()
        seen = {spot.get("id") for spot in existing if isinstance(spot, dict)}
        incoming = [dict(spot) for spot in spots]
        for spot in incoming:
            spot_id = spot.get("id")
            if not isinstance(spot_id, str) or not spot_id:
                raise StoreError("Spot is missing an id")
            if spot_id in seen:
                raise StoreError(f"Duplicate spot id: {spot_id}")
            seen.add(spot_id)
        self.replace_all([*existing, *incoming])
        return [spot["id"] for spot in incoming]

    def next_spot_id(self) -> str:
        return next_spot_id(spot.get("id") for spot in self.load() if isinstance(spot, dict))
