"""Tag and concept hygiene for producers.

Tags and concepts are user-visible and indexed downstream, so producers keep
them small and enumerable: de-duplicated, order-preserving, clamped, and (for
concepts) restricted to a closed whitelist.  The validator only checks
length/shape; enforcing the whitelist is the producer's job.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from typing import Any, Final, TypeVar

__all__ = [
    "CONCEPT_WHITELIST",
    "MAX_CONCEPTS",
    "MAX_TAGS",
    "clamp_list",
    "filter_concepts",
    "sanitize_labels",
]

T = TypeVar("T")

MAX_TAGS: Final = 6
MAX_CONCEPTS: Final = 6

CONCEPT_WHITELIST: Final = frozenset(
    {
        "range-advantage",
        "equity-denial",
        "barrel-geometry",
        "high-equity-combo-draw",
        "protection-bet",
        "value-max",
        "bet-sizing",
        "blockers",
    }
)


def clamp_list(items: Iterable[T], limit: int) -> list[T]:
    """Return the first ``limit`` distinct items (compared by ``str``)."""

    out: list[T] = []
    if limit <= 0:
        return out
    seen: set[str] = set()
    for item in items:
        key = str(item)
        if key in seen:
            continue
        seen.add(key)
        out.append(item)
        if len(out) >= limit:
            break
    return out


def filter_concepts(concepts: Iterable[str]) -> list[str]:
    return [concept for concept in concepts if concept in CONCEPT_WHITELIST]


def sanitize_labels(spot: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``spot`` with clamped tags and whitelisted concepts."""

    cleaned = copy.deepcopy(dict(spot))
    tags = cleaned.get("tags")
    if isinstance(tags, list):
        cleaned["tags"] = clamp_list(tags, MAX_TAGS)

    data = cleaned.get("data")
    meta = data.get("meta") if isinstance(data, dict) else None
    if isinstance(meta, dict) and isinstance(meta.get("concept"), list):
        concepts = [concept for concept in meta["concept"] if isinstance(concept, str)]
        meta["concept"] = clamp_list(filter_concepts(concepts), MAX_CONCEPTS)
    return cleaned
