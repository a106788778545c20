"""Environment-driven feature flags for the integrity engine.

``GTOSPOTS_FEATURES`` holds a comma-separated, case-insensitive list of
enabled flags.  Tests flip flags with :func:`override`; overrides stack, and
an explicit disable wins over any enable.

Known flags:

``policy.skip_intent``
    Skip the intent-policy pass during validation (grammar and arithmetic
    checks still run).
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Final

ENV_VAR: Final = "GTOSPOTS_FEATURES"
SKIP_INTENT_POLICY: Final = "policy.skip_intent"

_overrides: list[tuple[frozenset[str], frozenset[str]]] = []


def _key(flag: str) -> str:
    return flag.strip().lower()


def _keys(flags: Iterable[str] | None) -> frozenset[str]:
    return frozenset(_key(flag) for flag in (flags or ()) if flag.strip())


def env_flags() -> frozenset[str]:
    return _keys((os.getenv(ENV_VAR) or "").split(","))


def enabled_flags() -> frozenset[str]:
    """All flags currently in effect (environment plus overrides)."""

    active = set(env_flags())
    for enabled, _ in _overrides:
        active |= enabled
    for _, disabled in _overrides:
        active -= disabled
    return frozenset(active)


def is_enabled(flag: str) -> bool:
    return _key(flag) in enabled_flags()


@contextmanager
def override(*, enable: Iterable[str] | None = None, disable: Iterable[str] | None = None) -> Iterator[None]:
    _overrides.append((_keys(enable), _keys(disable)))
    try:
        yield
    finally:
        _overrides.pop()
