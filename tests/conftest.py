from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure "src" is on sys.path for imports in tests
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer feature flags and store paths out of the suite."""

    monkeypatch.delenv("GTOSPOTS_FEATURES", raising=False)
    monkeypatch.delenv("GTOSPOTS_STORE", raising=False)
    monkeypatch.delenv("GTOSPOTS_WORKERS", raising=False)
