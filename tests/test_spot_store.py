from __future__ import annotations

import json
from pathlib import Path

import pytest

from gtospots.store.json_store import SpotStore, StoreError

from spot_factory import make_spot


def test_missing_file_loads_empty(tmp_path: Path) -> None:
    store = SpotStore(tmp_path / "nested" / "spots.json")
    assert store.load() == []
    assert store.next_spot_id() == "s001"
    assert store.find("s001") is None


def test_replace_all_round_trips_nulls_and_arity(tmp_path: Path) -> None:
    path = tmp_path / "spots.json"
    store = SpotStore(path)
    spot = make_spot()
    store.replace_all([spot])

    assert store.load() == [spot]
    raw = path.read_text(encoding="utf-8")
    assert '\n  {\n    "id": "s001"' in raw
    assert "null" in raw
    assert not list(tmp_path.glob("*.tmp"))


def test_non_ascii_text_is_written_verbatim(tmp_path: Path) -> None:
    store = SpotStore(tmp_path / "spots.json")
    spot = make_spot()
    spot["data"]["meta"]["summary"] = "Check–raise the K♠ turn"
    store.replace_all([spot])
    assert "K♠" in (tmp_path / "spots.json").read_text(encoding="utf-8")


def test_non_array_payload_is_a_store_error(tmp_path: Path) -> None:
    path = tmp_path / "spots.json"
    path.write_text(json.dumps({"spots": []}), encoding="utf-8")
    with pytest.raises(StoreError):
        SpotStore(path).load()

    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(StoreError):
        SpotStore(path).load()


def test_append_and_find(tmp_path: Path) -> None:
    store = SpotStore(tmp_path / "spots.json")
    assert store.append([make_spot(spot_id="s001"), make_spot(spot_id="s007")]) == ["s001", "s007"]

    found = store.find("s007")
    assert found is not None and found["id"] == "s007"
    assert store.next_spot_id() == "s008"


def test_append_rejects_duplicates_without_writing(tmp_path: Path) -> None:
    store = SpotStore(tmp_path / "spots.json")
    store.append([make_spot(spot_id="s001")])

    with pytest.raises(StoreError):
        store.append([make_spot(spot_id="s001")])
    with pytest.raises(StoreError):
        store.append([make_spot(spot_id="s002"), make_spot(spot_id="s002")])
    with pytest.raises(StoreError):
        store.append([{"data": {}}])

    assert [spot["id"] for spot in store.load()] == ["s001"]
