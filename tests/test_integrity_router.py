from __future__ import annotations

from pathlib import Path

from fastapi import FastAPI
from fastapi.testclient import TestClient

from gtospots.features.integrity import IntegrityService, create_integrity_router
from gtospots.policy.intent_policy import PURE_BLUFF_LARGE
from gtospots.store.json_store import SpotStore
from gtospots.web.app import create_app

from spot_factory import bluff_spot, make_spot


def _client(tmp_path: Path) -> tuple[TestClient, IntegrityService]:
    service = IntegrityService(store=SpotStore(tmp_path / "spots.json"))
    app = FastAPI()
    app.include_router(create_integrity_router(service))
    return TestClient(app), service


def test_validate_endpoint_reports_errors(tmp_path: Path) -> None:
    client, _ = _client(tmp_path)

    ok = client.post("/api/v1/spots/validate", json=make_spot())
    assert ok.status_code == 200
    assert ok.json() == {"id": "s001", "ok": True, "errors": []}

    bad = client.post("/api/v1/spots/validate", json=bluff_spot()).json()
    assert bad["ok"] is False
    assert bad["errors"] == [PURE_BLUFF_LARGE]


def test_validate_endpoint_accepts_any_json(tmp_path: Path) -> None:
    client, _ = _client(tmp_path)

    response = client.post("/api/v1/spots/validate", json=[1, 2, 3])
    assert response.status_code == 200
    assert response.json() == {"ok": False, "errors": ["Spot must be an object"]}

    garbled = client.post(
        "/api/v1/spots/validate",
        content=b"{nope",
        headers={"Content-Type": "application/json"},
    )
    assert garbled.status_code == 200
    assert garbled.json()["ok"] is False


def test_repair_endpoint_returns_fixed_spot(tmp_path: Path) -> None:
    client, _ = _client(tmp_path)
    drifted = make_spot(pot=10, options=[["x"], ["b", 33, 3.3], ["b", 75, 7.5]])

    data = client.post("/api/v1/spots/repair", json=drifted).json()

    assert data["changed"] is True
    assert data["spot"]["data"]["pot"] == 13.0
    assert data["spot"]["data"]["opts"][1] == ["b", 33, 4.29]
    assert data["spot"]["data"]["hist"][1] == ["BB", "c", None, 2.0]
    assert data["validation"]["ok"] is True


def test_frequencies_endpoint(tmp_path: Path) -> None:
    client, _ = _client(tmp_path)

    response = client.post(
        "/api/v1/spots/frequencies",
        json={"hand_intent": "Made_Value", "turn_type": "blank_turn", "node_intent": "value", "num_options": 2},
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["hand_intent"] == "made_value"
    assert payload["freq"] == [0.35, 0.65]

    invalid = client.post(
        "/api/v1/spots/frequencies",
        json={"hand_intent": "monster", "turn_type": "blank_turn", "node_intent": "value", "num_options": 2},
    )
    assert invalid.status_code == 422


def test_commit_report_and_lookup(tmp_path: Path) -> None:
    client, service = _client(tmp_path)

    created = client.post("/api/v1/spots/commit", json=make_spot())
    assert created.status_code == 201
    assert created.json() == {"committed": "s001"}

    rejected = client.post("/api/v1/spots/commit", json=bluff_spot(spot_id="s002"))
    assert rejected.status_code == 400
    assert rejected.json()["detail"]["errors"] == [PURE_BLUFF_LARGE]

    duplicate = client.post("/api/v1/spots/commit", json=make_spot())
    assert duplicate.status_code == 500

    report = client.get("/api/v1/spots/report").json()
    assert report == {"total": 1, "ok": 1, "bad": 0, "failures": []}

    assert client.get("/api/v1/spots/s001").json()["id"] == "s001"
    assert client.get("/api/v1/spots/s404").status_code == 404
    assert len(service.store.load()) == 1


def test_report_on_corrupt_store_is_server_error(tmp_path: Path) -> None:
    client, service = _client(tmp_path)
    service.store.path.write_text('{"spots": []}', encoding="utf-8")
    assert client.get("/api/v1/spots/report").status_code == 500


def test_create_app_wires_router_and_health(tmp_path: Path) -> None:
    service = IntegrityService(store=SpotStore(tmp_path / "spots.json"))
    client = TestClient(create_app(service))

    assert client.get("/healthz").json() == {"status": "ok"}
    assert client.post("/api/v1/spots/validate", json=make_spot()).json()["ok"] is True


def test_app_shutdown_stops_worker_pool(tmp_path: Path) -> None:
    from gtospots.features.integrity import concurrency

    service = IntegrityService(store=SpotStore(tmp_path / "spots.json"))
    with TestClient(create_app(service)) as client:
        assert client.post("/api/v1/spots/validate", json=make_spot()).status_code == 200
        assert concurrency._pool is not None
    assert concurrency._pool is None
