from __future__ import annotations

import json
from dataclasses import replace

from fastapi import FastAPI
from fastapi.testclient import TestClient

from app import create_app
from backend.controllers.access_controller import router
from backend.utils.config import get_settings


def _build_test_settings(policy_path=None):
    get_settings.cache_clear()
    return replace(get_settings(), room_policy_path=policy_path)


def _build_client(policy_path=None) -> TestClient:
    return TestClient(create_app(_build_test_settings(policy_path)))


def test_simulate_returns_ordered_decisions_and_summary():
    client = _build_client()
    payload = json.dumps(
        [
            {"id": "E1", "access_level": 2, "request_time": "09:20", "room": "ServerRoom"},
            {"id": "E1", "access_level": "2", "request_time": "09:15", "room": "ServerRoom"},
            {"id": "E9", "access_level": 5, "request_time": "09:00", "room": "Basement"},
        ]
    )

    response = client.post("/simulate", json={"payload": payload})

    assert response.status_code == 200
    body = response.json()
    assert body["summary"] == {"total": 3, "granted": 1, "denied": 2}
    assert [row["index"] for row in body["decisions"]] == [2, 1, 0]
    assert body["decisions"][0]["reason"] == "Unknown room: Basement"
    assert body["decisions"][1]["decision"] == "GRANTED"
    assert body["decisions"][1]["request"]["access_level"] == 2
    assert body["decisions"][2]["reason"] == (
        "Cooldown active (last access 09:15, retry at 09:30)"
    )


def test_simulate_can_restore_input_order():
    client = _build_client()
    payload = client.get("/sample").json()["payload"]

    response = client.post("/simulate", json={"payload": payload, "input_order": True})

    assert response.status_code == 200
    assert [row["index"] for row in response.json()["decisions"]] == list(range(10))


def test_simulate_rejects_malformed_json():
    client = _build_client()

    response = client.post("/simulate", json={"payload": "[{"})

    assert response.status_code == 400
    assert "JSON parse error" in response.json()["detail"]


def test_simulate_rejects_non_array_payload():
    client = _build_client()

    response = client.post("/simulate", json={"payload": "{\"id\": \"E1\"}"})

    assert response.status_code == 400
    assert "array" in response.json()["detail"]


def test_simulate_reports_first_invalid_index():
    client = _build_client()
    payload = json.dumps(
        [
            {"id": "E1", "access_level": 2, "request_time": "09:15", "room": "ServerRoom"},
            {"id": "E2", "request_time": "09:15", "room": "ServerRoom"},
        ]
    )

    response = client.post("/simulate", json={"payload": payload})

    assert response.status_code == 400
    assert "index 1" in response.json()["detail"]
    assert "access_level" in response.json()["detail"]


def test_simulate_rejects_bad_time_without_partial_results():
    client = _build_client()
    payload = json.dumps(
        [
            {"id": "E1", "access_level": 2, "request_time": "09:15", "room": "ServerRoom"},
            {"id": "E2", "access_level": 2, "request_time": "9am", "room": "ServerRoom"},
        ]
    )

    response = client.post("/simulate", json={"payload": payload})

    assert response.status_code == 400
    assert "9am" in response.json()["detail"]
    assert "decisions" not in response.json()


def test_simulate_requires_non_empty_payload():
    client = _build_client()

    response = client.post("/simulate", json={"payload": ""})

    assert response.status_code == 422


def test_policies_endpoint_lists_configured_rooms(tmp_path):
    policy_file = tmp_path / "rooms.json"
    policy_file.write_text(
        json.dumps({"Lab": {"minLevel": 1, "open": "07:00", "close": "19:00", "cooldown": 5}}),
        encoding="utf-8",
    )
    client = _build_client(policy_file)

    response = client.get("/policies")

    assert response.status_code == 200
    assert response.json() == [
        {
            "room": "Lab",
            "min_level": 1,
            "open_time": "07:00",
            "close_time": "19:00",
            "cooldown_minutes": 5,
        }
    ]


def test_sample_endpoint_returns_json_text():
    client = _build_client()

    response = client.get("/sample")

    assert response.status_code == 200
    sample = json.loads(response.json()["payload"])
    assert len(sample) == 10
    assert sample[0]["id"] == "EMP001"


def test_router_builds_service_lazily_when_app_state_is_empty():
    get_settings.cache_clear()
    app = FastAPI()
    app.include_router(router)
    client = TestClient(app)

    response = client.get("/health")
    sample = client.get("/sample")

    assert response.json() == {"status": "ok"}
    assert sample.status_code == 200
    assert app.state.simulation_service is not None


def test_simulate_rejects_oversized_level_string():
    client = _build_client()
    payload = json.dumps(
        [{"id": "E1", "access_level": "9" * 5000, "request_time": "09:15", "room": "ServerRoom"}]
    )

    response = client.post("/simulate", json={"payload": payload})

    assert response.status_code == 400
    assert "index 0" in response.json()["detail"]
