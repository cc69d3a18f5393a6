# tests/test_api.py
"""
HTTP surface with in-memory repositories swapped in (no DB, no lifespan).
"""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from api.v1.deps import contract_repo, daily_log_repo
from main import app
from services.auth import create_token
from services.contracts import InMemoryDailyContractRepository
from services.daily_log import InMemoryDailyConsumedRepository

DAY = "2026-10-17"
AUTH = {"Authorization": f"Bearer {create_token('u1')}"}


@pytest.fixture
def client():
    logs, contracts = InMemoryDailyConsumedRepository(), InMemoryDailyContractRepository()
    app.dependency_overrides[daily_log_repo] = lambda: logs
    app.dependency_overrides[contract_repo] = lambda: contracts
    yield TestClient(app)
    app.dependency_overrides.clear()


# ── meta / auth ─────────────────────────────────────────────────────
def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_missing_or_bad_token_is_401(client):
    assert client.get("/api/v1/logs/today").status_code == 401
    bad = {"Authorization": "Bearer not-a-jwt"}
    assert client.get("/api/v1/logs/today", headers=bad).status_code == 401


# ── logs ────────────────────────────────────────────────────────────
def test_log_additions_accumulate(client):
    for kcal in (300, 450):
        r = client.post(f"/api/v1/logs/today?day={DAY}", json={"calories": kcal, "protein_g": 20}, headers=AUTH)
        assert r.status_code == 201

    r = client.get(f"/api/v1/logs/today?day={DAY}", headers=AUTH)
    body = r.json()
    assert body["day"] == DAY
    assert body["consumed"]["calories"] == 750
    assert body["consumed"]["protein_g"] == 40


def test_negative_addition_rejected(client):
    r = client.post(f"/api/v1/logs/today?day={DAY}", json={"calories": -5}, headers=AUTH)
    assert r.status_code == 422


def test_bad_day_rejected(client):
    assert client.get("/api/v1/logs/today?day=17-10-2026", headers=AUTH).status_code == 422


# ── intelligence ────────────────────────────────────────────────────
def test_daily_vector_with_explicit_consumed(client):
    r = client.post(
        "/api/v1/intelligence/daily-vector",
        json={"profile": {"mode": "privacy"}, "consumed": {"calories": 1200}},
        headers=AUTH,
    )
    assert r.status_code == 200
    v = r.json()
    assert v["targets"]["calories"] == 2200
    assert v["remaining"]["calories"] == 1000
    assert v["deficit_of_day"]["key"] == "protein"


def test_daily_vector_reads_stored_totals(client):
    client.post(f"/api/v1/logs/today?day={DAY}", json={"sodium_mg": 2100, "calories": 500}, headers=AUTH)
    r = client.post(f"/api/v1/intelligence/daily-vector?day={DAY}", json={}, headers=AUTH)
    assert r.json()["over_risk"]["key"] == "sodium"


def test_next_meal_full_payload(client):
    r = client.post(
        "/api/v1/intelligence/next-meal",
        json={
            "profile": {"mode": "sync", "preferences": {"goal": "maintain", "cuisines": ["Thai"]}},
            "max_options": 3,
            "time_window": "lunch",
        },
        headers={**AUTH, "X-Member-Id": "kid"},
    )
    assert r.status_code == 200
    body = r.json()
    assert body["intent"]["intent_id"].startswith("intent_u1_kid_sync_")
    assert body["intent"]["intent_id"].endswith("_lunch")
    assert body["intent"]["context"]["cuisines"] == ["Thai"]
    assert 2 <= len(body["options"]) <= 3
    assert body["plan"]["primary_option"] == body["options"][0]
    assert body["suggestion"]["title"] == "Best next meal • Thai"


def test_next_meal_behavior_from_recent_logs(client):
    logs = [
        {"captured_at": f"2026-10-1{d}T20:00:00", "sodium_mg": 2600, "protein_g": 120}
        for d in range(4)
    ]
    r = client.post(
        "/api/v1/intelligence/next-meal",
        json={"recent_logs": logs, "consumed": {"calories": 800}},
        headers=AUTH,
    )
    assert r.status_code == 200
    assert r.json()["vector"]["behavior14d"]["high_sodium_days_pct"] == 1.0


def test_invalid_config_override_is_422(client):
    r = client.post(
        "/api/v1/intelligence/daily-vector",
        json={"config_overrides": {"ux": {"max_bullets": "lots"}}},
        headers=AUTH,
    )
    assert r.status_code == 422


def test_unknown_mode_is_422(client):
    r = client.post("/api/v1/intelligence/daily-vector", json={"profile": {"mode": "cloud"}}, headers=AUTH)
    assert r.status_code == 422


# ── contracts ───────────────────────────────────────────────────────
def test_contract_lifecycle(client):
    base = f"/api/v1/contracts/today?day={DAY}"
    assert client.get(base, headers=AUTH).status_code == 404

    r = client.post(base, json={"macro_gap": {"protein_g": 40}}, headers=AUTH)
    assert r.status_code == 200
    c = r.json()
    assert c["id"] == f"dc_{DAY}_u1"
    assert c["title"] == "Protein Close"
    assert c["status"] == "draft"

    # second create returns the stored contract
    again = client.post(base, json={"macro_gap": {"fiber_g": 15}}, headers=AUTH).json()
    assert again["title"] == "Protein Close"

    accept = f"/api/v1/contracts/today/accept?day={DAY}"
    assert client.post(accept, headers=AUTH).json()["status"] == "active"
    assert client.post(accept, headers=AUTH).status_code == 409

    adjusted = client.post(
        f"/api/v1/contracts/today/adjust?day={DAY}", json={"delta_pct": 50}, headers=AUTH
    ).json()
    assert adjusted["metric"]["target"] == 48

    progress = client.post(
        f"/api/v1/contracts/today/progress?day={DAY}", json={"protein_g": 48}, headers=AUTH
    ).json()
    assert progress["progress"]["pct"] == 100
    assert client.get(base, headers=AUTH).json()["progress"]["pct"] == 100


def test_contract_from_pipeline_gets_playbook(client):
    r = client.post(
        f"/api/v1/contracts/today?day={DAY}",
        json={"profile": {"mode": "privacy", "intel": {"eating_style": "home-heavy"}}},
        headers=AUTH,
    )
    c = r.json()
    assert c["title"] == "Protein Close"
    assert [p["route"] for p in c["playbook"]] == ["cook", "eatout"]
