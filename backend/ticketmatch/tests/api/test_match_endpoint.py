from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from ticketmatch.api.deps import get_engine
from ticketmatch.api.main import create_app


@pytest.fixture()
def api_client(engine):
    app = create_app(engine=engine)
    app.dependency_overrides[get_engine] = lambda: engine
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


def utc_today():
    return datetime.now(timezone.utc).date()


def test_health(api_client):
    response = api_client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True}


def test_match_exact_date(api_client, seed_event):
    day = utc_today() + timedelta(days=20)
    seed_event(
        "evt-1",
        name="Zach Bryan",
        day=day,
        city="Austin",
        performers=[("p-zach", "Zach Bryan")],
        offers=[
            {"source": "tn", "price_min": 9000, "tickets_yn": True},
            {"source": "geturtix", "price_min": 10000, "promo_percent": 20},
        ],
    )
    response = api_client.post(
        "/match",
        json={"performer_query": "Zach Bryan", "city": "Austin", "state": "TX", "date_day": day.isoformat()},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["confidence"] == "high"
    [match] = data["matches"]
    assert {"event_id", "event_name", "date_day", "time_24", "time_12", "offers", "tickets_yn"}.issubset(match)
    assert [o["est_after_promo"] for o in match["offers"]] == ["80.00", "90.00"]


def test_match_missing_fields(api_client):
    response = api_client.post("/match", json={"performer_query": "", "raw_title": "", "city": "Austin"})
    assert response.status_code == 200
    data = response.json()
    assert data["confidence"] == "low"
    assert data["reason"] == "missing_required_fields"
    assert data["matches"] == []


@pytest.mark.parametrize(
    "payload",
    [
        {"performer_query": "Zach Bryan", "city": "Austin", "date_day": "2026/11/20"},
        {"performer_query": "Zach Bryan", "city": "Austin", "date_day": "2026-02-30"},
        {"performer_query": "Zach Bryan", "city": "Austin", "time_24": "7pm"},
        {"performer_query": ["Zach Bryan"], "city": "Austin"},
    ],
)
def test_malformed_request_is_rejected(api_client, payload):
    response = api_client.post("/match", json=payload)
    assert response.status_code == 422


def test_missing_engine_is_server_error():
    app = create_app(engine=None)
    app.state.db_engine = None
    with TestClient(app) as client:
        response = client.post("/match", json={"performer_query": "Zach Bryan", "city": "Austin"})
    assert response.status_code == 500
