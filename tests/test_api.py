"""
Tests for the HTTP API.
"""

import pytest
from fastapi.testclient import TestClient

from smartsignal.main import app
from smartsignal.services.data_ingestion import MockDataProvider
from smartsignal.services.strategy import StrategyService, get_strategy_service

from conftest import ACTIVE_CLOCK, uptrend_candles


def _fixed_clock():
    return ACTIVE_CLOCK


@pytest.fixture
def client():
    service = StrategyService(
        MockDataProvider(seed=5, clock=_fixed_clock), clock=_fixed_clock, min_candles=100
    )
    app.dependency_overrides[get_strategy_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


def _payload(candles, **extra):
    return {"candles": [c.model_dump(mode="json") for c in candles], **extra}


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert "is_active" in body["session"]


def test_analyze_candles(client):
    response = client.post(
        "/api/v1/signals/analyze", json=_payload(uptrend_candles(), preset="BASIC")
    )

    assert response.status_code == 200
    body = response.json()
    assert body["preset"] == "BASIC"
    assert body["signal"]["level"] == "BUY"
    assert body["signal"]["risk_reward_ratio"] == pytest.approx(2.0)
    assert len(body["indicators"]["sma_20"]) == 81


def test_analyze_with_partial_config(client):
    response = client.post(
        "/api/v1/signals/analyze",
        json=_payload(uptrend_candles(), preset="BASIC", config={"min_confidence": 60}),
    )

    assert response.status_code == 200
    signal = response.json()["signal"]
    assert signal["level"] == "BUY"
    assert signal["trailing_stop"] is None


def test_analyze_rejects_short_history(client):
    response = client.post("/api/v1/signals/analyze", json=_payload(uptrend_candles(10)))

    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["required"] == 100
    assert detail["service"] == "StrategyService"


def test_analyze_rejects_out_of_order_candles(client):
    candles = uptrend_candles()
    candles[40], candles[41] = candles[41], candles[40]

    response = client.post("/api/v1/signals/analyze", json=_payload(candles))

    assert response.status_code == 422
    assert response.json()["detail"]["index"] == 41


def test_analyze_rejects_negative_price(client):
    payload = _payload(uptrend_candles())
    payload["candles"][0]["low"] = -1.0

    response = client.post("/api/v1/signals/analyze", json=payload)

    assert response.status_code == 422


def test_signal_for_symbol(client):
    response = client.get("/api/v1/signals/EURUSD", params={"timeframe": "1h", "preset": "ENHANCED"})

    assert response.status_code == 200
    body = response.json()
    assert body["preset"] == "ENHANCED"
    assert body["context"]["session_active"] is True


def test_signal_for_unknown_symbol(client):
    response = client.get("/api/v1/signals/XYZABC")

    assert response.status_code == 502


def test_preset_config(client):
    assert client.get("/api/v1/signals/presets/ENHANCED/config").json()["min_confidence"] == 65
    assert client.get("/api/v1/signals/presets/BASIC/config").json()["min_confidence"] == 70


def test_preset_script(client):
    response = client.get("/api/v1/signals/presets/BASIC/script")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text.startswith("//@version=5")
