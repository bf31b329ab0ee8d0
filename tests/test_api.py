"""Tests for the HTTP layer: dashboard history, ledger recording, lifespan."""

from unittest.mock import AsyncMock

from fastapi.testclient import TestClient

from portfolio_service.config import settings
from portfolio_service.schemas.ledger import LedgerReading
from portfolio_service.services.ibkr_client import BrokerageError, IBKRClient
from portfolio_service.utils.constants import DAY_MS


def _seed(store, clock, account_id: str, points: list[tuple[int, float]]):
    for ts, equity in points:
        clock.now = ts
        store.record_snapshot(account_id, LedgerReading(netliquidationvalue=equity))


# ---------------------------------------------------------------------------
# 1. /api/equityHistory
# ---------------------------------------------------------------------------

def test_equity_history_camel_case_payload(api, store, clock):
    _seed(store, clock, "A1", [(0, 100.0), (20_000, 101.0), (35_000, 102.0)])
    resp = api.get("/api/equityHistory", params={"accountId": "A1", "range": "all", "toTs": 60_000})
    assert resp.status_code == 200
    body = resp.json()
    assert body == {
        "points": [
            {"timestamp": 20_000, "equity": 101.0},
            {"timestamp": 35_000, "equity": 102.0},
        ],
        "bucketMs": 30_000,
        "fromTs": 0,
        "toTs": 60_000,
    }


def test_equity_history_unknown_range_defaults_to_1d(api):
    resp = api.get("/api/equityHistory", params={"accountId": "A1", "range": "3m", "toTs": 10 * DAY_MS})
    body = resp.json()
    assert body["fromTs"] == 10 * DAY_MS - DAY_MS
    assert body["points"] == []


def test_equity_history_default_account(api, store, clock):
    _seed(store, clock, settings.default_account_id, [(5_000, 77.0)])
    resp = api.get("/api/equityHistory", params={"range": "all", "toTs": 60_000})
    assert resp.json()["points"] == [{"timestamp": 5_000, "equity": 77.0}]


def test_equity_history_max_points_clamped(api):
    resp = api.get(
        "/api/equityHistory",
        params={"accountId": "A1", "fromTs": 0, "toTs": 400 * DAY_MS, "maxPoints": 1},
    )
    # Clamped to 10 points -> 40-day buckets
    assert resp.json()["bucketMs"] == 40 * DAY_MS


def test_equity_history_rejects_non_numeric_bounds(api):
    resp = api.get("/api/equityHistory", params={"fromTs": "yesterday"})
    assert resp.status_code == 422


# ---------------------------------------------------------------------------
# 2. /api/ledger and pass-through routes
# ---------------------------------------------------------------------------

def test_ledger_records_snapshot(api, store, clock):
    clock.now = 1_000
    resp = api.get("/api/ledger", params={"accountId": "U5"})
    assert resp.status_code == 200
    equity = resp.json()["USD"]["netliquidationvalue"]

    history = api.get("/api/equityHistory", params={"accountId": "U5", "range": "all", "toTs": 60_000})
    assert history.json()["points"] == [{"timestamp": 1_000, "equity": equity}]


def test_ledger_survives_store_failure(api, store, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("disk full")

    monkeypatch.setattr(store, "record_snapshot", boom)
    resp = api.get("/api/ledger", params={"accountId": "U5"})
    assert resp.status_code == 200
    assert "USD" in resp.json()


def test_brokerage_error_maps_to_502(api):
    from portfolio_service.api.deps import get_ibkr_client
    from portfolio_service.main import app

    failing = AsyncMock(spec=IBKRClient)
    failing.get_ledger.side_effect = BrokerageError("Gateway returned 401")
    app.dependency_overrides[get_ibkr_client] = lambda: failing

    resp = api.get("/api/ledger")
    assert resp.status_code == 502
    assert "401" in resp.json()["detail"]


def test_positions_and_account_info(api):
    positions = api.get("/api/positions", params={"accountId": "U5"}).json()
    assert positions and positions[0]["acctId"] == "U5"
    info = api.get("/api/accountInfo").json()
    assert info["accountId"] == settings.mock_account_id


def test_health(api):
    assert api.get("/api/system/health").json() == {"status": "ok"}


# ---------------------------------------------------------------------------
# 3. Lifespan wiring
# ---------------------------------------------------------------------------

def test_lifespan_opens_store_and_serves_mock_ledger(monkeypatch):
    from portfolio_service.main import app

    monkeypatch.setattr(settings, "db_path", ":memory:")
    monkeypatch.setattr(settings, "mock", True)
    monkeypatch.setattr(settings, "poll_accounts", [])

    with TestClient(app) as client:
        assert client.get("/api/ledger", params={"accountId": "U7"}).status_code == 200
        body = client.get("/api/equityHistory", params={"accountId": "U7", "range": "1d"}).json()
        assert len(body["points"]) == 1
        assert client.get("/api/system/scheduler").json()["running"] is False
