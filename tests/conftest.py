"""Shared fixtures: in-memory equity store with a controllable clock."""

import pytest
from fastapi.testclient import TestClient

from portfolio_service.services.equity_history import EquityHistoryStore
from portfolio_service.services.ibkr_client import IBKRClient


class FakeClock:
    """Epoch-ms clock the tests move by hand."""

    def __init__(self, now: int = 0):
        self.now = now

    def __call__(self) -> int:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    store = EquityHistoryStore.open(":memory:", clock=clock)
    yield store
    store.close()


@pytest.fixture
def mock_client():
    return IBKRClient(base_url="https://mock", mock_mode=True)


@pytest.fixture
def api(store, mock_client):
    """TestClient with the store and brokerage client injected (no lifespan)."""
    from portfolio_service.api.deps import get_ibkr_client, get_store
    from portfolio_service.main import app

    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_ibkr_client] = lambda: mock_client
    yield TestClient(app)
    app.dependency_overrides.clear()
