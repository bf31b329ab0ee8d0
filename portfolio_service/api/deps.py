"""Shared API dependencies."""

from fastapi import Request

from portfolio_service.services.equity_history import EquityHistoryStore
from portfolio_service.services.ibkr_client import IBKRClient


def get_store(request: Request) -> EquityHistoryStore:
    """The equity store opened during application startup."""
    return request.app.state.store


def get_ibkr_client(request: Request) -> IBKRClient:
    return request.app.state.ibkr_client
