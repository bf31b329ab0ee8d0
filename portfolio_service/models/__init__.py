"""Database models."""

from portfolio_service.models.equity_snapshot import EquitySnapshot

__all__ = [
    "EquitySnapshot",
]
