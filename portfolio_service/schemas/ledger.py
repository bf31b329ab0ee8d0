"""Pydantic schemas for brokerage ledger payloads."""

from pydantic import BaseModel


class LedgerReading(BaseModel):
    """One currency section of a Client Portal ledger response.

    Only the fields persisted with an equity snapshot are declared; the
    gateway sends many more and they are ignored.
    """

    netliquidationvalue: float | None = None
    cashbalance: float | None = None
    settledcash: float | None = None
    stockmarketvalue: float | None = None
    unrealizedpnl: float | None = None
    realizedpnl: float | None = None
    currency: str | None = None

    @property
    def equity(self) -> float | None:
        return self.netliquidationvalue


def extract_reading(ledger: dict | None, currency: str) -> LedgerReading | None:
    """Pick one currency section (e.g. "USD") out of a full ledger payload."""
    if not ledger:
        return None
    section = ledger.get(currency)
    if not isinstance(section, dict):
        return None
    return LedgerReading.model_validate(section)
