"""EquitySnapshot model — append-only account equity readings."""

from sqlalchemy import BigInteger, Column, Index
from sqlmodel import SQLModel, Field


class EquitySnapshot(SQLModel, table=True):
    __tablename__ = "equity_snapshots"
    __table_args__ = (
        Index("idx_equity_snapshots_account_ts", "account_id", "ts"),
        {"sqlite_autoincrement": True},
    )

    id: int | None = Field(default=None, primary_key=True)
    account_id: str
    ts: int = Field(sa_column=Column(BigInteger, nullable=False))  # epoch ms
    equity: float  # net liquidation value

    # Auxiliary ledger fields, not read back by history queries
    cash_balance: float | None = None
    settled_cash: float | None = None
    stock_market_value: float | None = None
    unrealized_pnl: float | None = None
    realized_pnl: float | None = None
    currency: str | None = None
