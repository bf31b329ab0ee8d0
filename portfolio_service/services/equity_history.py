"""Equity history store — snapshot recording and bucketed history queries.

Snapshots land in a single append-only table keyed by (account_id, ts).
Reads return a downsampled series: the range is cut into equal-width
buckets and the last observation of each populated bucket is returned, so
the response size stays bounded no matter how densely the poller wrote.

Recording assumes one writer per account (the ledger poller). The
read-latest/insert pair runs in one session, but two concurrent writers
for the same account can both pass the dedup check; the result is a
duplicate-looking row, never a corrupt table.
"""

import logging
import math
import time
from typing import Callable

from sqlalchemy import Integer, cast, func
from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from portfolio_service.database import create_db_and_tables, create_db_engine
from portfolio_service.models.equity_snapshot import EquitySnapshot
from portfolio_service.schemas.equity_history import EquityHistory, EquityHistoryPoint
from portfolio_service.schemas.ledger import LedgerReading
from portfolio_service.utils.constants import (
    DEDUP_MIN_EQUITY_DELTA,
    DEDUP_WINDOW_MS,
    DEFAULT_MAX_POINTS,
    MAX_MAX_POINTS,
    MIN_BUCKET_MS,
    MIN_MAX_POINTS,
    RANGE_LOOKBACK_MS,
)

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


def range_start(range_key: str, to_ts: int) -> int:
    """Start of a named range ending at to_ts. "all" starts at the epoch."""
    if range_key not in RANGE_LOOKBACK_MS:
        raise ValueError(f"Unknown range: {range_key!r}")
    lookback = RANGE_LOOKBACK_MS[range_key]
    if lookback is None:
        return 0
    return to_ts - lookback


def clamp_max_points(max_points: float | None) -> int:
    if max_points is None:
        return DEFAULT_MAX_POINTS
    if not math.isfinite(max_points):
        return MIN_MAX_POINTS
    return min(max(math.floor(max_points), MIN_MAX_POINTS), MAX_MAX_POINTS)


def bucket_width(from_ts: int, to_ts: int, max_points: int) -> int:
    """Bucket width in ms for a range, never narrower than MIN_BUCKET_MS."""
    span = max(1, to_ts - from_ts)
    return max(MIN_BUCKET_MS, (span + max_points - 1) // max_points)


def _is_duplicate(last: EquitySnapshot, ts: int, equity: float) -> bool:
    return (
        abs(ts - last.ts) < DEDUP_WINDOW_MS
        and math.isfinite(last.equity)
        and abs(equity - last.equity) < DEDUP_MIN_EQUITY_DELTA
    )


class EquityHistoryStore:
    """Owns the SQLite engine backing equity snapshots.

    Opened once at startup and closed on shutdown; the clock is injectable
    so tests can place snapshots at exact timestamps.
    """

    def __init__(self, engine: Engine, clock: Callable[[], int] = now_ms):
        self.engine = engine
        self._clock = clock

    @classmethod
    def open(cls, db_path: str | None = None, clock: Callable[[], int] = now_ms) -> "EquityHistoryStore":
        engine = create_db_engine(db_path)
        create_db_and_tables(engine)
        return cls(engine, clock=clock)

    def close(self):
        self.engine.dispose()
        logger.info("Equity store closed")

    def latest_snapshot(self, account_id: str) -> EquitySnapshot | None:
        with Session(self.engine) as session:
            return self._latest(session, account_id)

    def _latest(self, session: Session, account_id: str) -> EquitySnapshot | None:
        return session.exec(
            select(EquitySnapshot)
            .where(EquitySnapshot.account_id == account_id)
            .order_by(EquitySnapshot.ts.desc(), EquitySnapshot.id.desc())
            .limit(1)
        ).first()

    def record_snapshot(self, account_id: str, ledger: LedgerReading | None) -> bool:
        """Append a snapshot for the account unless it is a near-duplicate.

        Returns True when a row was written. Missing, zero and non-finite
        equity readings are ignored silently.
        """
        if ledger is None:
            return False
        equity = ledger.equity
        if equity is None or not math.isfinite(equity) or equity == 0:
            return False

        ts = self._clock()
        with Session(self.engine) as session:
            last = self._latest(session, account_id)
            if last is not None and _is_duplicate(last, ts, equity):
                logger.debug(f"[{account_id}] Snapshot suppressed: equity={equity:.2f} unchanged")
                return False

            session.add(
                EquitySnapshot(
                    account_id=account_id,
                    ts=ts,
                    equity=equity,
                    cash_balance=ledger.cashbalance,
                    settled_cash=ledger.settledcash,
                    stock_market_value=ledger.stockmarketvalue,
                    unrealized_pnl=ledger.unrealizedpnl,
                    realized_pnl=ledger.realizedpnl,
                    currency=ledger.currency,
                )
            )
            session.commit()

        logger.debug(f"[{account_id}] Snapshot recorded: ts={ts} equity={equity:.2f}")
        return True

    def get_history(
        self,
        account_id: str,
        range_key: str = "1d",
        from_ts: int | None = None,
        to_ts: int | None = None,
        max_points: int | None = DEFAULT_MAX_POINTS,
    ) -> EquityHistory:
        """Bucketed equity series for an account.

        Explicit from_ts/to_ts win over the named range (to_ts must be > 0,
        from_ts >= 0). Each populated bucket contributes its last recorded
        point; nothing is interpolated.
        """
        to = int(to_ts) if to_ts is not None and to_ts > 0 else self._clock()
        frm = int(from_ts) if from_ts is not None and from_ts >= 0 else range_start(range_key, to)
        bucket_ms = bucket_width(frm, to, clamp_max_points(max_points))

        if frm > to:
            return EquityHistory(points=[], bucket_ms=bucket_ms, from_ts=frm, to_ts=to)

        bucket = cast(EquitySnapshot.ts / bucket_ms, Integer)
        buckets = (
            select(bucket.label("b"), func.max(EquitySnapshot.ts).label("max_ts"))
            .where(
                EquitySnapshot.account_id == account_id,
                EquitySnapshot.ts >= frm,
                EquitySnapshot.ts <= to,
            )
            .group_by(bucket)
            .cte("buckets")
        )
        stmt = (
            select(EquitySnapshot.id, EquitySnapshot.ts, EquitySnapshot.equity)
            .join(buckets, EquitySnapshot.ts == buckets.c.max_ts)
            .where(EquitySnapshot.account_id == account_id)
            .order_by(EquitySnapshot.ts, EquitySnapshot.id)
        )

        points: list[EquityHistoryPoint] = []
        with Session(self.engine) as session:
            for _, ts, equity in session.exec(stmt).all():
                # Same-ts rows from racing writers: keep the newest insert
                if points and points[-1].timestamp == ts:
                    points[-1] = EquityHistoryPoint(timestamp=ts, equity=equity)
                else:
                    points.append(EquityHistoryPoint(timestamp=ts, equity=equity))

        return EquityHistory(points=points, bucket_ms=bucket_ms, from_ts=frm, to_ts=to)
