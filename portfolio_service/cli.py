"""CLI tool for admin operations.

Usage:
    python -m portfolio_service.cli init-db
    python -m portfolio_service.cli history <account_id> [1d|7d|1y|all]
    python -m portfolio_service.cli latest <account_id>
    python -m portfolio_service.cli record-mock <account_id>
"""

import sys
from datetime import datetime, timezone

from portfolio_service.config import settings
from portfolio_service.database import resolve_db_path
from portfolio_service.engine.ledger_job import record_ledger
from portfolio_service.services.equity_history import EquityHistoryStore
from portfolio_service.services.mock_data import mock_ledger
from portfolio_service.utils.constants import DEFAULT_RANGE, VALID_RANGES


def init_db():
    """Create the database file and tables."""
    store = EquityHistoryStore.open(settings.db_path)
    store.close()
    print(f"Equity store ready at {resolve_db_path(settings.db_path)}")


def show_history(account_id: str, range_key: str = DEFAULT_RANGE):
    """Print the bucketed equity series for an account."""
    if range_key not in VALID_RANGES:
        print(f"Unknown range '{range_key}'. Choose from: {', '.join(VALID_RANGES)}")
        sys.exit(1)

    store = EquityHistoryStore.open(settings.db_path)
    try:
        history = store.get_history(account_id, range_key)
    finally:
        store.close()

    print(f"{len(history.points)} points, bucket={history.bucket_ms}ms")
    for point in history.points:
        when = datetime.fromtimestamp(point.timestamp / 1000, tz=timezone.utc)
        print(f"{when.isoformat()}  {point.equity:,.2f}")


def show_latest(account_id: str):
    """Print the most recent snapshot for an account."""
    store = EquityHistoryStore.open(settings.db_path)
    try:
        snapshot = store.latest_snapshot(account_id)
    finally:
        store.close()

    if snapshot is None:
        print(f"No snapshots for {account_id}.")
        return
    when = datetime.fromtimestamp(snapshot.ts / 1000, tz=timezone.utc)
    print(f"{when.isoformat()}  equity={snapshot.equity:,.2f}  cash={snapshot.cash_balance}  currency={snapshot.currency}")


def record_mock(account_id: str):
    """Record one snapshot from the demo ledger."""
    store = EquityHistoryStore.open(settings.db_path)
    try:
        written = record_ledger(store, account_id, mock_ledger(account_id))
    finally:
        store.close()
    print("Snapshot recorded." if written else "Snapshot suppressed (unchanged equity).")


def main():
    if len(sys.argv) < 2:
        print("Usage: python -m portfolio_service.cli <command>")
        print("Commands: init-db, history, latest, record-mock")
        sys.exit(1)

    command = sys.argv[1]
    args = sys.argv[2:]
    if command == "init-db":
        init_db()
    elif command == "history" and args:
        show_history(*args[:2])
    elif command == "latest" and args:
        show_latest(args[0])
    elif command == "record-mock" and args:
        record_mock(args[0])
    else:
        print(f"Unknown command or missing arguments: {command}")
        sys.exit(1)


if __name__ == "__main__":
    main()
