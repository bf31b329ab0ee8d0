"""Ledger fetch + equity snapshot recording.

Shared by the /api/ledger route and the scheduler's per-account poll job.
A failed snapshot write is logged and never prevents the ledger payload
from reaching the caller.
"""

import asyncio
import logging

from portfolio_service.config import settings
from portfolio_service.schemas.ledger import extract_reading
from portfolio_service.services.equity_history import EquityHistoryStore
from portfolio_service.services.ibkr_client import BrokerageError, IBKRClient

logger = logging.getLogger(__name__)
_account_locks: dict[str, asyncio.Lock] = {}


def record_ledger(store: EquityHistoryStore, account_id: str, ledger: dict | None) -> bool:
    """Record the configured currency section of a ledger. Never raises."""
    try:
        reading = extract_reading(ledger, settings.ledger_currency)
        return store.record_snapshot(account_id, reading)
    except Exception:
        logger.exception(f"[{account_id}] Failed to record ledger snapshot")
        return False


async def fetch_and_record_ledger(client: IBKRClient, store: EquityHistoryStore, account_id: str) -> dict:
    """Fetch the ledger and record a snapshot. Brokerage errors propagate."""
    ledger = await client.get_ledger(account_id)
    record_ledger(store, account_id, ledger)
    return ledger


async def run_ledger_poll(client: IBKRClient, store: EquityHistoryStore, account_id: str):
    """Scheduler entry point: one poll per account, skipping overlaps."""
    lock = _account_locks.setdefault(account_id, asyncio.Lock())
    if lock.locked():
        logger.warning(f"[{account_id}] Skipping overlapping ledger poll")
        return

    async with lock:
        try:
            await fetch_and_record_ledger(client, store, account_id)
        except BrokerageError as e:
            logger.error(f"[{account_id}] Ledger poll failed: {e}")
