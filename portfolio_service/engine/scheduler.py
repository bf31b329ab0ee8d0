"""APScheduler integration for FastAPI.

Manages per-account interval jobs that poll the ledger and record
equity snapshots.
"""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from portfolio_service.engine.ledger_job import run_ledger_poll
from portfolio_service.services.equity_history import EquityHistoryStore
from portfolio_service.services.ibkr_client import IBKRClient

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()


def _job_id(account_id: str) -> str:
    return f"ledger_{account_id}"


def add_account_job(client: IBKRClient, store: EquityHistoryStore, account_id: str, interval_seconds: int):
    """Add or replace the ledger poll job for an account."""
    job_id = _job_id(account_id)

    # Remove existing job if present
    if scheduler.get_job(job_id):
        scheduler.remove_job(job_id)

    scheduler.add_job(
        run_ledger_poll,
        trigger=IntervalTrigger(seconds=interval_seconds),
        args=[client, store, account_id],
        id=job_id,
        name=f"Ledger {account_id}",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        misfire_grace_time=60,
    )
    logger.info(f"Scheduled ledger poll for {account_id} every {interval_seconds}s")


def start_scheduler(client: IBKRClient, store: EquityHistoryStore, accounts: list[str], interval_seconds: int):
    """Start the scheduler with one poll job per account."""
    for account_id in accounts:
        add_account_job(client, store, account_id, interval_seconds)

    scheduler.start()
    logger.info(f"Scheduler started with {len(scheduler.get_jobs())} jobs")


def stop_scheduler():
    """Shut down the scheduler."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")


def get_scheduler_status() -> dict:
    """Return current scheduler state for the API."""
    jobs = scheduler.get_jobs()
    return {
        "running": scheduler.running,
        "job_count": len(jobs),
        "jobs": [
            {
                "id": j.id,
                "name": j.name,
                "next_run": str(j.next_run_time) if j.next_run_time else None,
                "trigger": str(j.trigger),
            }
            for j in jobs
        ],
    }
