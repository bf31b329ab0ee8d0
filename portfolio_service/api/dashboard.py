"""Dashboard API — bucketed equity history."""

from fastapi import APIRouter, Depends, Query

from portfolio_service.config import settings
from portfolio_service.api.deps import get_store
from portfolio_service.schemas.equity_history import EquityHistory
from portfolio_service.services.equity_history import EquityHistoryStore
from portfolio_service.utils.constants import DEFAULT_RANGE, VALID_RANGES

router = APIRouter(prefix="/api", tags=["dashboard"])


@router.get("/equityHistory", response_model=EquityHistory)
def equity_history(
    accountId: str | None = None,
    range_key: str = Query(default=DEFAULT_RANGE, alias="range"),
    fromTs: int | None = None,
    toTs: int | None = None,
    maxPoints: int | None = None,
    store: EquityHistoryStore = Depends(get_store),
):
    """Equity curve for an account, downsampled to at most ~maxPoints points."""
    account_id = accountId or settings.default_account_id
    if range_key not in VALID_RANGES:
        range_key = DEFAULT_RANGE
    return store.get_history(
        account_id,
        range_key,
        from_ts=fromTs,
        to_ts=toTs,
        max_points=maxPoints,
    )
