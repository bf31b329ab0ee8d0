"""Portfolio API — account, positions and ledger pass-through to the gateway."""

from fastapi import APIRouter, Depends, HTTPException

from portfolio_service.config import settings
from portfolio_service.api.deps import get_ibkr_client, get_store
from portfolio_service.engine.ledger_job import fetch_and_record_ledger
from portfolio_service.services.equity_history import EquityHistoryStore
from portfolio_service.services.ibkr_client import BrokerageError, IBKRClient

router = APIRouter(prefix="/api", tags=["portfolio"])


def _bad_gateway(e: BrokerageError) -> HTTPException:
    return HTTPException(status_code=502, detail=str(e))


@router.get("/accountInfo")
async def account_info(client: IBKRClient = Depends(get_ibkr_client)):
    try:
        return await client.get_account_info()
    except BrokerageError as e:
        raise _bad_gateway(e)


@router.get("/positions")
async def positions(
    accountId: str | None = None,
    pageId: str = "0",
    client: IBKRClient = Depends(get_ibkr_client),
):
    account_id = accountId or settings.default_account_id
    try:
        return await client.get_positions(account_id, pageId)
    except BrokerageError as e:
        raise _bad_gateway(e)


@router.get("/conDetail")
async def con_detail(
    accountId: str | None = None,
    conId: str = "0",
    client: IBKRClient = Depends(get_ibkr_client),
):
    account_id = accountId or settings.default_account_id
    try:
        return await client.get_con_detail(account_id, conId)
    except BrokerageError as e:
        raise _bad_gateway(e)


@router.get("/ledger")
async def ledger(
    accountId: str | None = None,
    client: IBKRClient = Depends(get_ibkr_client),
    store: EquityHistoryStore = Depends(get_store),
):
    """Ledger for an account; also records an equity snapshot."""
    account_id = accountId or settings.default_account_id
    try:
        return await fetch_and_record_ledger(client, store, account_id)
    except BrokerageError as e:
        raise _bad_gateway(e)
