"""Interactive Brokers Client Portal gateway client.

Thin async wrapper over the gateway's portfolio endpoints. Authentication
is handled by the gateway itself; this client only forwards requests.
"""

import logging

import httpx

from portfolio_service.services import mock_data

logger = logging.getLogger(__name__)


class BrokerageError(Exception):
    """Gateway unreachable or returned a non-2xx response."""


class IBKRClient:
    """Wrapper around the Client Portal REST API for portfolio reads."""

    def __init__(
        self,
        base_url: str,
        verify_ssl: bool = False,
        timeout: float = 15.0,
        mock_mode: bool = False,
    ):
        self.base_url = base_url.rstrip("/")
        self.verify_ssl = verify_ssl
        self.timeout = timeout
        self._mock_mode = mock_mode
        self._http: httpx.AsyncClient | None = None

    @property
    def mock_mode(self) -> bool:
        return self._mock_mode

    def _ensure_client(self) -> httpx.AsyncClient:
        """Lazily create the HTTP client."""
        if self._http is None:
            self._http = httpx.AsyncClient(
                base_url=self.base_url,
                verify=self.verify_ssl,
                timeout=self.timeout,
            )
            logger.info(f"IBKR gateway client initialized for {self.base_url}")
        return self._http

    async def _get(self, path: str):
        client = self._ensure_client()
        try:
            resp = await client.get(path)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Gateway GET {path} failed: HTTP {e.response.status_code}")
            raise BrokerageError(f"Gateway returned {e.response.status_code} for {path}") from e
        except httpx.RequestError as e:
            logger.error(f"Gateway GET {path} failed: {e}")
            raise BrokerageError(f"Gateway request failed for {path}: {e}") from e
        return resp.json()

    async def get_account_info(self) -> dict | None:
        """First account visible to the gateway session."""
        if self._mock_mode:
            return mock_data.mock_account_info()
        accounts = await self._get("/portfolio/accounts")
        return accounts[0] if accounts else None

    async def get_positions(self, account_id: str, page_id: str = "0") -> list[dict]:
        if self._mock_mode:
            return mock_data.mock_positions(account_id)
        return await self._get(f"/portfolio/{account_id}/positions/{page_id}")

    async def get_con_detail(self, account_id: str, con_id: str = "0"):
        if self._mock_mode:
            return next(
                (p for p in mock_data.mock_positions(account_id) if str(p["conid"]) == con_id),
                None,
            )
        return await self._get(f"/portfolio/{account_id}/positions/{con_id}")

    async def get_ledger(self, account_id: str) -> dict:
        """Ledger keyed by currency code ("USD", "BASE", ...)."""
        if self._mock_mode:
            return mock_data.mock_ledger(account_id)
        return await self._get(f"/portfolio/{account_id}/ledger")

    async def close(self):
        """Close the HTTP client."""
        if self._http is not None:
            await self._http.aclose()
        self._http = None
