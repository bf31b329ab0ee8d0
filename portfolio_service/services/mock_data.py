"""Deterministic demo portfolio served when mock mode is enabled."""

import time

from portfolio_service.config import settings

# conid, symbol, name, qty, price, avg_price, exchange, realized_pnl
MOCK_POSITIONS = [
    (4815747, "NVDA", "NVIDIA Corporation", 120, 615.25, 560.1, "NASDAQ", 1250.0),
    (265598, "AAPL", "Apple Inc.", 150, 195.12, 170.0, "NASDAQ", 820.0),
    (272093, "MSFT", "Microsoft Corporation", 60, 415.4, 360.0, "NASDAQ", 600.0),
    (76792991, "TSLA", "Tesla, Inc.", 80, 210.55, 240.5, "NASDAQ", -350.0),
    (756733, "SPY", "SPDR S&P 500 ETF Trust", 100, 492.03, 470.0, "ARCA", 420.0),
    (653148986, "IBIT", "iShares Bitcoin Trust ETF", 300, 36.02, 32.1, "NASDAQ", 0.0),
    (22253472, "BABA", "Alibaba Group Holding Limited", 200, 75.12, 82.0, "NYSE", -180.0),
]

MOCK_CASH_BALANCE = 32150.55
MOCK_SETTLED_CASH = 30125.2
MOCK_REALIZED_PNL = 5410.25


def mock_account_info() -> dict:
    return {
        "id": "DEMO",
        "accountTitle": "Demo Portfolio",
        "accountVan": "VAN-DEMO",
        "displayName": "Demo Account",
        "accountId": settings.mock_account_id,
        "currency": "USD",
    }


def mock_positions(account_id: str) -> list[dict]:
    positions = []
    for conid, symbol, name, qty, price, avg_price, exchange, realized in MOCK_POSITIONS:
        positions.append({
            "acctId": account_id,
            "conid": conid,
            "contractDesc": symbol,
            "position": qty,
            "mktPrice": price,
            "mktValue": qty * price,
            "currency": "USD",
            "avgCost": avg_price * qty,
            "avgPrice": avg_price,
            "realizedPnl": realized,
            "unrealizedPnl": (price - avg_price) * qty,
            "listingExchange": exchange,
            "fullName": name,
        })
    return positions


def mock_ledger(account_id: str) -> dict:
    """Ledger keyed by currency, shaped like the gateway's portfolio/{acct}/ledger."""
    positions = mock_positions(account_id)
    stock_value = sum(p["mktValue"] for p in positions)
    unrealized = sum(p["unrealizedPnl"] for p in positions)

    usd = {
        "acctcode": account_id,
        "key": "USD",
        "secondkey": "BASE",
        "currency": "USD",
        "timestamp": int(time.time() * 1000),
        "netliquidationvalue": stock_value + MOCK_CASH_BALANCE,
        "cashbalance": MOCK_CASH_BALANCE,
        "settledcash": MOCK_SETTLED_CASH,
        "stockmarketvalue": stock_value,
        "unrealizedpnl": unrealized,
        "realizedpnl": MOCK_REALIZED_PNL,
        "exchangerate": 1,
        "dividends": 182.4,
        "interest": 46.12,
    }
    base = {**usd, "key": "BASE", "secondkey": "USD"}
    return {"USD": usd, "BASE": base}
