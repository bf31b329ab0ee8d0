"""Application configuration via environment variables."""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ":memory:" keeps everything in-process; empty means data/ibkr-portfolio.sqlite under cwd
    db_path: str = ""
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:5173"]  # Vite dev server

    # Brokerage (Client Portal gateway, already authenticated)
    ibkr_gateway_url: str = "https://localhost:5000/v1/api"
    ibkr_verify_ssl: bool = False
    ibkr_timeout_seconds: float = 15.0
    mock: bool = False
    mock_account_id: str = Field(
        default="U00000000",
        validation_alias=AliasChoices("PORTFOLIO_MOCK_ACCOUNT_ID", "MOCK_ACCOUNT_ID"),
    )

    default_account_id: str = "U13825171"
    ledger_currency: str = "USD"

    # Ledger poller
    poll_accounts: list[str] = []
    poll_interval_seconds: int = 60

    model_config = {"env_prefix": "PORTFOLIO_", "env_file": ".env"}


settings = Settings()
