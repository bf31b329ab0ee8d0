"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from portfolio_service.config import settings
from portfolio_service.services.equity_history import EquityHistoryStore
from portfolio_service.services.ibkr_client import IBKRClient
from portfolio_service.utils.logging import setup_logging
from portfolio_service.api import portfolio, dashboard, system


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    setup_logging()
    # A store that cannot be opened aborts startup
    store = EquityHistoryStore.open(settings.db_path)
    client = IBKRClient(
        base_url=settings.ibkr_gateway_url,
        verify_ssl=settings.ibkr_verify_ssl,
        timeout=settings.ibkr_timeout_seconds,
        mock_mode=settings.mock,
    )
    app.state.store = store
    app.state.ibkr_client = client

    from portfolio_service.engine.scheduler import start_scheduler, stop_scheduler
    if settings.poll_accounts:
        start_scheduler(client, store, settings.poll_accounts, settings.poll_interval_seconds)

    yield

    stop_scheduler()
    await client.close()
    store.close()


app = FastAPI(
    title="Portfolio Service",
    description="IBKR portfolio dashboard backend with equity history",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount routers
app.include_router(portfolio.router)
app.include_router(dashboard.router)
app.include_router(system.router)


def mount_frontend(app: FastAPI, dist: Path):
    """Serve the built SPA from dist/. Register after all API routers."""
    dist = dist.resolve()
    if (dist / "assets").is_dir():
        app.mount("/assets", StaticFiles(directory=str(dist / "assets")), name="static-assets")

    @app.get("/{path:path}")
    async def serve_spa(path: str):
        if path.startswith("api/"):
            raise HTTPException(status_code=404, detail="Not found")
        file = (dist / path).resolve()
        # Anything resolving outside dist/ falls through to the SPA shell
        if file.is_relative_to(dist) and file.is_file():
            return FileResponse(str(file))
        return FileResponse(str(dist / "index.html"))


_frontend_dist = Path(__file__).resolve().parent.parent / "dist"
if _frontend_dist.exists():
    mount_frontend(app, _frontend_dist)
