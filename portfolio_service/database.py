"""SQLModel engine setup for the SQLite equity store."""

import logging
from pathlib import Path

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from portfolio_service.config import settings
from portfolio_service.utils.constants import DEFAULT_DB_FILE, MEMORY_DB

logger = logging.getLogger(__name__)


def resolve_db_path(db_path: str | None = None) -> str:
    """Resolve the store location: explicit arg, then settings, then the default file."""
    raw = db_path if db_path is not None else settings.db_path
    if raw == MEMORY_DB:
        return raw
    if raw:
        return str(Path(raw).resolve())
    return str(Path.cwd() / DEFAULT_DB_FILE)


def _set_sqlite_pragmas(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    try:
        # WAL is meaningless for in-memory databases; sqlite just reports "memory"
        cursor.execute("PRAGMA journal_mode = WAL")
        cursor.execute("PRAGMA synchronous = NORMAL")
        cursor.execute("PRAGMA foreign_keys = ON")
    finally:
        cursor.close()


def create_db_engine(db_path: str | None = None) -> Engine:
    """Open the SQLite engine. Failures here are fatal for the caller."""
    path = resolve_db_path(db_path)

    if path == MEMORY_DB:
        # One shared connection, otherwise every session sees an empty database
        engine = create_engine(
            "sqlite://",
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(
            f"sqlite:///{path}",
            echo=False,
            connect_args={"check_same_thread": False},
        )

    event.listen(engine, "connect", _set_sqlite_pragmas)
    logger.info(f"Opened equity store at {path}")
    return engine


def create_db_and_tables(engine: Engine):
    """Create all tables and indexes if missing."""
    import portfolio_service.models  # noqa: F401  registers table metadata

    SQLModel.metadata.create_all(engine)
