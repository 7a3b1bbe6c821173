"""
Engine and session factory for the snapshot store.

The live host rewrites its slot on every tick, so SQLite connections run in
WAL mode with relaxed syncing to keep those small writes cheap.
"""

from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from ..config import get_database_url

DATABASE_URL = get_database_url()


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _sqlite_pragmas(dbapi_connection, connection_record) -> None:  # noqa: ARG001
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL;")
    cursor.execute("PRAGMA synchronous=NORMAL;")
    cursor.close()


def build_engine(url: str = DATABASE_URL) -> Engine:
    """
    Create an engine for ``url``.

    SQLite engines allow cross-thread use (FastAPI runs sync routes in a
    thread pool) and get WAL pragmas on every new connection.
    """
    if not _is_sqlite(url):
        return create_engine(url, pool_pre_ping=True)
    sqlite_engine = create_engine(url, connect_args={"check_same_thread": False})
    event.listen(sqlite_engine, "connect", _sqlite_pragmas)
    return sqlite_engine


engine = build_engine()

SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

Base = declarative_base()


def init_db(bind: Engine | None = None) -> None:
    """Create the snapshot table on ``bind`` (default engine) when missing."""
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
