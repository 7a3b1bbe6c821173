from __future__ import annotations

import pytest
from pathlib import Path
import sys

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sim_microgrid.db.session import Base  # noqa: E402
from sim_microgrid.persistence import PersistenceService  # noqa: E402
from sim_microgrid.simulation.engine import initial_state  # noqa: E402


@pytest.fixture()
def sqlite_session_factory():
    """Provide a session factory bound to an in-memory SQLite database."""
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    Session = sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )
    yield Session
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def persistence(sqlite_session_factory):
    """Provide a PersistenceService bound to the temporary SQLite DB."""
    return PersistenceService(session_factory=sqlite_session_factory)


@pytest.fixture()
def state():
    """Fresh startup snapshot."""
    return initial_state()


class FakeClock:
    """Manually advanced millisecond clock for host tests."""

    def __init__(self, start_ms: float = 0.0) -> None:
        self.now_ms = start_ms

    def advance(self, delta_ms: float) -> None:
        self.now_ms += delta_ms

    def __call__(self) -> float:
        return self.now_ms


@pytest.fixture()
def fake_clock() -> FakeClock:
    return FakeClock()
