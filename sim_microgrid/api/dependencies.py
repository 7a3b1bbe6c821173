from __future__ import annotations

from functools import lru_cache

from ..db.session import init_db
from ..host import SimulationHost
from ..persistence import PersistenceService


@lru_cache()
def get_persistence_service() -> PersistenceService:
    """
    Provide a cached PersistenceService instance for API routes.
    """
    init_db()
    return PersistenceService()


@lru_cache()
def get_host() -> SimulationHost:
    """
    Provide the process-wide SimulationHost, restored from the database.

    All routes share this host; it persists every mutation under the
    configured snapshot name.
    """
    host = SimulationHost(persistence=get_persistence_service())
    host.restore()
    return host
