"""
Database persistence layer for simulation snapshots.

Snapshots are stored as JSON documents keyed by a slot name. The live
simulation writes its slot after every mutation; additional slots hold
user-saved checkpoints that can be restored later.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from .config import get_snapshot_name
from .db.models import SnapshotRecord
from .db.session import SessionLocal
from .serialization import snapshot_from_dict, snapshot_to_dict
from .simulation.models import SimulationState

logger = logging.getLogger(__name__)


class PersistenceService:
    """
    Database persistence service for simulation snapshots.

    Provides upsert, load, listing and deletion of named snapshot slots.
    All operations use transactional sessions with automatic
    commit/rollback handling.

    Attributes:
        _session_factory: SQLAlchemy session factory for creating database connections.

    Example:
        ```python
        service = PersistenceService()
        service.save_snapshot(initial_state())
        state = service.load_snapshot()          # SimulationState | None
        service.save_snapshot(state, name="before-heatwave")
        [r.name for r in service.list_snapshots()]
        ```
    """

    def __init__(self, session_factory: type[Session] | None = None) -> None:
        self._session_factory = session_factory or SessionLocal

    @contextmanager
    def session(self) -> Iterable[Session]:
        """
        Context manager providing a transactional database session.

        Commits on success, rolls back and re-raises on error, and always
        closes the session.
        """
        session: Session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def save_snapshot(self, state: SimulationState, name: str | None = None) -> SnapshotRecord:
        """
        Insert or replace the snapshot stored under ``name``.

        Args:
            state: Snapshot to persist verbatim.
            name: Slot name; defaults to ``SIM_MICROGRID_SNAPSHOT``.

        Returns:
            The stored record (detached from its session).
        """
        slot = name or get_snapshot_name()
        payload = snapshot_to_dict(state)
        with self.session() as session:
            stmt = select(SnapshotRecord).where(SnapshotRecord.name == slot)
            record = session.execute(stmt).scalar_one_or_none()
            if record is None:
                record = SnapshotRecord(name=slot, state=payload)
                session.add(record)
            else:
                record.state = payload
            record.current_time = state.current_time
            record.state_of_charge = state.battery.state_of_charge
            session.flush()
            logger.debug("Saved snapshot %r at t=%.3fh", slot, state.current_time)
            return record

    def load_snapshot(self, name: str | None = None) -> SimulationState | None:
        """
        Load the snapshot stored under ``name``.

        Returns:
            The rebuilt snapshot, or ``None`` when the slot does not exist.

        Raises:
            pydantic.ValidationError: If the stored payload is not a valid snapshot.
        """
        slot = name or get_snapshot_name()
        with self.session() as session:
            stmt = select(SnapshotRecord).where(SnapshotRecord.name == slot)
            record = session.execute(stmt).scalar_one_or_none()
            if record is None:
                return None
            return snapshot_from_dict(record.state)

    def list_snapshots(self) -> list[SnapshotRecord]:
        """Return every stored slot ordered by name."""
        with self.session() as session:
            stmt = select(SnapshotRecord).order_by(SnapshotRecord.name)
            return list(session.execute(stmt).scalars().all())

    def delete_snapshot(self, name: str) -> bool:
        """Delete a slot; returns False when it did not exist."""
        with self.session() as session:
            stmt = select(SnapshotRecord).where(SnapshotRecord.name == name)
            record = session.execute(stmt).scalar_one_or_none()
            if record is None:
                return False
            session.delete(record)
            logger.info("Deleted snapshot %r", name)
            return True
