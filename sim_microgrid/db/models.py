"""
SQLAlchemy database models for simulation snapshot persistence.

The engine state is stored as one JSON document per named slot. The host
upserts its slot after every mutation and reads it back at startup.
"""

from __future__ import annotations

from sqlalchemy import JSON, Column, DateTime, Float, Integer, String, func

from .session import Base


class TimestampMixin:
    """
    Mixin adding automatic created_at and updated_at timestamps.

    Notes:
        - Timestamps managed by database (server_default, onupdate)
        - created_at immutable after insert
        - updated_at changes on every UPDATE
    """
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class SnapshotRecord(Base, TimestampMixin):
    """
    Persisted simulation snapshot.

    Attributes:
        id: Primary key (auto-increment).
        name: Unique slot name (e.g. "default" for the live simulation,
            or a user-chosen label for a saved checkpoint).
        current_time: Simulated time of day, copied out for listings.
        state_of_charge: Aggregate battery SoC, copied out for listings.
        state: Complete snapshot as produced by
            :func:`sim_microgrid.serialization.snapshot_to_dict`.

    Example:
        ```python
        record = SnapshotRecord(
            name="default",
            current_time=12.0,
            state_of_charge=50.0,
            state=snapshot_to_dict(initial_state()),
        )
        ```
    """
    __tablename__ = "simulation_snapshots"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), unique=True, nullable=False)
    current_time = Column(Float, nullable=True)
    state_of_charge = Column(Float, nullable=True)
    state = Column(JSON, nullable=False)
