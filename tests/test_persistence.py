from __future__ import annotations

import pytest
from pydantic import ValidationError

from sim_microgrid.db.models import SnapshotRecord
from sim_microgrid.persistence import PersistenceService
from sim_microgrid.simulation import engine
from sim_microgrid.simulation.models import BatterySize


def test_save_and_load_snapshot(persistence: PersistenceService, state):
    """Verify a snapshot survives a database round trip unchanged."""
    state = engine.add_battery(engine.tick(state, 600_000), BatterySize.LARGE)
    record = persistence.save_snapshot(state, "unit")

    assert record.id is not None
    assert record.current_time == pytest.approx(state.current_time)
    assert record.state_of_charge == pytest.approx(state.battery.state_of_charge)
    assert persistence.load_snapshot("unit") == state


def test_save_snapshot_upserts_by_name(persistence: PersistenceService, state):
    persistence.save_snapshot(state, "unit")
    later = engine.set_time(state, 18.5)
    persistence.save_snapshot(later, "unit")

    records = persistence.list_snapshots()
    assert [r.name for r in records] == ["unit"]
    assert persistence.load_snapshot("unit").current_time == 18.5


def test_default_slot_name_comes_from_env(persistence: PersistenceService, state, monkeypatch):
    monkeypatch.setenv("SIM_MICROGRID_SNAPSHOT", "lab")
    persistence.save_snapshot(state)
    assert persistence.load_snapshot("lab") == state
    assert persistence.load_snapshot() == state


def test_missing_snapshot_returns_none(persistence: PersistenceService):
    assert persistence.load_snapshot("nope") is None


def test_list_and_delete_snapshots(persistence: PersistenceService, state):
    persistence.save_snapshot(state, "b")
    persistence.save_snapshot(state, "a")
    assert [r.name for r in persistence.list_snapshots()] == ["a", "b"]

    assert persistence.delete_snapshot("a") is True
    assert persistence.delete_snapshot("a") is False
    assert [r.name for r in persistence.list_snapshots()] == ["b"]


def test_invalid_payload_raises_validation_error(persistence: PersistenceService):
    with persistence.session() as session:
        session.add(SnapshotRecord(name="broken", state={"current_time": "noon"}))

    with pytest.raises(ValidationError):
        persistence.load_snapshot("broken")


def test_session_rolls_back_on_error(persistence: PersistenceService, state):
    with pytest.raises(RuntimeError):
        with persistence.session() as session:
            session.add(SnapshotRecord(name="ghost", state={}))
            session.flush()
            raise RuntimeError("boom")

    assert persistence.list_snapshots() == []


def test_file_database_uses_wal_journal(tmp_path, state):
    """Verify a file-backed store is created in WAL mode and accepts snapshots."""
    from sqlalchemy.orm import sessionmaker

    from sim_microgrid.db.session import build_engine, init_db

    db_engine = build_engine(f"sqlite+pysqlite:///{tmp_path / 'snapshots.db'}")
    init_db(db_engine)
    service = PersistenceService(session_factory=sessionmaker(bind=db_engine, expire_on_commit=False))
    service.save_snapshot(state, "file")

    with db_engine.connect() as conn:
        assert conn.exec_driver_sql("PRAGMA journal_mode").scalar() == "wal"
    assert service.load_snapshot("file") == state
    db_engine.dispose()
