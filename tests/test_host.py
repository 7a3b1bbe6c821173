from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

import pytest

from sim_microgrid.db.models import SnapshotRecord
from sim_microgrid.host import SimulationHost
from sim_microgrid.persistence import PersistenceService
from sim_microgrid.simulation import engine
from sim_microgrid.simulation.commands import (
    ResetSimulation,
    SetTime,
    SetTimeSpeed,
    ToggleAppliance,
    TogglePause,
)
from sim_microgrid.simulation.constants import MS_PER_HOUR


def test_tick_uses_wall_clock_deltas(fake_clock):
    host = SimulationHost(clock=fake_clock)

    assert host.tick().current_time == 12.0
    fake_clock.advance(MS_PER_HOUR)
    assert host.tick().current_time == pytest.approx(13.0)
    fake_clock.advance(MS_PER_HOUR / 2)
    assert host.tick().current_time == pytest.approx(13.5)


def test_clock_reset_commands_restart_wall_reference(fake_clock):
    host = SimulationHost(clock=fake_clock)
    host.tick()

    fake_clock.advance(5 * MS_PER_HOUR)
    host.dispatch(SetTime(6.0))
    assert host.tick().current_time == 6.0

    fake_clock.advance(MS_PER_HOUR)
    assert host.tick().current_time == pytest.approx(7.0)

    host.dispatch(TogglePause())
    fake_clock.advance(MS_PER_HOUR)
    assert host.tick().current_time == pytest.approx(7.0)
    host.dispatch(TogglePause())
    fake_clock.advance(3 * MS_PER_HOUR)
    assert host.tick().current_time == pytest.approx(7.0)


def test_explicit_tick_time(fake_clock):
    host = SimulationHost(clock=fake_clock)
    host.tick(now_ms=1_000.0)
    assert host.tick(now_ms=1_000.0 + MS_PER_HOUR).current_time == pytest.approx(13.0)


def test_mutations_are_persisted(persistence: PersistenceService):
    host = SimulationHost(persistence=persistence, snapshot_name="live")
    host.dispatch(ToggleAppliance("tv"))
    host.advance(600_000)

    assert persistence.load_snapshot("live") == host.state


def test_noop_commands_are_not_persisted(persistence: PersistenceService):
    host = SimulationHost(persistence=persistence, snapshot_name="live")
    host.dispatch(ToggleAppliance("refrigerator"))
    assert persistence.list_snapshots() == []


def test_restore_loads_stored_snapshot(persistence: PersistenceService, state):
    stored = engine.set_time(engine.toggle_appliance(state, "heater"), 7.0)
    persistence.save_snapshot(stored, "live")

    host = SimulationHost(persistence=persistence, snapshot_name="live")
    assert host.restore() == stored
    assert host.state == stored


def test_restore_without_stored_snapshot_keeps_state(persistence: PersistenceService, state):
    host = SimulationHost(state=engine.set_time(state, 3.0), persistence=persistence, snapshot_name="empty")
    assert host.restore().current_time == 3.0


def test_restore_falls_back_on_invalid_payload(persistence: PersistenceService, state, caplog):
    with persistence.session() as session:
        session.add(SnapshotRecord(name="broken", state={"weather": "tornado"}))

    host = SimulationHost(state=engine.set_time(state, 3.0), persistence=persistence, snapshot_name="broken")
    with caplog.at_level(logging.WARNING, logger="sim_microgrid.host"):
        restored = host.restore()

    assert restored == engine.initial_state()
    assert "invalid" in caplog.text


def test_run_covers_requested_duration(persistence: PersistenceService):
    host = SimulationHost(persistence=persistence, snapshot_name="run")
    snapshots = host.run(2.0, step_ms=60_000)

    assert len(snapshots) == 121
    assert snapshots[0] == engine.initial_state()
    assert snapshots[-1].current_time == pytest.approx(14.0)
    assert persistence.load_snapshot("run") == host.state


def test_run_with_partial_last_step_and_speed():
    host = SimulationHost()
    host.dispatch(SetTimeSpeed(60.0))
    snapshots = host.run(1.5, step_ms=60_000)  # one simulated hour per tick

    assert len(snapshots) == 3
    assert snapshots[-1].current_time == pytest.approx(13.5)


def test_run_rejects_paused_simulation():
    host = SimulationHost()
    host.dispatch(TogglePause())
    with pytest.raises(ValueError):
        host.run(1.0)
    with pytest.raises(ValueError):
        SimulationHost().run(1.0, step_ms=0)


def test_reset_command_restores_initial_state():
    host = SimulationHost()
    host.dispatch(ToggleAppliance("ac"))
    host.advance(MS_PER_HOUR)
    assert host.dispatch(ResetSimulation()) == engine.initial_state()


def test_concurrent_advances_are_not_lost():
    """Verify ticks issued from many threads all land on the shared snapshot."""
    host = SimulationHost()

    def worker(_):
        for _ in range(50):
            host.advance(MS_PER_HOUR / 100)

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(worker, range(8)))

    assert host.state.current_time == pytest.approx(16.0)
