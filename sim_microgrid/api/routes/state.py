"""
Simulation state and clock endpoints.

- GET /api/state: current snapshot
- POST /api/tick: advance by an explicit or measured wall-clock delta
- POST /api/reset, POST /api/pause
- PUT /api/time, /api/time-speed, /api/weather
- GET /api/snapshots: persisted snapshot slots

Every mutating endpoint returns the resulting snapshot.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ...host import SimulationHost
from ...persistence import PersistenceService
from ...simulation.commands import ResetSimulation, SetTime, SetTimeSpeed, SetWeather, TogglePause
from ...simulation.models import SimulationState
from .. import dependencies
from ..schemas import controls as schemas
from ..schemas.snapshots import SnapshotInfo

router = APIRouter(prefix="/api", tags=["state"])


@router.get("/state", response_model=SimulationState)
def get_state(host: SimulationHost = Depends(dependencies.get_host)) -> SimulationState:
    return host.state


@router.post("/tick", response_model=SimulationState)
def tick(
    payload: schemas.TickRequest | None = None,
    host: SimulationHost = Depends(dependencies.get_host),
) -> SimulationState:
    """
    Advance the simulation by one tick.

    Without a body (or with ``wall_delta_ms: null``) the host measures the
    wall time since its previous tick, which is how a polling UI drives the
    simulation. Tests and scripted clients pass an explicit delta.

    Example:
        ```python
        # POST /api/tick
        {"wall_delta_ms": 3600000}   # one simulated hour at speed 1
        ```
    """
    if payload is None or payload.wall_delta_ms is None:
        return host.tick()
    return host.advance(payload.wall_delta_ms)


@router.post("/reset", response_model=SimulationState)
def reset(host: SimulationHost = Depends(dependencies.get_host)) -> SimulationState:
    return host.dispatch(ResetSimulation())


@router.post("/pause", response_model=SimulationState)
def toggle_pause(host: SimulationHost = Depends(dependencies.get_host)) -> SimulationState:
    return host.dispatch(TogglePause())


@router.put("/time", response_model=SimulationState)
def set_time(
    payload: schemas.TimeRequest,
    host: SimulationHost = Depends(dependencies.get_host),
) -> SimulationState:
    return host.dispatch(SetTime(payload.hours))


@router.put("/time-speed", response_model=SimulationState)
def set_time_speed(
    payload: schemas.TimeSpeedRequest,
    host: SimulationHost = Depends(dependencies.get_host),
) -> SimulationState:
    return host.dispatch(SetTimeSpeed(payload.multiplier))


@router.put("/weather", response_model=SimulationState)
def set_weather(
    payload: schemas.WeatherRequest,
    host: SimulationHost = Depends(dependencies.get_host),
) -> SimulationState:
    """Force a weather condition; the clock snaps to its canonical hour."""
    return host.dispatch(SetWeather(payload.weather))


@router.get("/snapshots", response_model=list[SnapshotInfo])
def list_snapshots(
    persistence: PersistenceService = Depends(dependencies.get_persistence_service),
) -> list[SnapshotInfo]:
    return persistence.list_snapshots()
