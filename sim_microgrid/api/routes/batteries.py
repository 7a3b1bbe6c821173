"""
Battery bank configuration endpoints.

Structural requests outside the allowed range (adding a 13th unit, removing
the last one, unknown ids) are no-ops and return the unchanged snapshot
with HTTP 200.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ...host import SimulationHost
from ...simulation.commands import (
    AddBattery,
    ChangeBatterySize,
    RemoveBattery,
    SetBatteryConfig,
    SetMinMaxSoC,
)
from ...simulation.models import SimulationState
from .. import dependencies
from ..schemas import controls as schemas

router = APIRouter(prefix="/api/batteries", tags=["batteries"])


@router.post("", response_model=SimulationState)
def add_battery(
    payload: schemas.BatteryAddRequest,
    host: SimulationHost = Depends(dependencies.get_host),
) -> SimulationState:
    """Add one unit; it joins at the bank's current SoC."""
    return host.dispatch(AddBattery(payload.size))


@router.put("/config", response_model=SimulationState)
def set_battery_config(
    payload: schemas.BatteryConfigRequest,
    host: SimulationHost = Depends(dependencies.get_host),
) -> SimulationState:
    return host.dispatch(SetBatteryConfig(size=payload.size, count=payload.count))


@router.put("/soc-limits", response_model=SimulationState)
def set_soc_limits(
    payload: schemas.SocLimitsRequest,
    host: SimulationHost = Depends(dependencies.get_host),
) -> SimulationState:
    return host.dispatch(SetMinMaxSoC(min_soc=payload.min_soc, max_soc=payload.max_soc))


@router.delete("/{battery_id}", response_model=SimulationState)
def remove_battery(
    battery_id: str,
    host: SimulationHost = Depends(dependencies.get_host),
) -> SimulationState:
    return host.dispatch(RemoveBattery(battery_id))


@router.put("/{battery_id}/size", response_model=SimulationState)
def change_battery_size(
    battery_id: str,
    payload: schemas.BatterySizeRequest,
    host: SimulationHost = Depends(dependencies.get_host),
) -> SimulationState:
    """Swap one unit's preset, keeping its SoC percentage."""
    return host.dispatch(ChangeBatterySize(battery_id=battery_id, size=payload.size))
