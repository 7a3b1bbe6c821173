"""
Solar array configuration endpoints.

Changes take effect on the next tick; ``current_power`` is not recomputed
by the configuration call itself.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ...host import SimulationHost
from ...simulation.commands import (
    SetIrradianceOverride,
    SetSolarEfficiency,
    SetSolarPanelAngle,
    SetSolarPanelCount,
    SetSolarPanelPower,
)
from ...simulation.models import SimulationState
from .. import dependencies
from ..schemas import controls as schemas

router = APIRouter(prefix="/api/solar", tags=["solar"])


@router.put("/panel-count", response_model=SimulationState)
def set_panel_count(
    payload: schemas.PanelCountRequest,
    host: SimulationHost = Depends(dependencies.get_host),
) -> SimulationState:
    return host.dispatch(SetSolarPanelCount(payload.count))


@router.put("/panel-power", response_model=SimulationState)
def set_panel_power(
    payload: schemas.PanelPowerRequest,
    host: SimulationHost = Depends(dependencies.get_host),
) -> SimulationState:
    return host.dispatch(SetSolarPanelPower(payload.watts_per_panel))


@router.put("/angle", response_model=SimulationState)
def set_panel_angle(
    payload: schemas.PanelAngleRequest,
    host: SimulationHost = Depends(dependencies.get_host),
) -> SimulationState:
    return host.dispatch(SetSolarPanelAngle(payload.degrees))


@router.put("/efficiency", response_model=SimulationState)
def set_efficiency(
    payload: schemas.SolarEfficiencyRequest,
    host: SimulationHost = Depends(dependencies.get_host),
) -> SimulationState:
    return host.dispatch(SetSolarEfficiency(payload.efficiency))


@router.put("/irradiance", response_model=SimulationState)
def set_irradiance(
    payload: schemas.IrradianceRequest,
    host: SimulationHost = Depends(dependencies.get_host),
) -> SimulationState:
    """
    Override the sun intensity with a fixed irradiance.

    Example:
        ```python
        # PUT /api/solar/irradiance
        {"irradiance_w_m2": 800}    # intensity 0.8 at any hour
        {"irradiance_w_m2": null}   # back to the time-of-day curve
        ```
    """
    return host.dispatch(SetIrradianceOverride(payload.irradiance_w_m2))
