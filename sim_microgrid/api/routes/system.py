from __future__ import annotations

from fastapi import APIRouter, Depends

from ...host import SimulationHost
from ...simulation.commands import SetSystemVoltage, SetWireGauge
from ...simulation.models import SimulationState
from .. import dependencies
from ..schemas import controls as schemas

router = APIRouter(prefix="/api/system", tags=["system"])


@router.put("/voltage", response_model=SimulationState)
def set_voltage(
    payload: schemas.VoltageRequest,
    host: SimulationHost = Depends(dependencies.get_host),
) -> SimulationState:
    return host.dispatch(SetSystemVoltage(payload.voltage))


@router.put("/wire-gauge", response_model=SimulationState)
def set_wire_gauge(
    payload: schemas.WireGaugeRequest,
    host: SimulationHost = Depends(dependencies.get_host),
) -> SimulationState:
    return host.dispatch(SetWireGauge(payload.wire_gauge))
