from __future__ import annotations

from fastapi import APIRouter, Depends

from ...host import SimulationHost
from ...simulation.commands import ToggleAppliance
from ...simulation.models import SimulationState
from .. import dependencies

router = APIRouter(prefix="/api", tags=["appliances"])


@router.post("/appliances/{appliance_id}/toggle", response_model=SimulationState)
def toggle_appliance(
    appliance_id: str,
    host: SimulationHost = Depends(dependencies.get_host),
) -> SimulationState:
    """
    Switch an appliance on or off.

    Unknown ids and always-on appliances (the refrigerator) leave the
    snapshot unchanged; the call still succeeds.
    """
    return host.dispatch(ToggleAppliance(appliance_id))
