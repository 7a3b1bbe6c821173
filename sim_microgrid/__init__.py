from .simulation.commands import Command
from .simulation.engine import apply_command, initial_state, tick
from .simulation.models import (
    Appliance,
    ApplianceType,
    BatteryBank,
    BatterySize,
    IndividualBattery,
    SimulationState,
    Weather,
    WireGauge,
)
from .serialization import snapshot_from_dict, snapshot_to_dict
from .reporting import generate_report, trace_frame

__all__ = [
    "Appliance",
    "ApplianceType",
    "BatteryBank",
    "BatterySize",
    "IndividualBattery",
    "SimulationState",
    "Weather",
    "WireGauge",
    "Command",
    "initial_state",
    "tick",
    "apply_command",
    "snapshot_to_dict",
    "snapshot_from_dict",
    "trace_frame",
    "generate_report",
]
