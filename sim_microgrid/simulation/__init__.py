"""
Core microgrid simulation models.

This package collects every component of the tick-driven engine:

* Leaf models: clock/weather, solar generation, battery bank, dispatch,
  losses and cumulative statistics.
* Immutable snapshot value types (`models`) and command values
  (`commands`).
* The pure reducer (`engine`) that composes them into one tick and
  implements the control surface.

Higher layers (`host`, FastAPI routes, CLI) import from this namespace only.
"""

from __future__ import annotations

from .balancer import DispatchResult, dispatch
from .battery import aggregate, charge_step, soc_after_step
from .clock import advance_clock, ambient_temperature, weather_from_time
from .commands import (
    AddBattery,
    ChangeBatterySize,
    Command,
    RemoveBattery,
    ResetSimulation,
    SetBatteryConfig,
    SetIrradianceOverride,
    SetMinMaxSoC,
    SetSolarEfficiency,
    SetSolarPanelAngle,
    SetSolarPanelCount,
    SetSolarPanelPower,
    SetSystemVoltage,
    SetTime,
    SetTimeSpeed,
    SetWeather,
    SetWireGauge,
    Tick,
    ToggleAppliance,
    TogglePause,
)
from .engine import apply_command, initial_state, tick
from .losses import compute_losses
from .models import (
    Appliance,
    ApplianceType,
    BatteryBank,
    BatterySize,
    GridLink,
    IndividualBattery,
    LossBreakdown,
    PowerConsumption,
    SimulationState,
    SolarArray,
    StatisticsSnapshot,
    SystemConfig,
    Weather,
    WireGauge,
)
from .solar import solar_power, sun_intensity

__all__ = [
    # Snapshot types
    "Appliance",
    "ApplianceType",
    "BatteryBank",
    "BatterySize",
    "GridLink",
    "IndividualBattery",
    "LossBreakdown",
    "PowerConsumption",
    "SimulationState",
    "SolarArray",
    "StatisticsSnapshot",
    "SystemConfig",
    "Weather",
    "WireGauge",
    # Component models
    "advance_clock",
    "ambient_temperature",
    "weather_from_time",
    "sun_intensity",
    "solar_power",
    "aggregate",
    "charge_step",
    "soc_after_step",
    "DispatchResult",
    "dispatch",
    "compute_losses",
    # Reducer
    "initial_state",
    "tick",
    "apply_command",
    # Commands
    "Command",
    "Tick",
    "ToggleAppliance",
    "SetTime",
    "SetTimeSpeed",
    "TogglePause",
    "SetWeather",
    "ResetSimulation",
    "SetSolarPanelCount",
    "SetSolarPanelPower",
    "SetSolarPanelAngle",
    "SetSolarEfficiency",
    "SetIrradianceOverride",
    "AddBattery",
    "RemoveBattery",
    "ChangeBatterySize",
    "SetBatteryConfig",
    "SetMinMaxSoC",
    "SetSystemVoltage",
    "SetWireGauge",
]
