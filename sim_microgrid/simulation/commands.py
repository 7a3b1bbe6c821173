"""
Command values accepted by the reducer.

Each operation of the command surface has one frozen dataclass; the tick
signal is a command like any other. :func:`sim_microgrid.simulation.engine.apply_command`
maps them onto the engine functions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from .models import BatterySize, Weather, WireGauge


@dataclass(frozen=True)
class Tick:
    wall_delta_ms: float


@dataclass(frozen=True)
class ToggleAppliance:
    appliance_id: str


@dataclass(frozen=True)
class SetTime:
    hours: float


@dataclass(frozen=True)
class SetTimeSpeed:
    multiplier: float


@dataclass(frozen=True)
class TogglePause:
    pass


@dataclass(frozen=True)
class SetWeather:
    weather: Weather


@dataclass(frozen=True)
class ResetSimulation:
    pass


@dataclass(frozen=True)
class SetSolarPanelCount:
    count: int


@dataclass(frozen=True)
class SetSolarPanelPower:
    watts_per_panel: float


@dataclass(frozen=True)
class SetSolarPanelAngle:
    degrees: float


@dataclass(frozen=True)
class SetSolarEfficiency:
    efficiency: float


@dataclass(frozen=True)
class SetIrradianceOverride:
    irradiance_w_m2: Optional[float] = None


@dataclass(frozen=True)
class AddBattery:
    size: BatterySize


@dataclass(frozen=True)
class RemoveBattery:
    battery_id: str


@dataclass(frozen=True)
class ChangeBatterySize:
    battery_id: str
    size: BatterySize


@dataclass(frozen=True)
class SetBatteryConfig:
    size: BatterySize
    count: int


@dataclass(frozen=True)
class SetMinMaxSoC:
    min_soc: float
    max_soc: float


@dataclass(frozen=True)
class SetSystemVoltage:
    voltage: float


@dataclass(frozen=True)
class SetWireGauge:
    wire_gauge: WireGauge


Command = Union[
    Tick,
    ToggleAppliance,
    SetTime,
    SetTimeSpeed,
    TogglePause,
    SetWeather,
    ResetSimulation,
    SetSolarPanelCount,
    SetSolarPanelPower,
    SetSolarPanelAngle,
    SetSolarEfficiency,
    SetIrradianceOverride,
    AddBattery,
    RemoveBattery,
    ChangeBatterySize,
    SetBatteryConfig,
    SetMinMaxSoC,
    SetSystemVoltage,
    SetWireGauge,
]

# Commands after which the host must reset its wall-clock reference.
CLOCK_RESET_COMMANDS = (SetTime, TogglePause, ResetSimulation)
