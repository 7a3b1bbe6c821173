"""
Immutable value types that make up a simulation snapshot.

Every type is a frozen dataclass and every collection a tuple, so a snapshot
can be shared freely between the engine, the host and the HTTP layer. New
snapshots are derived with :func:`dataclasses.replace`; nothing is mutated in
place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class Weather(str, Enum):
    """Weather condition driving the solar model."""

    SUNNY = "sunny"
    CLOUDY = "cloudy"
    NIGHT = "night"


class BatterySize(str, Enum):
    """Battery unit preset (see ``constants.BATTERY_PRESETS``)."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class ApplianceType(str, Enum):
    LIGHT = "light"
    REFRIGERATOR = "refrigerator"
    AC = "ac"
    TV = "tv"
    COMPUTER = "computer"
    WASHER = "washer"
    HEATER = "heater"
    DISHWASHER = "dishwasher"
    ELECTRIC_CAR = "electric_car"


class WireGauge(str, Enum):
    AWG10 = "10AWG"
    AWG8 = "8AWG"
    AWG6 = "6AWG"


@dataclass(frozen=True)
class SolarArray:
    """
    Rooftop PV array configuration and output.

    Attributes:
        panel_count: Number of installed panels.
        power_per_panel: Nameplate rating of one panel (W).
        max_power: Array rating, ``panel_count * power_per_panel / 1000`` (kW).
        area: Module surface of the array (m²), from the rating at standard
            test conditions and a typical module efficiency.
        efficiency: System derate factor (0-1) applied to the nameplate rating.
        panel_angle: Fixed tilt angle (degrees, 0-90).
        irradiance_override: Manual irradiance (W/m²) or None for the
            time-of-day curve.
        current_power: Instantaneous generation (kW), before temperature
            derating.
        total_generated: Cumulative generation (kWh), monotonic.
    """

    panel_count: int
    power_per_panel: float
    max_power: float
    area: float
    efficiency: float
    panel_angle: float
    irradiance_override: Optional[float] = None
    current_power: float = 0.0
    total_generated: float = 0.0


@dataclass(frozen=True)
class IndividualBattery:
    id: str
    size: BatterySize
    capacity: float
    internal_resistance: float
    max_c_rate: float
    current_charge: float
    state_of_charge: float


@dataclass(frozen=True)
class BatteryBank:
    """
    Aggregate view of the battery units.

    All fields except ``min_soc``/``max_soc`` and the efficiencies are
    derived from the unit tuple and the last dispatched flow; they are
    recomputed by :func:`sim_microgrid.simulation.battery.aggregate`.

    Attributes:
        capacity: Total capacity, sum of unit capacities (kWh).
        current_charge: Total stored energy (kWh).
        state_of_charge: Aggregate SoC (%), ``current_charge / capacity * 100``.
        internal_resistance: Parallel combination of unit resistances (ohm).
        min_soc: Lower SoC bound enforced on every tick (%).
        max_soc: Upper SoC bound enforced on every tick (%).
        charging: True while the last tick charged the bank.
        charging_rate: Magnitude of the last battery flow (kW).
        max_charge_rate: Sum of ``capacity * max_c_rate`` over units (kW).
        available_charge_rate: Charge power currently accepted (kW), 0 at max_soc.
        available_discharge_rate: Discharge power currently available (kW),
            0 at min_soc.
        depth_of_discharge: ``100 - state_of_charge`` (%).
        c_rate: ``charging_rate / capacity``.
    """

    capacity: float
    current_charge: float
    state_of_charge: float
    internal_resistance: float
    min_soc: float
    max_soc: float
    charge_efficiency: float
    discharge_efficiency: float
    max_charge_rate: float
    available_charge_rate: float
    available_discharge_rate: float
    depth_of_discharge: float
    charging: bool = False
    charging_rate: float = 0.0
    c_rate: float = 0.0


@dataclass(frozen=True)
class Appliance:
    id: str
    name: str
    type: ApplianceType
    power_rating: float
    is_on: bool
    always_on: bool = False


@dataclass(frozen=True)
class PowerConsumption:
    total_power: float
    total_consumed: float
    appliances: Tuple[Appliance, ...]


@dataclass(frozen=True)
class GridLink:
    """Grid interconnection; ``current_flow`` is +import / -export (kW)."""

    importing: bool
    exporting: bool
    current_flow: float
    total_imported: float
    total_exported: float
    import_rate: float
    export_rate: float


@dataclass(frozen=True)
class WireLosses:
    solar_to_battery: float = 0.0
    battery_to_house: float = 0.0
    grid_to_house: float = 0.0
    total: float = 0.0


@dataclass(frozen=True)
class BatteryLosses:
    charging: float = 0.0
    discharging: float = 0.0
    resistive: float = 0.0


@dataclass(frozen=True)
class TemperatureLosses:
    solar: float = 0.0
    # Battery temperature effects act through the derated charge efficiency.
    battery: float = 0.0


@dataclass(frozen=True)
class LossBreakdown:
    wire_losses: WireLosses = field(default_factory=WireLosses)
    inverter_loss: float = 0.0
    battery_losses: BatteryLosses = field(default_factory=BatteryLosses)
    temperature_losses: TemperatureLosses = field(default_factory=TemperatureLosses)
    total_losses: float = 0.0


@dataclass(frozen=True)
class SystemConfig:
    """
    Electrical configuration plus system-level observables.

    Attributes:
        voltage: DC bus voltage (V).
        wire_gauge: Conductor gauge for every segment.
        total_efficiency: Share of the power entering the house system
            (solar, grid import, battery discharge) not lost on the way (%).
        energy_balance: Power balance error ``in - out - stored`` (kW).
            Dispatch ignores losses, so its magnitude stays within
            ``LossBreakdown.total_losses``.
    """

    voltage: float
    wire_gauge: WireGauge
    total_efficiency: float = 0.0
    energy_balance: float = 0.0


@dataclass(frozen=True)
class StatisticsSnapshot:
    net_energy: float = 0.0
    cost_savings: float = 0.0
    co2_saved: float = 0.0
    efficiency: float = 0.0


@dataclass(frozen=True)
class SimulationState:
    """
    Complete, immutable simulation snapshot.

    The clock is flattened onto the snapshot (``current_time``,
    ``time_speed``, ``is_paused``, ``is_manual_weather_control``). The
    wall-clock reference used to compute tick deltas is deliberately absent:
    it belongs to the host adapter and is never persisted.
    """

    current_time: float
    time_speed: float
    weather: Weather
    is_paused: bool
    is_manual_weather_control: bool
    ambient_temperature: float
    solar: SolarArray
    batteries: Tuple[IndividualBattery, ...]
    battery: BatteryBank
    consumption: PowerConsumption
    grid: GridLink
    losses: LossBreakdown
    statistics: StatisticsSnapshot
    system: SystemConfig
