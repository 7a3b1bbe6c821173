"""
Pure simulation reducer.

``(previous snapshot, command) -> new snapshot``. The module holds no state:
:func:`tick` advances the simulation by a wall-clock delta and every other
public function implements one command of the control surface. Functions
return the unchanged snapshot object when a command is a no-op, so callers
can detect "nothing happened" with an identity check.

One tick runs, in order: clock -> weather -> temperature -> solar ->
consumption -> dispatch -> battery integration -> grid -> losses ->
cumulative counters -> statistics.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Dict, Iterable, Optional

from . import battery as bank_ops
from . import solar as solar_ops
from .balancer import dispatch
from .clock import advance_clock, ambient_temperature, canonical_hour, resolve_weather, weather_from_time
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
from .constants import (
    APPLIANCE_POWER,
    BATTERY_CHARGE_EFFICIENCY,
    BATTERY_DISCHARGE_EFFICIENCY,
    DEFAULT_MAX_SOC,
    DEFAULT_MIN_SOC,
    DEFAULT_VOLTAGE,
    DEFAULT_WIRE_GAUGE,
    GRID_EXPORT_RATE,
    GRID_IMPORT_RATE,
    INITIAL_APPLIANCES,
    INITIAL_BATTERY_SIZE,
    INITIAL_PANEL_ANGLE,
    INITIAL_PANEL_COUNT,
    INITIAL_POWER_PER_PANEL_W,
    INITIAL_SOC,
    INITIAL_SOLAR_EFFICIENCY,
    INITIAL_TIME,
)
from .losses import compute_losses
from .models import (
    Appliance,
    ApplianceType,
    BatterySize,
    GridLink,
    LossBreakdown,
    PowerConsumption,
    SimulationState,
    SolarArray,
    StatisticsSnapshot,
    SystemConfig,
    Weather,
    WireGauge,
)
from .statistics import integrate, summarize, update_grid, update_system


def total_consumption(appliances: Iterable[Appliance]) -> float:
    """Sum of ``power_rating`` over the appliances that are on (kW)."""
    return sum(appliance.power_rating for appliance in appliances if appliance.is_on)


def _initial_appliances() -> tuple[Appliance, ...]:
    return tuple(
        Appliance(
            id=appliance_id,
            name=name,
            type=ApplianceType(kind),
            power_rating=APPLIANCE_POWER[kind],
            is_on=is_on,
            always_on=always_on,
        )
        for appliance_id, name, kind, is_on, always_on in INITIAL_APPLIANCES
    )


def initial_state() -> SimulationState:
    """
    Build the fixed startup snapshot.

    Noon, sunny, real-time speed; 56 x 250 W panels at 30°; one small
    battery at 50 %; 240 V with 8AWG wiring; only the refrigerator running.
    Calling it twice yields equal snapshots.
    """
    appliances = _initial_appliances()
    units = (bank_ops.make_battery("battery-1", BatterySize(INITIAL_BATTERY_SIZE), INITIAL_SOC),)
    return SimulationState(
        current_time=INITIAL_TIME,
        time_speed=1.0,
        weather=Weather.SUNNY,
        is_paused=False,
        is_manual_weather_control=False,
        ambient_temperature=ambient_temperature(INITIAL_TIME),
        solar=SolarArray(
            panel_count=INITIAL_PANEL_COUNT,
            power_per_panel=INITIAL_POWER_PER_PANEL_W,
            max_power=solar_ops.max_power_kw(INITIAL_PANEL_COUNT, INITIAL_POWER_PER_PANEL_W),
            area=solar_ops.array_area_m2(INITIAL_PANEL_COUNT, INITIAL_POWER_PER_PANEL_W),
            efficiency=INITIAL_SOLAR_EFFICIENCY,
            panel_angle=INITIAL_PANEL_ANGLE,
        ),
        batteries=units,
        battery=bank_ops.aggregate(
            units,
            min_soc=DEFAULT_MIN_SOC,
            max_soc=DEFAULT_MAX_SOC,
            charge_efficiency=BATTERY_CHARGE_EFFICIENCY,
            discharge_efficiency=BATTERY_DISCHARGE_EFFICIENCY,
        ),
        consumption=PowerConsumption(
            total_power=total_consumption(appliances),
            total_consumed=0.0,
            appliances=appliances,
        ),
        grid=GridLink(
            importing=False,
            exporting=False,
            current_flow=0.0,
            total_imported=0.0,
            total_exported=0.0,
            import_rate=GRID_IMPORT_RATE,
            export_rate=GRID_EXPORT_RATE,
        ),
        losses=LossBreakdown(),
        statistics=StatisticsSnapshot(),
        system=SystemConfig(voltage=float(DEFAULT_VOLTAGE), wire_gauge=WireGauge(DEFAULT_WIRE_GAUGE)),
    )


def tick(state: SimulationState, wall_delta_ms: float) -> SimulationState:
    """
    Advance the simulation by one wall-clock delta.

    Args:
        state: Previous snapshot.
        wall_delta_ms: Wall-clock time since the previous tick (ms).

    Returns:
        New snapshot, or ``state`` itself while paused.

    Notes:
        - Dispatch uses the SoC at the start of the step.
        - Battery SoC integrates over the visual delta; cumulative kWh,
          cost and CO2 counters integrate over the accumulation delta.
    """
    if state.is_paused:
        return state

    step = advance_clock(state.current_time, state.time_speed, wall_delta_ms)
    weather = resolve_weather(step.current_time, state.weather, state.is_manual_weather_control)
    temperature = ambient_temperature(step.current_time)

    solar_power = solar_ops.solar_power(state.solar, step.current_time, weather)
    consumption = total_consumption(state.consumption.appliances)

    bank = state.battery
    result = dispatch(
        solar_power,
        consumption,
        bank.state_of_charge,
        bank.min_soc,
        bank.max_soc,
        bank.max_charge_rate,
    )

    units = bank_ops.charge_step(
        state.batteries,
        -result.battery_flow,
        step.visual_delta_hours,
        bank.min_soc,
        bank.max_soc,
        temperature,
        bank.charge_efficiency,
        bank.discharge_efficiency,
    )
    new_bank = bank_ops.aggregate(
        units,
        min_soc=bank.min_soc,
        max_soc=bank.max_soc,
        charge_efficiency=bank.charge_efficiency,
        discharge_efficiency=bank.discharge_efficiency,
        battery_flow=result.battery_flow,
    )

    losses = compute_losses(
        solar_power=solar_power,
        consumption=consumption,
        battery_flow=result.battery_flow,
        grid_power=result.grid_power,
        voltage=state.system.voltage,
        wire_gauge=state.system.wire_gauge,
        bank_resistance=new_bank.internal_resistance,
        charge_efficiency=bank.charge_efficiency,
        discharge_efficiency=bank.discharge_efficiency,
        temperature_c=temperature,
    )

    increments = integrate(solar_power, consumption, result.grid_power, step.accumulation_delta_hours)
    solar = replace(
        state.solar,
        current_power=solar_power,
        total_generated=state.solar.total_generated + increments.generated,
    )
    grid = update_grid(state.grid, result.grid_power, increments)

    return replace(
        state,
        current_time=step.current_time,
        weather=weather,
        ambient_temperature=temperature,
        solar=solar,
        batteries=units,
        battery=new_bank,
        consumption=replace(
            state.consumption,
            total_power=consumption,
            total_consumed=state.consumption.total_consumed + increments.consumed,
        ),
        grid=grid,
        losses=losses,
        system=update_system(
            state.system,
            solar_power=solar_power,
            consumption=consumption,
            battery_flow=result.battery_flow,
            grid_power=result.grid_power,
            total_losses=losses.total_losses,
        ),
        statistics=summarize(
            previous=state.statistics,
            solar_power=solar_power,
            consumption=consumption,
            total_losses=losses.total_losses,
            total_generated=solar.total_generated,
            grid=grid,
        ),
    )


# Clock and weather


def set_time(state: SimulationState, hours: float) -> SimulationState:
    """Jump to a time of day; clears the manual weather override."""
    return replace(
        state,
        current_time=hours,
        is_manual_weather_control=False,
        weather=weather_from_time(hours),
        ambient_temperature=ambient_temperature(hours),
    )


def set_time_speed(state: SimulationState, multiplier: float) -> SimulationState:
    return replace(state, time_speed=multiplier)


def toggle_pause(state: SimulationState) -> SimulationState:
    return replace(state, is_paused=not state.is_paused)


def set_weather(state: SimulationState, weather: Weather) -> SimulationState:
    """Force a weather condition and snap the clock to its canonical hour."""
    weather = Weather(weather)
    hour = canonical_hour(weather)
    return replace(
        state,
        weather=weather,
        is_manual_weather_control=True,
        current_time=hour,
        ambient_temperature=ambient_temperature(hour),
    )


def reset_simulation(state: Optional[SimulationState] = None) -> SimulationState:
    return initial_state()


# Loads


def toggle_appliance(state: SimulationState, appliance_id: str) -> SimulationState:
    """Flip an appliance on/off; always-on and unknown appliances are left alone."""
    target = next((a for a in state.consumption.appliances if a.id == appliance_id), None)
    if target is None or target.always_on:
        return state
    appliances = tuple(
        replace(a, is_on=not a.is_on) if a.id == appliance_id else a
        for a in state.consumption.appliances
    )
    return replace(
        state,
        consumption=replace(
            state.consumption,
            appliances=appliances,
            total_power=total_consumption(appliances),
        ),
    )


# Solar array


def set_solar_panel_count(state: SimulationState, count: int) -> SimulationState:
    return replace(state, solar=solar_ops.with_panel_count(state.solar, count))


def set_solar_panel_power(state: SimulationState, watts_per_panel: float) -> SimulationState:
    return replace(state, solar=solar_ops.with_panel_power(state.solar, watts_per_panel))


def set_solar_panel_angle(state: SimulationState, degrees: float) -> SimulationState:
    return replace(state, solar=solar_ops.with_panel_angle(state.solar, degrees))


def set_solar_efficiency(state: SimulationState, efficiency: float) -> SimulationState:
    return replace(state, solar=solar_ops.with_efficiency(state.solar, efficiency))


def set_irradiance_override(state: SimulationState, irradiance_w_m2: Optional[float]) -> SimulationState:
    return replace(state, solar=solar_ops.with_irradiance_override(state.solar, irradiance_w_m2))


# Battery bank


def _with_units(
    state: SimulationState,
    units: bank_ops.Units,
    *,
    min_soc: Optional[float] = None,
    max_soc: Optional[float] = None,
) -> SimulationState:
    bank = state.battery
    return replace(
        state,
        batteries=units,
        battery=bank_ops.aggregate(
            units,
            min_soc=bank.min_soc if min_soc is None else min_soc,
            max_soc=bank.max_soc if max_soc is None else max_soc,
            charge_efficiency=bank.charge_efficiency,
            discharge_efficiency=bank.discharge_efficiency,
            battery_flow=bank_ops.bank_flow(bank),
        ),
    )


def _structural(state: SimulationState, units: bank_ops.Units) -> SimulationState:
    if units is state.batteries:
        return state
    return _with_units(state, units)


def add_battery(state: SimulationState, size: BatterySize) -> SimulationState:
    return _structural(state, bank_ops.add_battery(state.batteries, BatterySize(size)))


def remove_battery(state: SimulationState, battery_id: str) -> SimulationState:
    return _structural(state, bank_ops.remove_battery(state.batteries, battery_id))


def change_battery_size(state: SimulationState, battery_id: str, size: BatterySize) -> SimulationState:
    return _structural(state, bank_ops.change_battery_size(state.batteries, battery_id, BatterySize(size)))


def set_battery_config(state: SimulationState, size: BatterySize, count: int) -> SimulationState:
    return _structural(state, bank_ops.set_battery_config(state.batteries, BatterySize(size), count))


def set_min_max_soc(state: SimulationState, min_soc: float, max_soc: float) -> SimulationState:
    """Update the SoC bounds and pull the current SoC inside them."""
    units = bank_ops.clamp_to_bounds(state.batteries, min_soc, max_soc)
    return _with_units(state, units, min_soc=min_soc, max_soc=max_soc)


def set_battery_soc(state: SimulationState, state_of_charge: float) -> SimulationState:
    """Set every unit to one SoC (test fixtures and restore tooling)."""
    return _with_units(state, bank_ops.with_uniform_soc(state.batteries, state_of_charge))


# Electrical system


def set_system_voltage(state: SimulationState, voltage: float) -> SimulationState:
    return replace(state, system=replace(state.system, voltage=voltage))


def set_wire_gauge(state: SimulationState, wire_gauge: WireGauge) -> SimulationState:
    return replace(state, system=replace(state.system, wire_gauge=WireGauge(wire_gauge)))


_HANDLERS: Dict[type, Callable[[SimulationState, object], SimulationState]] = {
    Tick: lambda s, c: tick(s, c.wall_delta_ms),
    ToggleAppliance: lambda s, c: toggle_appliance(s, c.appliance_id),
    SetTime: lambda s, c: set_time(s, c.hours),
    SetTimeSpeed: lambda s, c: set_time_speed(s, c.multiplier),
    TogglePause: lambda s, c: toggle_pause(s),
    SetWeather: lambda s, c: set_weather(s, c.weather),
    ResetSimulation: lambda s, c: reset_simulation(s),
    SetSolarPanelCount: lambda s, c: set_solar_panel_count(s, c.count),
    SetSolarPanelPower: lambda s, c: set_solar_panel_power(s, c.watts_per_panel),
    SetSolarPanelAngle: lambda s, c: set_solar_panel_angle(s, c.degrees),
    SetSolarEfficiency: lambda s, c: set_solar_efficiency(s, c.efficiency),
    SetIrradianceOverride: lambda s, c: set_irradiance_override(s, c.irradiance_w_m2),
    AddBattery: lambda s, c: add_battery(s, c.size),
    RemoveBattery: lambda s, c: remove_battery(s, c.battery_id),
    ChangeBatterySize: lambda s, c: change_battery_size(s, c.battery_id, c.size),
    SetBatteryConfig: lambda s, c: set_battery_config(s, c.size, c.count),
    SetMinMaxSoC: lambda s, c: set_min_max_soc(s, c.min_soc, c.max_soc),
    SetSystemVoltage: lambda s, c: set_system_voltage(s, c.voltage),
    SetWireGauge: lambda s, c: set_wire_gauge(s, c.wire_gauge),
}


def apply_command(state: SimulationState, command: Command) -> SimulationState:
    """
    Reduce one command (or tick signal) onto a snapshot.

    Raises:
        TypeError: If ``command`` is not one of the command types.
    """
    handler = _HANDLERS.get(type(command))
    if handler is None:
        raise TypeError(f"Unsupported command type: {type(command)!r}")
    return handler(state, command)
