"""
Multi-unit battery bank: presets, aggregation and charge integration.

The bank is an ordered tuple of :class:`IndividualBattery` units (1 to 12)
plus a derived :class:`BatteryBank` aggregate. Structural operations return a
new unit tuple (or the very same tuple when the operation is a no-op);
:func:`aggregate` then rebuilds the aggregate view.

Per-unit state of charge is tracked on every tick: :func:`charge_step`
integrates the bank as one equivalent cell and moves every unit by the same
percentage delta, each unit keeping its offset from the aggregate. The
aggregate is therefore always derivable from the units.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Tuple

import numpy as np

from .constants import (
    BATTERY_CHARGE_EFFICIENCY,
    BATTERY_DISCHARGE_EFFICIENCY,
    BATTERY_MIN_TEMP_EFFICIENCY,
    BATTERY_OPTIMAL_TEMP_C,
    BATTERY_PRESETS,
    BATTERY_TEMP_COEFFICIENT,
    MAX_BATTERIES,
    MIN_BATTERIES,
)
from .models import BatteryBank, BatterySize, IndividualBattery

Units = Tuple[IndividualBattery, ...]

BATTERY_ID_PREFIX = "battery-"


def _clamp(value: float, lower: float, upper: float) -> float:
    return min(upper, max(lower, value))


def _soc_bounds(min_soc: float, max_soc: float) -> Tuple[float, float]:
    return max(0.0, min_soc), min(100.0, max_soc)


def make_battery(battery_id: str, size: BatterySize, state_of_charge: float) -> IndividualBattery:
    """
    Build a unit from its size preset at the given SoC (%).

    Example:
        ```python
        unit = make_battery("battery-1", BatterySize.SMALL, 50.0)
        unit.capacity        # 13.5
        unit.current_charge  # 6.75
        ```
    """
    size = BatterySize(size)
    capacity, resistance, max_c_rate = BATTERY_PRESETS[size.value]
    return IndividualBattery(
        id=battery_id,
        size=size,
        capacity=capacity,
        internal_resistance=resistance,
        max_c_rate=max_c_rate,
        current_charge=state_of_charge / 100.0 * capacity,
        state_of_charge=state_of_charge,
    )


def _with_soc(unit: IndividualBattery, state_of_charge: float) -> IndividualBattery:
    return replace(
        unit,
        state_of_charge=state_of_charge,
        current_charge=state_of_charge / 100.0 * unit.capacity,
    )


def total_capacity(units: Iterable[IndividualBattery]) -> float:
    return sum(unit.capacity for unit in units)


def aggregate_soc(units: Units) -> float:
    """
    Aggregate SoC (%), i.e. total charge over total capacity.

    Computed as the capacity-weighted mean of unit SoC so that a bank whose
    units share one SoC reports exactly that value. Returns 0 for a bank
    without capacity.
    """
    if not units:
        return 0.0
    socs = {unit.state_of_charge for unit in units}
    if len(socs) == 1:
        return socs.pop()
    capacity = total_capacity(units)
    if capacity <= 0:
        return 0.0
    return sum(unit.state_of_charge * unit.capacity for unit in units) / capacity


def equivalent_resistance(units: Iterable[IndividualBattery]) -> float:
    """Parallel combination ``1 / sum(1 / r_i)``; 0 when undefined."""
    conductance = sum(1.0 / unit.internal_resistance for unit in units if unit.internal_resistance > 0)
    if conductance <= 0:
        return 0.0
    return 1.0 / conductance


def max_charge_rate(units: Iterable[IndividualBattery]) -> float:
    """Bank power limit in kW: ``sum(capacity_i * max_c_rate_i)``."""
    return sum(unit.capacity * unit.max_c_rate for unit in units)


def aggregate(
    units: Units,
    *,
    min_soc: float,
    max_soc: float,
    charge_efficiency: float = BATTERY_CHARGE_EFFICIENCY,
    discharge_efficiency: float = BATTERY_DISCHARGE_EFFICIENCY,
    battery_flow: float = 0.0,
) -> BatteryBank:
    """
    Recompute the aggregate bank view from its units.

    Args:
        units: Battery units.
        min_soc: Lower SoC bound (%).
        max_soc: Upper SoC bound (%).
        charge_efficiency: Base charging efficiency (0-1).
        discharge_efficiency: Base discharging efficiency (0-1).
        battery_flow: Last dispatched battery flow in kW (positive =
            discharging, negative = charging), used for the rate fields.

    Returns:
        BatteryBank with every derived field populated.
    """
    capacity = total_capacity(units)
    soc = aggregate_soc(units)
    rate = max_charge_rate(units)
    charging_rate = abs(battery_flow)
    return BatteryBank(
        capacity=capacity,
        current_charge=sum(unit.current_charge for unit in units),
        state_of_charge=soc,
        internal_resistance=equivalent_resistance(units),
        min_soc=min_soc,
        max_soc=max_soc,
        charge_efficiency=charge_efficiency,
        discharge_efficiency=discharge_efficiency,
        max_charge_rate=rate,
        available_charge_rate=rate if soc < max_soc else 0.0,
        available_discharge_rate=rate if soc > min_soc else 0.0,
        depth_of_discharge=100.0 - soc,
        charging=battery_flow < 0,
        charging_rate=charging_rate,
        c_rate=charging_rate / capacity if capacity > 0 else 0.0,
    )


def bank_flow(bank: BatteryBank) -> float:
    """Signed flow (positive = discharging) recorded on an aggregate."""
    return -bank.charging_rate if bank.charging else bank.charging_rate


def _battery_index(battery_id: str) -> int:
    suffix = battery_id[len(BATTERY_ID_PREFIX):] if battery_id.startswith(BATTERY_ID_PREFIX) else ""
    return int(suffix) if suffix.isdigit() else 0


def next_battery_id(units: Iterable[IndividualBattery]) -> str:
    highest = max((_battery_index(unit.id) for unit in units), default=0)
    return f"{BATTERY_ID_PREFIX}{highest + 1}"


def add_battery(units: Units, size: BatterySize) -> Units:
    """Append a unit at the current aggregate SoC; no-op at 12 units."""
    if len(units) >= MAX_BATTERIES:
        return units
    unit = make_battery(next_battery_id(units), size, aggregate_soc(units))
    return units + (unit,)


def remove_battery(units: Units, battery_id: str) -> Units:
    """Drop a unit by id; no-op when only one unit is left or the id is unknown."""
    if len(units) <= MIN_BATTERIES:
        return units
    remaining = tuple(unit for unit in units if unit.id != battery_id)
    if len(remaining) == len(units):
        return units
    return remaining


def change_battery_size(units: Units, battery_id: str, size: BatterySize) -> Units:
    """
    Swap a unit to another preset, preserving its percentage SoC.

    The stored energy is rescaled (``new_charge = soc% * new_capacity``),
    so resizing changes the bank's energy content, not its SoC.
    """
    if not any(unit.id == battery_id for unit in units):
        return units
    return tuple(
        make_battery(unit.id, size, unit.state_of_charge) if unit.id == battery_id else unit
        for unit in units
    )


def set_battery_config(units: Units, size: BatterySize, count: int) -> Units:
    """Rebuild the bank as ``count`` identical units at the current aggregate SoC."""
    count = int(_clamp(count, MIN_BATTERIES, MAX_BATTERIES))
    soc = aggregate_soc(units)
    return tuple(make_battery(f"{BATTERY_ID_PREFIX}{idx + 1}", size, soc) for idx in range(count))


def with_uniform_soc(units: Units, state_of_charge: float) -> Units:
    return tuple(_with_soc(unit, state_of_charge) for unit in units)


def clamp_to_bounds(units: Units, min_soc: float, max_soc: float) -> Units:
    """Pull the aggregate SoC back inside ``[min_soc, max_soc]`` if needed."""
    return _shift_units(units, _clamp(aggregate_soc(units), *_soc_bounds(min_soc, max_soc)))


def battery_temperature_efficiency(base_efficiency: float, temperature_c: float) -> float:
    """
    Temperature-adjusted efficiency, floored at 70 %.

    ``base * (1 + |T - 20| / 10 * coefficient)`` with a negative coefficient,
    so efficiency degrades the further the cell is from 20 °C.
    """
    deviation = abs(temperature_c - BATTERY_OPTIMAL_TEMP_C) / 10.0
    return max(BATTERY_MIN_TEMP_EFFICIENCY, base_efficiency * (1.0 + deviation * BATTERY_TEMP_COEFFICIENT))


def soc_after_step(
    state_of_charge: float,
    capacity: float,
    flow_kw: float,
    dt_hours: float,
    min_soc: float,
    max_soc: float,
    ambient_temp_c: float,
    charge_efficiency: float = BATTERY_CHARGE_EFFICIENCY,
    discharge_efficiency: float = BATTERY_DISCHARGE_EFFICIENCY,
) -> float:
    """
    Integrate one step for a single equivalent cell.

    Args:
        state_of_charge: SoC before the step (%).
        capacity: Cell capacity (kWh).
        flow_kw: Power into the cell; positive charges, negative discharges.
        dt_hours: Step duration (hours).
        min_soc: Lower bound (%).
        max_soc: Upper bound (%).
        ambient_temp_c: Ambient temperature (°C).
        charge_efficiency: Base charging efficiency.
        discharge_efficiency: Base discharging efficiency.

    Returns:
        New SoC clamped into ``[min_soc, max_soc]`` intersected with [0, 100].

    Notes:
        Charging stores ``flow * dt * eff``; discharging removes
        ``flow * dt / eff`` so the cell gives up more than it delivers.
    """
    if flow_kw > 0:
        efficiency = battery_temperature_efficiency(charge_efficiency, ambient_temp_c)
        energy_change = flow_kw * dt_hours * efficiency
    else:
        efficiency = battery_temperature_efficiency(discharge_efficiency, ambient_temp_c)
        energy_change = flow_kw * dt_hours / efficiency

    soc_change = energy_change / capacity * 100.0 if capacity > 0 else 0.0
    return _clamp(state_of_charge + soc_change, *_soc_bounds(min_soc, max_soc))


def _shift_units(units: Units, new_soc: float) -> Units:
    old_soc = aggregate_soc(units)
    if new_soc == old_soc:
        return units
    return tuple(
        _with_soc(unit, float(np.clip(new_soc + (unit.state_of_charge - old_soc), 0.0, 100.0)))
        for unit in units
    )


def charge_step(
    units: Units,
    flow_kw: float,
    dt_hours: float,
    min_soc: float,
    max_soc: float,
    ambient_temp_c: float,
    charge_efficiency: float = BATTERY_CHARGE_EFFICIENCY,
    discharge_efficiency: float = BATTERY_DISCHARGE_EFFICIENCY,
) -> Units:
    """
    Apply charge/discharge physics to the whole bank for one step.

    The bank is integrated as one equivalent cell (:func:`soc_after_step`);
    the resulting aggregate delta is applied to every unit.

    Args:
        units: Battery units before the step.
        flow_kw: Power into the bank; positive charges, negative discharges.
        dt_hours: Step duration (hours).
        min_soc: Lower aggregate bound (%).
        max_soc: Upper aggregate bound (%).
        ambient_temp_c: Ambient temperature (°C).
        charge_efficiency: Base charging efficiency.
        discharge_efficiency: Base discharging efficiency.

    Returns:
        New unit tuple (the same tuple when nothing changed).
    """
    new_soc = soc_after_step(
        aggregate_soc(units),
        total_capacity(units),
        flow_kw,
        dt_hours,
        min_soc,
        max_soc,
        ambient_temp_c,
        charge_efficiency,
        discharge_efficiency,
    )
    return _shift_units(units, new_soc)
