"""
Per-segment loss ledger.

Losses are computed for observability only: the dispatch in
:mod:`sim_microgrid.simulation.balancer` does not subtract them, so the
power balance holds to within ``total_losses``.
"""

from __future__ import annotations

from .constants import (
    DEFAULT_WIRE_GAUGE,
    INVERTER_EFFICIENCY,
    SOLAR_REFERENCE_TEMP_C,
    SOLAR_TEMP_COEFFICIENT,
    WIRE_GAUGE_RESISTANCE,
    WIRE_SEGMENT_MULTIPLIERS,
)
from .models import BatteryLosses, LossBreakdown, TemperatureLosses, WireGauge, WireLosses


def wire_resistance(wire_gauge: WireGauge | str, segment: str) -> float:
    """
    Resistance of one cable run in ohms.

    Args:
        wire_gauge: Conductor gauge (10AWG, 8AWG, 6AWG). Unknown gauges fall
            back to 8AWG.
        segment: One of ``solar_to_battery``, ``battery_to_house``,
            ``grid_to_house``.
    """
    gauge = wire_gauge.value if isinstance(wire_gauge, WireGauge) else str(wire_gauge)
    base = WIRE_GAUGE_RESISTANCE.get(gauge, WIRE_GAUGE_RESISTANCE[DEFAULT_WIRE_GAUGE])
    return base * WIRE_SEGMENT_MULTIPLIERS[segment]


def wire_loss(power_kw: float, resistance: float, voltage: float) -> float:
    """
    I²R loss in kW for a power flowing through a conductor.

    ``I = P * 1000 / V``; returns 0 for non-positive power or voltage.
    """
    if power_kw <= 0 or voltage <= 0:
        return 0.0
    current = power_kw * 1000.0 / voltage
    return current * current * resistance / 1000.0


def resistive_loss(power_kw: float, resistance: float, voltage: float) -> float:
    """Battery internal I²R loss for a flow of either sign."""
    return wire_loss(abs(power_kw), resistance, voltage)


def solar_temperature_loss(solar_power: float, temperature_c: float) -> float:
    """Derating above 25 °C, ``|P * coeff * (T - 25)|``; 0 at or below 25 °C."""
    excess = temperature_c - SOLAR_REFERENCE_TEMP_C
    if excess <= 0:
        return 0.0
    return abs(solar_power * SOLAR_TEMP_COEFFICIENT * excess)


def compute_losses(
    *,
    solar_power: float,
    consumption: float,
    battery_flow: float,
    grid_power: float,
    voltage: float,
    wire_gauge: WireGauge | str,
    bank_resistance: float,
    charge_efficiency: float,
    discharge_efficiency: float,
    temperature_c: float,
) -> LossBreakdown:
    """
    Build the loss breakdown for one tick.

    Args:
        solar_power: Solar output (kW).
        consumption: House load (kW).
        battery_flow: Battery flow (kW, positive = discharging).
        grid_power: Grid flow (kW, positive = importing).
        voltage: System voltage (V).
        wire_gauge: Conductor gauge.
        bank_resistance: Equivalent internal resistance of the bank (ohm).
        charge_efficiency: Base charging efficiency.
        discharge_efficiency: Base discharging efficiency.
        temperature_c: Ambient temperature (°C).

    Returns:
        LossBreakdown with every component in kW and their sum.
    """
    charging = battery_flow < 0
    discharging = battery_flow > 0

    solar_to_battery = (
        wire_loss(abs(battery_flow), wire_resistance(wire_gauge, "solar_to_battery"), voltage)
        if solar_power > 0 and charging
        else 0.0
    )
    battery_to_house = (
        wire_loss(battery_flow, wire_resistance(wire_gauge, "battery_to_house"), voltage)
        if discharging
        else 0.0
    )
    grid_to_house = (
        wire_loss(grid_power, wire_resistance(wire_gauge, "grid_to_house"), voltage)
        if grid_power > 0
        else 0.0
    )
    wire_total = solar_to_battery + battery_to_house + grid_to_house

    inverter = consumption * (1.0 - INVERTER_EFFICIENCY)
    charge_loss = abs(battery_flow) * (1.0 - charge_efficiency) if charging else 0.0
    discharge_loss = battery_flow * (1.0 - discharge_efficiency) if discharging else 0.0
    resistive = resistive_loss(battery_flow, bank_resistance, voltage)
    solar_temp = solar_temperature_loss(solar_power, temperature_c)

    return LossBreakdown(
        wire_losses=WireLosses(
            solar_to_battery=solar_to_battery,
            battery_to_house=battery_to_house,
            grid_to_house=grid_to_house,
            total=wire_total,
        ),
        inverter_loss=inverter,
        battery_losses=BatteryLosses(
            charging=charge_loss,
            discharging=discharge_loss,
            resistive=resistive,
        ),
        temperature_losses=TemperatureLosses(solar=solar_temp),
        total_losses=wire_total + inverter + charge_loss + discharge_loss + resistive + solar_temp,
    )
