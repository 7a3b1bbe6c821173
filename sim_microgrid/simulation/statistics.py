"""
Cumulative energy counters, grid account and summary statistics.

All integrals use the accumulation delta so totals move at an observable
rate while the displayed clock advances slowly.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .constants import CO2_PER_KWH, FLOW_EPSILON_KW
from .models import GridLink, StatisticsSnapshot, SystemConfig


@dataclass(frozen=True)
class EnergyIncrements:
    """Energy moved during one step (kWh)."""

    generated: float
    consumed: float
    imported: float
    exported: float


def integrate(
    solar_power: float,
    consumption: float,
    grid_power: float,
    accumulation_delta_hours: float,
) -> EnergyIncrements:
    return EnergyIncrements(
        generated=solar_power * accumulation_delta_hours,
        consumed=consumption * accumulation_delta_hours,
        imported=max(grid_power, 0.0) * accumulation_delta_hours,
        exported=max(-grid_power, 0.0) * accumulation_delta_hours,
    )


def update_grid(grid: GridLink, grid_power: float, increments: EnergyIncrements) -> GridLink:
    return replace(
        grid,
        importing=grid_power > FLOW_EPSILON_KW,
        exporting=grid_power < -FLOW_EPSILON_KW,
        current_flow=grid_power,
        total_imported=grid.total_imported + increments.imported,
        total_exported=grid.total_exported + increments.exported,
    )


def cost_savings(
    total_generated: float,
    total_exported: float,
    total_imported: float,
    import_rate: float,
    export_rate: float,
) -> float:
    """
    Net money saved by the installation ($).

    Solar energy that stayed on site (generated minus exported) is valued at
    the import tariff it avoided, exports earn the feed-in tariff and
    imports are charged at the import tariff.
    """
    solar_offset = max(0.0, total_generated - total_exported)
    return solar_offset * import_rate + total_exported * export_rate - total_imported * import_rate


def co2_saved(total_generated: float) -> float:
    return total_generated * CO2_PER_KWH


def system_efficiency(solar_power: float, total_losses: float, previous: float) -> float:
    """Share of solar output left after losses (%); keeps ``previous`` without sun."""
    if solar_power > 0:
        return (solar_power - total_losses) / solar_power * 100.0
    return previous


def _power_in(solar_power: float, battery_flow: float, grid_power: float) -> float:
    return solar_power + max(grid_power, 0.0) + max(battery_flow, 0.0)


def energy_balance(solar_power: float, consumption: float, battery_flow: float, grid_power: float) -> float:
    """
    Power balance error ``in - out - stored`` (kW).

    ``in`` is solar plus grid import plus battery discharge, ``out`` is the
    house load plus grid export and ``stored`` is battery charging power.
    """
    power_out = consumption + max(-grid_power, 0.0)
    stored = max(-battery_flow, 0.0)
    return _power_in(solar_power, battery_flow, grid_power) - power_out - stored


def total_efficiency(solar_power: float, battery_flow: float, grid_power: float, total_losses: float) -> float:
    """Share of incoming power not lost in the system (%), 0 when nothing flows."""
    power_in = _power_in(solar_power, battery_flow, grid_power)
    if power_in <= FLOW_EPSILON_KW:
        return 0.0
    return min(100.0, max(0.0, (power_in - total_losses) / power_in * 100.0))


def update_system(
    system: SystemConfig,
    *,
    solar_power: float,
    consumption: float,
    battery_flow: float,
    grid_power: float,
    total_losses: float,
) -> SystemConfig:
    return replace(
        system,
        total_efficiency=total_efficiency(solar_power, battery_flow, grid_power, total_losses),
        energy_balance=energy_balance(solar_power, consumption, battery_flow, grid_power),
    )


def summarize(
    *,
    previous: StatisticsSnapshot,
    solar_power: float,
    consumption: float,
    total_losses: float,
    total_generated: float,
    grid: GridLink,
) -> StatisticsSnapshot:
    return StatisticsSnapshot(
        net_energy=solar_power - consumption,
        cost_savings=cost_savings(
            total_generated,
            grid.total_exported,
            grid.total_imported,
            grid.import_rate,
            grid.export_rate,
        ),
        co2_saved=co2_saved(total_generated),
        efficiency=system_efficiency(solar_power, total_losses, previous.efficiency),
    )
