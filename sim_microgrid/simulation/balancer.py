"""
Greedy single-pass power dispatch.

Priority order is fixed: solar serves the house first, the battery covers a
shortfall or absorbs a surplus within its rate and SoC limits, and the grid
takes whatever remains. There is no lookahead and losses are not subtracted
before dispatch.
"""

from __future__ import annotations

from dataclasses import dataclass

from .constants import FLOW_EPSILON_KW


@dataclass(frozen=True)
class DispatchResult:
    """
    Outcome of one dispatch decision (all kW).

    Attributes:
        battery_flow: Positive when the battery discharges into the house,
            negative when it charges from surplus solar.
        grid_power: Positive when importing, negative when exporting.
    """

    battery_flow: float
    grid_power: float

    @property
    def importing(self) -> bool:
        return self.grid_power > 0

    @property
    def exporting(self) -> bool:
        return self.grid_power < 0


def battery_dispatch(
    solar_power: float,
    consumption: float,
    state_of_charge: float,
    min_soc: float,
    max_soc: float,
    max_rate: float,
) -> float:
    """
    Battery power needed to balance solar against consumption.

    Returns:
        Battery flow in kW: ``min(deficit, max_rate)`` on a shortfall when
        the SoC is above ``min_soc``, ``max(deficit, -max_rate)`` on a
        surplus when the SoC is below ``max_soc``, otherwise 0.
    """
    deficit = consumption - solar_power
    if deficit > 0:
        return min(deficit, max_rate) if state_of_charge > min_soc else 0.0
    if deficit < 0:
        return max(deficit, -max_rate) if state_of_charge < max_soc else 0.0
    return 0.0


def grid_power(solar_power: float, battery_flow: float, consumption: float) -> float:
    """Residual grid flow (+import / -export), snapped to 0 below 1e-9 kW."""
    power = -(solar_power + battery_flow - consumption)
    if abs(power) < FLOW_EPSILON_KW:
        return 0.0
    return power


def dispatch(
    solar_power: float,
    consumption: float,
    state_of_charge: float,
    min_soc: float,
    max_soc: float,
    max_rate: float,
) -> DispatchResult:
    """
    Run the full dispatch for one tick.

    Example:
        ```python
        result = dispatch(
            solar_power=0.0, consumption=7.15,
            state_of_charge=20.0, min_soc=20.0, max_soc=95.0, max_rate=13.5,
        )
        result.battery_flow  # 0.0  (battery at its floor)
        result.grid_power    # 7.15 (grid covers the load)
        ```
    """
    flow = battery_dispatch(solar_power, consumption, state_of_charge, min_soc, max_soc, max_rate)
    return DispatchResult(
        battery_flow=flow,
        grid_power=grid_power(solar_power, flow, consumption),
    )
