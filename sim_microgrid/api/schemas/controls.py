"""
Request bodies for the simulation control endpoints.

Each schema carries the argument of exactly one engine command. Enum-typed
fields (weather, battery size, wire gauge) are validated by pydantic and
rejected with HTTP 422; numeric configuration values are passed through
without range checks.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from ...simulation.models import BatterySize, Weather, WireGauge


class TickRequest(BaseModel):
    """
    Tick request body.

    Attributes:
        wall_delta_ms: Explicit wall-clock delta in milliseconds. When
            omitted, the host measures the time elapsed since its previous
            tick (the first tick after a reset advances by zero).
    """
    wall_delta_ms: Optional[float] = Field(default=None, description="Wall-clock delta (ms)")


class TimeRequest(BaseModel):
    hours: float = Field(..., description="Time of day in hours [0, 24)")


class TimeSpeedRequest(BaseModel):
    multiplier: float = Field(..., description="Simulated hours per wall-clock hour")


class WeatherRequest(BaseModel):
    weather: Weather


class PanelCountRequest(BaseModel):
    count: int


class PanelPowerRequest(BaseModel):
    watts_per_panel: float = Field(..., description="Nameplate power of one panel (W)")


class PanelAngleRequest(BaseModel):
    degrees: float


class SolarEfficiencyRequest(BaseModel):
    efficiency: float = Field(..., description="Fractional efficiency multiplier")


class IrradianceRequest(BaseModel):
    """Irradiance override; ``null`` returns to the time-of-day model."""
    irradiance_w_m2: Optional[float] = None


class BatteryAddRequest(BaseModel):
    size: BatterySize


class BatterySizeRequest(BaseModel):
    size: BatterySize


class BatteryConfigRequest(BaseModel):
    """
    Replace the whole bank.

    Attributes:
        size: Preset applied to every unit.
        count: Number of units, clamped to 1..12 by the engine.
    """
    size: BatterySize
    count: int


class SocLimitsRequest(BaseModel):
    min_soc: float = Field(..., description="Lower SoC bound (%)")
    max_soc: float = Field(..., description="Upper SoC bound (%)")


class VoltageRequest(BaseModel):
    voltage: float


class WireGaugeRequest(BaseModel):
    wire_gauge: WireGauge
