"""
Closed-form solar generation model.

Provides the time-of-day irradiance curve, the fixed-tilt incidence
approximation and helpers to reconfigure a :class:`SolarArray`. This is a
deliberately simple model: a half-sine daylight curve between sunrise and
sunset rather than a full solar-position calculation.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

import numpy as np

from .constants import (
    CLOUDY_FACTOR,
    PANEL_MODULE_EFFICIENCY,
    STC_IRRADIANCE_W_M2,
    SUNRISE_HOUR,
    SUNSET_HOUR,
)
from .models import SolarArray, Weather


def sun_intensity(time: float, weather: Weather, irradiance_override: Optional[float] = None) -> float:
    """
    Normalized sun intensity (0-1) for a time of day and weather.

    Args:
        time: Time of day in hours.
        weather: Current weather condition.
        irradiance_override: Manual irradiance in W/m². When given, the
            intensity is ``override / 1000`` clamped to [0, 1] and both time
            and weather are ignored.

    Returns:
        Intensity factor where 1.0 corresponds to clear-sky noon (1000 W/m²).

    Example:
        ```python
        sun_intensity(12.0, Weather.SUNNY)          # 1.0
        sun_intensity(12.0, Weather.CLOUDY)         # 0.3
        sun_intensity(3.0, Weather.SUNNY, 800.0)    # 0.8
        ```
    """
    if irradiance_override is not None:
        return float(np.clip(irradiance_override / STC_IRRADIANCE_W_M2, 0.0, 1.0))

    if Weather(weather) is Weather.NIGHT:
        return 0.0
    if time < SUNRISE_HOUR or time > SUNSET_HOUR:
        return 0.0

    day_progress = (time - SUNRISE_HOUR) / (SUNSET_HOUR - SUNRISE_HOUR)
    intensity = float(np.sin(np.pi * day_progress))
    if Weather(weather) is Weather.CLOUDY:
        intensity *= CLOUDY_FACTOR
    return intensity


def angle_effect(angle_deg: float) -> float:
    """Cosine incidence factor for a fixed panel tilt."""
    return float(np.cos(np.deg2rad(angle_deg)))


def solar_power(array: SolarArray, time: float, weather: Weather) -> float:
    """
    Instantaneous array output in kW.

    ``max_power * efficiency * sun_intensity * angle_effect``, floored at 0.
    Temperature derating is reported separately by the loss model and is
    not subtracted here.
    """
    power = (
        array.max_power
        * array.efficiency
        * sun_intensity(time, weather, array.irradiance_override)
        * angle_effect(array.panel_angle)
    )
    return max(0.0, power)


def max_power_kw(panel_count: int, power_per_panel_w: float) -> float:
    return panel_count * power_per_panel_w / 1000.0


def array_area_m2(panel_count: int, power_per_panel_w: float) -> float:
    """Module surface needed for the nameplate rating at standard test conditions."""
    return panel_count * power_per_panel_w / (STC_IRRADIANCE_W_M2 * PANEL_MODULE_EFFICIENCY)


def with_panel_count(array: SolarArray, panel_count: int) -> SolarArray:
    return replace(
        array,
        panel_count=panel_count,
        max_power=max_power_kw(panel_count, array.power_per_panel),
        area=array_area_m2(panel_count, array.power_per_panel),
    )


def with_panel_power(array: SolarArray, power_per_panel_w: float) -> SolarArray:
    return replace(
        array,
        power_per_panel=power_per_panel_w,
        max_power=max_power_kw(array.panel_count, power_per_panel_w),
        area=array_area_m2(array.panel_count, power_per_panel_w),
    )


def with_panel_angle(array: SolarArray, angle_deg: float) -> SolarArray:
    return replace(array, panel_angle=angle_deg)


def with_efficiency(array: SolarArray, efficiency: float) -> SolarArray:
    return replace(array, efficiency=efficiency)


def with_irradiance_override(array: SolarArray, irradiance_w_m2: Optional[float]) -> SolarArray:
    return replace(array, irradiance_override=irradiance_w_m2)
