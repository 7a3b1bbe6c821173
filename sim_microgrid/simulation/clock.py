"""
Simulation clock, weather resolution and the ambient temperature curve.

The clock runs on two time scales. The *visual* delta advances the
time of day shown to the user; the *accumulation* delta (a fixed multiple of
the visual one) integrates cumulative energy, cost and emission counters.
"""

from __future__ import annotations

from dataclasses import dataclass

from .constants import (
    ACCUMULATION_MULTIPLIER,
    CLOUDY_END_HOUR,
    CLOUDY_START_HOUR,
    HOURS_PER_DAY,
    MS_PER_HOUR,
    SUNRISE_HOUR,
    SUNSET_HOUR,
)
from .models import Weather

CANONICAL_HOURS = {
    Weather.SUNNY: 12.0,
    Weather.CLOUDY: 14.0,
    Weather.NIGHT: 0.0,
}


@dataclass(frozen=True)
class ClockStep:
    """
    Result of advancing the clock by one wall-clock delta.

    Attributes:
        current_time: New time of day in hours, wrapped into [0, 24).
        visual_delta_hours: Simulated hours elapsed on the displayed clock.
        accumulation_delta_hours: Scaled delta used for cumulative counters.
    """

    current_time: float
    visual_delta_hours: float
    accumulation_delta_hours: float


def advance_clock(current_time: float, time_speed: float, wall_delta_ms: float) -> ClockStep:
    """
    Advance the time of day by a wall-clock delta.

    Args:
        current_time: Time of day before the step (hours).
        time_speed: Simulation speed multiplier (1.0 = real time).
        wall_delta_ms: Elapsed wall-clock time in milliseconds. Negative
            values are treated as zero.

    Returns:
        ClockStep with the wrapped time and both deltas.

    Example:
        ```python
        step = advance_clock(23.5, 1.0, 3_600_000)
        step.current_time              # 0.5
        step.accumulation_delta_hours  # 100.0
        ```
    """
    visual_delta = max(0.0, wall_delta_ms) / MS_PER_HOUR * time_speed
    return ClockStep(
        current_time=(current_time + visual_delta) % HOURS_PER_DAY,
        visual_delta_hours=visual_delta,
        accumulation_delta_hours=visual_delta * ACCUMULATION_MULTIPLIER,
    )


def weather_from_time(time: float) -> Weather:
    """Derive weather from the time of day (night / midday clouds / sun)."""
    if time < SUNRISE_HOUR or time > SUNSET_HOUR:
        return Weather.NIGHT
    if CLOUDY_START_HOUR <= time < CLOUDY_END_HOUR:
        return Weather.CLOUDY
    return Weather.SUNNY


def resolve_weather(time: float, weather: Weather, manual: bool) -> Weather:
    """Keep the explicitly chosen weather under manual control, else derive it."""
    if manual:
        return weather
    return weather_from_time(time)


def canonical_hour(weather: Weather) -> float:
    return CANONICAL_HOURS[Weather(weather)]


def ambient_temperature(time: float) -> float:
    """
    Piecewise-linear outdoor temperature over the day (°C).

    15 °C at night, warming to 35 °C by noon, holding until 15:00 and
    cooling to 20 °C at sunset.
    """
    if 6.0 <= time < 9.0:
        return 15.0 + (time - 6.0) / 3.0 * 10.0
    if 9.0 <= time < 12.0:
        return 25.0 + (time - 9.0) / 3.0 * 10.0
    if 12.0 <= time < 15.0:
        return 35.0
    if 15.0 <= time < 18.0:
        return 35.0 - (time - 15.0) / 3.0 * 15.0
    return 15.0
