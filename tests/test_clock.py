from __future__ import annotations

import pytest

from sim_microgrid.simulation.clock import (
    advance_clock,
    ambient_temperature,
    canonical_hour,
    resolve_weather,
    weather_from_time,
)
from sim_microgrid.simulation.models import Weather


def test_advance_clock_wraps_past_midnight():
    step = advance_clock(23.5, 1.0, 3_600_000)
    assert step.current_time == pytest.approx(0.5)
    assert step.visual_delta_hours == pytest.approx(1.0)
    assert step.accumulation_delta_hours == pytest.approx(100.0)


def test_advance_clock_applies_speed_multiplier():
    step = advance_clock(10.0, 60.0, 1000)
    assert step.visual_delta_hours == pytest.approx(1.0 / 60.0)
    assert step.current_time == pytest.approx(10.0 + 1.0 / 60.0)


def test_negative_wall_delta_is_ignored():
    step = advance_clock(8.0, 1.0, -5000)
    assert step.current_time == 8.0
    assert step.visual_delta_hours == 0.0
    assert step.accumulation_delta_hours == 0.0


@pytest.mark.parametrize(
    "time, expected",
    [
        (0.0, Weather.NIGHT),
        (5.99, Weather.NIGHT),
        (6.0, Weather.SUNNY),
        (11.99, Weather.SUNNY),
        (12.0, Weather.CLOUDY),
        (15.99, Weather.CLOUDY),
        (16.0, Weather.SUNNY),
        (18.0, Weather.SUNNY),
        (18.01, Weather.NIGHT),
    ],
)
def test_weather_from_time(time, expected):
    assert weather_from_time(time) is expected


def test_manual_weather_is_kept():
    assert resolve_weather(3.0, Weather.SUNNY, manual=True) is Weather.SUNNY
    assert resolve_weather(3.0, Weather.SUNNY, manual=False) is Weather.NIGHT


def test_canonical_hours():
    assert canonical_hour(Weather.SUNNY) == 12.0
    assert canonical_hour(Weather.CLOUDY) == 14.0
    assert canonical_hour(Weather.NIGHT) == 0.0


@pytest.mark.parametrize(
    "time, expected",
    [
        (3.0, 15.0),
        (6.0, 15.0),
        (7.5, 20.0),
        (10.5, 30.0),
        (13.0, 35.0),
        (16.5, 27.5),
        (20.0, 15.0),
    ],
)
def test_ambient_temperature_curve(time, expected):
    assert ambient_temperature(time) == pytest.approx(expected)
