from __future__ import annotations

import json

import pytest

from sim_microgrid.serialization import snapshot_from_dict, snapshot_to_dict
from sim_microgrid.simulation import engine
from sim_microgrid.simulation.battery import bank_flow
from sim_microgrid.simulation.commands import (
    AddBattery,
    ResetSimulation,
    SetTime,
    SetWeather,
    Tick,
    ToggleAppliance,
    TogglePause,
)
from sim_microgrid.simulation.constants import MS_PER_HOUR
from sim_microgrid.simulation.models import BatterySize, Weather, WireGauge


def test_initial_state(state):
    assert state.current_time == 12.0
    assert state.weather is Weather.SUNNY
    assert state.solar.max_power == pytest.approx(14.0)
    assert len(state.batteries) == 1
    assert state.battery.capacity == pytest.approx(13.5)
    assert state.battery.state_of_charge == 50.0
    assert state.consumption.total_power == pytest.approx(0.15)
    assert state.system.voltage == 240.0
    assert state.system.wire_gauge is WireGauge.AWG8
    assert state.system.total_efficiency == 0.0
    assert state.system.energy_balance == 0.0
    assert state.solar.area == pytest.approx(70.0)
    assert engine.initial_state() == state


def test_sunny_noon_hour_charges_battery(state):
    state = engine.set_solar_panel_power(state, 100.0)
    state = engine.set_weather(state, Weather.SUNNY)

    result = engine.tick(state, MS_PER_HOUR)

    assert result.current_time == pytest.approx(13.0)
    assert result.solar.current_power == pytest.approx(4.85, abs=0.5)
    assert result.consumption.total_power == pytest.approx(0.15)
    assert result.battery.state_of_charge == pytest.approx(82.0, abs=0.5)
    assert result.battery.charging is True
    assert result.grid.importing is False


def test_night_with_air_conditioning_drains_battery(state):
    state = engine.set_time(state, 22.0)
    state = engine.set_battery_soc(state, 85.0)
    state = engine.toggle_appliance(state, "ac")

    result = engine.tick(state, 2 * MS_PER_HOUR)

    assert result.current_time == pytest.approx(0.0)
    assert result.weather is Weather.NIGHT
    assert result.solar.current_power == 0.0
    assert result.consumption.total_power == pytest.approx(3.65)
    assert result.battery.state_of_charge == pytest.approx(29.0, abs=0.5)
    assert result.battery.charging is False
    assert bank_flow(result.battery) > 3.0


def test_battery_at_floor_leaves_ev_charging_to_grid(state):
    state = engine.set_time(state, 20.0)
    state = engine.set_battery_soc(state, 20.0)
    state = engine.toggle_appliance(state, "electric-car")

    result = engine.tick(state, 1000)

    assert abs(bank_flow(result.battery)) < 0.5
    assert result.battery.state_of_charge == 20.0
    assert result.grid.importing is True
    assert result.grid.current_flow >= 7.0
    assert result.system.energy_balance == pytest.approx(0.0, abs=1e-9)
    assert 0.0 < result.system.total_efficiency < 100.0


def test_tick_accumulates_counters_on_accumulation_scale(state):
    result = engine.tick(engine.set_weather(state, Weather.SUNNY), 36_000)  # 0.01 h
    assert result.solar.total_generated == pytest.approx(result.solar.current_power * 1.0, rel=1e-9)
    assert result.consumption.total_consumed == pytest.approx(0.15)
    assert result.statistics.co2_saved == pytest.approx(result.solar.total_generated * 0.5)
    assert result.statistics.net_energy == pytest.approx(result.solar.current_power - 0.15)


def test_paused_tick_returns_same_snapshot(state):
    paused = engine.toggle_pause(state)
    assert engine.tick(paused, MS_PER_HOUR) is paused
    assert engine.toggle_pause(paused).is_paused is False


def test_manual_weather_survives_into_night(state):
    state = engine.set_weather(state, Weather.SUNNY)
    assert state.current_time == 12.0
    assert state.is_manual_weather_control is True

    evening = engine.tick(state, 7 * MS_PER_HOUR)
    assert evening.current_time == pytest.approx(19.0)
    assert evening.weather is Weather.SUNNY
    assert evening.solar.current_power == 0.0


def test_set_time_clears_weather_override(state):
    state = engine.set_weather(state, Weather.CLOUDY)
    assert state.current_time == 14.0

    jumped = engine.set_time(state, 19.0)
    assert jumped.is_manual_weather_control is False
    assert engine.tick(jumped, 0).weather is Weather.NIGHT


def test_reset_is_idempotent(state):
    busy = engine.tick(engine.toggle_appliance(state, "heater"), MS_PER_HOUR)
    once = engine.reset_simulation(busy)
    assert once == engine.initial_state()
    assert engine.reset_simulation(once) == once


def test_toggle_appliance_rules(state):
    on = engine.toggle_appliance(state, "tv")
    assert on.consumption.total_power == pytest.approx(0.30)
    assert engine.toggle_appliance(on, "tv").consumption.total_power == pytest.approx(0.15)
    assert engine.toggle_appliance(state, "refrigerator") is state
    assert engine.toggle_appliance(state, "jacuzzi") is state


def test_battery_count_boundaries(state):
    assert engine.remove_battery(state, "battery-1") is state

    full = engine.set_battery_config(state, BatterySize.SMALL, 12)
    assert len(full.batteries) == 12
    assert engine.add_battery(full, BatterySize.LARGE) is full


def test_battery_commands_refresh_aggregate(state):
    grown = engine.add_battery(state, BatterySize.MEDIUM)
    assert grown.battery.capacity == pytest.approx(53.5)
    assert grown.battery.state_of_charge == pytest.approx(50.0)

    resized = engine.change_battery_size(grown, "battery-1", BatterySize.LARGE)
    assert resized.battery.capacity == pytest.approx(140.0)

    shrunk = engine.remove_battery(resized, "battery-2")
    assert [b.id for b in shrunk.batteries] == ["battery-1"]
    assert shrunk.battery.capacity == pytest.approx(100.0)


def test_set_min_max_soc_clamps_current_soc(state):
    narrowed = engine.set_min_max_soc(state, 30.0, 40.0)
    assert narrowed.battery.min_soc == 30.0
    assert narrowed.battery.max_soc == 40.0
    assert narrowed.battery.state_of_charge == pytest.approx(40.0)


def test_electrical_settings(state):
    state = engine.set_system_voltage(state, 120.0)
    state = engine.set_wire_gauge(state, WireGauge.AWG10)
    assert state.system.voltage == 120.0
    assert state.system.wire_gauge is WireGauge.AWG10


def test_soc_stays_within_bounds_over_a_day(state):
    state = engine.toggle_appliance(state, "electric-car")
    state = engine.toggle_appliance(state, "heater")
    state = engine.add_battery(state, BatterySize.SMALL)
    for _ in range(24 * 30):
        state = engine.tick(state, 2 * 60_000)
        assert 0.0 <= state.battery.state_of_charge <= 100.0
        assert state.battery.min_soc <= state.battery.state_of_charge <= state.battery.max_soc
        for unit in state.batteries:
            assert 0.0 <= unit.state_of_charge <= 100.0


def test_energy_balance_stays_within_losses_over_a_day(state):
    state = engine.toggle_appliance(state, "washer")
    state = engine.toggle_appliance(state, "ac")
    for _ in range(24 * 30):
        state = engine.tick(state, 2 * 60_000)
        assert abs(state.system.energy_balance) <= state.losses.total_losses
        assert 0.0 <= state.system.total_efficiency <= 100.0


def test_serialized_snapshot_resumes_identically(state):
    state = engine.toggle_appliance(state, "washer")
    state = engine.add_battery(state, BatterySize.MEDIUM)
    for _ in range(5):
        state = engine.tick(state, 600_000)

    payload = json.loads(json.dumps(snapshot_to_dict(state)))
    restored = snapshot_from_dict(payload)

    assert restored == state
    assert engine.tick(restored, 600_000) == engine.tick(state, 600_000)


def test_apply_command_dispatches_values(state):
    state = engine.apply_command(state, SetTime(8.0))
    state = engine.apply_command(state, ToggleAppliance("computer"))
    state = engine.apply_command(state, AddBattery(BatterySize.SMALL))
    state = engine.apply_command(state, Tick(MS_PER_HOUR))
    assert state.current_time == pytest.approx(9.0)
    assert len(state.batteries) == 2

    state = engine.apply_command(state, SetWeather(Weather.NIGHT))
    assert state.current_time == 0.0
    assert engine.apply_command(state, TogglePause()).is_paused
    assert engine.apply_command(state, ResetSimulation()) == engine.initial_state()


def test_apply_command_rejects_unknown_values(state):
    with pytest.raises(TypeError):
        engine.apply_command(state, "tick")
