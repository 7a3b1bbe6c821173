from __future__ import annotations

import pytest

from sim_microgrid.simulation.losses import (
    compute_losses,
    solar_temperature_loss,
    wire_loss,
    wire_resistance,
)
from sim_microgrid.simulation.models import WireGauge


def test_wire_loss_uses_i_squared_r():
    # 2.4 kW at 240 V -> 10 A
    assert wire_loss(2.4, 0.0206, 240.0) == pytest.approx(100 * 0.0206 / 1000)


def test_wire_loss_guards():
    assert wire_loss(0.0, 0.0206, 240.0) == 0.0
    assert wire_loss(-1.0, 0.0206, 240.0) == 0.0
    assert wire_loss(1.0, 0.0206, 0.0) == 0.0


def test_wire_resistance_segments_and_fallback():
    assert wire_resistance(WireGauge.AWG6, "grid_to_house") == pytest.approx(0.0130 * 3.0)
    assert wire_resistance("10AWG", "solar_to_battery") == pytest.approx(0.0328 * 1.5)
    assert wire_resistance("4AWG", "battery_to_house") == pytest.approx(0.0206)


def test_solar_temperature_loss_above_reference_only():
    assert solar_temperature_loss(10.0, 35.0) == pytest.approx(0.4)
    assert solar_temperature_loss(10.0, 20.0) == 0.0


def _losses(**overrides):
    params = dict(
        solar_power=5.0,
        consumption=1.0,
        battery_flow=-4.0,
        grid_power=0.0,
        voltage=240.0,
        wire_gauge=WireGauge.AWG8,
        bank_resistance=0.05,
        charge_efficiency=0.97,
        discharge_efficiency=0.97,
        temperature_c=25.0,
    )
    params.update(overrides)
    return compute_losses(**params)


def test_charging_losses():
    losses = _losses()
    current_sq = (4000.0 / 240.0) ** 2
    assert losses.wire_losses.solar_to_battery == pytest.approx(current_sq * 0.0206 * 1.5 / 1000)
    assert losses.wire_losses.battery_to_house == 0.0
    assert losses.wire_losses.grid_to_house == 0.0
    assert losses.inverter_loss == pytest.approx(0.04)
    assert losses.battery_losses.charging == pytest.approx(0.12)
    assert losses.battery_losses.discharging == 0.0
    assert losses.battery_losses.resistive == pytest.approx(current_sq * 0.05 / 1000)
    assert losses.temperature_losses.solar == 0.0


def test_discharge_and_import_losses():
    losses = _losses(solar_power=0.0, consumption=5.0, battery_flow=2.4, grid_power=2.6)
    assert losses.wire_losses.solar_to_battery == 0.0
    assert losses.wire_losses.battery_to_house == pytest.approx(100 * 0.0206 / 1000)
    assert losses.wire_losses.grid_to_house > 0.0
    assert losses.battery_losses.discharging == pytest.approx(2.4 * 0.03)
    assert losses.battery_losses.charging == 0.0


def test_total_is_sum_of_components():
    losses = _losses(temperature_c=35.0)
    parts = (
        losses.wire_losses.total
        + losses.inverter_loss
        + losses.battery_losses.charging
        + losses.battery_losses.discharging
        + losses.battery_losses.resistive
        + losses.temperature_losses.solar
    )
    assert losses.total_losses == pytest.approx(parts)
    assert losses.temperature_losses.solar == pytest.approx(0.2)
