from __future__ import annotations

import pytest

from sim_microgrid.simulation.statistics import (
    co2_saved,
    cost_savings,
    energy_balance,
    integrate,
    system_efficiency,
    total_efficiency,
    update_grid,
    update_system,
)


def test_integrate_splits_grid_direction():
    inc = integrate(5.0, 1.0, -2.0, 0.5)
    assert inc.generated == pytest.approx(2.5)
    assert inc.consumed == pytest.approx(0.5)
    assert inc.imported == 0.0
    assert inc.exported == pytest.approx(1.0)


def test_update_grid_accumulates_and_flags(state):
    grid = update_grid(state.grid, 3.0, integrate(0.0, 3.0, 3.0, 100.0))
    assert grid.importing and not grid.exporting
    assert grid.current_flow == 3.0
    assert grid.total_imported == pytest.approx(300.0)

    idle = update_grid(grid, 1e-12, integrate(0.0, 0.0, 1e-12, 1.0))
    assert not idle.importing and not idle.exporting


def test_cost_savings():
    assert cost_savings(100.0, 20.0, 10.0, 0.13, 0.08) == pytest.approx(10.7)


def test_co2_saved():
    assert co2_saved(10.0) == pytest.approx(5.0)


def test_system_efficiency_keeps_previous_without_sun():
    assert system_efficiency(10.0, 1.0, 0.0) == pytest.approx(90.0)
    assert system_efficiency(0.0, 1.0, 42.0) == 42.0


def test_energy_balance_of_dispatched_flows():
    # Surplus: 5 kW solar feeds 1 kW load, charges 3 kW, exports 1 kW.
    assert energy_balance(5.0, 1.0, -3.0, -1.0) == pytest.approx(0.0)
    # Deficit: battery and grid cover a 4 kW load.
    assert energy_balance(0.0, 4.0, 2.5, 1.5) == pytest.approx(0.0)
    assert energy_balance(2.0, 1.0, 0.0, 0.0) == pytest.approx(1.0)


def test_total_efficiency_counts_every_source():
    assert total_efficiency(0.0, 0.0, 0.0, 0.0) == 0.0
    assert total_efficiency(2.0, 1.0, 1.0, 0.4) == pytest.approx(90.0)
    assert total_efficiency(4.0, -3.0, 0.0, 0.2) == pytest.approx(95.0)
    assert total_efficiency(0.1, 0.0, 0.0, 0.5) == 0.0


def test_update_system_keeps_configuration(state):
    system = update_system(
        state.system,
        solar_power=0.0,
        consumption=2.0,
        battery_flow=0.0,
        grid_power=2.0,
        total_losses=0.1,
    )
    assert system.voltage == state.system.voltage
    assert system.wire_gauge is state.system.wire_gauge
    assert system.total_efficiency == pytest.approx(95.0)
    assert system.energy_balance == pytest.approx(0.0)
