"""
Physical constants, hardware presets and the fixed initial configuration.

Values are grouped by subsystem. Power is expressed in kW, energy in kWh,
resistance in ohms and temperatures in °C unless stated otherwise.
"""

from __future__ import annotations

from typing import Dict, Tuple

# Clock
MS_PER_HOUR = 3_600_000.0
HOURS_PER_DAY = 24.0
ACCUMULATION_MULTIPLIER = 100.0

SUNRISE_HOUR = 6.0
SUNSET_HOUR = 18.0
CLOUDY_START_HOUR = 12.0
CLOUDY_END_HOUR = 16.0

# Solar
CLOUDY_FACTOR = 0.3
STC_IRRADIANCE_W_M2 = 1000.0
PANEL_MODULE_EFFICIENCY = 0.20  # nameplate W per W/m² of module surface at STC
SOLAR_TEMP_COEFFICIENT = -0.004  # per °C above the reference temperature
SOLAR_REFERENCE_TEMP_C = 25.0

# Battery
BATTERY_CHARGE_EFFICIENCY = 0.97
BATTERY_DISCHARGE_EFFICIENCY = 0.97
BATTERY_OPTIMAL_TEMP_C = 20.0
BATTERY_TEMP_COEFFICIENT = -0.01  # efficiency change per 10 °C away from optimum
BATTERY_MIN_TEMP_EFFICIENCY = 0.7
MIN_BATTERIES = 1
MAX_BATTERIES = 12
DEFAULT_MIN_SOC = 20.0
DEFAULT_MAX_SOC = 95.0

# name -> (capacity kWh, internal resistance ohm, max C-rate)
BATTERY_PRESETS: Dict[str, Tuple[float, float, float]] = {
    "small": (13.5, 0.05, 1.0),
    "medium": (40.0, 0.02, 0.8),
    "large": (100.0, 0.01, 0.5),
}

# Electrical system
SUPPORTED_VOLTAGES = (120, 240, 480)
INVERTER_EFFICIENCY = 0.96
DEFAULT_VOLTAGE = 240
DEFAULT_WIRE_GAUGE = "8AWG"

# Copper resistance of a 10 m reference run per gauge (ohm).
WIRE_GAUGE_RESISTANCE: Dict[str, float] = {
    "10AWG": 0.0328,
    "8AWG": 0.0206,
    "6AWG": 0.0130,
}

# Cable run length relative to the reference run.
WIRE_SEGMENT_MULTIPLIERS: Dict[str, float] = {
    "solar_to_battery": 1.5,
    "battery_to_house": 1.0,
    "grid_to_house": 3.0,
}

# Grid and environment
GRID_IMPORT_RATE = 0.13  # $/kWh
GRID_EXPORT_RATE = 0.08  # $/kWh
CO2_PER_KWH = 0.5  # kg
FLOW_EPSILON_KW = 1e-9

# Appliance power ratings (kW)
APPLIANCE_POWER: Dict[str, float] = {
    "light": 0.06,
    "refrigerator": 0.15,
    "ac": 3.5,
    "tv": 0.15,
    "computer": 0.3,
    "washer": 1.2,
    "heater": 2.0,
    "dishwasher": 1.8,
    "electric_car": 7.0,
}

# (id, display name, type, initially on, always on)
INITIAL_APPLIANCES: Tuple[Tuple[str, str, str, bool, bool], ...] = (
    ("light-1", "Living room light", "light", False, False),
    ("light-2", "Kitchen light", "light", False, False),
    ("refrigerator", "Refrigerator", "refrigerator", True, True),
    ("ac", "Air conditioning", "ac", False, False),
    ("tv", "Television", "tv", False, False),
    ("computer", "Computer", "computer", False, False),
    ("washer", "Washing machine", "washer", False, False),
    ("heater", "Space heater", "heater", False, False),
    ("dishwasher", "Dishwasher", "dishwasher", False, False),
    ("electric-car", "Electric car charger", "electric_car", False, False),
)

# Initial configuration
INITIAL_TIME = 12.0
INITIAL_PANEL_COUNT = 56
INITIAL_POWER_PER_PANEL_W = 250.0
INITIAL_SOLAR_EFFICIENCY = 1.0
INITIAL_PANEL_ANGLE = 30.0
INITIAL_BATTERY_SIZE = "small"
INITIAL_SOC = 50.0
