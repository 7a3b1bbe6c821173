"""
Pydantic schemas for API request/response validation.

- controls: one request body per simulation command
- snapshots: persisted snapshot listings

Snapshot responses use the engine's ``SimulationState`` dataclass directly
as the response model.
"""

from __future__ import annotations

from .controls import (
    BatteryAddRequest,
    BatteryConfigRequest,
    BatterySizeRequest,
    IrradianceRequest,
    PanelAngleRequest,
    PanelCountRequest,
    PanelPowerRequest,
    SocLimitsRequest,
    SolarEfficiencyRequest,
    TickRequest,
    TimeRequest,
    TimeSpeedRequest,
    VoltageRequest,
    WeatherRequest,
    WireGaugeRequest,
)
from .snapshots import SnapshotInfo

__all__ = [
    # Clock
    "TickRequest",
    "TimeRequest",
    "TimeSpeedRequest",
    "WeatherRequest",
    # Solar
    "PanelCountRequest",
    "PanelPowerRequest",
    "PanelAngleRequest",
    "SolarEfficiencyRequest",
    "IrradianceRequest",
    # Batteries
    "BatteryAddRequest",
    "BatterySizeRequest",
    "BatteryConfigRequest",
    "SocLimitsRequest",
    # Electrical system
    "VoltageRequest",
    "WireGaugeRequest",
    # Persistence
    "SnapshotInfo",
]
