"""
API route modules for the microgrid simulation.

Route handlers are organized by control area:
- state: snapshot, tick, pause/reset, clock and weather, persisted slots
- appliances: load toggles
- solar: array configuration and irradiance override
- batteries: bank composition and SoC limits
- system: voltage and wire gauge

All routers are prefixed with /api and share the process-wide host.
"""

from __future__ import annotations

from .appliances import router as appliances_router
from .batteries import router as batteries_router
from .solar import router as solar_router
from .state import router as state_router
from .system import router as system_router

__all__ = [
    "state_router",
    "appliances_router",
    "solar_router",
    "batteries_router",
    "system_router",
]
