"""
Stateful host around the pure simulation reducer.

The host is the only holder of mutable state: the current snapshot, the
wall-clock reference used to derive tick deltas, and an optional
persistence service that receives every new snapshot. UI layers (HTTP
routes, CLI) talk to the simulation exclusively through a host.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from typing import Callable, List, Optional

from pydantic import ValidationError

from .config import get_snapshot_name
from .persistence import PersistenceService
from .simulation.commands import CLOCK_RESET_COMMANDS, Command, Tick
from .simulation.constants import MS_PER_HOUR
from .simulation.engine import apply_command, initial_state
from .simulation.models import SimulationState

logger = logging.getLogger(__name__)


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class SimulationHost:
    """
    Drive the reducer from wall-clock time and persist its snapshots.

    Attributes:
        state: Current snapshot (read-only property).
        snapshot_name: Persistence slot written after each mutation.

    Example:
        ```python
        host = SimulationHost(persistence=PersistenceService())
        host.restore()
        host.dispatch(SetWeather(Weather.SUNNY))
        host.tick()                 # called ~30 times per second by the UI
        host.state.battery.state_of_charge
        ```

    Notes:
        - The wall-clock reference is never persisted; the first tick after
          startup, a time jump, a pause toggle or a reset advances by zero.
        - Commands that leave the snapshot unchanged are not persisted.
        - Public methods hold a re-entrant lock, so a host shared by the
          HTTP worker threads applies ticks and commands one at a time.
    """

    def __init__(
        self,
        state: Optional[SimulationState] = None,
        persistence: Optional[PersistenceService] = None,
        snapshot_name: Optional[str] = None,
        clock: Callable[[], float] = _monotonic_ms,
    ) -> None:
        self._state = state if state is not None else initial_state()
        self._persistence = persistence
        self.snapshot_name = snapshot_name or get_snapshot_name()
        self._clock = clock
        self._last_wall_ms: Optional[float] = None
        self._lock = threading.RLock()

    @property
    def state(self) -> SimulationState:
        return self._state

    def restore(self) -> SimulationState:
        """
        Load the persisted snapshot, if any.

        A missing slot keeps the current snapshot; an invalid payload is
        logged and replaced by the initial state.
        """
        with self._lock:
            self._last_wall_ms = None
            if self._persistence is None:
                return self._state
            try:
                stored = self._persistence.load_snapshot(self.snapshot_name)
            except ValidationError as exc:
                logger.warning(
                    "Stored snapshot %r is invalid (%d errors); starting from the initial state",
                    self.snapshot_name,
                    exc.error_count(),
                )
                stored = None
                self._state = initial_state()
            if stored is not None:
                logger.info("Restored snapshot %r at t=%.2fh", self.snapshot_name, stored.current_time)
                self._state = stored
            return self._state

    def tick(self, now_ms: Optional[float] = None) -> SimulationState:
        """Advance by the wall time elapsed since the previous tick."""
        with self._lock:
            now = self._clock() if now_ms is None else now_ms
            delta = 0.0 if self._last_wall_ms is None else now - self._last_wall_ms
            self._last_wall_ms = now
            return self._apply(Tick(wall_delta_ms=delta))

    def advance(self, wall_delta_ms: float) -> SimulationState:
        """Advance by an explicit wall-clock delta (headless use)."""
        with self._lock:
            return self._apply(Tick(wall_delta_ms=wall_delta_ms))

    def dispatch(self, command: Command) -> SimulationState:
        """Apply a control command and return the resulting snapshot."""
        with self._lock:
            state = self._apply(command)
            if isinstance(command, CLOCK_RESET_COMMANDS):
                self._last_wall_ms = None
            return state

    def run(self, duration_hours: float, step_ms: float = 1000.0) -> List[SimulationState]:
        """
        Run the simulation headlessly for a span of simulated time.

        Args:
            duration_hours: Simulated hours to cover (visual clock).
            step_ms: Wall-clock delta fed to each tick.

        Returns:
            Snapshots from the starting state through the last tick. Only the
            final snapshot is persisted.

        Raises:
            ValueError: If ``step_ms`` is not positive or the simulation is
                paused with a positive duration.
        """
        if step_ms <= 0:
            raise ValueError("step_ms must be positive")
        with self._lock:
            snapshots = [self._state]
            if duration_hours <= 0:
                return snapshots
            speed = self._state.time_speed
            if self._state.is_paused or speed <= 0:
                raise ValueError("cannot run a paused or stopped simulation")

            step_hours = step_ms / MS_PER_HOUR * speed
            steps = max(1, math.ceil(duration_hours / step_hours - 1e-9))
            # The last tick covers whatever remains of the duration.
            last_ms = (duration_hours - step_hours * (steps - 1)) / speed * MS_PER_HOUR
            for index in range(steps):
                delta_ms = step_ms if index < steps - 1 else last_ms
                self._state = apply_command(self._state, Tick(wall_delta_ms=delta_ms))
                snapshots.append(self._state)

            logger.info(
                "Ran %.2f simulated hours in %d ticks (SoC %.1f%%)",
                duration_hours,
                len(snapshots) - 1,
                self._state.battery.state_of_charge,
            )
            self._persist()
            return snapshots

    def _apply(self, command: Command) -> SimulationState:
        # Callers hold self._lock.
        new_state = apply_command(self._state, command)
        if new_state is not self._state:
            self._state = new_state
            self._persist()
        return self._state

    def _persist(self) -> None:
        if self._persistence is not None:
            self._persistence.save_snapshot(self._state, self.snapshot_name)
