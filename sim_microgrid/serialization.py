"""
JSON serialization of simulation snapshots.

Snapshots are frozen dataclasses; pydantic's :class:`TypeAdapter` validates
them back from plain JSON data, rebuilding enums, tuples and nested value
types. A dump/load round trip yields a snapshot equal to the original.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict

from pydantic import TypeAdapter

from .simulation.models import SimulationState


@lru_cache()
def _state_adapter() -> TypeAdapter:
    return TypeAdapter(SimulationState)


def snapshot_to_dict(state: SimulationState) -> Dict[str, Any]:
    """
    Convert a snapshot to JSON-compatible data.

    Example:
        ```python
        data = snapshot_to_dict(initial_state())
        data["weather"]          # "sunny"
        data["system"]["voltage"]  # 240.0
        ```
    """
    return _state_adapter().dump_python(state, mode="json")


def snapshot_from_dict(data: Any) -> SimulationState:
    """
    Rebuild a snapshot from JSON-compatible data.

    Raises:
        pydantic.ValidationError: If the payload does not describe a snapshot.
    """
    return _state_adapter().validate_python(data)
