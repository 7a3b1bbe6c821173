from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class SnapshotInfo(BaseModel):
    """
    Persisted snapshot slot summary.

    Example:
        ```python
        # Response item from GET /api/snapshots
        {
            "name": "default",
            "current_time": 13.25,
            "state_of_charge": 61.4,
            "updated_at": "2025-01-15T10:30:00Z"
        }
        ```
    """
    model_config = ConfigDict(from_attributes=True)

    name: str
    current_time: Optional[float] = None
    state_of_charge: Optional[float] = None
    updated_at: Optional[datetime] = None
