"""
Session-related models for the Polaris runtime.

These describe:
- a chat Session (messages + the route derived from the latest response)
- helpers for the timestamps stored on it
"""

import time
from typing import List

from pydantic import BaseModel, Field

from core.directions.models import LegInfo, TimelineEvent, WaypointDetail


def now_ms() -> int:
    return int(time.time() * 1000)


class Session(BaseModel):
    session_id: str
    name: str
    last_modified: int = Field(default_factory=now_ms)  # epoch milliseconds
    messages: List[str] = Field(default_factory=list)

    # Route state from the most recent response only.
    timeline: List[TimelineEvent] = Field(default_factory=list)
    waypoints: List[WaypointDetail] = Field(default_factory=list)
    legs: List[LegInfo] = Field(default_factory=list)
    total_distance_km: float = 0.0
    total_duration_min: int = 0

    # Indices into `messages` that received a response. Sorted, no duplicates.
    response_indices: List[int] = Field(default_factory=list)
