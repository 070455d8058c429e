"""
Route data models shared by the directions client, the aggregator and
the session store.

DirectionsResponse is the wire shape of the directions service. It is
parsed through an explicit field whitelist: unknown keys are dropped and
every optional field has a defined default (an explicit JSON null for a
list field is read as an empty list).
"""

from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LegInfo(BaseModel):
    """Travel segment between two consecutive waypoints."""

    model_config = ConfigDict(extra="ignore")

    distance: str = ""  # e.g. "0.8 km"
    duration: str = ""  # e.g. "2 mins"

    @field_validator("distance", "duration", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else value


class WaypointDetail(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = ""
    address: str = ""
    coordinates: Tuple[float, float]  # (lat, lng)
    type: str = ""
    hours: List[str] = Field(default_factory=list)
    photos: List[str] = Field(default_factory=list)

    @field_validator("name", "address", "type", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else value

    @field_validator("hours", "photos", mode="before")
    @classmethod
    def _none_to_list(cls, value):
        return [] if value is None else value


class DirectionsResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    polyline: Optional[str] = None
    instructions: List[str] = Field(default_factory=list)
    waypoints: List[WaypointDetail] = Field(default_factory=list)
    round_trip: bool = False
    notes: str = ""
    legs: List[LegInfo] = Field(default_factory=list)

    @field_validator("instructions", "waypoints", "legs", mode="before")
    @classmethod
    def _none_to_list(cls, value):
        return [] if value is None else value

    @field_validator("notes", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else value

    @field_validator("round_trip", mode="before")
    @classmethod
    def _none_to_false(cls, value):
        return False if value is None else value


class TimelineEvent(BaseModel):
    """One route instruction, as shown in the directions list."""

    time: str  # "Step 1"
    title: str  # "Instruction 1"
    description: str


class RouteTotals(BaseModel):
    total_distance_km: float = 0.0
    total_duration_min: int = 0


class RouteUpdate(BaseModel):
    """
    Everything derived from one DirectionsResponse.

    timeline / waypoints / legs / totals are attached to the session;
    route_geometry and waypoint_coords are (lng, lat) projections handed
    to the map and never stored.
    """

    timeline: List[TimelineEvent] = Field(default_factory=list)
    waypoints: List[WaypointDetail] = Field(default_factory=list)
    legs: List[LegInfo] = Field(default_factory=list)
    totals: RouteTotals = Field(default_factory=RouteTotals)
    route_geometry: List[Tuple[float, float]] = Field(default_factory=list)
    waypoint_coords: List[Tuple[float, float]] = Field(default_factory=list)
    round_trip: bool = False
    notes: str = ""
