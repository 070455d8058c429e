"""
Turn a raw DirectionsResponse into the pieces the rest of the runtime needs:

- a timeline (one event per instruction, in order)
- leg totals from the aggregator
- (lng, lat) route geometry decoded from the polyline
- (lng, lat) marker coordinates for each waypoint

A malformed polyline only costs the route overlay for that turn; the
timeline, waypoints and totals still come through.
"""

import logging
from typing import List, Optional, Tuple

from core.aggregator.route_totals import compute_totals
from core.directions.models import (
    DirectionsResponse,
    RouteUpdate,
    TimelineEvent,
    WaypointDetail,
)
from core.geometry.polyline import decode_polyline, to_lng_lat
from exceptions.exceptions import FormatError


logger = logging.getLogger(__name__)


def build_timeline(instructions: List[str]) -> List[TimelineEvent]:
    return [
        TimelineEvent(
            time=f"Step {idx + 1}",
            title=f"Instruction {idx + 1}",
            description=inst,
        )
        for idx, inst in enumerate(instructions)
    ]


def decode_route_geometry(encoded: Optional[str]) -> List[Tuple[float, float]]:
    """Decode the polyline into (lng, lat) pairs; empty on missing or malformed input."""
    if not encoded:
        return []
    try:
        decoded = decode_polyline(encoded)
    except FormatError as e:
        logger.warning("[ROUTE] Skipping route overlay, bad polyline: %s", e)
        return []
    return to_lng_lat(decoded)


def waypoint_coords(waypoints: List[WaypointDetail]) -> List[Tuple[float, float]]:
    """Marker positions in (lng, lat) order."""
    return [(lng, lat) for lat, lng in (wp.coordinates for wp in waypoints)]


def build_route_update(response: DirectionsResponse) -> RouteUpdate:
    if response.legs and len(response.legs) != max(len(response.waypoints) - 1, 0):
        # Kept as-is: the UI pairs leg i with waypoint i+1 and simply
        # shows nothing for missing pairs.
        logger.warning(
            "[ROUTE] Got %d legs for %d waypoints",
            len(response.legs),
            len(response.waypoints),
        )

    return RouteUpdate(
        timeline=build_timeline(response.instructions),
        waypoints=list(response.waypoints),
        legs=list(response.legs),
        totals=compute_totals(response.legs),
        route_geometry=decode_route_geometry(response.polyline),
        waypoint_coords=waypoint_coords(response.waypoints),
        round_trip=response.round_trip,
        notes=response.notes,
    )
