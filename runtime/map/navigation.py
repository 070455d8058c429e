"""Turn-by-turn export to Google Maps.

Origin is the first waypoint, destination the last, and every stop in
between goes into `waypoints` joined with "|". Coordinates come in as
(lng, lat) marker pairs and go out as "lat,lng".
"""

from typing import Optional, Sequence, Tuple
from urllib.parse import urlencode

from configs.settings import settings


GOOGLE_MAPS_DIR_URL = "https://www.google.com/maps/dir/"
WAYPOINT_SEPARATOR = "|"


def _lat_lng(coord: Tuple[float, float]) -> str:
    lng, lat = coord
    return f"{lat},{lng}"


def build_navigation_url(
    waypoint_coords: Sequence[Tuple[float, float]],
    navigate: bool = False,
    travel_mode: Optional[str] = None,
) -> str:
    """Build a Google Maps directions URL for the ordered (lng, lat) stops.

    `navigate=True` adds `dir_action=navigate`, which opens straight into
    navigation on a phone (used for the QR hand-off).
    """
    if len(waypoint_coords) < 2:
        raise ValueError("a navigation URL needs at least two waypoints")

    params = [
        ("api", "1"),
        ("origin", _lat_lng(waypoint_coords[0])),
        ("destination", _lat_lng(waypoint_coords[-1])),
        ("travelmode", travel_mode or settings.travel_mode),
    ]
    if navigate:
        params.append(("dir_action", "navigate"))

    intermediate = WAYPOINT_SEPARATOR.join(_lat_lng(c) for c in waypoint_coords[1:-1])
    if intermediate:
        params.append(("waypoints", intermediate))

    return GOOGLE_MAPS_DIR_URL + "?" + urlencode(params)
