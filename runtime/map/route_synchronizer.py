"""RouteSynchronizer: projects the active route onto a map renderer.

This is the only component that mutates the renderer. It owns:

- the "route" path overlay
- the list of waypoint markers
- the user-location marker
- the idle rotation task used in globe mode

Lifecycle
---------
UNINITIALIZED -> READY, once location resolution finishes. Whichever of
"position found" and "timeout" happens first decides how the base map is
set up; the other outcome is ignored. A position starts a flat map
zoomed on the user. A timeout (or a geolocation error) starts a globe at
the default camera with a slow idle rotation.

Within READY, route and markers are replaced freely. The base view is
only rebuilt by `reinitialize`, which cancels the rotation task before
the old renderer is disposed.

Route geometry and waypoint updates that arrive before READY are kept
and drawn as soon as the map is ready.
"""

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple

from configs.settings import DEFAULT_CENTER, DEFAULT_ZOOM, USER_LOCATION_ZOOM, settings
from exceptions.exceptions import GeolocationError

from .renderer import BoundingBox, MapRenderer, MarkerStyle, Padding, Projection, linear


logger = logging.getLogger(__name__)

LngLat = Tuple[float, float]

ROUTE_OVERLAY_ID = "route"
ROUTE_STYLE = {
    "line-color": "#3498db",
    "line-width": 4,
    "line-join": "round",
    "line-cap": "round",
}

LOCATING_TEXT = "Locating you..."
TIMEOUT_TEXT = "Geolocation is taking too long, showing globe view"


class MapState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"


def marker_style(index: int, total: int) -> MarkerStyle:
    """First marker is the origin, last is the destination, the rest are stops."""
    if index == 0:
        return MarkerStyle.ORIGIN
    if index == total - 1:
        return MarkerStyle.DESTINATION
    return MarkerStyle.WAYPOINT


class RouteSynchronizer:
    """Keeps one map renderer in line with the active session's route.

    Parameters
    ----------
    renderer:
        The renderer this synchronizer exclusively drives.
    panel_width:
        Width of the side panel. When the panel is open the right edge of
        every route fit is padded by this much.
    """

    def __init__(
        self,
        renderer: MapRenderer,
        panel_width: Optional[float] = None,
        geolocation_timeout_s: Optional[float] = None,
    ) -> None:
        self._renderer = renderer
        self._state = MapState.UNINITIALIZED
        self._degraded = False
        self._status_text = LOCATING_TEXT

        self._panel_open = False
        self._panel_width = panel_width if panel_width is not None else settings.panel_width
        self._geolocation_timeout_s = (
            geolocation_timeout_s
            if geolocation_timeout_s is not None
            else settings.geolocation_timeout_s
        )

        self._route: List[LngLat] = []
        self._waypoints: List[LngLat] = []
        self._markers: List[object] = []
        self._user_marker: Optional[object] = None
        self._rotation_task: Optional[asyncio.Task] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def renderer(self) -> MapRenderer:
        return self._renderer

    @property
    def state(self) -> MapState:
        return self._state

    @property
    def degraded(self) -> bool:
        return self._degraded

    @property
    def status_text(self) -> str:
        return self._status_text

    @property
    def rotating(self) -> bool:
        return self._rotation_task is not None and not self._rotation_task.done()

    @property
    def route(self) -> List[LngLat]:
        return list(self._route)

    @property
    def waypoints(self) -> List[LngLat]:
        return list(self._waypoints)

    # ------------------------------------------------------------------
    # Location resolution
    # ------------------------------------------------------------------

    async def resolve_location(self, locate: Callable[[], Awaitable[LngLat]]) -> MapState:
        """Race `locate()` against the geolocation timeout and bring the map up.

        The losing side has no effect: on timeout the pending locate call
        is cancelled, and a position that arrives after the map is ready
        is ignored.
        """
        if self._state is MapState.READY:
            return self._state

        try:
            position = await asyncio.wait_for(locate(), timeout=self._geolocation_timeout_s)
        except asyncio.TimeoutError:
            self.location_timed_out()
        except GeolocationError as e:
            logger.warning("[MAP] Geolocation error: %s", e.details)
            self.location_failed(f"Geolocation error: {e.details}")
        else:
            self.location_found(position)
        return self._state

    def location_found(self, position: LngLat) -> bool:
        """Start the map on the user's position. Returns False if already READY."""
        if self._state is MapState.READY:
            return False
        lng, lat = position
        self._renderer.initialize((lng, lat), USER_LOCATION_ZOOM, Projection.MERCATOR)
        self._user_marker = self._renderer.add_marker((lng, lat), MarkerStyle.USER)
        self._status_text = ""
        self._become_ready()
        return True

    def location_timed_out(self) -> bool:
        return self.location_failed(TIMEOUT_TEXT)

    def location_failed(self, status_text: str) -> bool:
        """Start the degraded globe view. Returns False if already READY."""
        if self._state is MapState.READY:
            return False
        self._degraded = True
        self._status_text = status_text
        self._renderer.initialize(DEFAULT_CENTER, DEFAULT_ZOOM, Projection.GLOBE)
        self._become_ready()
        self._renderer.on_load(self.start_rotation)
        return True

    def _become_ready(self) -> None:
        self._state = MapState.READY
        logger.info("[MAP] Map ready (degraded=%s)", self._degraded)
        if len(self._route) >= 2:
            self._render_route()
        if self._waypoints:
            self._render_waypoints()

    # ------------------------------------------------------------------
    # Idle rotation
    # ------------------------------------------------------------------

    def start_rotation(self) -> None:
        """Start the idle globe rotation on the running event loop (once)."""
        if self.rotating:
            return
        self._rotation_task = asyncio.get_running_loop().create_task(self._rotate())

    def stop_rotation(self) -> None:
        if self._rotation_task is not None:
            self._rotation_task.cancel()
            self._rotation_task = None

    async def _rotate(self) -> None:
        step = settings.rotation_step_deg
        duration_ms = settings.rotation_duration_ms
        interval = settings.frame_interval_s
        while True:
            lng, lat = self._renderer.get_center()
            self._renderer.animate_to((lng - step, lat), duration_ms, linear)
            await asyncio.sleep(interval)

    # ------------------------------------------------------------------
    # Side panel
    # ------------------------------------------------------------------

    def set_panel_open(self, is_open: bool, width: Optional[float] = None) -> None:
        """Record side panel state and re-fit the current route for it."""
        self._panel_open = is_open
        if width is not None:
            self._panel_width = width
        if self._state is MapState.READY and len(self._route) >= 2:
            self._render_route()

    def fit_padding(self) -> Padding:
        pad = settings.fit_padding
        extra = self._panel_width if self._panel_open else 0
        return Padding(top=pad, bottom=pad, left=pad, right=pad + extra)

    # ------------------------------------------------------------------
    # Route + markers
    # ------------------------------------------------------------------

    def update_route(self, geometry: Sequence[LngLat]) -> bool:
        """Replace the route overlay with `geometry` ((lng, lat) points).

        Fewer than two points means there is no route yet, and nothing on
        the map is touched. Returns True when the map was updated.
        """
        if len(geometry) < 2:
            return False
        self._route = [tuple(p) for p in geometry]
        if self._state is not MapState.READY:
            return False
        self._render_route()
        return True

    def clear_route(self) -> None:
        """Forget the current route and remove its overlay if drawn."""
        self._route = []
        if self._state is MapState.READY and self._renderer.has_path_overlay(ROUTE_OVERLAY_ID):
            self._renderer.remove_path_overlay(ROUTE_OVERLAY_ID)

    def update_waypoints(self, coords: Sequence[LngLat]) -> bool:
        """Replace every waypoint marker with markers for `coords`."""
        self._waypoints = [tuple(c) for c in coords]
        if self._state is not MapState.READY:
            return False
        self._render_waypoints()
        return True

    def _render_route(self) -> None:
        if self._renderer.has_path_overlay(ROUTE_OVERLAY_ID):
            self._renderer.remove_path_overlay(ROUTE_OVERLAY_ID)
        self._renderer.add_path_overlay(ROUTE_OVERLAY_ID, self._route, ROUTE_STYLE)
        self._renderer.fit_to_bounds(BoundingBox.around(self._route), self.fit_padding())

    def _render_waypoints(self) -> None:
        for handle in self._markers:
            self._renderer.remove_marker(handle)
        self._markers = []

        total = len(self._waypoints)
        for index, coord in enumerate(self._waypoints):
            handle = self._renderer.add_marker(coord, marker_style(index, total))
            self._markers.append(handle)

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def dispose(self) -> None:
        """Tear down the view: stop rotation first, then dispose the renderer."""
        self.stop_rotation()
        self._renderer.dispose()
        self._markers = []
        self._user_marker = None
        self._state = MapState.UNINITIALIZED
        self._degraded = False
        self._status_text = LOCATING_TEXT

    def reinitialize(self, renderer: MapRenderer) -> None:
        """Swap in a fresh renderer (host view remounted).

        The stored route and waypoints survive and are redrawn once the
        new renderer reaches READY.
        """
        self.dispose()
        self._renderer = renderer
