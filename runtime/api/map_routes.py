"""HTTP routes for the map view.

- GET  /map/state        -> GeoJSON snapshot, lifecycle state, status text
- POST /map/location     -> position reported by the client (first one wins)
- POST /map/panel        -> side panel open/closed (affects route padding)
- GET  /map/navigation   -> Google Maps URL for the active session's stops
"""

import logging

from fastapi import APIRouter, HTTPException
from typing import Any, Dict, Optional

from core.directions.response_transform import waypoint_coords
from runtime.map.navigation import build_navigation_url
from runtime.map.route_synchronizer import RouteSynchronizer

from ..models.api_models import LocationRequest, NavigationResponse, PanelRequest
from ..store.session_store import SessionStore


logger = logging.getLogger(__name__)

router = APIRouter()


_SESSION_STORE: Optional[SessionStore] = None
_SYNCHRONIZER: Optional[RouteSynchronizer] = None
_CLIENT_LOCATION = None


def init_routes(session_store: SessionStore, synchronizer: RouteSynchronizer, client_location) -> None:
    """Initialize module-level references used by the route handlers."""
    global _SESSION_STORE, _SYNCHRONIZER, _CLIENT_LOCATION
    _SESSION_STORE = session_store
    _SYNCHRONIZER = synchronizer
    _CLIENT_LOCATION = client_location


def _require_synchronizer() -> RouteSynchronizer:
    if _SYNCHRONIZER is None:
        raise HTTPException(
            status_code=500,
            detail="RouteSynchronizer is not configured on the server.",
        )
    return _SYNCHRONIZER


@router.get("/state")
async def map_state() -> Dict[str, Any]:
    synchronizer = _require_synchronizer()
    renderer = synchronizer.renderer
    snapshot = renderer.snapshot() if hasattr(renderer, "snapshot") else None
    return {
        "state": synchronizer.state.value,
        "degraded": synchronizer.degraded,
        "status_text": synchronizer.status_text,
        "map": snapshot,
    }


@router.post("/location")
async def report_location(request: LocationRequest) -> Dict[str, Any]:
    """Hand the client's position to the pending location race.

    Positions that arrive after the map is already up are ignored.
    """
    if _CLIENT_LOCATION is None:
        raise HTTPException(status_code=500, detail="Location reporting is not configured.")
    accepted = _CLIENT_LOCATION.report((request.lng, request.lat))
    if not accepted:
        logger.info("[MAP] Ignoring late location report (%s, %s)", request.lng, request.lat)
    return {"accepted": accepted}


@router.post("/panel")
async def set_panel(request: PanelRequest) -> Dict[str, Any]:
    synchronizer = _require_synchronizer()
    synchronizer.set_panel_open(request.open, request.width)
    padding = synchronizer.fit_padding()
    return {
        "open": request.open,
        "padding": {
            "top": padding.top,
            "bottom": padding.bottom,
            "left": padding.left,
            "right": padding.right,
        },
    }


@router.get("/navigation", response_model=NavigationResponse)
async def navigation_url(navigate: bool = False) -> NavigationResponse:
    if _SESSION_STORE is None:
        raise HTTPException(status_code=500, detail="SessionStore is not configured on the server.")
    session = _SESSION_STORE.ensure_session()
    coords = waypoint_coords(session.waypoints)
    if len(coords) < 2:
        raise HTTPException(
            status_code=409,
            detail="The active session has fewer than two stops.",
        )
    return NavigationResponse(url=build_navigation_url(coords, navigate=navigate))
