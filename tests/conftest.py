from __future__ import annotations

import copy
from datetime import datetime
from itertools import count
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import httpx
import pytest

from core.api.directions_client import DirectionsClient
from runtime.map.renderer import BoundingBox, MarkerStyle, Padding, Projection
from runtime.store.session_store import SessionStore


TEST_URL = "https://directions.test/api/directions"

# Google's reference polyline: (38.5, -120.2), (40.7, -120.95), (43.252, -126.453)
SAMPLE_POLYLINE = "_p~iF~ps|U_ulLnnqC_mqNvxq`@"

SAMPLE_PAYLOAD: Dict[str, Any] = {
    "polyline": SAMPLE_POLYLINE,
    "instructions": [
        "Head north on Main St (0.4 km)",
        "Turn left onto Oak Ave (1.0 km)",
        "Continue to destination",
    ],
    "waypoints": [
        {
            "name": "Home",
            "address": "1 Main St",
            "coordinates": [38.5, -120.2],
            "type": "origin",
            "hours": [],
            "photos": [],
        },
        {
            "name": "Blue Bottle",
            "address": "20 Oak Ave",
            "coordinates": [40.7, -120.95],
            "type": "cafe",
            "hours": ["Monday: 7:00 AM – 6:00 PM", "Sunday: Closed"],
            "photos": ["https://photos.test/1.jpg"],
        },
        {
            "name": "Dolores Park",
            "address": "Dolores St",
            "coordinates": [43.252, -126.453],
            "type": "park",
            "hours": [],
            "photos": [],
        },
    ],
    "round_trip": False,
    "notes": "Enjoy the coffee.",
    "legs": [
        {"distance": "0.8 km", "duration": "2 mins"},
        {"distance": "1.2 km", "duration": "3 mins"},
    ],
}


def sample_payload() -> Dict[str, Any]:
    return copy.deepcopy(SAMPLE_PAYLOAD)


def make_client(handler: Callable[[httpx.Request], httpx.Response], url: str = TEST_URL) -> DirectionsClient:
    """DirectionsClient whose HTTP traffic goes to `handler`."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return DirectionsClient(url=url, http_client=http_client)


def json_handler(payload: Any, status_code: int = 200) -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=payload)

    return handler


class RecordingRenderer:
    """Fake MapRenderer that records every call in order."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, tuple]] = []
        self.initialized = False
        self.disposed = False
        self.center: Optional[Tuple[float, float]] = None
        self.overlays: Dict[str, List[Tuple[float, float]]] = {}
        self.markers: Dict[int, Tuple[Tuple[float, float], MarkerStyle]] = {}
        self._handles = count(1)
        self._load_callbacks: List[Callable[[], None]] = []

    def calls_named(self, name: str) -> List[tuple]:
        return [args for call, args in self.calls if call == name]

    @property
    def mutation_count(self) -> int:
        return sum(
            1
            for name, _ in self.calls
            if name in ("add_path_overlay", "remove_path_overlay", "add_marker", "remove_marker", "fit_to_bounds")
        )

    def initialize(self, center, zoom: float, projection: Projection) -> None:
        self.calls.append(("initialize", (tuple(center), zoom, projection)))
        self.center = tuple(center)
        self.initialized = True
        callbacks, self._load_callbacks = self._load_callbacks, []
        for callback in callbacks:
            callback()

    def dispose(self) -> None:
        self.calls.append(("dispose", ()))
        self.disposed = True

    def add_path_overlay(self, overlay_id: str, coordinates: Sequence, style: Dict[str, Any]) -> None:
        self.calls.append(("add_path_overlay", (overlay_id, list(coordinates), style)))
        self.overlays[overlay_id] = list(coordinates)

    def remove_path_overlay(self, overlay_id: str) -> None:
        self.calls.append(("remove_path_overlay", (overlay_id,)))
        self.overlays.pop(overlay_id, None)

    def has_path_overlay(self, overlay_id: str) -> bool:
        return overlay_id in self.overlays

    def add_marker(self, coordinate, style: MarkerStyle) -> int:
        handle = next(self._handles)
        self.calls.append(("add_marker", (tuple(coordinate), style)))
        self.markers[handle] = (tuple(coordinate), style)
        return handle

    def remove_marker(self, handle: int) -> None:
        self.calls.append(("remove_marker", (handle,)))
        self.markers.pop(handle, None)

    def fit_to_bounds(self, bbox: BoundingBox, padding: Padding) -> None:
        self.calls.append(("fit_to_bounds", (bbox, padding)))

    def get_center(self) -> Tuple[float, float]:
        return self.center

    def animate_to(self, center, duration_ms: int, easing) -> None:
        self.calls.append(("animate_to", (tuple(center), duration_ms)))
        self.center = tuple(center)

    def on_load(self, callback: Callable[[], None]) -> None:
        if self.initialized:
            callback()
        else:
            self._load_callbacks.append(callback)


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    return lambda: datetime(2024, 3, 4, 15, 30, 0)


@pytest.fixture
def store(fixed_clock) -> SessionStore:
    return SessionStore(clock=fixed_clock)


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()
