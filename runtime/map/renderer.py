"""
Map renderer contract consumed by the RouteSynchronizer, plus an
in-memory implementation.

The synchronizer only talks to a renderer through `MapRenderer`. A
browser map (Mapbox GL and friends) sits behind this contract in the
real UI; `GeoJSONRenderer` keeps the same state in memory and exposes it
as a GeoJSON snapshot for the HTTP API and the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from itertools import count
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Tuple


LngLat = Tuple[float, float]
Easing = Callable[[float], float]


class Projection(str, Enum):
    MERCATOR = "mercator"
    GLOBE = "globe"


class MarkerStyle(str, Enum):
    ORIGIN = "origin"
    DESTINATION = "destination"
    WAYPOINT = "waypoint"
    USER = "user"


@dataclass(frozen=True)
class BoundingBox:
    west: float
    south: float
    east: float
    north: float

    @classmethod
    def around(cls, points: Sequence[LngLat]) -> "BoundingBox":
        """Smallest box containing every (lng, lat) point."""
        if not points:
            raise ValueError("cannot bound an empty point list")
        lngs = [p[0] for p in points]
        lats = [p[1] for p in points]
        return cls(west=min(lngs), south=min(lats), east=max(lngs), north=max(lats))


@dataclass(frozen=True)
class Padding:
    top: float
    bottom: float
    left: float
    right: float


def linear(t: float) -> float:
    return t


class MapRenderer(Protocol):
    def initialize(self, center: LngLat, zoom: float, projection: Projection) -> None: ...

    def dispose(self) -> None: ...

    def add_path_overlay(self, overlay_id: str, coordinates: Sequence[LngLat], style: Dict[str, Any]) -> None: ...

    def remove_path_overlay(self, overlay_id: str) -> None: ...

    def has_path_overlay(self, overlay_id: str) -> bool: ...

    def add_marker(self, coordinate: LngLat, style: MarkerStyle) -> Any: ...

    def remove_marker(self, handle: Any) -> None: ...

    def fit_to_bounds(self, bbox: BoundingBox, padding: Padding) -> None: ...

    def get_center(self) -> LngLat: ...

    def animate_to(self, center: LngLat, duration_ms: int, easing: Easing) -> None: ...

    def on_load(self, callback: Callable[[], None]) -> None: ...


class GeoJSONRenderer:
    """In-memory renderer that records overlays, markers and camera state.

    Loading is immediate: the renderer counts as loaded as soon as
    `initialize` returns, and `on_load` callbacks registered afterwards
    run straight away. Camera animations jump to their target.
    """

    def __init__(self) -> None:
        self.initialized = False
        self.disposed = False
        self.center: Optional[LngLat] = None
        self.zoom: Optional[float] = None
        self.projection: Optional[Projection] = None
        self.bounds: Optional[BoundingBox] = None
        self.padding: Optional[Padding] = None
        self._overlays: Dict[str, Dict[str, Any]] = {}
        self._markers: Dict[int, Tuple[LngLat, MarkerStyle]] = {}
        self._handles = count(1)
        self._load_callbacks: List[Callable[[], None]] = []

    def initialize(self, center: LngLat, zoom: float, projection: Projection) -> None:
        self.center = tuple(center)
        self.zoom = zoom
        self.projection = projection
        self.initialized = True
        callbacks, self._load_callbacks = self._load_callbacks, []
        for callback in callbacks:
            callback()

    def dispose(self) -> None:
        self.disposed = True
        self._overlays.clear()
        self._markers.clear()
        self._load_callbacks.clear()

    def add_path_overlay(self, overlay_id: str, coordinates: Sequence[LngLat], style: Dict[str, Any]) -> None:
        if overlay_id in self._overlays:
            raise ValueError(f"overlay {overlay_id!r} already exists")
        self._overlays[overlay_id] = {
            "coordinates": [tuple(c) for c in coordinates],
            "style": dict(style),
        }

    def remove_path_overlay(self, overlay_id: str) -> None:
        self._overlays.pop(overlay_id, None)

    def has_path_overlay(self, overlay_id: str) -> bool:
        return overlay_id in self._overlays

    def add_marker(self, coordinate: LngLat, style: MarkerStyle) -> int:
        handle = next(self._handles)
        self._markers[handle] = (tuple(coordinate), style)
        return handle

    def remove_marker(self, handle: int) -> None:
        self._markers.pop(handle, None)

    def fit_to_bounds(self, bbox: BoundingBox, padding: Padding) -> None:
        self.bounds = bbox
        self.padding = padding

    def get_center(self) -> LngLat:
        if self.center is None:
            raise RuntimeError("renderer is not initialized")
        return self.center

    def animate_to(self, center: LngLat, duration_ms: int, easing: Easing) -> None:
        self.center = tuple(center)

    def on_load(self, callback: Callable[[], None]) -> None:
        if self.initialized and not self.disposed:
            callback()
        else:
            self._load_callbacks.append(callback)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def snapshot(self) -> Dict[str, Any]:
        """Current map contents as a GeoJSON FeatureCollection plus camera."""
        features: List[Dict[str, Any]] = []
        for overlay_id, overlay in self._overlays.items():
            features.append(
                {
                    "type": "Feature",
                    "id": overlay_id,
                    "properties": {"kind": "path", **overlay["style"]},
                    "geometry": {
                        "type": "LineString",
                        "coordinates": [list(c) for c in overlay["coordinates"]],
                    },
                }
            )
        for handle, (coord, style) in self._markers.items():
            features.append(
                {
                    "type": "Feature",
                    "id": f"marker-{handle}",
                    "properties": {"kind": "marker", "style": style.value},
                    "geometry": {"type": "Point", "coordinates": list(coord)},
                }
            )

        camera: Dict[str, Any] = {
            "center": list(self.center) if self.center else None,
            "zoom": self.zoom,
            "projection": self.projection.value if self.projection else None,
        }
        if self.bounds is not None:
            camera["bounds"] = [self.bounds.west, self.bounds.south, self.bounds.east, self.bounds.north]
            camera["padding"] = {
                "top": self.padding.top,
                "bottom": self.padding.bottom,
                "left": self.padding.left,
                "right": self.padding.right,
            }

        return {
            "type": "FeatureCollection",
            "features": features,
            "camera": camera,
        }
