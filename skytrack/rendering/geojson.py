"""Mapbox GL style output: GeoJSON sources, layers, role markers, bounds.

The result of ``render()`` is plain JSON a browser map can apply with
``addSource`` / ``addLayer`` / ``new Marker`` / ``fitBounds``. Markers
are keyed by role, so a new current position overwrites the old one.
"""

from __future__ import annotations

import json
from typing import Any

from skytrack.contracts.enums import MarkerRole
from skytrack.contracts.render import Marker, Polyline, Viewport
from skytrack.rendering.base import MapRenderer

ROUTE_COLOR = "#00D4FF"
FIT_PADDING_PX = 100

_ICONS = {
    MarkerRole.ORIGIN: "🛫",
    MarkerRole.DESTINATION: "🛬",
    MarkerRole.CURRENT_POSITION: "✈️",
}

ROUTE_LAYER = {
    "id": "route",
    "type": "line",
    "source": "route",
    "layout": {"line-join": "round", "line-cap": "round"},
    "paint": {"line-color": ROUTE_COLOR, "line-width": 3, "line-opacity": 0.8},
}

POINTS_LAYER = {
    "id": "route-points",
    "type": "circle",
    "source": "route-points",
    "paint": {"circle-radius": 4, "circle-color": ROUTE_COLOR, "circle-opacity": 0.6},
}


class GeoJSONRenderer(MapRenderer):
    def __init__(self, style: str = "mapbox://styles/mapbox/dark-v11") -> None:
        super().__init__()
        self.style = style
        self._route: list[list[float]] = []
        self._points: list[dict[str, Any]] = []
        self._markers: dict[str, dict[str, Any]] = {}
        self._bounds: list[list[float]] | None = None

    def _clear(self) -> None:
        self._route = []
        self._points = []
        self._markers = {}
        self._bounds = None

    def _draw_polyline(self, polyline: Polyline) -> None:
        self._route = polyline.lon_lat()

    def _draw_marker(self, marker: Marker) -> None:
        role = MarkerRole(marker.role)
        if role is MarkerRole.SAMPLE:
            self._points.append({
                "type": "Feature",
                "properties": dict(marker.properties),
                "geometry": {"type": "Point", "coordinates": marker.position.as_lon_lat()},
            })
            return
        self._markers[role.value] = {
            "lngLat": marker.position.as_lon_lat(),
            "icon": _ICONS[role],
            "rotation": marker.rotation_deg,
            "popup": {"title": marker.label, **marker.properties},
        }

    def _fit_bounds(self, viewport: Viewport) -> None:
        self._bounds = viewport.as_bounds()

    def render(self) -> dict[str, Any]:
        sources: dict[str, Any] = {}
        layers: list[dict[str, Any]] = []
        if self._route:
            sources["route"] = {
                "type": "geojson",
                "data": {
                    "type": "Feature",
                    "properties": {},
                    "geometry": {"type": "LineString", "coordinates": self._route},
                },
            }
            layers.append(ROUTE_LAYER)
        if self._points:
            sources["route-points"] = {
                "type": "geojson",
                "data": {"type": "FeatureCollection", "features": self._points},
            }
            layers.append(POINTS_LAYER)

        output: dict[str, Any] = {
            "replace": True,
            "style": self.style,
            "sources": sources,
            "layers": layers,
            "markers": dict(self._markers),
        }
        if self._bounds is not None:
            output["fitBounds"] = {"bounds": self._bounds, "padding": FIT_PADDING_PX}
        return output

    def to_json(self, **kwargs: Any) -> str:
        return json.dumps(self.render(), ensure_ascii=False, **kwargs)
