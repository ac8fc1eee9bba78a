"""pydeck binding: path, sample points and role markers over a Mapbox base map.

Needs the Mapbox access token; without it construction fails with
``MapTokenMissing`` instead of producing a blank map.
"""

from __future__ import annotations

import math
from typing import Any

import pydeck as pdk

from skytrack.config import MAP_TOKEN_ENV
from skytrack.contracts.enums import MarkerRole
from skytrack.contracts.render import Marker, Polyline, Viewport
from skytrack.errors import MapTokenMissing
from skytrack.rendering.base import MapRenderer

MAP_STYLE = "mapbox://styles/mapbox/dark-v11"

_ROUTE_RGBA = [0, 212, 255, 200]
_MARKER_RGBA = {
    MarkerRole.ORIGIN: [0, 200, 83, 230],
    MarkerRole.DESTINATION: [255, 82, 82, 230],
}
_PLANE = "✈"


def zoom_for(viewport: Viewport) -> float:
    """Rough web-mercator zoom that fits the viewport span."""
    span = max(viewport.east - viewport.west, (viewport.north - viewport.south) * 2, 1e-3)
    return max(1.0, min(12.0, math.log2(360.0 / span)))


class DeckRenderer(MapRenderer):
    def __init__(self, map_token: str | None, map_style: str = MAP_STYLE) -> None:
        if not map_token:
            raise MapTokenMissing(MAP_TOKEN_ENV)
        super().__init__()
        self._token = map_token
        self._style = map_style
        self._path: list[list[float]] = []
        self._points: list[dict[str, Any]] = []
        self._markers: dict[str, dict[str, Any]] = {}
        self._view = pdk.ViewState(latitude=20, longitude=0, zoom=2)

    def _clear(self) -> None:
        self._path = []
        self._points = []
        self._markers = {}
        self._view = pdk.ViewState(latitude=20, longitude=0, zoom=2)

    def _draw_polyline(self, polyline: Polyline) -> None:
        self._path = polyline.lon_lat()

    def _draw_marker(self, marker: Marker) -> None:
        role = MarkerRole(marker.role)
        row = {
            "position": marker.position.as_lon_lat(),
            "name": marker.label,
            "altitude": marker.properties.get("altitude", ""),
            "speed": marker.properties.get("speed", ""),
            "timestamp": marker.properties.get("timestamp", ""),
        }
        if role is MarkerRole.SAMPLE:
            self._points.append(row)
            return
        if role is MarkerRole.CURRENT_POSITION:
            # deck.gl angles run counter-clockwise; headings run clockwise
            row.update(text=_PLANE, angle=-marker.rotation_deg)
        else:
            row.update(color=_MARKER_RGBA[role])
        self._markers[role.value] = row

    def _fit_bounds(self, viewport: Viewport) -> None:
        center = viewport.center
        self._view = pdk.ViewState(
            latitude=center.latitude,
            longitude=center.longitude,
            zoom=zoom_for(viewport),
        )

    def layers(self) -> list[pdk.Layer]:
        layers: list[pdk.Layer] = []
        if self._path:
            layers.append(
                pdk.Layer(
                    "PathLayer",
                    id="route",
                    data=[{"path": self._path}],
                    get_path="path",
                    get_color=_ROUTE_RGBA,
                    width_min_pixels=3,
                )
            )
        if self._points:
            layers.append(
                pdk.Layer(
                    "ScatterplotLayer",
                    id="route-points",
                    data=self._points,
                    get_position="position",
                    get_fill_color=_ROUTE_RGBA,
                    get_radius=100,
                    radius_min_pixels=4,
                    radius_max_pixels=4,
                    pickable=True,
                )
            )
        airports = [
            self._markers[role.value]
            for role in (MarkerRole.ORIGIN, MarkerRole.DESTINATION)
            if role.value in self._markers
        ]
        if airports:
            layers.append(
                pdk.Layer(
                    "ScatterplotLayer",
                    id="airports",
                    data=airports,
                    get_position="position",
                    get_fill_color="color",
                    get_radius=100,
                    radius_min_pixels=10,
                    radius_max_pixels=10,
                    pickable=True,
                )
            )
        current = self._markers.get(MarkerRole.CURRENT_POSITION.value)
        if current is not None:
            layers.append(
                pdk.Layer(
                    "TextLayer",
                    id="current-position",
                    data=[current],
                    get_position="position",
                    get_text="text",
                    get_angle="angle",
                    get_size=28,
                    get_color=[255, 255, 255, 255],
                    character_set=[_PLANE],
                    pickable=True,
                )
            )
        return layers

    def render(self) -> pdk.Deck:
        return pdk.Deck(
            layers=self.layers(),
            initial_view_state=self._view,
            map_provider="mapbox",
            map_style=self._style,
            api_keys={"mapbox": self._token},
            tooltip={
                "html": "<b>{name}</b><br/>Alt: {altitude} ft<br/>"
                        "Speed: {speed} kt<br/>{timestamp}",
                "style": {"backgroundColor": "steelblue", "color": "white"},
            },
        )
