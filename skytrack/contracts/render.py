"""Renderer-agnostic drawing instructions.

Produced by ``RenderAdapter`` and consumed by any ``MapRenderer``.
A description always replaces whatever the renderer showed before
(``replace=True``); renderers never patch incrementally.
"""

from typing import Any

from pydantic import ConfigDict, Field

from skytrack.contracts.common import GeoPoint, WireModel
from skytrack.contracts.enums import MarkerRole


class Marker(WireModel):
    """A point drawn on the map.

    ``properties`` carries the data shown when the marker is inspected
    (altitude, speed, timestamp for sample markers).
    """

    role: MarkerRole
    position: GeoPoint
    rotation_deg: float = Field(default=0.0, ge=0, lt=360)
    label: str = ""
    properties: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)


class Polyline(WireModel):
    """Route line through the path points, in path order."""

    points: list[GeoPoint] = Field(default_factory=list)

    def lon_lat(self) -> list[list[float]]:
        return [p.as_lon_lat() for p in self.points]


class Viewport(WireModel):
    """Bounding box enclosing every path point."""

    south: float = Field(..., ge=-90.0, le=90.0)
    west: float = Field(..., ge=-180.0, le=180.0)
    north: float = Field(..., ge=-90.0, le=90.0)
    east: float = Field(..., ge=-180.0, le=180.0)

    model_config = ConfigDict(frozen=True)

    @property
    def center(self) -> GeoPoint:
        return GeoPoint(
            latitude=(self.south + self.north) / 2,
            longitude=(self.west + self.east) / 2,
        )

    def as_bounds(self) -> list[list[float]]:
        """``[[west, south], [east, north]]`` as Mapbox ``fitBounds`` expects."""
        return [[self.west, self.south], [self.east, self.north]]


class RenderDescription(WireModel):
    """Everything a renderer needs to draw one flight."""

    flight_number: str
    polyline: Polyline = Field(default_factory=Polyline)
    sample_markers: list[Marker] = Field(default_factory=list)
    markers: dict[str, Marker] = Field(
        default_factory=dict,
        description="Markers keyed by role value: origin, destination, current_position",
    )
    viewport: Viewport | None = None
    replace: bool = True
    path_version: int = 0

    def marker(self, role: MarkerRole) -> Marker | None:
        return self.markers.get(MarkerRole(role).value)
