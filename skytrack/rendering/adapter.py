"""Turn an assembled path into renderer-agnostic drawing instructions.

Every call recomputes the description from scratch. The adapter's only
state is the last description it emitted and the role-keyed marker
registry behind it, so replacing the current-position marker is a single
registry write instead of a search through whatever is on screen.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from skytrack.contracts.enums import MarkerRole
from skytrack.contracts.flight import Airport, Flight
from skytrack.contracts.render import Marker, Polyline, RenderDescription, Viewport
from skytrack.contracts.tracking import FlightPath, TrackingSample

logger = logging.getLogger(__name__)


def compute_viewport(samples: Sequence[TrackingSample]) -> Viewport | None:
    """Smallest lat/lon box enclosing every sample; None for an empty path."""
    if not samples:
        return None
    lats = [s.latitude for s in samples]
    lons = [s.longitude for s in samples]
    return Viewport(south=min(lats), west=min(lons), north=max(lats), east=max(lons))


def sample_marker(index: int, sample: TrackingSample) -> Marker:
    return Marker(
        role=MarkerRole.SAMPLE,
        position=sample.position,
        label=f"Tracking Point #{index + 1}",
        properties={
            "index": index,
            "altitude": sample.altitude,
            "speed": sample.speed,
            "timestamp": sample.timestamp.isoformat(),
        },
    )


def airport_marker(role: MarkerRole, airport: Airport) -> Marker:
    title = "Origin" if role is MarkerRole.ORIGIN else "Destination"
    return Marker(
        role=role,
        position=airport.coordinates,
        label=f"{title}: {airport.code} - {airport.city}".rstrip(" -"),
        properties={
            "airport": airport.code,
            "city": airport.city,
            "country": airport.country,
        },
    )


def current_position_marker(sample: TrackingSample) -> Marker:
    return Marker(
        role=MarkerRole.CURRENT_POSITION,
        position=sample.position,
        rotation_deg=sample.heading,
        label="Current Position",
        properties={
            "altitude": sample.altitude,
            "speed": sample.speed,
            "heading": sample.heading,
            "vertical_speed": sample.vertical_speed,
            "timestamp": sample.timestamp.isoformat(),
        },
    )


class RenderAdapter:
    """Build ``RenderDescription`` objects for one map view."""

    def __init__(self) -> None:
        self._markers: dict[MarkerRole, Marker] = {}
        self._last: RenderDescription | None = None

    @property
    def last(self) -> RenderDescription | None:
        """The description most recently emitted, if any."""
        return self._last

    def describe(
        self,
        path: FlightPath | Sequence[TrackingSample],
        flight: Flight | None = None,
        current: TrackingSample | None = None,
    ) -> RenderDescription:
        """Recompute the full description for a path."""
        if isinstance(path, FlightPath):
            samples, version, number = path.samples, path.version, path.flight_number
        else:
            samples, version = tuple(path), 0
            number = samples[0].flight_number if samples else ""
        if flight is not None:
            number = number or flight.flight_number

        self._markers = {}
        if flight is not None:
            self._markers[MarkerRole.ORIGIN] = airport_marker(MarkerRole.ORIGIN, flight.origin)
            self._markers[MarkerRole.DESTINATION] = airport_marker(
                MarkerRole.DESTINATION, flight.destination
            )
        if current is not None:
            self._markers[MarkerRole.CURRENT_POSITION] = current_position_marker(current)

        self._last = RenderDescription(
            flight_number=number,
            polyline=Polyline(points=[s.position for s in samples]),
            sample_markers=[sample_marker(i, s) for i, s in enumerate(samples)],
            markers=self._registry(),
            viewport=compute_viewport(samples),
            path_version=version,
        )
        logger.debug("Described %s: %d points, v%d", number, len(samples), version)
        return self._last

    def replace_current_position(self, current: TrackingSample | None) -> RenderDescription:
        """Swap (or drop) the current-position marker of the last description."""
        if self._last is None:
            raise RuntimeError("describe() must be called before replacing markers")
        if current is None:
            self._markers.pop(MarkerRole.CURRENT_POSITION, None)
        else:
            self._markers[MarkerRole.CURRENT_POSITION] = current_position_marker(current)
        self._last = self._last.model_copy(update={"markers": self._registry()})
        return self._last

    def reset(self) -> None:
        self._markers = {}
        self._last = None

    def _registry(self) -> dict[str, Marker]:
        return {role.value: marker for role, marker in self._markers.items()}
