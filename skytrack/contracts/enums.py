"""Enumerations shared across all SkyTrack contracts."""

from enum import Enum


class FlightStatus(str, Enum):
    """Lifecycle of a tracked flight. Only ever moves forward."""
    SCHEDULED = "scheduled"
    ACTIVE = "active"
    COMPLETED = "completed"

    @property
    def rank(self) -> int:
        return _STATUS_ORDER.index(self)


_STATUS_ORDER = [FlightStatus.SCHEDULED, FlightStatus.ACTIVE, FlightStatus.COMPLETED]


class MarkerRole(str, Enum):
    """Role of a marker in a render description."""
    SAMPLE = "sample"
    ORIGIN = "origin"
    DESTINATION = "destination"
    CURRENT_POSITION = "current_position"


class RendererKind(str, Enum):
    GEOJSON = "geojson"
    DECK = "deck"
