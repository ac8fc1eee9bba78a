"""TrackingSample, FlightPath and assembly results.

The backend accepts samples with a nested ``position`` object
(``POST /tracking/ingest``) but returns them flattened from its path and
location endpoints. ``TrackingSample`` reads both shapes and always holds
the flat one; ``to_ingest_payload()`` produces the nested one.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import ConfigDict, Field, field_validator, model_validator

from skytrack.contracts.common import GeoPoint, WireModel, ensure_utc
from skytrack.contracts.flight import normalize_flight_number


class ReceiverInfo(WireModel):
    """Ground station that captured a sample."""

    receiver_id: str = ""
    receiver_location: GeoPoint | None = None
    signal_strength: float = Field(default=100.0, ge=0, le=100)

    model_config = ConfigDict(frozen=True)


class TrackingSample(WireModel):
    """One geospatial and kinematic observation of a flight at an instant.

    Immutable once accepted: a later sample with the same timestamp
    supersedes it in the path, nothing updates it in place.
    """

    flight_number: str
    timestamp: datetime
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)
    altitude: float = Field(..., description="Feet; negative values pass through")
    speed: float = Field(..., ge=0, description="Ground speed in knots")
    heading: float = Field(..., ge=0, lt=360)
    vertical_speed: float = Field(..., description="ft/min, signed")
    receiver_info: ReceiverInfo | None = None
    squawk: str | None = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def flatten_position(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("position"), dict):
            data = dict(data)
            position = data.pop("position")
            for key in ("latitude", "longitude", "altitude"):
                if key in position:
                    data.setdefault(key, position[key])
        return data

    @field_validator("flight_number", mode="before")
    @classmethod
    def normalize_number(cls, v: str) -> str:
        return normalize_flight_number(v)

    @field_validator("timestamp")
    @classmethod
    def as_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @field_validator("squawk", mode="before")
    @classmethod
    def blank_squawk(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def position(self) -> GeoPoint:
        return GeoPoint(latitude=self.latitude, longitude=self.longitude)

    def to_ingest_payload(self) -> dict[str, Any]:
        """Nested shape expected by ``POST /tracking/ingest``."""
        data = self.to_wire()
        data["position"] = {
            "latitude": data.pop("latitude"),
            "longitude": data.pop("longitude"),
            "altitude": data.pop("altitude"),
        }
        return data


@dataclass(frozen=True)
class FlightPath:
    """Immutable snapshot of a flight's samples, ascending by timestamp.

    ``version`` increases by one on every store mutation of this flight.
    """

    flight_number: str
    samples: tuple[TrackingSample, ...] = ()
    version: int = 0

    def __len__(self) -> int:
        return len(self.samples)

    def __iter__(self):
        return iter(self.samples)

    def __bool__(self) -> bool:
        return bool(self.samples)

    @property
    def first(self) -> TrackingSample | None:
        return self.samples[0] if self.samples else None

    @property
    def last(self) -> TrackingSample | None:
        return self.samples[-1] if self.samples else None


class SampleRejection(WireModel):
    """Why one record of a batch was skipped."""

    index: int = Field(..., ge=0)
    field: str
    message: str


class AssemblySummary(WireModel):
    """Outcome of assembling a batch of raw records into a flight path."""

    flight_number: str
    accepted: list[TrackingSample] = Field(default_factory=list)
    rejections: list[SampleRejection] = Field(default_factory=list)

    @property
    def accepted_count(self) -> int:
        return len(self.accepted)

    @property
    def rejected_count(self) -> int:
        return len(self.rejections)


class InterpolatedPosition(WireModel):
    """Position estimated between two observed samples.

    Only produced by ``PositionResolver.interpolate_at``; ``interpolated``
    is False when the query time hit an observed sample exactly or lay
    after the last one.
    """

    flight_number: str
    timestamp: datetime
    latitude: float
    longitude: float
    altitude: float
    speed: float
    heading: float
    interpolated: bool
