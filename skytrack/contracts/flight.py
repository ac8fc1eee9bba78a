"""Flight and Airport: metadata of a tracked flight.

Owned on the client by ``FlightLifecycleTracker``. The Flight never holds
its tracking samples; ``FlightPathStore`` is their sole keeper and links
them back by flight number.
"""

import re
from datetime import datetime

from pydantic import Field, field_validator

from skytrack.contracts.common import GeoPoint, WireModel, ensure_utc
from skytrack.contracts.enums import FlightStatus

_FLIGHT_NUMBER_RE = re.compile(r"^[A-Z0-9]+$")


def normalize_flight_number(value: str) -> str:
    """Strip and uppercase a flight number; reject anything non-alphanumeric."""
    if not isinstance(value, str):
        raise ValueError("flight number must be a string")
    normalized = value.strip().upper()
    if not _FLIGHT_NUMBER_RE.match(normalized):
        raise ValueError(f"invalid flight number {value!r}")
    return normalized


class Airport(WireModel):
    """Origin or destination of a flight."""

    code: str = Field(..., min_length=1, alias="airport", description="IATA/ICAO code")
    city: str = ""
    country: str = ""
    coordinates: GeoPoint

    @field_validator("code", mode="before")
    @classmethod
    def upper_code(cls, v: str) -> str:
        return v.strip().upper() if isinstance(v, str) else v


class Flight(WireModel):
    """A flight as known to the tracking backend."""

    flight_number: str
    airline: str = ""
    aircraft_type: str = ""
    origin: Airport
    destination: Airport
    scheduled_departure: datetime | None = None
    scheduled_arrival: datetime | None = None
    status: FlightStatus = FlightStatus.SCHEDULED

    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("flight_number", mode="before")
    @classmethod
    def normalize_number(cls, v: str) -> str:
        return normalize_flight_number(v)

    @field_validator(
        "scheduled_departure", "scheduled_arrival", "created_at", "updated_at"
    )
    @classmethod
    def as_utc(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v) if v is not None else None
