"""Base classes and shared types for SkyTrack contracts.

Unit conventions (all contracts and wire payloads):
- **Altitudes**: feet
- **Speeds**: knots
- **Vertical speeds**: feet per minute, signed (negative = descending)
- **Headings**: degrees true, ``[0, 360)``
- **Datetimes**: always UTC; naive inputs are read as UTC, integers as
  Unix epoch seconds
- **Coordinates**: WGS84 decimal degrees

The backend speaks camelCase JSON (``flightNumber``, ``verticalSpeed``);
contracts use snake_case attributes and serialize through aliases.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

_DATETIME = TypeAdapter(datetime)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes, convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: Any) -> datetime:
    """Coerce an ISO string, epoch number or datetime to an aware UTC datetime.

    Raises ``pydantic.ValidationError`` when the value is not a timestamp.
    """
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, str):
        value = value.strip().replace("Z", "+00:00")
    return ensure_utc(_DATETIME.validate_python(value))


class WireModel(BaseModel):
    """Base model with backend-friendly (camelCase JSON) serialization.

    - Enums serialize as string values.
    - ``to_wire()`` produces a JSON-safe dict (datetimes as ISO 8601).
    - ``from_wire()`` hydrates from a backend response dict.
    - NaN and infinity are rejected in every float field.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        allow_inf_nan=False,
    )

    def to_wire(self) -> dict[str, Any]:
        """Dump to a backend-compatible dict."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> "WireModel":
        """Create model instance from a backend response dict."""
        return cls.model_validate(data)


class GeoPoint(WireModel):
    """WGS84 geographic coordinate."""

    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)

    model_config = ConfigDict(frozen=True)

    def as_lon_lat(self) -> list[float]:
        """GeoJSON / deck.gl coordinate order."""
        return [self.longitude, self.latitude]
