"""Structural and range validation of raw tracking records.

Raw records come from forms or backend responses as untyped mappings.
Validation is delegated to the ``TrackingSample`` contract; the first
pydantic error (fields are checked in declaration order) is reported as a
single ``ValidationError`` naming the offending field in snake_case.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_snake

from skytrack.contracts.common import parse_timestamp
from skytrack.contracts.flight import normalize_flight_number
from skytrack.contracts.tracking import TrackingSample
from skytrack.errors import ValidationError

_FLIGHT_NUMBER_KEYS = ("flightNumber", "flight_number")


def validate_sample(
    raw: Mapping[str, Any] | TrackingSample,
    flight_number: str | None = None,
) -> TrackingSample:
    """Turn a raw record into a ``TrackingSample`` or raise ``ValidationError``.

    When ``flight_number`` is given, a record without one inherits it and a
    record naming a different flight is rejected on ``flight_number``.
    """
    if isinstance(raw, TrackingSample):
        raw = raw.model_dump()
    if not isinstance(raw, Mapping):
        raise ValidationError("record", f"expected a mapping, got {type(raw).__name__}")

    data = dict(raw)
    if flight_number is not None:
        expected = coerce_flight_number(flight_number)
        given = next((data[k] for k in _FLIGHT_NUMBER_KEYS if data.get(k)), None)
        if given is None:
            data["flightNumber"] = expected
        elif not isinstance(given, str) or given.strip().upper() != expected:
            raise ValidationError(
                "flight_number", f"record belongs to {given!r}, not {expected}"
            )

    try:
        return TrackingSample.model_validate(data)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        raise ValidationError(_field_name(first["loc"]), first["msg"]) from exc


def coerce_flight_number(value: str) -> str:
    """``normalize_flight_number`` reporting failures as ``ValidationError``."""
    try:
        return normalize_flight_number(value)
    except ValueError as exc:
        raise ValidationError("flight_number", str(exc)) from exc


def coerce_time(value: Any, field: str = "timestamp") -> datetime:
    """``parse_timestamp`` reporting failures as ``ValidationError``."""
    try:
        return parse_timestamp(value)
    except PydanticValidationError as exc:
        raise ValidationError(field, exc.errors()[0]["msg"]) from exc


def _field_name(loc: tuple[Any, ...]) -> str:
    parts = [to_snake(str(p)) for p in loc if not isinstance(p, int)]
    return ".".join(parts) or "record"
