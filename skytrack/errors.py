"""SkyTrack exceptions.

Every error is independently recoverable by re-issuing the user action;
none is fatal to the process.
"""

from __future__ import annotations


class SkyTrackError(Exception):
    """Base exception for all SkyTrack errors."""


class ValidationError(SkyTrackError):
    """A tracking record is malformed or has an out-of-range field."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class NotFound(SkyTrackError):
    """No sample answers a position query."""

    def __init__(self, flight_number: str, message: str | None = None):
        self.flight_number = flight_number
        super().__init__(message or f"no tracking data for {flight_number}")


class UnknownFlight(SkyTrackError):
    """Lifecycle operation on a flight that was never fetched."""

    def __init__(self, flight_number: str):
        self.flight_number = flight_number
        super().__init__(f"flight {flight_number} is not tracked")


class StatusTransitionError(SkyTrackError):
    """Requested status change would move a flight backwards."""

    def __init__(self, flight_number: str, current: str, requested: str):
        self.flight_number = flight_number
        self.current = current
        self.requested = requested
        super().__init__(
            f"flight {flight_number} cannot go from {current} to {requested}"
        )


class FlightCompleted(SkyTrackError):
    """Samples were submitted for a flight that has already completed."""

    def __init__(self, flight_number: str):
        self.flight_number = flight_number
        super().__init__(f"flight {flight_number} is completed; tracking data rejected")


class RemoteError(SkyTrackError):
    """The backend answered with an error or could not be reached.

    ``status`` is None for transport failures (DNS, refused connection,
    timeout).
    """

    def __init__(self, status: int | None, message: str):
        self.status = status
        self.message = message
        prefix = f"HTTP {status}" if status is not None else "network error"
        super().__init__(f"{prefix}: {message}")


class MapTokenMissing(SkyTrackError):
    """The map renderer needs an access token that is not configured."""

    def __init__(self, variable: str):
        self.variable = variable
        super().__init__(
            f"map access token not configured; set {variable} in the environment"
        )
