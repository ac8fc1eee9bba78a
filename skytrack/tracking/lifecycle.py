"""Flight metadata and the scheduled → active → completed state machine.

The client never moves a status backwards. Completing a flight releases
its samples from the path store; from then on the backend's archival log
is the only copy.
"""

from __future__ import annotations

import logging

from skytrack.contracts.enums import FlightStatus
from skytrack.contracts.flight import Flight
from skytrack.errors import FlightCompleted, StatusTransitionError, UnknownFlight
from skytrack.tracking.path_store import FlightPathStore
from skytrack.tracking.validator import coerce_flight_number

logger = logging.getLogger(__name__)

_ALLOWED: dict[FlightStatus, set[FlightStatus]] = {
    FlightStatus.SCHEDULED: {FlightStatus.ACTIVE, FlightStatus.COMPLETED},
    FlightStatus.ACTIVE: {FlightStatus.COMPLETED},
    FlightStatus.COMPLETED: set(),
}


class FlightLifecycleTracker:
    """Holds every flight the client has fetched or created."""

    def __init__(self, store: FlightPathStore):
        self._store = store
        self._flights: dict[str, Flight] = {}

    def register(self, flight: Flight) -> Flight:
        """Record metadata received from the backend.

        A flight seen before keeps the more advanced of the two statuses;
        a backend report of ``completed`` releases the flight's samples.
        """
        known = self._flights.get(flight.flight_number)
        if known is not None:
            current = FlightStatus(known.status)
            reported = FlightStatus(flight.status)
            if reported.rank < current.rank:
                logger.warning(
                    "Ignoring status regression for %s: %s -> %s",
                    flight.flight_number,
                    current.value,
                    reported.value,
                )
                flight = flight.model_copy(update={"status": current.value})

        self._flights[flight.flight_number] = flight
        if FlightStatus(flight.status) is FlightStatus.COMPLETED and (
            known is None or FlightStatus(known.status) is not FlightStatus.COMPLETED
        ):
            self._store.clear(flight.flight_number)
        return flight

    def get(self, flight_number: str) -> Flight:
        key = coerce_flight_number(flight_number)
        try:
            return self._flights[key]
        except KeyError:
            raise UnknownFlight(key) from None

    def status(self, flight_number: str) -> FlightStatus:
        return FlightStatus(self.get(flight_number).status)

    def transition(self, flight_number: str, new_status: FlightStatus | str) -> Flight:
        """Move a flight forward. Same-status requests are no-ops."""
        flight = self.get(flight_number)
        current = FlightStatus(flight.status)
        target = FlightStatus(new_status)
        if target is current:
            return flight
        if target not in _ALLOWED[current]:
            raise StatusTransitionError(flight.flight_number, current.value, target.value)

        updated = flight.model_copy(update={"status": target.value})
        self._flights[flight.flight_number] = updated
        logger.info("Flight %s: %s -> %s", flight.flight_number, current.value, target.value)
        if target is FlightStatus.COMPLETED:
            self._store.clear(flight.flight_number)
        return updated

    def mark_completed(self, flight_number: str) -> Flight:
        """Complete a flight and release its client-held samples."""
        return self.transition(flight_number, FlightStatus.COMPLETED)

    def ensure_accepting_samples(self, flight_number: str) -> None:
        """Raise ``FlightCompleted`` if the flight is known to be completed.

        Flights the client has not fetched are let through; the backend
        has the final say on those.
        """
        key = coerce_flight_number(flight_number)
        flight = self._flights.get(key)
        if flight is not None and FlightStatus(flight.status) is FlightStatus.COMPLETED:
            raise FlightCompleted(key)

    def flights(self, status: FlightStatus | str | None = None) -> list[Flight]:
        items = sorted(self._flights.values(), key=lambda f: f.flight_number)
        if status is None:
            return items
        wanted = FlightStatus(status)
        return [f for f in items if FlightStatus(f.status) is wanted]

    def __contains__(self, flight_number: object) -> bool:
        return isinstance(flight_number, str) and flight_number.strip().upper() in self._flights
