"""Per-flight ordered store of accepted tracking samples.

Single-writer by contract: every mutation happens on the event-loop
thread that drives the UI, so there is no locking. Subscribers receive an
immutable ``FlightPath`` snapshot after each mutation.
"""

from __future__ import annotations

import logging
from bisect import bisect_left, bisect_right
from collections.abc import Callable, Iterable
from datetime import datetime

from skytrack.contracts.tracking import FlightPath, TrackingSample
from skytrack.errors import ValidationError
from skytrack.tracking.validator import coerce_flight_number, coerce_time

logger = logging.getLogger(__name__)

Subscriber = Callable[[FlightPath], None]


def _timestamp(sample: TrackingSample) -> datetime:
    return sample.timestamp


class FlightPathStore:
    """Keeps each flight's samples strictly ascending by timestamp.

    A sample whose timestamp already exists replaces the stored one
    (last write wins). Lookups and inserts use binary search.
    """

    def __init__(self) -> None:
        self._paths: dict[str, list[TrackingSample]] = {}
        self._versions: dict[str, int] = {}
        self._subscribers: list[Subscriber] = []

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def upsert(self, flight_number: str, sample: TrackingSample) -> None:
        """Insert ``sample`` at its timestamp position, replacing a duplicate."""
        key = coerce_flight_number(flight_number)
        self._insert(key, sample)
        self._bump(key)

    def upsert_many(self, flight_number: str, samples: Iterable[TrackingSample]) -> int:
        """Upsert samples in the given order; notify subscribers once.

        Returns the number of samples applied.
        """
        key = coerce_flight_number(flight_number)
        count = 0
        for sample in samples:
            self._insert(key, sample)
            count += 1
        if count:
            self._bump(key)
        return count

    def clear(self, flight_number: str) -> None:
        """Drop every sample of a flight."""
        key = coerce_flight_number(flight_number)
        dropped = len(self._paths.pop(key, []))
        logger.debug("Cleared %d samples for %s", dropped, key)
        self._bump(key)

    def _insert(self, key: str, sample: TrackingSample) -> None:
        if sample.flight_number != key:
            raise ValidationError(
                "flight_number",
                f"sample for {sample.flight_number} cannot be stored under {key}",
            )
        path = self._paths.setdefault(key, [])
        i = bisect_left(path, sample.timestamp, key=_timestamp)
        if i < len(path) and path[i].timestamp == sample.timestamp:
            path[i] = sample
        else:
            path.insert(i, sample)

    def _bump(self, key: str) -> None:
        self._versions[key] = self._versions.get(key, 0) + 1
        snapshot = self.snapshot(key)
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception:
                logger.exception("Path subscriber failed for %s", key)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get(self, flight_number: str) -> tuple[TrackingSample, ...]:
        """Ordered samples of a flight; empty when nothing is known yet."""
        return tuple(self._paths.get(coerce_flight_number(flight_number), ()))

    def snapshot(self, flight_number: str) -> FlightPath:
        key = coerce_flight_number(flight_number)
        return FlightPath(
            flight_number=key,
            samples=tuple(self._paths.get(key, ())),
            version=self._versions.get(key, 0),
        )

    def window(
        self,
        flight_number: str,
        start: datetime | str | int | float | None = None,
        end: datetime | str | int | float | None = None,
    ) -> tuple[TrackingSample, ...]:
        """Samples with ``start <= timestamp <= end`` (either bound optional)."""
        path = self._paths.get(coerce_flight_number(flight_number), [])
        lo = 0 if start is None else bisect_left(path, coerce_time(start), key=_timestamp)
        hi = len(path) if end is None else bisect_right(path, coerce_time(end), key=_timestamp)
        return tuple(path[lo:hi])

    def version(self, flight_number: str) -> int:
        return self._versions.get(coerce_flight_number(flight_number), 0)

    def flights(self) -> list[str]:
        """Flight numbers currently holding at least one sample."""
        return sorted(k for k, v in self._paths.items() if v)

    def __contains__(self, flight_number: object) -> bool:
        if not isinstance(flight_number, str):
            return False
        return bool(self._paths.get(flight_number.strip().upper()))

    def __len__(self) -> int:
        return len(self.flights())

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback``; returns a function that unregisters it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe
