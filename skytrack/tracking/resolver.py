"""Time-indexed position queries against a ``FlightPathStore``.

``resolve_at`` answers with the last observed sample at or before the
query time and never invents positions. Interpolation between samples is
a separate, explicit call.
"""

from __future__ import annotations

from bisect import bisect_right
from datetime import datetime

from skytrack.contracts.tracking import InterpolatedPosition, TrackingSample
from skytrack.errors import NotFound
from skytrack.tracking.path_store import FlightPathStore
from skytrack.tracking.validator import coerce_time


class PositionResolver:
    def __init__(self, store: FlightPathStore):
        self._store = store

    def resolve_current(self, flight_number: str) -> TrackingSample:
        """Latest sample of the flight."""
        path = self._store.get(flight_number)
        if not path:
            raise NotFound(flight_number)
        return path[-1]

    def resolve_at(
        self, flight_number: str, query_time: datetime | str | int | float
    ) -> TrackingSample:
        """Sample with the greatest timestamp ``<= query_time``."""
        path = self._store.get(flight_number)
        when = coerce_time(query_time)
        i = bisect_right(path, when, key=lambda s: s.timestamp)
        if i == 0:
            if not path:
                raise NotFound(flight_number)
            raise NotFound(
                flight_number,
                f"no position for {flight_number} at or before {when.isoformat()}",
            )
        return path[i - 1]

    def interpolate_at(
        self, flight_number: str, query_time: datetime | str | int | float
    ) -> InterpolatedPosition:
        """Linear estimate between the samples bracketing ``query_time``.

        Longitude follows the shorter way round the antimeridian. Heading is
        taken from the preceding sample. Raises ``NotFound`` like
        ``resolve_at``.
        """
        before = self.resolve_at(flight_number, query_time)
        when = coerce_time(query_time)
        path = self._store.get(flight_number)
        i = bisect_right(path, when, key=lambda s: s.timestamp)
        if before.timestamp == when or i >= len(path):
            return _as_position(before, when, interpolated=False)

        after = path[i]
        span = (after.timestamp - before.timestamp).total_seconds()
        f = (when - before.timestamp).total_seconds() / span

        dlon = after.longitude - before.longitude
        if dlon > 180:
            dlon -= 360
        elif dlon < -180:
            dlon += 360
        lon = before.longitude + f * dlon
        lon = (lon + 180) % 360 - 180

        return InterpolatedPosition(
            flight_number=before.flight_number,
            timestamp=when,
            latitude=before.latitude + f * (after.latitude - before.latitude),
            longitude=lon,
            altitude=before.altitude + f * (after.altitude - before.altitude),
            speed=before.speed + f * (after.speed - before.speed),
            heading=before.heading,
            interpolated=True,
        )


def _as_position(
    sample: TrackingSample, when: datetime, interpolated: bool
) -> InterpolatedPosition:
    return InterpolatedPosition(
        flight_number=sample.flight_number,
        timestamp=when,
        latitude=sample.latitude,
        longitude=sample.longitude,
        altitude=sample.altitude,
        speed=sample.speed,
        heading=sample.heading,
        interpolated=interpolated,
    )
