"""Tracker session: the composition root behind every UI action.

One session per map view. Network calls are awaited on the event loop;
everything else is synchronous. Each ``track_flight`` / ``position_at``
call is tagged, and a response is applied only if it is still the latest
request of its kind for the flight currently selected. Superseded
responses are dropped on arrival; their network calls are not cancelled.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from skytrack.contracts.enums import FlightStatus
from skytrack.contracts.flight import Flight
from skytrack.contracts.render import RenderDescription
from skytrack.contracts.tracking import AssemblySummary, FlightPath, TrackingSample
from skytrack.errors import NotFound
from skytrack.gateway.client import FlightTrackingClient
from skytrack.rendering.adapter import RenderAdapter
from skytrack.rendering.base import MapRenderer, paint
from skytrack.tracking.assembler import PathAssembler
from skytrack.tracking.lifecycle import FlightLifecycleTracker
from skytrack.tracking.path_store import FlightPathStore
from skytrack.tracking.resolver import PositionResolver
from skytrack.tracking.validator import coerce_flight_number, coerce_time, validate_sample

logger = logging.getLogger(__name__)

TimeLike = datetime | str | int | float

TRACK = "track"
POSITION = "position"


class RequestTags:
    """Monotonic request ids per action kind; only the latest one counts."""

    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self._latest: dict[str, int] = {}

    def issue(self, action: str) -> int:
        tag = next(self._counter)
        self._latest[action] = tag
        return tag

    def is_current(self, action: str, tag: int) -> bool:
        return self._latest.get(action) == tag


@dataclass
class TrackingView:
    """What the map currently shows for the selected flight."""

    flight: Flight | None = None
    path: FlightPath | None = None
    current: TrackingSample | None = None
    description: RenderDescription | None = None
    rendered: Any = None
    summary: AssemblySummary | None = None
    errors: list[str] = field(default_factory=list)


class TrackerSession:
    def __init__(
        self,
        gateway: FlightTrackingClient,
        renderer: MapRenderer | None = None,
        store: FlightPathStore | None = None,
    ):
        self.gateway = gateway
        self.renderer = renderer
        self.store = store or FlightPathStore()
        self.assembler = PathAssembler(self.store)
        self.resolver = PositionResolver(self.store)
        self.lifecycle = FlightLifecycleTracker(self.store)
        self.adapter = RenderAdapter()
        self._tags = RequestTags()
        self._selected: str | None = None
        self._view = TrackingView()
        self._hold_redraw = False
        self._unsubscribe = self.store.subscribe(self._on_path_changed)

    # ------------------------------------------------------------------
    # Selection and view
    # ------------------------------------------------------------------

    @property
    def selected(self) -> str | None:
        return self._selected

    @property
    def view(self) -> TrackingView:
        return self._view

    def select_flight(self, flight_number: str) -> str:
        """Switch the tracked flight; pending results for the old one are ignored."""
        fn = coerce_flight_number(flight_number)
        if fn != self._selected:
            logger.debug("Selected flight %s (was %s)", fn, self._selected)
            self._selected = fn
            self._view = TrackingView()
            self.adapter.reset()
        return fn

    def close(self) -> None:
        self._unsubscribe()

    # ------------------------------------------------------------------
    # Track flight / position at time
    # ------------------------------------------------------------------

    async def track_flight(self, flight_number: str) -> TrackingView | None:
        """Fetch metadata and history, assemble the path, render it.

        Returns None when a newer request superseded this one.
        """
        fn = self.select_flight(flight_number)
        tag = self._tags.issue(TRACK)

        flight = await self.gateway.get_flight(fn)
        raw_path = await self.gateway.get_path(fn)
        if not self._applies(TRACK, tag, fn):
            return None

        flight = self.lifecycle.register(flight)
        self._view.flight = flight
        summary = self.assembler.validate_batch(fn, raw_path)
        if FlightStatus(flight.status) is FlightStatus.COMPLETED:
            logger.info("Flight %s is completed; its samples are not kept", fn)
        else:
            self._hold_redraw = True
            try:
                self.assembler.commit(fn, summary.accepted)
            finally:
                self._hold_redraw = False
        self._view.summary = summary
        self._view.errors = [f"#{r.index} {r.field}: {r.message}" for r in summary.rejections]
        try:
            self._view.current = self.resolver.resolve_current(fn)
        except NotFound:
            self._view.current = None
        self._redraw()
        logger.info(
            "Tracking %s: %d samples (%d rejected)",
            fn,
            summary.accepted_count,
            summary.rejected_count,
        )
        return self._view

    async def position_at(
        self, query_time: TimeLike, remote: bool = False
    ) -> TrackingSample | None:
        """Highlight the last known position at or before ``query_time``.

        With ``remote=True`` the backend is asked first and its answer is
        merged into the path before resolving. Returns None when the
        request was superseded.
        """
        if self._selected is None:
            raise NotFound("", "no flight selected")
        fn = self._selected
        when = coerce_time(query_time, "query_time")
        tag = self._tags.issue(POSITION)

        path_changed = False
        if remote:
            if fn in self.lifecycle and self.lifecycle.status(fn) is FlightStatus.COMPLETED:
                raise NotFound(fn, f"flight {fn} is completed; no live position")
            raw = await self.gateway.get_location(fn, when)
            if not self._applies(POSITION, tag, fn):
                return None
            if raw is None:
                raise NotFound(fn, f"backend has no position for {fn} at {when.isoformat()}")
            self._hold_redraw = True
            try:
                self.assembler.ingest(fn, raw)
            finally:
                self._hold_redraw = False
            path_changed = True

        sample = self.resolver.resolve_at(fn, when)
        self._view.current = sample
        if path_changed and self._view.flight is not None:
            self._redraw()
        elif self.adapter.last is not None:
            self._view.description = self.adapter.replace_current_position(sample)
            self._paint()
        return sample

    def _applies(self, action: str, tag: int, flight_number: str) -> bool:
        if self._tags.is_current(action, tag) and self._selected == flight_number:
            return True
        logger.debug("Discarding superseded %s result #%d for %s", action, tag, flight_number)
        return False

    # ------------------------------------------------------------------
    # Management actions
    # ------------------------------------------------------------------

    async def create_flight(self, flight: Flight) -> Flight:
        created = await self.gateway.create_flight(flight)
        return self.lifecycle.register(created)

    async def ingest(self, raw: Mapping[str, Any]) -> TrackingSample:
        """Validate one record locally, send it, then add it to the path."""
        sample = validate_sample(raw)
        self.lifecycle.ensure_accepting_samples(sample.flight_number)
        await self.gateway.ingest_sample(sample)
        self.assembler.commit(sample.flight_number, [sample])
        return sample

    async def ingest_batch(
        self, flight_number: str, raws: Iterable[Mapping[str, Any]]
    ) -> AssemblySummary:
        """Send the valid records of a batch; invalid ones are reported, not sent."""
        fn = coerce_flight_number(flight_number)
        self.lifecycle.ensure_accepting_samples(fn)
        summary = self.assembler.validate_batch(fn, raws)
        if summary.accepted:
            await self.gateway.ingest_batch(fn, summary.accepted)
            self.assembler.commit(fn, summary.accepted)
        return summary

    async def complete_flight(self, flight_number: str) -> Flight:
        """Complete a fetched flight on the backend and drop its live path."""
        fn = coerce_flight_number(flight_number)
        self.lifecycle.get(fn)
        await self.gateway.complete_flight(fn)
        if fn == self._selected:
            self._view.current = None
        completed = self.lifecycle.mark_completed(fn)
        if fn == self._selected:
            self._view.flight = completed
            self._redraw()
        return completed

    async def refresh_active_flights(self) -> list[Flight]:
        flights = await self.gateway.list_active_flights()
        return [self.lifecycle.register(f) for f in flights]

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _on_path_changed(self, path: FlightPath) -> None:
        if self._hold_redraw or path.flight_number != self._selected:
            return
        if self._view.flight is None:
            return
        if not path:
            self._view.current = None
        elif self._view.current is None or self._view.current.timestamp < path.last.timestamp:
            self._view.current = path.last
        self._redraw()

    def _redraw(self) -> None:
        fn = self._selected
        if fn is None:
            return
        path = self.store.snapshot(fn)
        self._view.path = path
        self._view.description = self.adapter.describe(path, self._view.flight, self._view.current)
        self._paint()

    def _paint(self) -> None:
        if self.renderer is not None and self._view.description is not None:
            self._view.rendered = paint(self.renderer, self._view.description)
