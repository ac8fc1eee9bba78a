"""Async HTTP client for the flight-tracking backend.

The only module that talks to the backend. Tracking records come back
as raw dicts on purpose: they go through ``PathAssembler`` so a malformed
record is skipped and reported rather than failing a whole response.
No retries; a failed call surfaces as ``RemoteError`` and the user action
can simply be re-issued.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Any

import httpx

from skytrack.contracts.common import parse_timestamp
from skytrack.contracts.enums import FlightStatus
from skytrack.contracts.flight import Flight, normalize_flight_number
from skytrack.contracts.result import BackendResponse
from skytrack.contracts.tracking import TrackingSample
from skytrack.config import DEFAULT_BACKEND_URL
from skytrack.errors import RemoteError

logger = logging.getLogger(__name__)

TimeLike = datetime | str | int | float


def _iso(value: TimeLike) -> str:
    return parse_timestamp(value).isoformat().replace("+00:00", "Z")


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            if body.get(key):
                return str(body[key])
    return resp.reason_phrase or f"HTTP {resp.status_code}"


class FlightTrackingClient:
    """Async HTTP client for ``/flights``, ``/tracking`` and ``/logs``."""

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        base_url: str = DEFAULT_BACKEND_URL,
        timeout: float = 15.0,
    ):
        self._client = http_client or httpx.AsyncClient(
            timeout=timeout, headers={"Content-Type": "application/json"}
        )
        self._base_url = base_url.rstrip("/")

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> BackendResponse[Any]:
        url = f"{self._base_url}{path}"
        try:
            resp = await self._client.request(method, url, **kwargs)
        except httpx.RequestError as exc:
            logger.error("%s %s failed: %s", method, path, exc)
            raise RemoteError(None, str(exc) or exc.__class__.__name__) from exc

        if resp.is_error:
            message = _error_message(resp)
            logger.warning("%s %s -> %d %s", method, path, resp.status_code, message)
            raise RemoteError(resp.status_code, message)

        if not resp.content:
            return BackendResponse.ok(None)
        try:
            body = resp.json()
        except ValueError as exc:
            raise RemoteError(resp.status_code, "backend returned invalid JSON") from exc
        if not isinstance(body, dict):
            return BackendResponse.ok(body)

        envelope = BackendResponse[Any].model_validate(body)
        if not envelope.success:
            raise RemoteError(resp.status_code, envelope.message or "request failed")
        return envelope

    # ------------------------------------------------------------------
    # Flights
    # ------------------------------------------------------------------

    async def create_flight(self, flight: Flight) -> Flight:
        resp = await self._request("POST", "/flights", json=flight.to_wire())
        return Flight.from_wire(resp.data) if resp.data else flight

    async def list_flights(
        self,
        status: FlightStatus | str | None = None,
        airline: str | None = None,
        **params: Any,
    ) -> list[Flight]:
        """All flights known to the backend, optionally filtered."""
        if status is not None:
            params["status"] = FlightStatus(status).value
        if airline:
            params["airline"] = airline
        resp = await self._request("GET", "/flights", params=params)
        return [Flight.from_wire(f) for f in resp.data or []]

    async def get_flight(self, flight_number: str) -> Flight:
        fn = normalize_flight_number(flight_number)
        resp = await self._request("GET", f"/flights/{fn}")
        if not resp.data:
            raise RemoteError(404, f"flight {fn} not found")
        return Flight.from_wire(resp.data)

    async def list_active_flights(self) -> list[Flight]:
        resp = await self._request("GET", "/flights/active")
        return [Flight.from_wire(f) for f in resp.data or []]

    async def update_flight_status(
        self, flight_number: str, status: FlightStatus | str
    ) -> Flight | None:
        fn = normalize_flight_number(flight_number)
        resp = await self._request(
            "PUT", f"/flights/{fn}/status", json={"status": FlightStatus(status).value}
        )
        return Flight.from_wire(resp.data) if resp.data else None

    async def delete_flight(self, flight_number: str) -> BackendResponse[Any]:
        fn = normalize_flight_number(flight_number)
        return await self._request("DELETE", f"/flights/{fn}")

    # ------------------------------------------------------------------
    # Tracking
    # ------------------------------------------------------------------

    async def ingest_sample(self, sample: TrackingSample) -> BackendResponse[Any]:
        return await self._request("POST", "/tracking/ingest", json=sample.to_ingest_payload())

    async def ingest_batch(
        self, flight_number: str, samples: Iterable[TrackingSample]
    ) -> BackendResponse[Any]:
        """Send samples in one request; ``data`` holds the per-item result."""
        payload = {
            "flightNumber": normalize_flight_number(flight_number),
            "trackingDataArray": [s.to_ingest_payload() for s in samples],
        }
        return await self._request("POST", "/tracking/ingest/batch", json=payload)

    async def get_location(
        self, flight_number: str, timestamp: TimeLike | None = None
    ) -> dict[str, Any] | None:
        """Raw position record at ``timestamp`` (latest when omitted)."""
        fn = normalize_flight_number(flight_number)
        params = {"timestamp": _iso(timestamp)} if timestamp is not None else {}
        resp = await self._request("GET", f"/tracking/{fn}/location", params=params)
        data = resp.data or {}
        position = data.get("currentPosition", data) if isinstance(data, dict) else None
        return position or None

    async def get_path(
        self,
        flight_number: str,
        start_time: TimeLike | None = None,
        end_time: TimeLike | None = None,
    ) -> list[dict[str, Any]]:
        """Raw tracking records of a flight, oldest first as sent by the backend."""
        fn = normalize_flight_number(flight_number)
        params: dict[str, str] = {}
        if start_time is not None:
            params["startTime"] = _iso(start_time)
        if end_time is not None:
            params["endTime"] = _iso(end_time)
        resp = await self._request("GET", f"/tracking/{fn}/path", params=params)
        data = resp.data
        if isinstance(data, dict):
            data = data.get("path", [])
        return list(data or [])

    async def list_active_tracking(self, limit: int | None = None) -> list[dict[str, Any]]:
        params = {"limit": limit} if limit is not None else {}
        resp = await self._request("GET", "/tracking/active", params=params)
        return list(resp.data or [])

    async def complete_flight(self, flight_number: str) -> BackendResponse[Any]:
        fn = normalize_flight_number(flight_number)
        return await self._request("POST", f"/tracking/{fn}/complete")

    # ------------------------------------------------------------------
    # Archived logs (written by the backend when a flight completes)
    # ------------------------------------------------------------------

    async def list_flight_logs(self, **params: Any) -> list[dict[str, Any]]:
        resp = await self._request("GET", "/logs", params=params)
        return list(resp.data or [])

    async def get_flight_log(self, flight_number: str) -> dict[str, Any]:
        fn = normalize_flight_number(flight_number)
        resp = await self._request("GET", f"/logs/{fn}")
        return resp.data or {}

    async def list_logs_for_flight(self, flight_number: str) -> list[dict[str, Any]]:
        fn = normalize_flight_number(flight_number)
        resp = await self._request("GET", f"/logs/{fn}/all")
        return list(resp.data or [])

    async def get_flight_statistics(self, flight_number: str) -> dict[str, Any]:
        fn = normalize_flight_number(flight_number)
        resp = await self._request("GET", f"/logs/{fn}/statistics")
        return resp.data or {}

    async def delete_flight_log(self, log_id: str) -> BackendResponse[Any]:
        return await self._request("DELETE", f"/logs/{log_id}")
