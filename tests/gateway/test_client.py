"""Tests for the backend client with mocked HTTP responses."""

from __future__ import annotations

import json

import httpx
import pytest

from skytrack.contracts.enums import FlightStatus
from skytrack.errors import RemoteError
from skytrack.gateway.client import FlightTrackingClient
from tests.factories import envelope, flight, flight_payload, raw_sample, sample

BASE = "https://backend.test/api"


def _client(http: httpx.AsyncClient) -> FlightTrackingClient:
    return FlightTrackingClient(http_client=http, base_url=BASE)


class TestFlights:
    async def test_get_flight(self):
        seen = []

        def handler(req: httpx.Request) -> httpx.Response:
            seen.append(req)
            return httpx.Response(200, json=envelope(flight_payload()))

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            result = await _client(http).get_flight("aa123")
        assert result.flight_number == "AA123"
        assert result.origin.code == "JFK"
        assert str(seen[0].url) == f"{BASE}/flights/AA123"

    async def test_get_flight_not_found(self):
        transport = httpx.MockTransport(
            lambda req: httpx.Response(
                404, json={"success": False, "message": "Flight not found"}
            )
        )
        async with httpx.AsyncClient(transport=transport) as http:
            with pytest.raises(RemoteError) as exc_info:
                await _client(http).get_flight("ZZ999")
        assert exc_info.value.status == 404
        assert exc_info.value.message == "Flight not found"

    async def test_get_flight_empty_data(self):
        transport = httpx.MockTransport(lambda req: httpx.Response(200, json=envelope(None)))
        async with httpx.AsyncClient(transport=transport) as http:
            with pytest.raises(RemoteError) as exc_info:
                await _client(http).get_flight("AA123")
        assert exc_info.value.status == 404

    async def test_create_flight_posts_wire_shape(self):
        bodies = []

        def handler(req: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(req.content))
            return httpx.Response(201, json=envelope(flight_payload(status="scheduled")))

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            created = await _client(http).create_flight(flight(status="scheduled"))
        assert bodies[0]["flightNumber"] == "AA123"
        assert bodies[0]["origin"]["airport"] == "JFK"
        assert created.status == FlightStatus.SCHEDULED

    async def test_list_active_flights(self):
        def handler(req: httpx.Request) -> httpx.Response:
            assert req.url.path == "/api/flights/active"
            return httpx.Response(
                200, json=envelope([flight_payload("AA123"), flight_payload("BA2490")])
            )

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            flights = await _client(http).list_active_flights()
        assert [f.flight_number for f in flights] == ["AA123", "BA2490"]

    async def test_list_flights_filters(self):
        def handler(req: httpx.Request) -> httpx.Response:
            assert req.url.params["status"] == "completed"
            assert req.url.params["airline"] == "Delta"
            return httpx.Response(200, json=envelope([]))

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            assert await _client(http).list_flights(FlightStatus.COMPLETED, "Delta") == []

    async def test_update_flight_status(self):
        def handler(req: httpx.Request) -> httpx.Response:
            assert req.method == "PUT"
            assert req.url.path == "/api/flights/AA123/status"
            assert json.loads(req.content) == {"status": "active"}
            return httpx.Response(200, json=envelope(flight_payload(status="active")))

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            updated = await _client(http).update_flight_status("AA123", "active")
        assert updated.status == "active"

    async def test_delete_flight(self):
        def handler(req: httpx.Request) -> httpx.Response:
            assert req.method == "DELETE"
            return httpx.Response(200, json=envelope(message="Flight deleted successfully"))

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            resp = await _client(http).delete_flight("AA123")
        assert resp.message == "Flight deleted successfully"


class TestTracking:
    async def test_get_path_returns_raw_records(self):
        records = [raw_sample(minutes=0), raw_sample(minutes=1, latitude=200)]

        def handler(req: httpx.Request) -> httpx.Response:
            assert req.url.path == "/api/tracking/AA123/path"
            assert req.url.params["startTime"] == "2025-06-15T08:00:00Z"
            return httpx.Response(200, json=envelope({"flightNumber": "AA123", "path": records}))

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            path = await _client(http).get_path("AA123", start_time="2025-06-15T08:00:00Z")
        assert path == records

    async def test_get_path_plain_list(self):
        transport = httpx.MockTransport(
            lambda req: httpx.Response(200, json=envelope([raw_sample()]))
        )
        async with httpx.AsyncClient(transport=transport) as http:
            assert len(await _client(http).get_path("AA123")) == 1

    async def test_get_location_with_timestamp(self):
        def handler(req: httpx.Request) -> httpx.Response:
            assert req.url.params["timestamp"] == "2025-06-15T08:30:00Z"
            return httpx.Response(
                200, json=envelope({"currentPosition": raw_sample(minutes=30)})
            )

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            position = await _client(http).get_location("AA123", "2025-06-15T08:30:00Z")
        assert position["latitude"] == 40.6413

    async def test_get_location_latest(self):
        def handler(req: httpx.Request) -> httpx.Response:
            assert "timestamp" not in req.url.params
            return httpx.Response(200, json=envelope({"currentPosition": None}))

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            assert await _client(http).get_location("AA123") is None

    async def test_ingest_sample_sends_nested_position(self):
        bodies = []

        def handler(req: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(req.content))
            return httpx.Response(201, json=envelope({"id": "abc"}))

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            await _client(http).ingest_sample(sample())
        assert bodies[0]["position"]["latitude"] == 40.6413
        assert "latitude" not in bodies[0]

    async def test_ingest_batch_body(self):
        bodies = []

        def handler(req: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(req.content))
            return httpx.Response(200, json=envelope({"successful": 2, "failed": 0}))

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            resp = await _client(http).ingest_batch("aa123", [sample(minutes=0), sample(minutes=1)])
        assert bodies[0]["flightNumber"] == "AA123"
        assert len(bodies[0]["trackingDataArray"]) == 2
        assert resp.data["successful"] == 2

    async def test_list_active_tracking(self):
        def handler(req: httpx.Request) -> httpx.Response:
            assert req.url.params["limit"] == "5"
            return httpx.Response(200, json=envelope([raw_sample()]))

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            assert len(await _client(http).list_active_tracking(limit=5)) == 1

    async def test_complete_flight(self):
        def handler(req: httpx.Request) -> httpx.Response:
            assert req.method == "POST"
            assert req.url.path == "/api/tracking/AA123/complete"
            return httpx.Response(200, json=envelope({"logId": "log1"}))

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            resp = await _client(http).complete_flight("AA123")
        assert resp.data == {"logId": "log1"}


class TestLogs:
    async def test_statistics(self):
        def handler(req: httpx.Request) -> httpx.Response:
            assert req.url.path == "/api/logs/AA123/statistics"
            return httpx.Response(200, json=envelope({"totalDataPoints": 42}))

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            stats = await _client(http).get_flight_statistics("AA123")
        assert stats["totalDataPoints"] == 42

    async def test_list_and_delete(self):
        def handler(req: httpx.Request) -> httpx.Response:
            if req.method == "DELETE":
                assert req.url.path == "/api/logs/log1"
                return httpx.Response(200, json=envelope())
            assert req.url.path == "/api/logs/AA123/all"
            return httpx.Response(200, json=envelope([{"id": "log1"}]))

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            client = _client(http)
            logs = await client.list_logs_for_flight("AA123")
            await client.delete_flight_log(logs[0]["id"])
        assert logs == [{"id": "log1"}]


class TestErrors:
    async def test_server_error(self):
        transport = httpx.MockTransport(
            lambda req: httpx.Response(500, json={"success": False, "message": "db down"})
        )
        async with httpx.AsyncClient(transport=transport) as http:
            with pytest.raises(RemoteError) as exc_info:
                await _client(http).list_active_flights()
        assert exc_info.value.status == 500
        assert str(exc_info.value) == "HTTP 500: db down"

    async def test_error_without_body(self):
        transport = httpx.MockTransport(lambda req: httpx.Response(503))
        async with httpx.AsyncClient(transport=transport) as http:
            with pytest.raises(RemoteError) as exc_info:
                await _client(http).list_active_flights()
        assert exc_info.value.message == "Service Unavailable"

    async def test_unsuccessful_envelope(self):
        transport = httpx.MockTransport(
            lambda req: httpx.Response(200, json=envelope(success=False, message="nope"))
        )
        async with httpx.AsyncClient(transport=transport) as http:
            with pytest.raises(RemoteError) as exc_info:
                await _client(http).list_active_flights()
        assert exc_info.value.message == "nope"

    async def test_invalid_json(self):
        transport = httpx.MockTransport(lambda req: httpx.Response(200, text="<html>"))
        async with httpx.AsyncClient(transport=transport) as http:
            with pytest.raises(RemoteError):
                await _client(http).list_active_flights()

    async def test_network_failure(self):
        def handler(req: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=req)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            with pytest.raises(RemoteError) as exc_info:
                await _client(http).get_path("AA123")
        assert exc_info.value.status is None
        assert str(exc_info.value).startswith("network error")
