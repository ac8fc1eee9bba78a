"""Flight endpoints (proxied to the backend, mirrored in the session)."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from skytrack.api.deps import get_session
from skytrack.contracts.enums import FlightStatus
from skytrack.contracts.flight import Flight
from skytrack.session import TrackerSession

router = APIRouter(prefix="/flights", tags=["flights"])


@router.get("")
async def list_known_flights(
    status: FlightStatus | None = None,
    session: TrackerSession = Depends(get_session),
) -> list[dict]:
    """Flights this session has fetched or created."""
    return [f.to_wire() for f in session.lifecycle.flights(status)]


@router.get("/active")
async def list_active_flights(session: TrackerSession = Depends(get_session)) -> list[dict]:
    flights = await session.refresh_active_flights()
    return [f.to_wire() for f in flights]


@router.post("", status_code=201)
async def create_flight(
    flight: Flight,
    session: TrackerSession = Depends(get_session),
) -> dict:
    created = await session.create_flight(flight)
    return created.to_wire()
