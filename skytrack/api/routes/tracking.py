"""Tracking ingestion and flight completion endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends

from skytrack.api.deps import get_session
from skytrack.session import TrackerSession

router = APIRouter(prefix="/tracking", tags=["tracking"])


@router.post("/ingest", status_code=201)
async def ingest(
    record: dict[str, Any] = Body(...),
    session: TrackerSession = Depends(get_session),
) -> dict:
    sample = await session.ingest(record)
    return sample.to_wire()


@router.post("/ingest/batch")
async def ingest_batch(
    flight_number: str = Body(..., alias="flightNumber"),
    records: list[dict[str, Any]] = Body(..., alias="trackingDataArray"),
    session: TrackerSession = Depends(get_session),
) -> dict:
    summary = await session.ingest_batch(flight_number, records)
    return {
        "flightNumber": summary.flight_number,
        "accepted": summary.accepted_count,
        "rejected": summary.rejected_count,
        "rejections": [r.to_wire() for r in summary.rejections],
    }


@router.post("/{flight_number}/complete")
async def complete_flight(
    flight_number: str,
    session: TrackerSession = Depends(get_session),
) -> dict:
    flight = await session.complete_flight(flight_number)
    return flight.to_wire()
