"""Map view endpoints: track a flight, move the highlighted position."""

from __future__ import annotations

import json
from typing import Any

from fastapi import APIRouter, Depends

from skytrack.api.deps import get_session, get_settings
from skytrack.config import Settings
from skytrack.contracts.common import WireModel
from skytrack.errors import NotFound
from skytrack.session import TrackerSession, TrackingView

router = APIRouter(prefix="/tracker", tags=["tracker"])


class TrackRequest(WireModel):
    flight_number: str


def _view_payload(view: TrackingView) -> dict[str, Any]:
    return {
        "flight": view.flight.to_wire() if view.flight else None,
        "pathLength": len(view.path) if view.path is not None else 0,
        "pathVersion": view.path.version if view.path is not None else 0,
        "currentPosition": view.current.to_wire() if view.current else None,
        "description": view.description.to_wire() if view.description else None,
        "rejected": view.errors,
    }


def _rendered(view: TrackingView) -> Any:
    rendered = view.rendered
    if rendered is None or isinstance(rendered, dict):
        return rendered
    # pydeck.Deck and anything else that serializes itself
    return json.loads(rendered.to_json())


@router.post("/track")
async def track_flight(
    request: TrackRequest,
    session: TrackerSession = Depends(get_session),
) -> dict:
    view = await session.track_flight(request.flight_number)
    if view is None:
        return {"applied": False}
    return {"applied": True, **_view_payload(view)}


@router.get("/position")
async def position_at(
    timestamp: str,
    remote: bool = False,
    session: TrackerSession = Depends(get_session),
) -> dict:
    sample = await session.position_at(timestamp, remote=remote)
    if sample is None:
        return {"applied": False}
    return {"applied": True, "currentPosition": sample.to_wire()}


@router.get("/interpolate")
async def interpolate_at(
    timestamp: str,
    session: TrackerSession = Depends(get_session),
) -> dict:
    if session.selected is None:
        raise NotFound("", "no flight selected")
    position = session.resolver.interpolate_at(session.selected, timestamp)
    return {"position": position.to_wire()}


@router.get("/view")
async def current_view(session: TrackerSession = Depends(get_session)) -> dict:
    return {"selected": session.selected, **_view_payload(session.view)}


@router.get("/render")
async def render(session: TrackerSession = Depends(get_session)) -> dict:
    return {"selected": session.selected, "output": _rendered(session.view)}


@router.get("/map-config")
async def map_config(settings: Settings = Depends(get_settings)) -> dict:
    return {
        "accessToken": settings.require_map_token(),
        "style": "mapbox://styles/mapbox/dark-v11",
    }
