"""FastAPI dependency injection wiring."""

from __future__ import annotations

from fastapi import HTTPException, Request

from skytrack.config import Settings
from skytrack.session import TrackerSession


def get_session(request: Request) -> TrackerSession:
    """The tracker session built at startup (singleton on app.state)."""
    session = getattr(request.app.state, "session", None)
    if session is None:
        raise HTTPException(status_code=503, detail="Tracker session not ready")
    return session


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
