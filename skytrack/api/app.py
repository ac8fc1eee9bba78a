"""FastAPI application factory for the local map UI."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

# Load .env file from project root (must be before settings are read)
load_dotenv()
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402

from skytrack.api.routes import flights, tracker, tracking  # noqa: E402
from skytrack.config import Settings  # noqa: E402
from skytrack.errors import (  # noqa: E402
    FlightCompleted,
    MapTokenMissing,
    NotFound,
    RemoteError,
    SkyTrackError,
    StatusTransitionError,
    UnknownFlight,
    ValidationError,
)
from skytrack.gateway.client import FlightTrackingClient  # noqa: E402
from skytrack.rendering.factory import create_renderer  # noqa: E402
from skytrack.session import TrackerSession  # noqa: E402

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: list[tuple[type[SkyTrackError], int]] = [
    (ValidationError, 422),
    (NotFound, 404),
    (UnknownFlight, 404),
    (StatusTransitionError, 409),
    (FlightCompleted, 409),
    (RemoteError, 502),
    (MapTokenMissing, 503),
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the tracker session unless a test already installed one."""
    if getattr(app.state, "session", None) is None:
        settings = Settings.from_env(dotenv=False)
        try:
            renderer = create_renderer(settings.renderer, settings)
        except MapTokenMissing as exc:
            logger.warning("%s; falling back to GeoJSON output", exc)
            renderer = create_renderer("geojson", settings)
        gateway = FlightTrackingClient(base_url=settings.backend_url, timeout=settings.http_timeout)
        app.state.settings = settings
        app.state.session = TrackerSession(gateway, renderer=renderer)
        logger.info("Tracker session ready (backend %s)", settings.backend_url)
        try:
            yield
        finally:
            app.state.session.close()
            await gateway.aclose()
            app.state.session = None
    else:
        yield


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env(dotenv=False)
    application = FastAPI(
        title="SkyTrack API",
        description="Flight path assembly and position lookup for the map UI",
        version="0.1.0",
        lifespan=lifespan,
    )
    application.state.settings = settings
    application.state.session = None

    application.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @application.exception_handler(SkyTrackError)
    async def skytrack_error(request: Request, exc: SkyTrackError) -> JSONResponse:
        status = next((code for cls, code in _STATUS_BY_ERROR if isinstance(exc, cls)), 500)
        if isinstance(exc, RemoteError) and exc.status == 404:
            status = 404
        content: dict = {"detail": str(exc), "error": type(exc).__name__}
        if isinstance(exc, ValidationError):
            content["field"] = exc.field
        return JSONResponse(status_code=status, content=content)

    application.include_router(tracker.router, prefix="/api")
    application.include_router(flights.router, prefix="/api")
    application.include_router(tracking.router, prefix="/api")

    @application.get("/api/health")
    async def health() -> dict:
        return {"status": "ok"}

    return application


app = create_app()
