"""Runtime configuration for SkyTrack.

Read from environment variables, optionally seeded from a ``.env`` file.
The map access token is never embedded in source; renderers that need it
ask for it through ``Settings.require_map_token()``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from skytrack.contracts.enums import RendererKind
from skytrack.errors import MapTokenMissing

DEFAULT_BACKEND_URL = "https://flight-tracking-backend.vercel.app/api"
MAP_TOKEN_ENV = "SKYTRACK_MAP_TOKEN"
LEGACY_MAP_TOKEN_ENV = "MAP_API"


@dataclass(frozen=True)
class Settings:
    backend_url: str = DEFAULT_BACKEND_URL
    http_timeout: float = 15.0
    map_token: str | None = None
    renderer: RendererKind = RendererKind.GEOJSON
    cors_origins: tuple[str, ...] = ("http://localhost:5173",)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """Build settings from the process environment."""
        if dotenv:
            load_dotenv()
        return cls(
            backend_url=os.getenv("SKYTRACK_BACKEND_URL", DEFAULT_BACKEND_URL).rstrip("/"),
            http_timeout=float(os.getenv("SKYTRACK_HTTP_TIMEOUT", "15")),
            map_token=os.getenv(MAP_TOKEN_ENV) or os.getenv(LEGACY_MAP_TOKEN_ENV) or None,
            renderer=RendererKind(os.getenv("SKYTRACK_RENDERER", "geojson").lower()),
            cors_origins=tuple(
                o.strip()
                for o in os.getenv("SKYTRACK_CORS_ORIGINS", "http://localhost:5173").split(",")
                if o.strip()
            ),
            log_level=os.getenv("SKYTRACK_LOG_LEVEL", "INFO").upper(),
        )

    @property
    def has_map_token(self) -> bool:
        return bool(self.map_token)

    def require_map_token(self) -> str:
        """Return the map token or raise ``MapTokenMissing``."""
        if not self.map_token:
            raise MapTokenMissing(MAP_TOKEN_ENV)
        return self.map_token
