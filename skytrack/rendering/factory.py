"""Select a concrete renderer at composition time."""

from __future__ import annotations

from skytrack.config import Settings
from skytrack.contracts.enums import RendererKind
from skytrack.rendering.base import MapRenderer
from skytrack.rendering.geojson import GeoJSONRenderer


def create_renderer(kind: RendererKind | str, settings: Settings) -> MapRenderer:
    kind = RendererKind(kind)
    if kind is RendererKind.DECK:
        # pydeck is only imported when the deck binding is chosen
        from skytrack.rendering.deck import DeckRenderer

        return DeckRenderer(settings.require_map_token())
    return GeoJSONRenderer()
