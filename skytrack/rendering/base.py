"""Renderer capability set and the clear-then-redraw paint routine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from skytrack.contracts.enums import MarkerRole
from skytrack.contracts.render import Marker, Polyline, RenderDescription, Viewport

ClickHandler = Callable[[Marker], Any]


class MapRenderer(ABC):
    """A concrete map binding.

    Subclasses implement the drawing hooks; this class keeps the sample
    markers so ``click(index)`` can hand the clicked one to the handler
    registered with ``on_point_click``.
    """

    def __init__(self) -> None:
        self._click_handler: ClickHandler | None = None
        self._sample_markers: list[Marker] = []

    # -- capability set ------------------------------------------------

    def clear(self) -> None:
        self._sample_markers = []
        self._clear()

    def draw_polyline(self, polyline: Polyline) -> None:
        self._draw_polyline(polyline)

    def draw_marker(self, marker: Marker) -> None:
        if MarkerRole(marker.role) is MarkerRole.SAMPLE:
            self._sample_markers.append(marker)
        self._draw_marker(marker)

    def fit_bounds(self, viewport: Viewport) -> None:
        self._fit_bounds(viewport)

    def on_point_click(self, handler: ClickHandler) -> None:
        self._click_handler = handler

    def click(self, index: int) -> Marker:
        """Simulate a click on the ``index``-th sample marker."""
        marker = self._sample_markers[index]
        if self._click_handler is not None:
            self._click_handler(marker)
        return marker

    # -- hooks ---------------------------------------------------------

    @abstractmethod
    def _clear(self) -> None: ...

    @abstractmethod
    def _draw_polyline(self, polyline: Polyline) -> None: ...

    @abstractmethod
    def _draw_marker(self, marker: Marker) -> None: ...

    @abstractmethod
    def _fit_bounds(self, viewport: Viewport) -> None: ...

    @abstractmethod
    def render(self) -> Any:
        """Renderer-specific output of everything drawn since the last clear."""


def paint(renderer: MapRenderer, description: RenderDescription) -> Any:
    """Replace whatever ``renderer`` shows with ``description``."""
    renderer.clear()
    if description.polyline.points:
        renderer.draw_polyline(description.polyline)
    for marker in description.sample_markers:
        renderer.draw_marker(marker)
    for role in (MarkerRole.ORIGIN, MarkerRole.DESTINATION, MarkerRole.CURRENT_POSITION):
        marker = description.marker(role)
        if marker is not None:
            renderer.draw_marker(marker)
    if description.viewport is not None:
        renderer.fit_bounds(description.viewport)
    return renderer.render()
