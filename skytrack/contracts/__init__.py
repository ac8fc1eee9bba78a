"""SkyTrack data contracts, Pydantic v2 models for flight tracking.

Data authority
--------------

**Tracking backend** (source of truth, reached only through
``FlightTrackingClient``):
- ``Flight``: ``/flights/{flightNumber}``
- ``TrackingSample``: ``/tracking/{flightNumber}/path``, archived to
  ``/logs`` once the flight completes

**Client memory** (transient, rebuilt from the backend every session):
- ``FlightPath``: ordered samples per flight, kept by ``FlightPathStore``
- ``Flight`` status: kept by ``FlightLifecycleTracker``

Calculated (never sent to the backend)
--------------------------------------
- ``AssemblySummary`` / ``SampleRejection``: batch ingestion outcome
- ``InterpolatedPosition``: explicit between-sample estimate
- ``RenderDescription`` and its parts: drawing instructions
"""

from skytrack.contracts.enums import FlightStatus, MarkerRole, RendererKind
from skytrack.contracts.common import GeoPoint, WireModel, ensure_utc, parse_timestamp
from skytrack.contracts.flight import Airport, Flight, normalize_flight_number
from skytrack.contracts.tracking import (
    AssemblySummary,
    FlightPath,
    InterpolatedPosition,
    ReceiverInfo,
    SampleRejection,
    TrackingSample,
)
from skytrack.contracts.render import Marker, Polyline, RenderDescription, Viewport
from skytrack.contracts.result import BackendResponse

__all__ = [
    # Enums
    "FlightStatus",
    "MarkerRole",
    "RendererKind",
    # Common
    "GeoPoint",
    "WireModel",
    "ensure_utc",
    "parse_timestamp",
    # Domain models
    "Airport",
    "Flight",
    "normalize_flight_number",
    "AssemblySummary",
    "FlightPath",
    "InterpolatedPosition",
    "ReceiverInfo",
    "SampleRejection",
    "TrackingSample",
    # Rendering
    "Marker",
    "Polyline",
    "RenderDescription",
    "Viewport",
    # Backend envelope
    "BackendResponse",
]
