"""Merge raw tracking records into a flight's path.

Batches have partial-failure semantics: a malformed record is skipped and
reported, the rest of the batch is still assembled.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from skytrack.contracts.tracking import AssemblySummary, SampleRejection, TrackingSample
from skytrack.errors import ValidationError
from skytrack.tracking.path_store import FlightPathStore
from skytrack.tracking.validator import coerce_flight_number, validate_sample

logger = logging.getLogger(__name__)


class PathAssembler:
    """Validate records and upsert the accepted ones into a ``FlightPathStore``."""

    def __init__(self, store: FlightPathStore):
        self._store = store

    def validate_batch(
        self,
        flight_number: str,
        raws: Iterable[Mapping[str, Any] | TrackingSample],
    ) -> AssemblySummary:
        """Validate every record without touching the store."""
        summary = AssemblySummary(flight_number=coerce_flight_number(flight_number))
        for index, raw in enumerate(raws):
            try:
                summary.accepted.append(validate_sample(raw, summary.flight_number))
            except ValidationError as exc:
                summary.rejections.append(
                    SampleRejection(index=index, field=exc.field, message=exc.message)
                )
        if summary.rejections:
            logger.warning(
                "Rejected %d of %d records for %s (first: %s)",
                summary.rejected_count,
                summary.accepted_count + summary.rejected_count,
                summary.flight_number,
                summary.rejections[0].field,
            )
        return summary

    def commit(self, flight_number: str, samples: Iterable[TrackingSample]) -> int:
        """Upsert already validated samples, in order."""
        return self._store.upsert_many(flight_number, samples)

    def ingest(
        self, flight_number: str, raw: Mapping[str, Any] | TrackingSample
    ) -> TrackingSample:
        """Validate and store a single record. Raises ``ValidationError``."""
        sample = validate_sample(raw, flight_number)
        self._store.upsert(sample.flight_number, sample)
        return sample

    def ingest_batch(
        self,
        flight_number: str,
        raws: Iterable[Mapping[str, Any] | TrackingSample],
    ) -> AssemblySummary:
        """Validate a batch and store every accepted record."""
        summary = self.validate_batch(flight_number, raws)
        self.commit(summary.flight_number, summary.accepted)
        logger.debug(
            "Assembled %d samples for %s", summary.accepted_count, summary.flight_number
        )
        return summary
