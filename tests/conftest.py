"""Shared fixtures for the tracking core."""

from __future__ import annotations

import pytest

from skytrack.tracking.assembler import PathAssembler
from skytrack.tracking.lifecycle import FlightLifecycleTracker
from skytrack.tracking.path_store import FlightPathStore
from skytrack.tracking.resolver import PositionResolver


@pytest.fixture
def store():
    return FlightPathStore()


@pytest.fixture
def assembler(store):
    return PathAssembler(store)


@pytest.fixture
def resolver(store):
    return PositionResolver(store)


@pytest.fixture
def lifecycle(store):
    return FlightLifecycleTracker(store)
