"""Tests for the ordered, versioned flight path store."""

import pytest

from skytrack.errors import ValidationError
from tests.factories import at, sample


class TestOrdering:
    def test_out_of_order_ingestion_is_sorted(self, store):
        for minutes in (30, 10, 50, 0, 20, 40):
            store.upsert("AA123", sample(minutes=minutes))
        stamps = [s.timestamp for s in store.get("AA123")]
        assert stamps == sorted(stamps)
        assert len(stamps) == 6

    def test_duplicate_timestamp_last_write_wins(self, store):
        store.upsert("AA123", sample(minutes=5, altitude=30000))
        store.upsert("AA123", sample(minutes=5, altitude=31000))
        path = store.get("AA123")
        assert len(path) == 1
        assert path[0].altitude == 31000

    def test_duplicate_inside_batch(self, store):
        store.upsert_many(
            "AA123",
            [sample(minutes=0), sample(minutes=1, speed=400), sample(minutes=1, speed=410)],
        )
        path = store.get("AA123")
        assert len(path) == 2
        assert path[1].speed == 410

    def test_unknown_flight_is_empty(self, store):
        assert store.get("ZZ999") == ()
        assert "ZZ999" not in store

    def test_flights_are_isolated(self, store):
        store.upsert("AA123", sample("AA123", 0))
        store.upsert("BA2490", sample("BA2490", 0))
        assert len(store.get("AA123")) == 1
        assert store.flights() == ["AA123", "BA2490"]
        assert len(store) == 2

    def test_flight_number_is_normalized(self, store):
        store.upsert("aa123", sample(minutes=0))
        assert "AA123" in store
        assert len(store.get(" aa123 ")) == 1

    def test_sample_for_other_flight_rejected(self, store):
        with pytest.raises(ValidationError):
            store.upsert("AA123", sample("BA2490"))

    def test_get_returns_a_copy(self, store):
        store.upsert("AA123", sample(minutes=0))
        before = store.get("AA123")
        store.upsert("AA123", sample(minutes=1))
        assert len(before) == 1


class TestWindow:
    @pytest.fixture(autouse=True)
    def _fill(self, store):
        store.upsert_many("AA123", [sample(minutes=m) for m in range(0, 60, 10)])

    def test_inclusive_bounds(self, store):
        window = store.window("AA123", at(10), at(30))
        assert [s.timestamp for s in window] == [at(10), at(20), at(30)]

    def test_open_start(self, store):
        assert len(store.window("AA123", end=at(15))) == 2

    def test_open_end(self, store):
        assert len(store.window("AA123", start="2025-06-15T08:45:00Z")) == 1

    def test_empty_window(self, store):
        assert store.window("AA123", at(11), at(19)) == ()


class TestVersioning:
    def test_version_increments_per_mutation(self, store):
        assert store.version("AA123") == 0
        store.upsert("AA123", sample(minutes=0))
        store.upsert_many("AA123", [sample(minutes=1), sample(minutes=2)])
        assert store.version("AA123") == 2
        assert store.snapshot("AA123").version == 2

    def test_empty_batch_does_not_bump(self, store):
        assert store.upsert_many("AA123", []) == 0
        assert store.version("AA123") == 0

    def test_clear(self, store):
        store.upsert("AA123", sample(minutes=0))
        store.clear("AA123")
        assert store.get("AA123") == ()
        assert store.version("AA123") == 2
        assert "AA123" not in store


class TestSubscribers:
    def test_notified_with_snapshot(self, store):
        seen = []
        store.subscribe(seen.append)
        store.upsert_many("AA123", [sample(minutes=1), sample(minutes=0)])
        assert len(seen) == 1
        assert seen[0].flight_number == "AA123"
        assert [s.timestamp for s in seen[0]] == [at(0), at(1)]
        assert seen[0].version == 1

    def test_unsubscribe(self, store):
        seen = []
        unsubscribe = store.subscribe(seen.append)
        unsubscribe()
        store.upsert("AA123", sample())
        assert seen == []

    def test_failing_subscriber_does_not_block_others(self, store, caplog):
        seen = []

        def broken(path):
            raise RuntimeError("boom")

        store.subscribe(broken)
        store.subscribe(seen.append)
        store.upsert("AA123", sample())
        assert len(seen) == 1
        assert len(store.get("AA123")) == 1
        assert "Path subscriber failed" in caplog.text
