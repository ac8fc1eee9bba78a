"""Tests for the command-line entry point against the fake backend."""

import json

import pytest

from skytrack import cli
from tests.factories import flight_payload, raw_sample
from tests.fake_backend import FakeBackend


@pytest.fixture
def backend(monkeypatch):
    fake = FakeBackend()
    fake.flights["AA123"] = flight_payload("AA123")
    fake.paths["AA123"] = [raw_sample("AA123", m) for m in (0, 10, 20)]
    monkeypatch.setattr(cli, "FlightTrackingClient", lambda **kwargs: fake.client())
    for name in ("SKYTRACK_RENDERER", "SKYTRACK_MAP_TOKEN", "MAP_API"):
        monkeypatch.delenv(name, raising=False)
    return fake


class TestCli:
    def test_track_writes_geojson(self, backend, tmp_path, capsys):
        output = tmp_path / "aa123.json"
        assert cli.main(["track", "AA123", "--output", str(output)]) == 0
        assert "AA123 @ 2025-06-15T08:20:00+00:00" in capsys.readouterr().out
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["sources"]["route"]["data"]["geometry"]["type"] == "LineString"

    def test_position(self, backend, capsys):
        assert cli.main(["position", "AA123", "2025-06-15T08:15:00Z"]) == 0
        assert "AA123 @ 2025-06-15T08:10:00+00:00" in capsys.readouterr().out

    def test_position_interpolated(self, backend, capsys):
        assert cli.main(["position", "AA123", "2025-06-15T08:15:00Z", "--interpolate"]) == 0
        assert "(interpolated)" in capsys.readouterr().out

    def test_ingest_reports_rejections(self, backend, tmp_path, capsys):
        records = tmp_path / "samples.json"
        records.write_text(
            json.dumps([raw_sample("AA123", 30), raw_sample("AA123", 31, latitude=200)]),
            encoding="utf-8",
        )
        assert cli.main(["ingest", "AA123", "--json", str(records)]) == 0
        out = capsys.readouterr().out
        assert "accepted 1, rejected 1" in out
        assert "#1 latitude" in out
        assert len(backend.ingested) == 1

    def test_active(self, backend, capsys):
        assert cli.main(["active"]) == 0
        assert capsys.readouterr().out.startswith("AA123\tAmerican Airlines\tactive")

    def test_errors_exit_non_zero(self, backend, capsys):
        assert cli.main(["track", "ZZ999"]) == 1
        assert "error: HTTP 404" in capsys.readouterr().err

    def test_deck_without_token(self, backend, capsys):
        assert cli.main(["track", "AA123", "--renderer", "deck"]) == 1
        assert "SKYTRACK_MAP_TOKEN" in capsys.readouterr().err
