"""Command-line entry point.

Usage:
    python -m skytrack.cli track AA123 --output aa123.json
    python -m skytrack.cli track AA123 --at 2025-06-15T08:45:00Z --renderer deck --output aa123.html
    python -m skytrack.cli position AA123 2025-06-15T08:45:00Z --interpolate
    python -m skytrack.cli active
    python -m skytrack.cli create --json flight.json
    python -m skytrack.cli ingest AA123 --json samples.json
    python -m skytrack.cli complete AA123
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from skytrack.config import Settings
from skytrack.contracts.flight import Flight
from skytrack.errors import SkyTrackError
from skytrack.gateway.client import FlightTrackingClient
from skytrack.rendering.factory import create_renderer
from skytrack.session import TrackerSession

logger = logging.getLogger(__name__)


def _load_json(path: Path) -> Any:
    with path.open(encoding="utf-8") as f:
        return json.load(f)


def _write_output(rendered: Any, output: Path) -> None:
    if isinstance(rendered, dict):
        output.write_text(json.dumps(rendered, ensure_ascii=False, indent=2), encoding="utf-8")
    else:
        rendered.to_html(str(output), open_browser=False)
    logger.info("Wrote map to %s", output)


async def _run(args: argparse.Namespace, settings: Settings) -> int:
    renderer = None
    if args.command == "track":
        renderer = create_renderer(args.renderer or settings.renderer, settings)

    gateway = FlightTrackingClient(base_url=settings.backend_url, timeout=settings.http_timeout)
    session = TrackerSession(gateway, renderer=renderer)
    try:
        if args.command == "track":
            await session.track_flight(args.flight_number)
            if args.at:
                await session.position_at(args.at, remote=args.remote)
            view = session.view
            for line in view.errors:
                print(f"skipped {line}")
            if view.current is not None:
                c = view.current
                print(
                    f"{view.flight.flight_number} @ {c.timestamp.isoformat()}: "
                    f"{c.latitude:.4f}, {c.longitude:.4f}, {c.altitude:,.0f} ft, "
                    f"{c.speed:.0f} kt, hdg {c.heading:.0f}"
                )
            else:
                print(f"{view.flight.flight_number}: no tracking data yet")
            if args.output and view.rendered is not None:
                _write_output(view.rendered, args.output)

        elif args.command == "position":
            await session.track_flight(args.flight_number)
            if args.interpolate:
                p = session.resolver.interpolate_at(args.flight_number, args.at)
                kind = "interpolated" if p.interpolated else "sample"
                print(
                    f"{p.flight_number} @ {p.timestamp.isoformat()} ({kind}): "
                    f"{p.latitude:.4f}, {p.longitude:.4f}, {p.altitude:,.0f} ft"
                )
            else:
                c = await session.position_at(args.at, remote=args.remote)
                print(
                    f"{c.flight_number} @ {c.timestamp.isoformat()}: "
                    f"{c.latitude:.4f}, {c.longitude:.4f}, {c.altitude:,.0f} ft"
                )

        elif args.command == "active":
            for flight in await session.refresh_active_flights():
                print(f"{flight.flight_number}\t{flight.airline}\t{flight.status}")

        elif args.command == "create":
            flight = await session.create_flight(Flight.model_validate(_load_json(args.json)))
            print(f"created {flight.flight_number}")

        elif args.command == "ingest":
            records = _load_json(args.json)
            if isinstance(records, dict):
                records = [records]
            summary = await session.ingest_batch(args.flight_number, records)
            print(f"accepted {summary.accepted_count}, rejected {summary.rejected_count}")
            for r in summary.rejections:
                print(f"  #{r.index} {r.field}: {r.message}")

        elif args.command == "complete":
            await session.track_flight(args.flight_number)
            flight = await session.complete_flight(args.flight_number)
            print(f"{flight.flight_number} is {flight.status}")
    finally:
        session.close()
        await gateway.aclose()
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="SkyTrack flight tracking client")
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    track = sub.add_parser("track", help="Fetch a flight's path and current position")
    track.add_argument("flight_number")
    track.add_argument("--at", help="Show the position at this time instead of the latest")
    track.add_argument("--remote", action="store_true", help="Ask the backend for --at")
    track.add_argument("--renderer", choices=["geojson", "deck"])
    track.add_argument("--output", type=Path, help="Write the map (JSON or HTML)")

    position = sub.add_parser("position", help="Show where a flight was at a given time")
    position.add_argument("flight_number")
    position.add_argument("at")
    group = position.add_mutually_exclusive_group()
    group.add_argument("--remote", action="store_true", help="Ask the backend as well")
    group.add_argument("--interpolate", action="store_true")

    sub.add_parser("active", help="List active flights")

    create = sub.add_parser("create", help="Create a flight from a JSON file")
    create.add_argument("--json", type=Path, required=True)

    ingest = sub.add_parser("ingest", help="Send tracking records from a JSON file")
    ingest.add_argument("flight_number")
    ingest.add_argument("--json", type=Path, required=True)

    complete = sub.add_parser("complete", help="Mark a flight completed")
    complete.add_argument("flight_number")

    args = parser.parse_args(argv)
    settings = Settings.from_env()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        return asyncio.run(_run(args, settings))
    except SkyTrackError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
