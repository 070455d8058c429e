#!/usr/bin/env python3
"""
Polaris CLI

Command-line access to the route engine without the map UI.

Commands:

1) route
   - Send one prompt to the directions service and print the stops,
     leg distances/durations, totals, directions and a Google Maps link.

2) decode
   - Decode an encoded polyline and print one "lat,lng" per line.

3) totals
   - Sum free-text leg distances/durations, given as pairs:
       polaris totals "0.8 km" "2 mins" "1.2 km" "3 mins"

The HTTP runtime server is started separately, e.g.:

    uvicorn runtime.api.server:app --reload
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List

# Ensure project root is on sys.path when running as a script
ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from configs.settings import settings
from core.aggregator.opening_hours import hours_status
from core.aggregator.route_totals import (
    compute_totals,
    format_total_distance,
    format_total_duration,
)
from core.directions.instructions import direction_kind, extract_distance, instruction_headline
from core.directions.models import LegInfo
from core.geometry.polyline import decode_polyline
from exceptions.exceptions import DirectionsError, FormatError


# ---------------------------------------------------------------------------
# route – one turn against the directions service
# ---------------------------------------------------------------------------


async def _run_route(prompt: str, url: str) -> int:
    # Lazy imports so decode/totals work without httpx configured.
    from core.api.directions_client import DirectionsClient
    from runtime.agents.route_agent import RouteAgent
    from runtime.map.navigation import build_navigation_url
    from runtime.store.session_store import SessionStore

    store = SessionStore()
    session_id = store.create_session()

    async with DirectionsClient(url=url) as client:
        agent = RouteAgent(session_store=store, directions_client=client)
        print(f"[Polaris] Requesting route for: {prompt!r}")
        result = await agent.handle_user_message(session_id, prompt)

    if not result.ok:
        print(f"[Polaris] ✗ {result.error}", file=sys.stderr)
        return 1

    session = store.get_session(result.session_id)
    update = result.update

    print(f"[Polaris] ✓ {len(session.waypoints)} stops")
    for idx, wp in enumerate(session.waypoints):
        line = f"  {idx + 1}. {wp.name}"
        if wp.address:
            line += f" ({wp.address})"
        if idx > 0 and idx - 1 < len(session.legs):
            leg = session.legs[idx - 1]
            line += f" [{leg.distance}, {leg.duration}]"
        print(line)
        for status in hours_status(wp.hours):
            if status.state.value != "not_today":
                print(f"       {status.display} ({status.state.value})")

    if session.legs:
        print(
            f"[Polaris] Total: {format_total_distance(session.total_distance_km)}, "
            f"{format_total_duration(session.total_duration_min)}"
        )

    if session.timeline:
        print("[Polaris] Directions:")
        for event in session.timeline:
            distance = extract_distance(event.description)
            suffix = f" – {distance}" if distance else ""
            print(
                f"  [{direction_kind(event.description)}] "
                f"{instruction_headline(event.description)}{suffix}"
            )

    if not update.route_geometry:
        print("[Polaris] (no route geometry in response)")

    if len(update.waypoint_coords) >= 2:
        print(f"[Polaris] Google Maps: {build_navigation_url(update.waypoint_coords)}")
    return 0


def cmd_route(prompt: str, url: str) -> int:
    try:
        return asyncio.run(_run_route(prompt, url))
    except DirectionsError as e:
        print(f"[Polaris] ✗ {e}", file=sys.stderr)
        return 1


# ---------------------------------------------------------------------------
# decode – polyline to coordinates
# ---------------------------------------------------------------------------


def cmd_decode(encoded: str) -> int:
    try:
        points = decode_polyline(encoded)
    except FormatError as e:
        print(f"[Polaris] ✗ {e}", file=sys.stderr)
        return 1
    for lat, lng in points:
        print(f"{lat:.5f},{lng:.5f}")
    return 0


# ---------------------------------------------------------------------------
# totals – sum leg text
# ---------------------------------------------------------------------------


def cmd_totals(values: List[str]) -> int:
    if len(values) % 2 != 0:
        print("[Polaris] ✗ totals expects DISTANCE DURATION pairs", file=sys.stderr)
        return 2
    legs = [
        LegInfo(distance=values[i], duration=values[i + 1])
        for i in range(0, len(values), 2)
    ]
    totals = compute_totals(legs)
    print(f"{format_total_distance(totals.total_distance_km)}, {format_total_duration(totals.total_duration_min)}")
    return 0


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Polaris CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # route
    p_route = subparsers.add_parser(
        "route",
        help="Request a route for a free-text prompt",
    )
    p_route.add_argument("prompt", help="Route request, e.g. 'coffee then the park'")
    p_route.add_argument(
        "--url",
        default=settings.directions_url,
        help="Directions endpoint (default: POLARIS_DIRECTIONS_URL)",
    )

    # decode
    p_decode = subparsers.add_parser("decode", help="Decode an encoded polyline")
    p_decode.add_argument("polyline", help="Encoded polyline string")

    # totals
    p_totals = subparsers.add_parser(
        "totals",
        help="Sum leg distances/durations given as DISTANCE DURATION pairs",
    )
    p_totals.add_argument("values", nargs="+", help='e.g. "0.8 km" "2 mins"')

    return parser


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    command: str = args.command

    if command == "route":
        return cmd_route(prompt=args.prompt, url=args.url)
    elif command == "decode":
        return cmd_decode(encoded=args.polyline)
    elif command == "totals":
        return cmd_totals(values=args.values)
    else:
        parser.error(f"Unknown command: {command}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
