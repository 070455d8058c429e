"""
Distance / duration parsing for legs returned by the directions service.

The service fills leg text from a language model, so values arrive as
loose phrases: "0.8 km", "1.2 mi", "2 mins", "1 hour 20 mins". Parsing
is best effort. Anything that does not match falls back to 0 and never
raises, so one odd leg cannot sink the totals for a whole route.
"""

from __future__ import annotations

import math
import re
from typing import Iterable, Optional

from core.directions.models import LegInfo, RouteTotals


KM_PER_MILE = 1.60934

_HOUR_RE = re.compile(r"(\d+)\s*hour")
_MINUTE_RE = re.compile(r"(\d+)\s*min")


def parse_distance(text: Optional[str]) -> float:
    """Return a distance phrase in kilometres ("0.8 km" -> 0.8, "1 mi" -> 1.60934)."""
    if not text:
        return 0.0
    parts = text.split()
    if len(parts) < 2:
        return 0.0

    try:
        value = float(parts[0])
    except ValueError:
        return 0.0
    if not math.isfinite(value):
        return 0.0

    unit = parts[1].lower()
    if unit == "km":
        return value
    if unit == "mi":
        return value * KM_PER_MILE
    return 0.0


def parse_duration(text: Optional[str]) -> int:
    """Return a duration phrase in whole minutes ("1 hour 20 mins" -> 80)."""
    if not text:
        return 0
    lower = text.lower()

    hours = 0
    minutes = 0

    hour_match = _HOUR_RE.search(lower)
    if hour_match:
        hours = int(hour_match.group(1))

    minute_match = _MINUTE_RE.search(lower)
    if minute_match:
        minutes = int(minute_match.group(1))

    return hours * 60 + minutes


def compute_totals(legs: Iterable[LegInfo]) -> RouteTotals:
    """Sum distance (km) and duration (minutes) across the ordered legs."""
    total_distance = 0.0
    total_duration = 0

    for leg in legs:
        total_distance += parse_distance(leg.distance)
        total_duration += parse_duration(leg.duration)

    return RouteTotals(
        total_distance_km=total_distance,
        total_duration_min=total_duration,
    )


def format_total_distance(km: float) -> str:
    return f"{km:.1f} km"


def format_total_duration(minutes: int) -> str:
    hrs = minutes // 60
    mins = minutes % 60

    if hrs > 0:
        hr_label = "hr" if hrs == 1 else "hrs"
        min_label = "min" if mins == 1 else "mins"
        return f"{hrs} {hr_label} {mins} {min_label}"
    return f"{minutes} {'min' if minutes == 1 else 'mins'}"
