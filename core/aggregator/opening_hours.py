"""
Opening-hours helpers for waypoint details.

Hours come from the directions service one line per day, e.g.

    "Monday: 9:00 AM – 5:00 PM"
    "Sunday: Closed"

The grammar is not guaranteed. Anything that does not split into a day
and an "open – close" range is shown as given and treated as closed.
Ranges that cross midnight are not special-cased.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional

# Upstream uses an en dash between opening and closing time.
RANGE_SEPARATOR = " – "
DAY_SEPARATOR = ": "
CLOSED = "Closed"


class HoursState(str, Enum):
    OPEN = "open"
    CLOSED = "closed"
    NOT_TODAY = "not_today"


@dataclass
class HoursEntry:
    day: str
    time_range: str
    opens: Optional[str] = None
    closes: Optional[str] = None


@dataclass
class HoursStatus:
    day: str
    display: str
    state: HoursState


def parse_time_string(text: Optional[str]) -> float:
    """Convert "9:30 PM" to fractional hours (21.5); -1 when unparseable."""
    if not text:
        return -1
    parts = text.strip().split(" ")
    time_part = parts[0] if parts else ""
    ampm = parts[1].upper() if len(parts) > 1 else None
    if not time_part:
        return -1

    hour_str, _, minute_str = time_part.partition(":")
    try:
        hour = int(hour_str)
        minute = int(minute_str or "0")
    except ValueError:
        return -1

    if ampm == "PM" and hour < 12:
        hour += 12
    if ampm == "AM" and hour == 12:
        hour = 0

    return hour + minute / 60


def parse_hours_entry(entry: str) -> HoursEntry:
    day, sep, time_range = entry.partition(DAY_SEPARATOR)
    if not sep or not time_range.strip():
        return HoursEntry(day=day.strip(), time_range=CLOSED)

    time_range = time_range.strip()
    opens, sep, closes = time_range.partition(RANGE_SEPARATOR)
    if not sep:
        return HoursEntry(day=day.strip(), time_range=time_range)
    return HoursEntry(
        day=day.strip(),
        time_range=time_range,
        opens=opens.strip(),
        closes=closes.strip(),
    )


def hours_status(hours: List[str], now: Optional[datetime] = None) -> List[HoursStatus]:
    """Classify each line as open now, closed now, or a different day."""
    now = now or datetime.now()
    today = now.strftime("%A")
    current = now.hour + now.minute / 60

    statuses: List[HoursStatus] = []
    for raw in hours:
        entry = parse_hours_entry(raw)
        is_today = entry.day == today

        is_open = False
        if is_today and entry.opens and entry.closes:
            open_val = parse_time_string(entry.opens)
            close_val = parse_time_string(entry.closes)
            if open_val >= 0 and close_val >= 0:
                is_open = open_val <= current <= close_val

        if not is_today:
            state = HoursState.NOT_TODAY
        elif is_open:
            state = HoursState.OPEN
        else:
            state = HoursState.CLOSED

        statuses.append(
            HoursStatus(
                day=entry.day,
                display=f"{entry.day}: {entry.time_range}",
                state=state,
            )
        )
    return statuses
