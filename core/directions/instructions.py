"""Small text helpers for turn-by-turn instructions."""

import re

_DISTANCE_RE = re.compile(r"\(([\d.]+)\s*km\)")

# Checked in order; first keyword found wins.
_KIND_KEYWORDS = (
    ("left", ("left",)),
    ("right", ("right",)),
    ("north", ("north",)),
    ("south", ("south",)),
    ("straight", ("head", "continue")),
)


def direction_kind(instruction: str) -> str:
    """Return the icon kind for an instruction: left/right/north/south/straight/milestone."""
    lower = instruction.lower()
    for kind, keywords in _KIND_KEYWORDS:
        if any(word in lower for word in keywords):
            return kind
    return "milestone"


def extract_distance(instruction: str) -> str:
    match = _DISTANCE_RE.search(instruction)
    if match:
        return match.group(1) + " km"
    return ""


def instruction_headline(instruction: str) -> str:
    return instruction.split("(")[0].strip()
