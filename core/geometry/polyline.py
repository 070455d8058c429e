"""
core.geometry.polyline

Encoded polyline codec (the Google "polyline algorithm", 1e5 precision).

Each coordinate is stored as the signed delta from the previous one,
scaled by 1e5, zig-zag folded so the sign lives in the lowest bit, and
split into 5-bit chunks. Every chunk is offset by 63 so it lands in the
printable range '?'..'~'; chunks with the 0x20 bit set are followed by
another chunk of the same value.

Used by:
  - core/directions/response_transform.py
  - cli/main.py (decode command)

Decoding returns (lat, lng). Map renderers want (lng, lat); that swap
is a separate call (`to_lng_lat`) so it always shows up at the call site.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from exceptions.exceptions import FormatError


PRECISION = 1e5

_OFFSET = 63
_CHUNK_MASK = 0x1F
_CONTINUATION = 0x20
_MAX_CHUNK = 0x3F


LatLng = Tuple[float, float]
LngLat = Tuple[float, float]


def _read_value(encoded: str, index: int) -> Tuple[int, int]:
    """Read one zig-zag varint starting at `index`; return (delta, next_index)."""
    start = index
    shift = 0
    value = 0
    while True:
        if index >= len(encoded):
            raise FormatError(
                encoded,
                index,
                f"unterminated value starting at position {start}",
            )
        b = ord(encoded[index]) - _OFFSET
        if b < 0 or b > _MAX_CHUNK:
            raise FormatError(
                encoded,
                index,
                f"symbol {encoded[index]!r} is outside the polyline alphabet",
            )
        index += 1
        value |= (b & _CHUNK_MASK) << shift
        shift += 5
        if b < _CONTINUATION:
            break
    delta = ~(value >> 1) if (value & 1) else (value >> 1)
    return delta, index


def decode_polyline(encoded: str) -> List[LatLng]:
    """Decode an encoded polyline string into a list of (lat, lng) points.

    Raises
    ------
    FormatError
        If the string ends in the middle of a value, holds a latitude
        without its longitude, or contains a character outside '?'..'~'.
    """
    result: List[LatLng] = []
    index = 0
    lat = 0
    lng = 0

    while index < len(encoded):
        d_lat, index = _read_value(encoded, index)
        if index >= len(encoded):
            raise FormatError(encoded, index, "latitude without a matching longitude")
        d_lng, index = _read_value(encoded, index)

        lat += d_lat
        lng += d_lng
        result.append((lat / PRECISION, lng / PRECISION))

    return result


def encode_polyline(coordinates: Iterable[Sequence[float]]) -> str:
    """Encode (lat, lng) pairs into a polyline string, rounding to 5 decimals."""
    encoded: List[str] = []
    prev_lat = 0
    prev_lng = 0

    for lat, lng in coordinates:
        lat_e5 = int(round(lat * PRECISION))
        lng_e5 = int(round(lng * PRECISION))

        for delta in (lat_e5 - prev_lat, lng_e5 - prev_lng):
            value = ~(delta << 1) if delta < 0 else (delta << 1)
            while value >= _CONTINUATION:
                encoded.append(chr((_CONTINUATION | (value & _CHUNK_MASK)) + _OFFSET))
                value >>= 5
            encoded.append(chr(value + _OFFSET))

        prev_lat = lat_e5
        prev_lng = lng_e5

    return "".join(encoded)


def to_lng_lat(points: Iterable[Sequence[float]]) -> List[LngLat]:
    """Swap (lat, lng) pairs into the (lng, lat) order map renderers expect."""
    return [(float(lng), float(lat)) for lat, lng in points]
