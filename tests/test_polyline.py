"""Tests for the encoded polyline codec."""

import random

import pytest

from core.geometry.polyline import decode_polyline, encode_polyline, to_lng_lat
from exceptions.exceptions import FormatError

from conftest import SAMPLE_POLYLINE


class TestDecodePolyline:
    def test_reference_polyline(self) -> None:
        """Decodes Google's documented example into (lat, lng) points."""
        assert decode_polyline(SAMPLE_POLYLINE) == [
            (38.5, -120.2),
            (40.7, -120.95),
            (43.252, -126.453),
        ]

    def test_empty_string_is_empty_path(self) -> None:
        assert decode_polyline("") == []

    def test_single_point(self) -> None:
        assert decode_polyline("_p~iF~ps|U") == [(38.5, -120.2)]

    def test_unterminated_continuation_raises(self) -> None:
        """Last chunk still has the continuation bit set."""
        with pytest.raises(FormatError) as exc_info:
            decode_polyline("_p~iF~ps|")
        assert exc_info.value.position == len("_p~iF~ps|")

    def test_latitude_without_longitude_raises(self) -> None:
        with pytest.raises(FormatError):
            decode_polyline("_p~iF")

    @pytest.mark.parametrize("bad", ["_p~iF~ps|U!", "_p~iF ps|U", "\x7f"])
    def test_out_of_range_symbol_raises(self, bad: str) -> None:
        with pytest.raises(FormatError):
            decode_polyline(bad)

    def test_format_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            decode_polyline("~")


class TestRoundTrip:
    def test_random_paths_round_trip_at_five_decimals(self) -> None:
        rng = random.Random(1234)
        for _ in range(50):
            path = [
                (round(rng.uniform(-90, 90), 5), round(rng.uniform(-180, 180), 5))
                for _ in range(rng.randint(1, 30))
            ]
            assert decode_polyline(encode_polyline(path)) == path

    def test_encoder_rounds_extra_precision(self) -> None:
        path = [(51.5074123, -0.1278456)]
        assert decode_polyline(encode_polyline(path)) == [(51.50741, -0.12785)]

    def test_encode_reference(self) -> None:
        path = [(38.5, -120.2), (40.7, -120.95), (43.252, -126.453)]
        assert encode_polyline(path) == SAMPLE_POLYLINE


def test_to_lng_lat_swaps_axes() -> None:
    assert to_lng_lat([(38.5, -120.2), (40.7, -120.95)]) == [(-120.2, 38.5), (-120.95, 40.7)]
