"""Tests for the polaris CLI commands."""

import pytest

import core.api.directions_client as directions_client_module
from cli.main import build_parser, main

from conftest import SAMPLE_POLYLINE, json_handler, make_client, sample_payload


def test_decode_prints_lat_lng_lines(capsys) -> None:
    assert main(["decode", SAMPLE_POLYLINE]) == 0

    out = capsys.readouterr().out.splitlines()
    assert out == ["38.50000,-120.20000", "40.70000,-120.95000", "43.25200,-126.45300"]


def test_decode_bad_polyline(capsys) -> None:
    assert main(["decode", "~~~"]) == 1
    assert "Polyline decode error" in capsys.readouterr().err


def test_totals(capsys) -> None:
    assert main(["totals", "0.8 km", "2 mins", "1.2 km", "1 hour 3 mins"]) == 0
    assert capsys.readouterr().out.strip() == "2.0 km, 1 hr 5 mins"


def test_totals_needs_pairs(capsys) -> None:
    assert main(["totals", "0.8 km"]) == 2
    assert "pairs" in capsys.readouterr().err


def test_route_requires_prompt() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["route"])


class TestRouteCommand:
    def _patch_client(self, monkeypatch, handler) -> None:
        monkeypatch.setattr(
            directions_client_module,
            "DirectionsClient",
            lambda url=None, **kwargs: make_client(handler, url),
        )

    def test_prints_stops_totals_and_link(self, monkeypatch, capsys) -> None:
        self._patch_client(monkeypatch, json_handler(sample_payload()))

        assert main(["route", "coffee then the park", "--url", "https://directions.test/x"]) == 0

        out = capsys.readouterr().out
        assert "3 stops" in out
        assert "1. Home (1 Main St)" in out
        assert "2. Blue Bottle (20 Oak Ave) [0.8 km, 2 mins]" in out
        assert "Total: 2.0 km, 5 mins" in out
        assert "[left] Turn left onto Oak Ave – 1.0 km" in out
        assert "Google Maps: https://www.google.com/maps/dir/?api=1" in out

    def test_failed_request_exits_nonzero(self, monkeypatch, capsys) -> None:
        self._patch_client(monkeypatch, json_handler({"error": "quota"}, status_code=429))

        assert main(["route", "coffee"]) == 1
        assert "429" in capsys.readouterr().err
