"""Tests for turning a DirectionsResponse into session + map data."""

import logging

import pytest

from core.directions.instructions import direction_kind, extract_distance, instruction_headline
from core.directions.models import DirectionsResponse
from core.directions.response_transform import build_route_update, build_timeline

from conftest import sample_payload


class TestDirectionsResponseModel:
    def test_optional_fields_default(self) -> None:
        response = DirectionsResponse.model_validate({})
        assert response.polyline is None
        assert response.instructions == []
        assert response.waypoints == []
        assert response.legs == []
        assert response.round_trip is False
        assert response.notes == ""

    def test_nulls_become_defaults(self) -> None:
        response = DirectionsResponse.model_validate(
            {
                "legs": None,
                "notes": None,
                "waypoints": [
                    {"name": "A", "coordinates": [1.0, 2.0], "hours": None, "photos": None}
                ],
            }
        )
        assert response.legs == []
        assert response.notes == ""
        assert response.waypoints[0].hours == []
        assert response.waypoints[0].photos == []

    def test_unknown_fields_are_dropped(self) -> None:
        response = DirectionsResponse.model_validate({"polyline": "abc", "debug": {"x": 1}})
        assert "debug" not in response.model_dump()


class TestBuildTimeline:
    def test_one_event_per_instruction_in_order(self) -> None:
        timeline = build_timeline(["Go north", "Turn left"])
        assert [(e.time, e.title, e.description) for e in timeline] == [
            ("Step 1", "Instruction 1", "Go north"),
            ("Step 2", "Instruction 2", "Turn left"),
        ]


class TestBuildRouteUpdate:
    def test_full_payload(self) -> None:
        update = build_route_update(DirectionsResponse.model_validate(sample_payload()))

        assert len(update.timeline) == 3
        assert [wp.name for wp in update.waypoints] == ["Home", "Blue Bottle", "Dolores Park"]
        assert update.totals.total_distance_km == pytest.approx(2.0)
        assert update.totals.total_duration_min == 5
        # Geometry and markers are (lng, lat).
        assert update.route_geometry[0] == (-120.2, 38.5)
        assert len(update.route_geometry) == 3
        assert update.waypoint_coords == [(-120.2, 38.5), (-120.95, 40.7), (-126.453, 43.252)]
        assert update.notes == "Enjoy the coffee."

    def test_missing_polyline_gives_empty_geometry(self) -> None:
        payload = sample_payload()
        payload["polyline"] = None
        update = build_route_update(DirectionsResponse.model_validate(payload))
        assert update.route_geometry == []
        assert len(update.waypoints) == 3

    def test_bad_polyline_skips_geometry_only(self, caplog: pytest.LogCaptureFixture) -> None:
        payload = sample_payload()
        payload["polyline"] = "_p~iF~ps|"
        with caplog.at_level(logging.WARNING):
            update = build_route_update(DirectionsResponse.model_validate(payload))
        assert update.route_geometry == []
        assert len(update.timeline) == 3
        assert update.totals.total_duration_min == 5
        assert "bad polyline" in caplog.text


class TestInstructionHelpers:
    @pytest.mark.parametrize(
        "instruction,kind",
        [
            ("Turn left onto Oak Ave", "left"),
            ("Turn right at the light", "right"),
            ("Go north on 5th", "north"),
            ("Head south", "south"),
            ("Head west on Main St", "straight"),
            ("Continue onto I-80", "straight"),
            ("Arrive at destination", "milestone"),
        ],
    )
    def test_direction_kind(self, instruction: str, kind: str) -> None:
        assert direction_kind(instruction) == kind

    def test_extract_distance(self) -> None:
        assert extract_distance("Head north on Main St (0.4 km)") == "0.4 km"
        assert extract_distance("Head north on Main St") == ""

    def test_headline(self) -> None:
        assert instruction_headline("Head north on Main St (0.4 km)") == "Head north on Main St"
