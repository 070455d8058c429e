"""Tests for DirectionsClient error mapping and request shape."""

import asyncio
import json

import httpx
import pytest

from core.api.directions_client import parse_directions_body
from exceptions.exceptions import ApiError, DirectionsError, NetworkError, ParseError

from conftest import TEST_URL, json_handler, make_client, sample_payload


def _request(client, prompt: str = "coffee then the park"):
    async def run():
        async with client:
            return await client.request_route(prompt)

    return asyncio.run(run())


class TestRequestRoute:
    def test_posts_prompt_once(self) -> None:
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=sample_payload())

        response = _request(make_client(handler), "coffee then the park")

        assert len(seen) == 1
        assert seen[0].method == "POST"
        assert str(seen[0].url) == TEST_URL
        assert json.loads(seen[0].content) == {"prompt": "coffee then the park"}
        assert len(response.waypoints) == 3
        assert response.legs[1].distance == "1.2 km"

    def test_non_success_status_is_api_error(self) -> None:
        client = make_client(json_handler({"error": "quota exceeded"}, status_code=429))
        with pytest.raises(ApiError) as exc_info:
            _request(client)
        assert exc_info.value.status_code == 429
        assert exc_info.value.detail == "quota exceeded"

    def test_server_error_without_json(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="<html>bad gateway</html>")

        with pytest.raises(ApiError) as exc_info:
            _request(make_client(handler))
        assert exc_info.value.status_code == 502
        assert exc_info.value.detail == "Bad Gateway"

    def test_transport_failure_is_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(NetworkError) as exc_info:
            _request(make_client(handler))
        assert exc_info.value.url == TEST_URL
        assert "connection refused" in str(exc_info.value)

    def test_non_json_body_is_parse_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="not json")

        with pytest.raises(ParseError):
            _request(make_client(handler))

    def test_all_failures_share_base_class(self) -> None:
        client = make_client(json_handler({}, status_code=500))
        with pytest.raises(DirectionsError):
            _request(client)


class TestParseDirectionsBody:
    def test_array_body_rejected(self) -> None:
        with pytest.raises(ParseError):
            parse_directions_body("[1, 2, 3]")

    def test_wrong_field_type_rejected(self) -> None:
        with pytest.raises(ParseError):
            parse_directions_body(json.dumps({"waypoints": "nowhere"}))

    def test_waypoint_without_coordinates_rejected(self) -> None:
        with pytest.raises(ParseError):
            parse_directions_body(json.dumps({"waypoints": [{"name": "A"}]}))

    def test_minimal_body(self) -> None:
        response = parse_directions_body("{}")
        assert response.polyline is None
