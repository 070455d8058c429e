"""
core.api.directions_client

Thin async wrapper around the Polaris directions service.

The service takes a free-text prompt and answers with a structured
itinerary (polyline, instructions, waypoints, legs). One call to
`request_route` is exactly one HTTP POST; there is no retry and no
de-duplication, so if two turns overlap the one that resolves last wins.

Used by:
  - runtime/agents/route_agent.py
  - cli/main.py (route command)
"""

from __future__ import annotations

import json
import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from configs.settings import settings
from core.directions.models import DirectionsResponse
from exceptions.exceptions import ApiError, NetworkError, ParseError


logger = logging.getLogger(__name__)


# -------------------------------------------------------------------
# Internal helpers
# -------------------------------------------------------------------


def _error_detail(response: httpx.Response) -> str:
    """
    Best-effort extraction of an error message from a failed response.

    Prefers a JSON `error` / `detail` / `message` field, falls back to the
    reason phrase, then to the raw text.
    """
    try:
        data = response.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        for key in ("error", "detail", "message"):
            if data.get(key):
                return str(data[key])

    return response.reason_phrase or response.text[:200]


def parse_directions_body(body: str) -> DirectionsResponse:
    """Decode a response body into a DirectionsResponse or raise ParseError."""
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise ParseError(body, f"body is not JSON: {e}") from e

    if not isinstance(data, dict):
        raise ParseError(body, f"expected a JSON object, got {type(data).__name__}")

    try:
        return DirectionsResponse.model_validate(data)
    except ValidationError as e:
        raise ParseError(body, str(e)) from e


# -------------------------------------------------------------------
# Public client
# -------------------------------------------------------------------


class DirectionsClient:
    """Issue route requests against the directions service.

    Parameters
    ----------
    url:
        Endpoint that accepts `{"prompt": ...}`. Defaults to
        `settings.directions_url`.
    timeout_s:
        Request timeout in seconds. None (the default) means the request
        may wait indefinitely.
    http_client:
        Optional pre-built `httpx.AsyncClient` (tests pass one with a
        MockTransport). A client created here is closed by `aclose()`;
        an injected one is left to its owner.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        timeout_s: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.url = url or settings.directions_url
        if http_client is None:
            timeout = timeout_s if timeout_s is not None else settings.directions_timeout_s
            http_client = httpx.AsyncClient(timeout=httpx.Timeout(timeout))
            self._owns_client = True
        else:
            self._owns_client = False
        self._client = http_client

    async def __aenter__(self) -> "DirectionsClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def request_route(self, prompt: str) -> DirectionsResponse:
        """
        Ask the service for a route matching `prompt`.

        Raises
        ------
        NetworkError
            The request never produced a response.
        ApiError
            The service answered with a non-2xx status.
        ParseError
            The body is not a valid DirectionsResponse.
        """
        logger.info("[DIRECTIONS] POST %s prompt=%r", self.url, prompt)
        try:
            response = await self._client.post(self.url, json={"prompt": prompt})
        except httpx.HTTPError as e:
            raise NetworkError(self.url, str(e) or type(e).__name__) from e

        if not response.is_success:
            raise ApiError(response.status_code, _error_detail(response))

        return parse_directions_body(response.text)
