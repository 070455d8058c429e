"""
Custom exceptions for the Polaris route runtime.

These exceptions are intentionally simple and descriptive.
They are used across:

  - core/api/          (directions client)
  - core/geometry/     (polyline decoding)
  - runtime/store/     (session lookups)
  - runtime/map/       (geolocation)

Placing them at the project root (exceptions/) avoids circular imports
and keeps exception types consistent across modules.
"""


class DirectionsError(Exception):
    """
    Base class for every failure of a directions request.

    Callers that only need to know "the turn produced no route" catch
    this and leave the session untouched.
    """


class NetworkError(DirectionsError):
    """
    Raised when the directions service cannot be reached at all
    (DNS failure, refused connection, dropped connection, timeout).
    """

    def __init__(self, url, details=None):
        self.url = url
        self.details = details or "Transport failure."
        msg = f"Could not reach directions service at {url}: {self.details}"
        super().__init__(msg)


class ApiError(DirectionsError):
    """
    Raised when the directions service answers with a non-success status.

    The exception carries the HTTP status code and whatever detail text
    the service sent back.
    """

    def __init__(self, status_code, detail=None):
        self.status_code = status_code
        self.detail = detail or ""
        msg = f"Directions service returned HTTP {status_code}"
        if self.detail:
            msg += f": {self.detail}"
        super().__init__(msg)


class ParseError(DirectionsError):
    """
    Raised when a response body cannot be decoded into a DirectionsResponse.

    Example:
        '{"polyline": "...", "waypoints": [...]}'  ← expected
        '<html>502 Bad Gateway</html>'              ← raises this exception
    """

    def __init__(self, body, details=None):
        self.body = body
        self.details = details or "Invalid directions response."
        preview = body if len(body) <= 200 else body[:200] + "..."
        msg = f"Could not parse directions response: {self.details}\nBody: {preview}"
        super().__init__(msg)


class FormatError(ValueError):
    """
    Raised when an encoded polyline is truncated or contains a symbol
    outside the encoding alphabet.

    The exception records the offending string and the character
    position where decoding stopped.
    """

    def __init__(self, encoded, position, details=None):
        self.encoded = encoded
        self.position = position
        self.details = details or "Malformed encoded polyline."
        msg = f"Polyline decode error at position {position}: {self.details}"
        super().__init__(msg)


class GeolocationError(Exception):
    """
    Raised by a location provider when no position can be obtained
    (permission denied, unsupported, unavailable).
    """

    def __init__(self, details=None):
        self.details = details or "Geolocation unavailable."
        super().__init__(self.details)


class UnknownSessionError(KeyError):
    """
    Raised when a session id is not present in the SessionStore.

    Passing an unknown id is a caller bug, not a recoverable runtime
    condition; the HTTP layer maps it to 404.
    """

    def __init__(self, session_id):
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")

    def __str__(self):
        return self.args[0]
