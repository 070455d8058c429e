from __future__ import annotations

import os
from typing import Optional

from dotenv import load_dotenv


load_dotenv()


DEFAULT_DIRECTIONS_URL = "https://polaris-backend-mauve.vercel.app/api/directions"

# Camera used when no user position is known (London, globe view).
DEFAULT_CENTER = (-0.1278, 51.5074)
DEFAULT_ZOOM = 1.5
USER_LOCATION_ZOOM = 13.0


def _float_env(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be a number, got {raw!r}")


class Settings:
    """
    Central configuration for Polaris.

    Values are loaded once from environment variables (with sensible defaults)
    and then exposed via typed properties.
    """

    def __init__(self) -> None:
        # Directions service
        self._directions_url = os.getenv("POLARIS_DIRECTIONS_URL", DEFAULT_DIRECTIONS_URL)
        # Unset means no timeout: the directions call is unbounded by default.
        self._directions_timeout_s = _float_env("POLARIS_DIRECTIONS_TIMEOUT_S", None)

        # Map / camera behaviour
        self._geolocation_timeout_s = _float_env("POLARIS_GEOLOCATION_TIMEOUT_S", 5.0)
        self._panel_width = _float_env("POLARIS_PANEL_WIDTH", 400.0)
        self._fit_padding = _float_env("POLARIS_FIT_PADDING", 50.0)
        self._rotation_step_deg = _float_env("POLARIS_ROTATION_STEP_DEG", 0.5)
        self._rotation_duration_ms = int(_float_env("POLARIS_ROTATION_DURATION_MS", 1000))
        self._frame_interval_s = _float_env("POLARIS_FRAME_INTERVAL_S", 1 / 60)

        # Navigation export + session naming
        self._travel_mode = os.getenv("POLARIS_TRAVEL_MODE", "driving")
        self._session_name_format = os.getenv(
            "POLARIS_SESSION_NAME_FORMAT", "%m/%d/%Y, %I:%M:%S %p"
        )

        self._log_level = os.getenv("POLARIS_LOG_LEVEL", "INFO").upper()

    # ------------------------------------------------------------------
    # Directions service
    # ------------------------------------------------------------------

    @property
    def directions_url(self) -> str:
        if not self._directions_url:
            raise RuntimeError(
                "POLARIS_DIRECTIONS_URL is empty. Please export it in your environment "
                "or define it in a .env file."
            )
        return self._directions_url

    @property
    def directions_timeout_s(self) -> Optional[float]:
        return self._directions_timeout_s

    # ------------------------------------------------------------------
    # Map settings
    # ------------------------------------------------------------------

    @property
    def geolocation_timeout_s(self) -> float:
        return self._geolocation_timeout_s

    @property
    def panel_width(self) -> float:
        return self._panel_width

    @property
    def fit_padding(self) -> float:
        return self._fit_padding

    @property
    def rotation_step_deg(self) -> float:
        return self._rotation_step_deg

    @property
    def rotation_duration_ms(self) -> int:
        return self._rotation_duration_ms

    @property
    def frame_interval_s(self) -> float:
        return self._frame_interval_s

    # ------------------------------------------------------------------
    # Misc
    # ------------------------------------------------------------------

    @property
    def travel_mode(self) -> str:
        return self._travel_mode

    @property
    def session_name_format(self) -> str:
        return self._session_name_format

    @property
    def log_level(self) -> str:
        return self._log_level


settings = Settings()
