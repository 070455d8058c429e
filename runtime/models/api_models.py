"""
HTTP request/response models for the Polaris runtime API.
"""

from pydantic import BaseModel
from typing import List, Optional

from core.directions.models import RouteUpdate

from .session_models import Session


class SessionListResponse(BaseModel):
    active_session_id: Optional[str] = None
    sessions: List[Session]


class RenameSessionRequest(BaseModel):
    name: str


class DeleteSessionResponse(BaseModel):
    deleted_session_id: str
    active_session_id: str


class MessageRequest(BaseModel):
    message: str


class TurnResponse(BaseModel):
    """
    Outcome of one user turn.

    - ok=True: `session` holds the updated route state and `route` the
      projections sent to the map; `navigation_url` is set when the route
      has at least two stops.
    - ok=False: `error` says why; the session's route state is unchanged.
    """
    ok: bool
    message_index: int
    error: Optional[str] = None
    session: Session
    route: Optional[RouteUpdate] = None
    navigation_url: Optional[str] = None


class PanelRequest(BaseModel):
    open: bool
    width: Optional[float] = None


class LocationRequest(BaseModel):
    lng: float
    lat: float


class NavigationResponse(BaseModel):
    url: str
