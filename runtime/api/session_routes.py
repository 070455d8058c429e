"""HTTP routes for chat sessions.

Exposes endpoints like:

- POST   /sessions                 -> create a session (becomes active)
- GET    /sessions                 -> all sessions + active_session_id
- GET    /sessions/{id}            -> one session
- PATCH  /sessions/{id}            -> rename
- DELETE /sessions/{id}            -> delete (store is never left empty)
- POST   /sessions/{id}/select     -> make active and show its stops
- POST   /sessions/{id}/messages   -> run one route turn

Unknown session ids raise UnknownSessionError, which the server maps
to 404.
"""

import logging

from fastapi import APIRouter, HTTPException
from typing import Optional

from exceptions.exceptions import UnknownSessionError
from runtime.map.navigation import build_navigation_url

from ..agents.route_agent import RouteAgent
from ..models.api_models import (
    DeleteSessionResponse,
    MessageRequest,
    RenameSessionRequest,
    SessionListResponse,
    TurnResponse,
)
from ..models.session_models import Session
from ..store.session_store import SessionStore


logger = logging.getLogger(__name__)

# Router for all session endpoints
router = APIRouter()


# Module-level references, to be initialized by the server.
_SESSION_STORE: Optional[SessionStore] = None
_ROUTE_AGENT: Optional[RouteAgent] = None


def init_routes(session_store: SessionStore, route_agent: RouteAgent) -> None:
    """Initialize module-level references used by the route handlers."""
    global _SESSION_STORE, _ROUTE_AGENT
    _SESSION_STORE = session_store
    _ROUTE_AGENT = route_agent


def _require_session_store() -> SessionStore:
    if _SESSION_STORE is None:
        raise HTTPException(
            status_code=500,
            detail="SessionStore is not configured on the server.",
        )
    return _SESSION_STORE


def _require_route_agent() -> RouteAgent:
    if _ROUTE_AGENT is None:
        raise HTTPException(
            status_code=500,
            detail="RouteAgent is not configured on the server.",
        )
    return _ROUTE_AGENT


@router.post("", response_model=Session)
async def create_session() -> Session:
    """Create a new, empty session, make it active and clear the map for it."""
    return _require_route_agent().create_session()


@router.get("", response_model=SessionListResponse)
async def list_sessions() -> SessionListResponse:
    store = _require_session_store()
    store.ensure_session()
    return SessionListResponse(
        active_session_id=store.active_session_id,
        sessions=store.list_sessions(),
    )


@router.get("/{session_id}", response_model=Session)
async def get_session(session_id: str) -> Session:
    return _require_session_store().get_session(session_id)


@router.patch("/{session_id}", response_model=Session)
async def rename_session(session_id: str, request: RenameSessionRequest) -> Session:
    store = _require_session_store()
    name = request.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Session name must not be empty")
    store.rename_session(session_id, name)
    return store.get_session(session_id)


@router.delete("/{session_id}", response_model=DeleteSessionResponse)
async def delete_session(session_id: str) -> DeleteSessionResponse:
    """Delete a session.

    When the active session goes away, the newly active one (a neighbour
    or a fresh replacement) has its stops pushed to the map.
    """
    store = _require_session_store()
    agent = _require_route_agent()

    was_active = store.active_session_id == session_id
    store.delete_session(session_id)
    if was_active:
        agent.select_session(store.active_session_id)

    return DeleteSessionResponse(
        deleted_session_id=session_id,
        active_session_id=store.active_session_id,
    )


@router.post("/{session_id}/select", response_model=Session)
async def select_session(session_id: str) -> Session:
    return _require_route_agent().select_session(session_id)


@router.post("/{session_id}/messages", response_model=TurnResponse)
async def send_message(session_id: str, request: MessageRequest) -> TurnResponse:
    """Run one route turn for the message.

    Directions failures come back as ok=False with the session's route
    state unchanged; they are not HTTP errors.
    """
    store = _require_session_store()
    agent = _require_route_agent()

    if not request.message.strip():
        raise HTTPException(status_code=400, detail="Message must not be empty")

    try:
        result = await agent.handle_user_message(session_id, request.message)
    except UnknownSessionError:
        raise
    except Exception:
        logger.exception(
            "[SESSION] Unexpected error for session_id=%s message=%r",
            session_id,
            request.message,
        )
        raise

    navigation_url = None
    if result.update is not None and len(result.update.waypoint_coords) >= 2:
        navigation_url = build_navigation_url(result.update.waypoint_coords)

    return TurnResponse(
        ok=result.ok,
        message_index=result.message_index,
        error=result.error,
        session=store.get_session(result.session_id),
        route=result.update,
        navigation_url=navigation_url,
    )
