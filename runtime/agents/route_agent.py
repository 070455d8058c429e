"""RouteAgent implementation.

Responsible for one user turn:
- appending the user's message to the session
- asking the directions service for a route
- turning the response into timeline / waypoints / legs / totals
- attaching that to the session (full replace)
- pushing route geometry and waypoint markers to the map

Failure policy:
- NetworkError / ApiError / ParseError are logged and the session's
  route state is left exactly as it was (the user message stays).
- a malformed polyline only drops the route overlay for that turn.

Known race: there is no request cancellation and no sequence token.
If two turns overlap, each response is attached to the session its turn
started on, and the map shows whichever arrived last, even if the user
has since switched to another session. If the turn's session was
deleted while the request was in flight, the response lands on the
session that is active when it arrives.
"""

import logging
from typing import Optional

from pydantic import BaseModel

from core.api.directions_client import DirectionsClient
from core.directions.models import RouteUpdate
from core.directions.response_transform import build_route_update, waypoint_coords
from exceptions.exceptions import ApiError, DirectionsError, NetworkError, ParseError

from ..map.route_synchronizer import RouteSynchronizer
from ..models.session_models import Session
from ..store.session_store import SessionStore


logger = logging.getLogger(__name__)


class TurnResult(BaseModel):
    """Outcome of one turn.

    `session_id` is the session holding the outcome. It differs from the
    session the turn started on only when that one was deleted while the
    request was in flight; `message_index` still refers to the original
    message.
    """
    ok: bool
    session_id: str
    message_index: int
    error: Optional[str] = None
    update: Optional[RouteUpdate] = None


class RouteAgent:
    """Per-turn orchestration between the store, the client and the map.

    Parameters
    ----------
    session_store:
        Owner of all Session records.
    directions_client:
        Client used to fetch one route per turn.
    synchronizer:
        Optional map synchronizer. Without one, turns only update the
        session (this is how the CLI runs).
    """

    def __init__(
        self,
        session_store: SessionStore,
        directions_client: DirectionsClient,
        synchronizer: Optional[RouteSynchronizer] = None,
    ) -> None:
        self.session_store = session_store
        self.directions_client = directions_client
        self.synchronizer = synchronizer

    async def handle_user_message(self, session_id: str, text: str) -> TurnResult:
        """Run one turn for `text` in the given session.

        Flow:
        - append the message, remember its index
        - request the route
        - on failure, log and return ok=False with the session untouched
        - otherwise transform, attach and render
        """
        message = text.strip()
        if not message:
            raise ValueError("message must not be empty")

        message_index = self.session_store.append_message(session_id, message)

        try:
            response = await self.directions_client.request_route(message)
        except NetworkError as e:
            logger.warning("[ROUTE] Network error for session_id=%s: %s", session_id, e)
            return self._failed(self._landing_session(session_id), message_index, e)
        except ApiError as e:
            logger.warning(
                "[ROUTE] API error %s for session_id=%s: %s",
                e.status_code,
                session_id,
                e.detail,
            )
            return self._failed(self._landing_session(session_id), message_index, e)
        except ParseError as e:
            logger.warning("[ROUTE] Unreadable response for session_id=%s: %s", session_id, e.details)
            return self._failed(self._landing_session(session_id), message_index, e)

        update = build_route_update(response)

        target_id = self._landing_session(session_id)
        self.session_store.attach_response(
            target_id,
            message_index if target_id == session_id else None,
            timeline=update.timeline,
            waypoints=update.waypoints,
            legs=update.legs,
            totals=update.totals,
        )

        if self.synchronizer is not None:
            self.synchronizer.update_route(update.route_geometry)
            self.synchronizer.update_waypoints(update.waypoint_coords)

        logger.info(
            "[ROUTE] session_id=%s message_index=%d stops=%d distance=%.1fkm duration=%dmin",
            target_id,
            message_index,
            len(update.waypoints),
            update.totals.total_distance_km,
            update.totals.total_duration_min,
        )
        return TurnResult(
            ok=True,
            session_id=target_id,
            message_index=message_index,
            update=update,
        )

    def select_session(self, session_id: str) -> Session:
        """Make `session_id` active and show its stored stops on the map.

        The encoded path is not kept on the session, so the route overlay
        is cleared; the next turn draws a new one.
        """
        self.session_store.select_session(session_id)
        session = self.session_store.get_session(session_id)
        if self.synchronizer is not None:
            self.synchronizer.clear_route()
            self.synchronizer.update_waypoints(waypoint_coords(session.waypoints))
        return session

    def create_session(self) -> Session:
        """Create a new active session and clear the map for it."""
        session_id = self.session_store.create_session()
        return self.select_session(session_id)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _landing_session(self, session_id: str) -> str:
        """Session a finished request reports to: its own, or the active one if it was deleted."""
        if session_id in self.session_store:
            return session_id
        active = self.session_store.ensure_session()
        logger.warning(
            "[ROUTE] session_id=%s was deleted mid-request; using active session_id=%s",
            session_id,
            active.session_id,
        )
        return active.session_id

    @staticmethod
    def _failed(session_id: str, message_index: int, error: DirectionsError) -> TurnResult:
        return TurnResult(
            ok=False,
            session_id=session_id,
            message_index=message_index,
            error=str(error),
        )
