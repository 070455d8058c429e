"""Session storage for the Polaris runtime.

An in-memory dict of session_id -> Session (insertion ordered) plus a
single `active_session_id`. The active pointer is always an id, never a
list position, so deleting or renaming one session can never make the
pointer drift onto another.

Invariants while the store is in use:
- at least one session exists
- exactly one session is active
- every entry of `response_indices` is a valid index into `messages`

Updates replace the whole Session record under its id. Two overlapping
updates to the same session are therefore last-write-wins, not merged.
Nothing is persisted; sessions live as long as the process.
"""

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional
from uuid import uuid4

from configs.settings import settings
from core.directions.models import LegInfo, RouteTotals, TimelineEvent, WaypointDetail
from exceptions.exceptions import UnknownSessionError

from ..models.session_models import Session, now_ms


logger = logging.getLogger(__name__)


class SessionStore:
    """In-memory, id-keyed session store with a single active session.

    Parameters
    ----------
    clock:
        Returns the current time as a datetime; used for default session
        names. Tests pass a fixed clock.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._sessions: Dict[str, Session] = {}
        self._active_id: Optional[str] = None
        self._clock = clock or datetime.now

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    @property
    def active_session_id(self) -> Optional[str]:
        return self._active_id

    @property
    def active_session(self) -> Optional[Session]:
        if self._active_id is None:
            return None
        return self._sessions[self._active_id]

    def get_session(self, session_id: str) -> Session:
        """Return the session or raise UnknownSessionError."""
        session = self._sessions.get(session_id)
        if session is None:
            raise UnknownSessionError(session_id)
        return session

    def list_sessions(self) -> List[Session]:
        """All sessions in creation order."""
        return list(self._sessions.values())

    def ensure_session(self) -> Session:
        """Return the active session, creating the first one if the store is empty."""
        if not self._sessions:
            self.create_session()
        return self.active_session

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def create_session(self) -> str:
        """Create an empty session, make it active and return its id.

        The display name defaults to the creation time.
        """
        session_id = str(uuid4())
        session = Session(
            session_id=session_id,
            name=self._clock().strftime(settings.session_name_format),
            last_modified=now_ms(),
        )
        self._sessions[session_id] = session
        self._active_id = session_id
        logger.debug("[SESSION] created %s", session_id)
        return session_id

    def delete_session(self, session_id: str) -> None:
        """Remove a session.

        If it was the active one, the session created just before it
        becomes active (or the first remaining one if it was the oldest).
        If nothing is left, a fresh session is created and selected.
        """
        if session_id not in self._sessions:
            raise UnknownSessionError(session_id)

        order = list(self._sessions)
        position = order.index(session_id)
        del self._sessions[session_id]
        logger.debug("[SESSION] deleted %s", session_id)

        if not self._sessions:
            self._active_id = None
            self.create_session()
            return

        if self._active_id == session_id:
            remaining = list(self._sessions)
            self._active_id = remaining[max(position - 1, 0)]

    def rename_session(self, session_id: str, new_name: str) -> None:
        session = self.get_session(session_id)
        self._sessions[session_id] = session.model_copy(update={"name": new_name})

    def select_session(self, session_id: str) -> None:
        if session_id not in self._sessions:
            raise UnknownSessionError(session_id)
        self._active_id = session_id

    # ------------------------------------------------------------------
    # Conversation + route state
    # ------------------------------------------------------------------

    def append_message(self, session_id: str, text: str) -> int:
        """Append a user message and return its index for response correlation."""
        session = self.get_session(session_id)
        messages = [*session.messages, text]
        self._sessions[session_id] = session.model_copy(
            update={"messages": messages, "last_modified": now_ms()}
        )
        return len(messages) - 1

    def attach_response(
        self,
        session_id: str,
        message_index: Optional[int],
        timeline: List[TimelineEvent],
        waypoints: List[WaypointDetail],
        legs: List[LegInfo],
        totals: RouteTotals,
    ) -> Session:
        """Replace the session's route state with the latest response.

        Route fields are overwritten, never merged: only the newest
        response describes the route on screen. `message_index` is added
        to `response_indices` once, however many times it is attached.
        Pass None when the response answers a message from another
        (deleted) session; the route is replaced and no index is recorded.
        """
        session = self.get_session(session_id)
        indices = set(session.response_indices)
        if message_index is not None:
            if not 0 <= message_index < len(session.messages):
                raise ValueError(
                    f"message_index {message_index} out of range for session "
                    f"{session_id} with {len(session.messages)} messages"
                )
            indices.add(message_index)

        updated = session.model_copy(
            update={
                "timeline": list(timeline),
                "waypoints": list(waypoints),
                "legs": list(legs),
                "total_distance_km": totals.total_distance_km,
                "total_duration_min": totals.total_duration_min,
                "response_indices": sorted(indices),
                "last_modified": now_ms(),
            }
        )
        self._sessions[session_id] = updated
        return updated
