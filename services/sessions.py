"""Registry of live interview sessions."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from threading import RLock
from typing import Callable, Dict, List, Optional

from interview_session import InterviewSession, SessionExpiredError, SessionNotFoundError
from observability import log_event

logger = logging.getLogger(__name__)

DiscardListener = Callable[[str], None]


class SessionRegistry:  # Thread-safe in-memory store of live sessions
    def __init__(self, *, timeout_minutes: int = 60) -> None:
        self._sessions: Dict[str, InterviewSession] = {}
        self._lock = RLock()
        self._timeout = timedelta(minutes=timeout_minutes)
        self._listeners: List[DiscardListener] = []

    def add(self, session: InterviewSession) -> InterviewSession:
        with self._lock:
            self._sessions[session.session_id] = session
        return session

    def on_discard(self, listener: DiscardListener) -> None:
        """Call ``listener(session_id)`` whenever a session leaves the registry, for any reason."""
        with self._lock:
            self._listeners.append(listener)

    def get(self, session_id: str) -> InterviewSession:
        """Return a live session, discarding it first if it sat idle past the timeout."""

        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                raise SessionNotFoundError(session_id)
            if self._is_expired(session):
                self._discard_locked(session_id, reason="expired")
                raise SessionExpiredError(session_id)
        return session

    def get_for(self, session_id: str, owner_id: str) -> InterviewSession:
        """Return a session only to the candidate who started it."""

        session = self.get(session_id)
        if session.state.candidate_id != owner_id:
            raise SessionNotFoundError(session_id)
        return session

    def discard(self, session_id: str) -> bool:
        with self._lock:
            return self._discard_locked(session_id, reason="discarded")

    def discard_owned_by(self, owner_id: str) -> List[str]:
        """Close every session started by ``owner_id``."""

        with self._lock:
            targets = [sid for sid, session in self._sessions.items() if session.state.candidate_id == owner_id]
            for session_id in targets:
                self._discard_locked(session_id, reason="signed_out")
        return targets

    def expire_idle(self, now: Optional[datetime] = None) -> List[str]:
        with self._lock:
            expired = [sid for sid, session in self._sessions.items() if self._is_expired(session, now)]
            for session_id in expired:
                self._discard_locked(session_id, reason="expired")
        return expired

    def close_all(self) -> None:
        with self._lock:
            for session_id in list(self._sessions):
                self._discard_locked(session_id, reason="shutdown")

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _discard_locked(self, session_id: str, *, reason: str) -> bool:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.close()
        log_event("session_discarded", session_id, outcome=reason)
        for listener in list(self._listeners):
            listener(session_id)
        return True

    def _is_expired(self, session: InterviewSession, now: Optional[datetime] = None) -> bool:
        if session.state.busy:
            return False
        age = (now or datetime.now(timezone.utc)) - session.state.last_activity
        return age > self._timeout


__all__ = ["SessionRegistry"]
