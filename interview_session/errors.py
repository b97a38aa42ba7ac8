from __future__ import annotations  # Session-level failures surfaced to callers


class SessionError(RuntimeError):  # Base error for interview session operations
    pass


class ValidationError(SessionError, ValueError):  # User input rejected before any AI call
    pass


class StageError(SessionError):  # Operation not allowed in the current stage
    def __init__(self, current: str, requested: str) -> None:
        super().__init__(f"Cannot move from '{current}' to '{requested}'")
        self.current = current
        self.requested = requested


class SessionBusyError(SessionError):  # Another round is still in flight
    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session {session_id} is still processing the previous request")
        self.session_id = session_id


class SessionNotFoundError(KeyError):  # Raised when session missing or discarded
    pass


class SessionExpiredError(RuntimeError):  # Raised when session expired
    def __init__(self, session_id: str) -> None:
        super().__init__(session_id)
        self.session_id = session_id


__all__ = [
    "SessionBusyError",
    "SessionError",
    "SessionExpiredError",
    "SessionNotFoundError",
    "StageError",
    "ValidationError",
]
