"""Interview session orchestration."""
from .errors import (
    SessionBusyError,
    SessionError,
    SessionExpiredError,
    SessionNotFoundError,
    StageError,
    ValidationError,
)
from .models import SessionPolicy, SessionState
from .orchestrator import InterviewAIClient, InterviewRecorder, InterviewSession, StoreRecorder, TRANSITIONS

__all__ = [
    "InterviewAIClient",
    "InterviewRecorder",
    "InterviewSession",
    "SessionBusyError",
    "SessionError",
    "SessionExpiredError",
    "SessionNotFoundError",
    "SessionPolicy",
    "SessionState",
    "StageError",
    "StoreRecorder",
    "TRANSITIONS",
    "ValidationError",
]
