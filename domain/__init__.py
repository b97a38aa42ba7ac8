from __future__ import annotations  # Re-export domain models

from .models import (  # noqa: F401
    CamelModel,
    Feedback,
    Interview,
    InterviewDraft,
    Message,
    PeerBenchmark,
    Sender,
    Skill,
    Stage,
    UserRole,
    utc_now,
)

__all__ = [
    "CamelModel",
    "Feedback",
    "Interview",
    "InterviewDraft",
    "Message",
    "PeerBenchmark",
    "Sender",
    "Skill",
    "Stage",
    "UserRole",
    "utc_now",
]
