from __future__ import annotations  # Interview domain models shared across services

from datetime import datetime, timezone
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Sender = Literal["candidate", "interviewer"]


def utc_now() -> str:  # ISO-8601 timestamp in UTC
    return datetime.now(timezone.utc).isoformat()


class CamelModel(BaseModel):  # camelCase on the wire, snake_case in Python
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Stage(str, Enum):  # Interview session stages, in forward order
    SETUP = "setup"
    ANALYZING = "analyzing"
    REVIEW = "review"
    INTERVIEW = "interview"
    COMPLETE = "complete"


class UserRole(str, Enum):  # Account roles stored in account metadata
    CANDIDATE = "candidate"
    HR_ADMIN = "hr_admin"

    @classmethod
    def from_metadata(cls, metadata: Optional[dict]) -> "UserRole":
        """Resolve the role attribute, defaulting to candidate when unset or unknown."""
        value = (metadata or {}).get("role")
        try:
            return cls(value)
        except ValueError:
            return cls.CANDIDATE


class Skill(CamelModel):  # Skill extracted from a resume
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    name: str
    proficiency: int = Field(ge=0, le=100)
    justification: str = ""


class Feedback(CamelModel):  # Evaluation attached to a candidate answer
    text: str
    score: int = Field(ge=0, le=100)
    confidence: int = Field(ge=0, le=100)


class Message(CamelModel):  # Transcript entry
    sender: Sender
    text: str
    timestamp: str = Field(default_factory=utc_now)
    feedback: Optional[Feedback] = None


class PeerBenchmark(CamelModel):  # Candidate skill level against same-role peers
    skill: str
    level: int
    peer_average: int


class InterviewDraft(CamelModel):  # Completed interview before the store assigns identity
    candidate_id: str
    candidate_name: str
    job_role: str
    skills: List[Skill] = Field(default_factory=list)
    transcript: List[Message] = Field(default_factory=list)
    summary: str = ""
    overall_score: int = Field(default=0, ge=0, le=100)
    confidence_scores: List[int] = Field(default_factory=list)
    badges: List[str] = Field(default_factory=list)
    peer_benchmark: List[PeerBenchmark] = Field(default_factory=list)


class Interview(InterviewDraft):  # Persisted, read-only interview record
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    created_at: str


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
