from __future__ import annotations  # Transient interview session state

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from config import Settings
from domain import CamelModel, Message, PeerBenchmark, Skill, Stage
from services.scoring import BadgeRules


def _now() -> datetime:
    return datetime.now(timezone.utc)


class SessionPolicy(BaseModel):  # Session tuning parameters
    max_questions: int = Field(default=5, ge=1)
    default_peer_average: int = Field(default=60, ge=0, le=100)
    fallback_score: int = Field(default=50, ge=0, le=100)
    fallback_confidence: int = Field(default=50, ge=0, le=100)
    redirect_delay_s: int = Field(default=3, ge=0)
    badges: BadgeRules = Field(default_factory=BadgeRules)

    @classmethod
    def from_settings(cls, cfg: Settings) -> "SessionPolicy":
        return cls(
            max_questions=cfg.MAX_QUESTIONS,
            default_peer_average=cfg.DEFAULT_PEER_AVERAGE,
            fallback_score=cfg.FALLBACK_SCORE,
            fallback_confidence=cfg.FALLBACK_CONFIDENCE,
            redirect_delay_s=cfg.REDIRECT_DELAY_SECONDS,
            badges=BadgeRules(
                quick_thinker_confidence=cfg.BADGE_QUICK_THINKER_CONFIDENCE,
                communicator_score=cfg.BADGE_COMMUNICATOR_SCORE,
                detail_words=cfg.BADGE_DETAIL_WORDS,
            ),
        )


class SessionState(CamelModel):  # Live interview session
    session_id: str = Field(default_factory=lambda: uuid4().hex)
    candidate_id: str
    candidate_name: str
    language: str = "en"
    stage: Stage = Stage.SETUP
    resume_text: str = ""
    job_role: str = ""
    skills: List[Skill] = Field(default_factory=list)
    transcript: List[Message] = Field(default_factory=list)
    pending_input: str = ""
    confidence_scores: List[int] = Field(default_factory=list)
    error: Optional[str] = None
    busy: bool = False
    closed: bool = False
    interview_id: Optional[str] = None
    redirect_to: Optional[str] = None
    redirect_after_s: Optional[int] = None
    summary: str = ""
    overall_score: Optional[int] = None
    badges: List[str] = Field(default_factory=list)
    peer_benchmark: List[PeerBenchmark] = Field(default_factory=list)
    events: List[Dict[str, Any]] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_now)
    last_activity: datetime = Field(default_factory=_now)

    def answer_count(self) -> int:
        return sum(1 for message in self.transcript if message.sender == "candidate")

    def last_question(self) -> Optional[str]:
        for message in reversed(self.transcript):
            if message.sender == "interviewer":
                return message.text
        return None

    def touch(self) -> None:
        self.last_activity = _now()


__all__ = ["SessionPolicy", "SessionState"]
