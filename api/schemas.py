"""Pydantic schemas for the HTTP API."""
from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from app_context.preferences import Theme
from domain import CamelModel, Message, PeerBenchmark, Skill, Stage, UserRole


class SignUpReq(CamelModel):
    email: str
    password: str
    role: UserRole = UserRole.CANDIDATE


class SignInReq(CamelModel):
    email: str
    password: str


class ResetRequestReq(CamelModel):
    email: str
    language: str = "en"


class ResetPasswordReq(CamelModel):
    token: str
    password: str


class MessageResp(CamelModel):
    message: str


class SetupReq(CamelModel):
    resume_text: str = ""
    job_role: str = ""


class DraftReq(CamelModel):
    text: str = ""


class AnswerReq(CamelModel):
    text: Optional[str] = None


class SpeechReq(CamelModel):
    session_id: str
    text: str


class PreferencesReq(CamelModel):
    language: Optional[str] = None
    theme: Optional[Theme] = None


class RouteResp(CamelModel):
    page: str
    params: dict = Field(default_factory=dict)
    redirect_to: Optional[str] = None


class SessionView(CamelModel):  # Live session as the client renders it
    session_id: str
    stage: Stage
    job_role: str = ""
    skills: List[Skill] = Field(default_factory=list)
    transcript: List[Message] = Field(default_factory=list)
    pending_input: str = ""
    confidence_scores: List[int] = Field(default_factory=list)
    questions_asked: int = 0
    max_questions: int = 5
    error: Optional[str] = None
    busy: bool = False
    interview_id: Optional[str] = None
    redirect_to: Optional[str] = None
    redirect_after_s: Optional[int] = None
    summary: str = ""
    overall_score: Optional[int] = None
    badges: List[str] = Field(default_factory=list)
    peer_benchmark: List[PeerBenchmark] = Field(default_factory=list)
