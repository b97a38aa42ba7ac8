"""Request dependencies shared by the routers."""
from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, HTTPException, Request

from app_context.context import AppContext
from auth import AuthenticationError, SessionInfo
from interview_session import InterviewSession
from storage.errors import PersistenceError

from .schemas import SessionView


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def bearer_token(authorization: Optional[str] = Header(default=None)) -> str:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Missing bearer token")
    return authorization.split(" ", 1)[1].strip()


def current_user(
    token: str = Depends(bearer_token),
    context: AppContext = Depends(get_context),
) -> SessionInfo:
    try:
        return context.auth.get_session(token)
    except AuthenticationError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    except PersistenceError as exc:
        raise HTTPException(status_code=500, detail={"message": str(exc), "hint": exc.hint}) from exc


def session_view(session: InterviewSession) -> SessionView:
    state = session.state
    return SessionView(
        session_id=state.session_id,
        stage=state.stage,
        job_role=state.job_role,
        skills=list(state.skills),
        transcript=list(state.transcript),
        pending_input=state.pending_input,
        confidence_scores=list(state.confidence_scores),
        questions_asked=state.answer_count(),
        max_questions=session.policy.max_questions,
        error=state.error,
        busy=state.busy,
        interview_id=state.interview_id,
        redirect_to=state.redirect_to,
        redirect_after_s=state.redirect_after_s,
        summary=state.summary,
        overall_score=state.overall_score,
        badges=list(state.badges),
        peer_benchmark=list(state.peer_benchmark),
    )
