"""FastAPI routes for interview session control."""
from __future__ import annotations

import logging
from typing import Callable

from fastapi import APIRouter, Depends, HTTPException, Response

from app_context.context import AppContext
from auth import SessionInfo
from interview_session import (
    InterviewSession,
    SessionBusyError,
    SessionExpiredError,
    SessionNotFoundError,
    StageError,
    ValidationError,
)

from .deps import current_user, get_context, session_view
from .schemas import AnswerReq, DraftReq, SessionView, SetupReq

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/interview-sessions")


def _load(context: AppContext, session_id: str, user: SessionInfo) -> InterviewSession:
    try:
        return context.registry.get_for(session_id, user.user_id)
    except SessionExpiredError as exc:
        raise HTTPException(status_code=404, detail="Session expired") from exc
    except SessionNotFoundError as exc:
        raise HTTPException(status_code=404, detail="session not found") from exc


def _run(session: InterviewSession, action: Callable[[], object]) -> SessionView:
    try:
        action()
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except (SessionBusyError, StageError) as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except SessionNotFoundError as exc:
        raise HTTPException(status_code=404, detail="session not found") from exc
    return session_view(session)


@router.post("", response_model=SessionView, status_code=201)
def create(user: SessionInfo = Depends(current_user), context: AppContext = Depends(get_context)) -> SessionView:
    session = context.start_session(user)
    return session_view(session)


@router.get("/{session_id}", response_model=SessionView)
def fetch(
    session_id: str,
    user: SessionInfo = Depends(current_user),
    context: AppContext = Depends(get_context),
) -> SessionView:
    return session_view(_load(context, session_id, user))


@router.put("/{session_id}/draft", response_model=SessionView)
def update_draft(
    session_id: str,
    req: DraftReq,
    user: SessionInfo = Depends(current_user),
    context: AppContext = Depends(get_context),
) -> SessionView:
    session = _load(context, session_id, user)
    return _run(session, lambda: session.update_draft(req.text))


@router.post("/{session_id}/setup", response_model=SessionView)
def setup(
    session_id: str,
    req: SetupReq,
    user: SessionInfo = Depends(current_user),
    context: AppContext = Depends(get_context),
) -> SessionView:
    session = _load(context, session_id, user)
    return _run(session, lambda: session.submit_setup(req.resume_text, req.job_role))


@router.post("/{session_id}/start", response_model=SessionView)
def start(
    session_id: str,
    user: SessionInfo = Depends(current_user),
    context: AppContext = Depends(get_context),
) -> SessionView:
    session = _load(context, session_id, user)
    return _run(session, session.begin_interview)


@router.post("/{session_id}/answer", response_model=SessionView)
def answer(
    session_id: str,
    req: AnswerReq,
    user: SessionInfo = Depends(current_user),
    context: AppContext = Depends(get_context),
) -> SessionView:
    session = _load(context, session_id, user)
    return _run(session, lambda: session.submit_answer(req.text))


@router.delete("/{session_id}", status_code=204)
def discard(
    session_id: str,
    user: SessionInfo = Depends(current_user),
    context: AppContext = Depends(get_context),
) -> Response:
    _load(context, session_id, user)
    context.end_session(session_id)
    return Response(status_code=204)
