"""Authentication routes."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from app_context import translate
from app_context.context import AppContext
from auth import AuthenticationError, AuthSession, RegistrationError, SessionInfo
from storage.accounts import AccountExistsError
from storage.errors import PersistenceError

from .deps import bearer_token, current_user, get_context
from .schemas import MessageResp, ResetPasswordReq, ResetRequestReq, SignInReq, SignUpReq

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth")


def _persistence_failure(exc: PersistenceError) -> HTTPException:
    return HTTPException(status_code=500, detail={"message": str(exc), "hint": exc.hint})


@router.post("/sign-up", response_model=AuthSession, status_code=201)
def sign_up(req: SignUpReq, context: AppContext = Depends(get_context)) -> AuthSession:
    try:
        return context.auth.sign_up(req.email, req.password, req.role)
    except RegistrationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except AccountExistsError as exc:
        raise HTTPException(status_code=409, detail={"message": str(exc), "hint": exc.hint}) from exc
    except PersistenceError as exc:
        raise _persistence_failure(exc) from exc


@router.post("/sign-in", response_model=AuthSession)
def sign_in(req: SignInReq, context: AppContext = Depends(get_context)) -> AuthSession:
    try:
        return context.auth.sign_in(req.email, req.password)
    except AuthenticationError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc


@router.post("/sign-out", status_code=204)
def sign_out(token: str = Depends(bearer_token), context: AppContext = Depends(get_context)) -> Response:
    try:
        context.auth.sign_out(token)
    except AuthenticationError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    except PersistenceError as exc:
        raise _persistence_failure(exc) from exc
    return Response(status_code=204)


@router.get("/session", response_model=SessionInfo)
def session(user: SessionInfo = Depends(current_user)) -> SessionInfo:
    return user


@router.post("/password-reset/request", response_model=MessageResp, status_code=202)
def request_password_reset(req: ResetRequestReq, context: AppContext = Depends(get_context)) -> MessageResp:
    try:
        context.auth.request_password_reset(req.email)
    except RegistrationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except PersistenceError as exc:
        raise _persistence_failure(exc) from exc
    return MessageResp(message=translate(req.language, "checkEmailForReset"))


@router.post("/password-reset", response_model=SessionInfo)
def reset_password(req: ResetPasswordReq, context: AppContext = Depends(get_context)) -> SessionInfo:
    try:
        return context.auth.reset_password(req.token, req.password)
    except RegistrationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except PersistenceError as exc:
        raise _persistence_failure(exc) from exc
