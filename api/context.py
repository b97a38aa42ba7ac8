"""View context routes: language, theme and client route resolution."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from app_context import ViewSnapshot, resolve
from app_context.context import AppContext
from auth import SessionInfo

from .deps import current_user, get_context
from .schemas import PreferencesReq, RouteResp

router = APIRouter(prefix="/api/context")


@router.get("", response_model=ViewSnapshot)
def fetch_context(user: SessionInfo = Depends(current_user), context: AppContext = Depends(get_context)) -> ViewSnapshot:
    return context.view_for(user).snapshot()


@router.patch("/preferences", response_model=ViewSnapshot)
def update_preferences(
    req: PreferencesReq,
    user: SessionInfo = Depends(current_user),
    context: AppContext = Depends(get_context),
) -> ViewSnapshot:
    view = context.view_for(user)
    if req.language is not None:
        try:
            view.set_language(req.language)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
    if req.theme is not None:
        view.set_theme(req.theme)
    return view.snapshot()


@router.post("/theme/toggle", response_model=ViewSnapshot)
def toggle_theme(user: SessionInfo = Depends(current_user), context: AppContext = Depends(get_context)) -> ViewSnapshot:
    view = context.view_for(user)
    view.toggle_theme()
    return view.snapshot()


@router.get("/translate/{key}")
def translate_key(key: str, user: SessionInfo = Depends(current_user), context: AppContext = Depends(get_context)) -> dict:
    return {"key": key, "text": context.view_for(user).translate(key)}


@router.get("/route", response_model=RouteResp)
def resolve_route(path: str = "/") -> RouteResp:
    page, params, redirect = resolve(path)
    return RouteResp(page=page, params=params, redirect_to=redirect)
