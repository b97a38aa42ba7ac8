"""Report and dashboard routes."""
from __future__ import annotations

import logging
import re

from fastapi import APIRouter, Depends, HTTPException, Response

from app_context.context import AppContext
from auth import SessionInfo
from domain import Interview
from services.dashboards import CandidateDashboard, HrDashboard, candidate_dashboard, hr_dashboard
from session_reports import generate_interview_report_pdf
from storage.errors import AuthorizationError, PersistenceError, RecordNotFoundError
from storage.interviews import get_interview_for

from .deps import current_user, get_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def _persistence_failure(exc: PersistenceError) -> HTTPException:
    logger.error("Report query failed: %s", exc)
    return HTTPException(status_code=500, detail={"message": str(exc), "hint": exc.hint})


def _load_report(interview_id: str, user: SessionInfo, context: AppContext) -> Interview:
    try:
        return get_interview_for(interview_id, requester_id=user.user_id, role=user.role)
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Report not found") from exc
    except AuthorizationError as exc:
        raise HTTPException(
            status_code=403,
            detail={
                "message": context.view_for(user).translate("reportForbidden"),
                "redirect_to": exc.redirect_to,
                "redirect_after_s": context.settings.REDIRECT_DELAY_SECONDS,
            },
        ) from exc
    except PersistenceError as exc:
        raise _persistence_failure(exc) from exc


def _safe_slug(value: str) -> str:
    return re.sub(r"[^A-Za-z0-9]+", "-", value).strip("-").lower()


@router.get("/reports/{interview_id}", response_model=Interview)
def fetch_report(
    interview_id: str,
    user: SessionInfo = Depends(current_user),
    context: AppContext = Depends(get_context),
) -> Interview:
    return _load_report(interview_id, user, context)


@router.get("/reports/{interview_id}/pdf")
def fetch_report_pdf(
    interview_id: str,
    user: SessionInfo = Depends(current_user),
    context: AppContext = Depends(get_context),
) -> Response:
    interview = _load_report(interview_id, user, context)
    payload = generate_interview_report_pdf(interview)
    filename = f"{_safe_slug(interview.candidate_name) or 'candidate'}-{_safe_slug(interview.job_role) or 'report'}.pdf"
    headers = {"Content-Disposition": f"attachment; filename=\"{filename}\""}
    return Response(content=payload, media_type="application/pdf", headers=headers)


@router.get("/dashboard", response_model=HrDashboard)
def fetch_dashboard(
    user: SessionInfo = Depends(current_user),
    context: AppContext = Depends(get_context),
) -> HrDashboard:
    if not user.is_hr:
        raise HTTPException(
            status_code=403,
            detail={
                "message": context.view_for(user).translate("hrOnly"),
                "redirect_to": "/",
                "redirect_after_s": context.settings.REDIRECT_DELAY_SECONDS,
            },
        )
    try:
        return hr_dashboard(limit=context.settings.DASHBOARD_LIMIT)
    except PersistenceError as exc:
        raise _persistence_failure(exc) from exc


@router.get("/candidate-dashboard", response_model=CandidateDashboard)
def fetch_candidate_dashboard(user: SessionInfo = Depends(current_user)) -> CandidateDashboard:
    try:
        return candidate_dashboard(user.user_id)
    except PersistenceError as exc:
        raise _persistence_failure(exc) from exc
