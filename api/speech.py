"""Speech route: interviewer lines as WAV audio."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response

from app_context.context import AppContext
from auth import SessionInfo
from interview_session import SessionExpiredError, SessionNotFoundError

from .deps import current_user, get_context
from .schemas import SpeechReq

router = APIRouter(prefix="/api/speech")


@router.post("")
def speak(
    req: SpeechReq,
    user: SessionInfo = Depends(current_user),
    context: AppContext = Depends(get_context),
) -> Response:
    try:
        context.registry.get_for(req.session_id, user.user_id)
    except (SessionNotFoundError, SessionExpiredError) as exc:
        raise HTTPException(status_code=404, detail="session not found") from exc
    audio = context.speech_channel(req.session_id).speak(req.text)
    if audio is None:
        return Response(status_code=204)
    return Response(content=audio, media_type="audio/wav")
