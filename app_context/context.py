"""Process-wide application context.

Built once at startup and closed at shutdown. It owns the AI client, the
auth service, the live session registry and the per-user view contexts.
"""
from __future__ import annotations

import logging
from pathlib import Path
from threading import RLock
from typing import Dict, Optional

from auth import AuthEvent, AuthService, SessionInfo
from config import Settings
from interview_ai import InterviewAI
from interview_session import InterviewSession, SessionPolicy
from services.sessions import SessionRegistry
from services.speech import SpeechChannel

from .preferences import PreferenceStore
from .view import ViewContext

logger = logging.getLogger(__name__)


class AppContext:
    def __init__(
        self,
        *,
        settings: Settings,
        ai: InterviewAI,
        auth: AuthService,
        registry: Optional[SessionRegistry] = None,
        preferences: Optional[PreferenceStore] = None,
    ) -> None:
        self.settings = settings
        self.ai = ai
        self.auth = auth
        self.registry = registry or SessionRegistry(timeout_minutes=settings.SESSION_TIMEOUT_MINUTES)
        self.preferences = preferences or PreferenceStore(Path(settings.PREFERENCES_PATH))
        self.policy = SessionPolicy.from_settings(settings)
        self._views: Dict[str, ViewContext] = {}
        self._speech: Dict[str, SpeechChannel] = {}
        self._lock = RLock()
        self.registry.on_discard(self._drop_speech)
        self._unsubscribe = auth.on_session_change(self._on_auth_event)

    @classmethod
    def from_settings(cls, cfg: Settings) -> "AppContext":
        ai = InterviewAI.from_config(Path(cfg.APP_CONFIG_PATH))
        return cls(settings=cfg, ai=ai, auth=AuthService.from_settings(cfg))

    def view_for(self, user: SessionInfo) -> ViewContext:
        """Return the user's view context, opening one if the process restarted since sign-in."""
        with self._lock:
            view = self._views.get(user.user_id)
            if view is None:
                view = ViewContext(user, self.preferences)
                self._views[user.user_id] = view
            return view

    def start_session(self, user: SessionInfo) -> InterviewSession:
        """Sweep idle sessions, then open a new one in the user's language."""
        self.registry.expire_idle()
        view = self.view_for(user)
        session = InterviewSession.start(
            user.user_id,
            user.display_name,
            self.ai,
            language=view.language,
            policy=self.policy,
            translate=view.translate,
        )
        return self.registry.add(session)

    def end_session(self, session_id: str) -> bool:
        return self.registry.discard(session_id)

    def speech_channel(self, session_id: str) -> SpeechChannel:
        with self._lock:
            channel = self._speech.get(session_id)
            if channel is None:
                channel = SpeechChannel(self.ai, session_id=session_id, sample_rate=self.settings.SPEECH_SAMPLE_RATE)
                self._speech[session_id] = channel
            return channel

    def close(self) -> None:
        self._unsubscribe()
        self.registry.close_all()
        with self._lock:
            self._views.clear()
            self._speech.clear()
        logger.info("Application context closed")

    def _drop_speech(self, session_id: str) -> None:
        with self._lock:
            self._speech.pop(session_id, None)

    def _on_auth_event(self, event: AuthEvent, user: Optional[SessionInfo]) -> None:
        if user is None:
            return
        if event == "SIGNED_IN":
            self.view_for(user)
        elif event == "SIGNED_OUT":
            self.registry.discard_owned_by(user.user_id)
            with self._lock:
                self._views.pop(user.user_id, None)


__all__ = ["AppContext"]
