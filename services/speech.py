"""Per-session speech synthesis with quota suppression."""
from __future__ import annotations

import logging
from typing import Optional, Protocol

from interview_ai import InterviewAIError, QuotaExceeded, to_wav
from observability import log_event

logger = logging.getLogger(__name__)


class SpeechSource(Protocol):
    def speech_audio(self, text: str) -> bytes: ...


class SpeechChannel:
    """Speaks interviewer lines for one session.

    After the first quota error every later request is skipped without
    calling the service. Other failures are logged and only that
    utterance is skipped.
    """

    def __init__(self, source: SpeechSource, *, session_id: str, sample_rate: int = 24000) -> None:
        self._source = source
        self._session_id = session_id
        self._sample_rate = sample_rate
        self.quota_exceeded = False

    def speak(self, text: str) -> Optional[bytes]:
        """Return WAV audio for ``text`` or ``None`` when speech is unavailable."""
        if self.quota_exceeded:
            return None
        try:
            pcm = self._source.speech_audio(text)
        except QuotaExceeded:
            self.quota_exceeded = True
            log_event("speech_quota_exceeded", self._session_id, outcome="suppressed")
            return None
        except InterviewAIError as exc:
            logger.warning("Speech failed session=%s: %s", self._session_id, exc)
            return None
        return to_wav(pcm, sample_rate=self._sample_rate)


__all__ = ["SpeechChannel", "SpeechSource"]
