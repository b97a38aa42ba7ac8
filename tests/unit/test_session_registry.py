from __future__ import annotations

import io
import wave
from datetime import datetime, timedelta, timezone

import pytest

from interview_ai import AnalysisError
from interview_session import InterviewSession, SessionExpiredError, SessionNotFoundError
from services.sessions import SessionRegistry
from services.speech import SpeechChannel


def _session(fake_ai, candidate_id: str = "cand-1") -> InterviewSession:
    return InterviewSession.start(candidate_id, "Ada", fake_ai)


def test_add_get_and_owner_scoping(fake_ai):
    registry = SessionRegistry(timeout_minutes=5)
    session = registry.add(_session(fake_ai))
    assert registry.get(session.session_id) is session
    assert registry.get_for(session.session_id, "cand-1") is session
    with pytest.raises(SessionNotFoundError):
        registry.get_for(session.session_id, "intruder")
    with pytest.raises(SessionNotFoundError):
        registry.get("missing")


def test_discard_closes_session(fake_ai):
    registry = SessionRegistry()
    session = registry.add(_session(fake_ai))
    assert registry.discard(session.session_id) is True
    assert session.state.closed
    assert registry.discard(session.session_id) is False
    assert len(registry) == 0


def test_idle_sessions_expire(fake_ai):
    registry = SessionRegistry(timeout_minutes=1)
    stale = registry.add(_session(fake_ai))
    fresh = registry.add(_session(fake_ai, "cand-2"))
    stale.state.last_activity = datetime.now(timezone.utc) - timedelta(minutes=5)
    with pytest.raises(SessionExpiredError):
        registry.get(stale.session_id)
    assert stale.state.closed

    fresh.state.last_activity = datetime.now(timezone.utc) - timedelta(minutes=5)
    assert registry.expire_idle() == [fresh.session_id]
    assert len(registry) == 0


def test_busy_sessions_do_not_expire(fake_ai):
    registry = SessionRegistry(timeout_minutes=1)
    session = registry.add(_session(fake_ai))
    session.state.busy = True
    later = datetime.now(timezone.utc) + timedelta(minutes=10)
    assert registry.expire_idle(now=later) == []


def test_discard_owned_by_and_close_all(fake_ai):
    registry = SessionRegistry()
    mine = registry.add(_session(fake_ai, "me"))
    other = registry.add(_session(fake_ai, "other"))
    assert registry.discard_owned_by("me") == [mine.session_id]
    assert mine.state.closed and not other.state.closed
    registry.close_all()
    assert other.state.closed
    assert len(registry) == 0


def test_speech_channel_returns_wav(fake_ai):
    channel = SpeechChannel(fake_ai, session_id="s1", sample_rate=24000)
    audio = channel.speak("Hello there")
    with wave.open(io.BytesIO(audio), "rb") as handle:
        assert handle.getframerate() == 24000
        assert handle.getnframes() == 16


def test_speech_channel_suppresses_after_quota(fake_ai):
    fake_ai.quota = True
    channel = SpeechChannel(fake_ai, session_id="s1")
    assert channel.speak("Hello") is None
    assert channel.quota_exceeded
    fake_ai.quota = False
    assert channel.speak("Again") is None
    assert fake_ai.calls.count("speech_audio") == 1


def test_speech_channel_skips_single_failures():
    class Broken:
        def speech_audio(self, text):
            raise AnalysisError("synthesis failed")

    channel = SpeechChannel(Broken(), session_id="s1")
    assert channel.speak("Hello") is None
    assert channel.quota_exceeded is False


def test_discard_listeners_see_every_removal(fake_ai):
    registry = SessionRegistry(timeout_minutes=1)
    removed = []
    registry.on_discard(removed.append)
    expired = registry.add(_session(fake_ai))
    swept = registry.add(_session(fake_ai, "cand-2"))
    ended = registry.add(_session(fake_ai, "cand-3"))
    expired.state.last_activity = datetime.now(timezone.utc) - timedelta(minutes=5)
    with pytest.raises(SessionExpiredError):
        registry.get(expired.session_id)
    swept.state.last_activity = datetime.now(timezone.utc) - timedelta(minutes=5)
    registry.expire_idle()
    registry.discard(ended.session_id)
    registry.discard(ended.session_id)
    assert removed == [expired.session_id, swept.session_id, ended.session_id]
