from __future__ import annotations

import pytest

from domain import Skill, Stage
from interview_session import (
    InterviewSession,
    SessionBusyError,
    SessionNotFoundError,
    SessionPolicy,
    StageError,
    TRANSITIONS,
    ValidationError,
)
from storage.errors import PersistenceError
from storage.interviews import get_interview, insert_interview


class FailingRecorder:
    def __init__(self, *, save_error: bool = False, history_error: bool = False) -> None:
        self.save_error = save_error
        self.history_error = history_error
        self.saved = []

    def save(self, draft):
        if self.save_error:
            raise PersistenceError("Could not save interview results: permission denied")
        self.saved.append(draft)
        return "saved-1"

    def peer_history(self, job_role):
        if self.history_error:
            raise PersistenceError("history unavailable")
        return [[Skill(name="Python", proficiency=50)]]


def _session(fake_ai, **kwargs) -> InterviewSession:
    return InterviewSession.start("cand-1", "Ada", fake_ai, **kwargs)


def _to_interview(session: InterviewSession) -> None:
    session.submit_setup("Five years of Python services.", "Backend Engineer")
    session.begin_interview()


def _answer_all(session: InterviewSession, count: int = 5) -> None:
    for index in range(count):
        session.submit_answer(f"Answer number {index}")


def test_transition_map_only_allows_forward_and_failed_analysis():
    assert TRANSITIONS[Stage.SETUP] == {Stage.ANALYZING}
    assert TRANSITIONS[Stage.ANALYZING] == {Stage.REVIEW, Stage.SETUP}
    assert TRANSITIONS[Stage.REVIEW] == {Stage.INTERVIEW}
    assert TRANSITIONS[Stage.INTERVIEW] == {Stage.COMPLETE}
    assert TRANSITIONS[Stage.COMPLETE] == set()


def test_setup_requires_resume_and_role(fake_ai):
    session = _session(fake_ai)
    with pytest.raises(ValidationError):
        session.submit_setup("   ", "Backend Engineer")
    assert session.state.stage is Stage.SETUP
    assert session.state.error == "Please provide both a resume and a job role."
    assert fake_ai.calls == []


def test_setup_moves_to_review_with_skills(fake_ai):
    session = _session(fake_ai)
    state = session.submit_setup("Five years of Python services.", "Backend Engineer")
    assert state.stage is Stage.REVIEW
    assert len(state.skills) == 6
    assert state.error is None
    assert session.state.events[0]["span"] == "extract_skills"


def test_failed_analysis_returns_to_setup(fake_ai):
    fake_ai.fail.add("extract_skills")
    session = _session(fake_ai)
    state = session.submit_setup("Resume", "Backend Engineer")
    assert state.stage is Stage.SETUP
    assert state.error == "Could not analyze the resume. Please try again."
    assert fake_ai.calls == ["extract_skills"]


def test_begin_interview_greets_then_asks(fake_ai):
    session = _session(fake_ai)
    _to_interview(session)
    transcript = session.state.transcript
    assert session.state.stage is Stage.INTERVIEW
    assert [m.sender for m in transcript] == ["interviewer", "interviewer"]
    assert "Backend Engineer" in transcript[0].text
    assert transcript[1].text == "Question 1 for Backend Engineer?"


def test_begin_interview_requires_review(fake_ai):
    session = _session(fake_ai)
    with pytest.raises(StageError):
        session.begin_interview()


def test_answer_requires_text_and_interview_stage(fake_ai):
    session = _session(fake_ai)
    session.submit_setup("Resume", "Backend Engineer")
    with pytest.raises(StageError):
        session.submit_answer("Too early")
    session.begin_interview()
    with pytest.raises(ValidationError):
        session.submit_answer("   ")
    assert session.state.answer_count() == 0


def test_full_interview_completes_and_persists(fake_ai):
    session = _session(fake_ai)
    _to_interview(session)
    _answer_all(session)
    state = session.state
    assert state.stage is Stage.COMPLETE
    assert len(state.transcript) == 11
    assert [m.sender for m in state.transcript[1:]] == ["interviewer", "candidate"] * 5
    assert all(m.feedback is not None for m in state.transcript if m.sender == "candidate")
    assert state.confidence_scores == [70] * 5
    assert state.overall_score == 80
    assert state.summary == fake_ai.summary
    assert state.redirect_to == f"/report/{state.interview_id}"
    assert state.redirect_after_s == 3
    assert fake_ai.calls.count("next_question") == 5
    assert fake_ai.calls[-1] == "summarize"

    stored = get_interview(state.interview_id)
    assert stored.candidate_id == "cand-1"
    assert stored.overall_score == 80
    assert len(stored.transcript) == 11
    assert all(row.peer_average == 60 for row in stored.peer_benchmark)
    assert "Strong Communicator" in stored.badges


def test_submit_uses_pending_draft(fake_ai):
    session = _session(fake_ai)
    _to_interview(session)
    session.update_draft("Drafted answer")
    session.submit_answer()
    assert session.state.transcript[2].text == "Drafted answer"
    assert session.state.pending_input == ""


def test_evaluation_failure_uses_fallback_and_still_counts(fake_ai):
    fake_ai.fail.add("evaluate_answer")
    session = _session(fake_ai)
    _to_interview(session)
    _answer_all(session)
    state = session.state
    assert state.stage is Stage.COMPLETE
    feedback = state.transcript[2].feedback
    assert feedback.text == "Could not evaluate the answer at this time."
    assert (feedback.score, feedback.confidence) == (50, 50)
    assert state.overall_score == 50


def test_question_failure_uses_apology_question(fake_ai):
    fake_ai.fail.add("next_question")
    session = _session(fake_ai)
    _to_interview(session)
    question = session.state.transcript[-1]
    assert question.sender == "interviewer"
    assert "Backend Engineer" in question.text
    assert question.text.startswith("I'm sorry")


def test_summary_failure_uses_fallback(fake_ai):
    fake_ai.fail.add("summarize")
    session = _session(fake_ai)
    _to_interview(session)
    _answer_all(session)
    assert session.state.summary == "Could not generate a summary for this interview."
    assert session.state.interview_id is not None


def test_second_submission_while_busy_is_rejected(fake_ai):
    session = _session(fake_ai)
    _to_interview(session)
    rejected = []

    def reenter(op):
        if op == "evaluate_answer" and not rejected:
            try:
                session.submit_answer("Impatient click")
            except SessionBusyError as exc:
                rejected.append(exc)

    fake_ai.on_call = reenter
    session.submit_answer("First answer")
    assert len(rejected) == 1
    assert session.state.busy is False
    assert [m.text for m in session.state.transcript if m.sender == "candidate"] == ["First answer"]


def test_close_drops_late_responses(fake_ai):
    session = _session(fake_ai)
    _to_interview(session)
    fake_ai.on_call = lambda op: session.close() if op == "evaluate_answer" else None
    session.submit_answer("Answer while leaving")
    state = session.state
    assert state.closed
    assert state.transcript[-1].sender == "candidate"
    assert state.transcript[-1].feedback is None
    assert state.confidence_scores == []
    with pytest.raises(SessionNotFoundError):
        session.submit_answer("Another")


def test_persistence_failure_is_terminal_without_redirect(fake_ai):
    recorder = FailingRecorder(save_error=True)
    session = _session(fake_ai, recorder=recorder)
    _to_interview(session)
    _answer_all(session)
    state = session.state
    assert state.stage is Stage.COMPLETE
    assert state.interview_id is None
    assert state.redirect_to is None
    assert "permission denied" in state.error
    assert "access policy" in state.error


def test_peer_history_failure_falls_back_to_defaults(fake_ai):
    recorder = FailingRecorder(history_error=True)
    session = _session(fake_ai, recorder=recorder)
    _to_interview(session)
    _answer_all(session)
    assert all(row.peer_average == 60 for row in recorder.saved[0].peer_benchmark)


def test_peer_benchmark_uses_same_role_history(fake_ai):
    fake_ai.skills = [Skill(name="Python", proficiency=90)]
    session = _session(fake_ai)
    _to_interview(session)
    _answer_all(session)
    first = get_interview(session.state.interview_id)
    assert first.peer_benchmark[0].peer_average == 60

    fake_ai.calls.clear()
    second = _session(fake_ai)
    _to_interview(second)
    _answer_all(second)
    assert second.state.peer_benchmark[0].peer_average == 90


def test_policy_controls_question_count(fake_ai):
    session = _session(fake_ai, policy=SessionPolicy(max_questions=2, redirect_delay_s=1))
    _to_interview(session)
    _answer_all(session, count=2)
    assert session.state.stage is Stage.COMPLETE
    assert len(session.state.transcript) == 5
    assert session.state.redirect_after_s == 1


def test_greeting_follows_session_language(fake_ai):
    session = _session(fake_ai, language="es")
    _to_interview(session)
    assert session.state.transcript[0].text.startswith("¡Hola!")
