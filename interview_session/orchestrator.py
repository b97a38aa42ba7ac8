"""Interview session stage machine.

A session moves ``setup -> analyzing -> review -> interview -> complete``. The
only backward edge is ``analyzing -> setup`` when skill extraction fails. AI
failures never escape this module: each operation has a fallback or returns
the session to a state the candidate can act on.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from threading import Lock
from typing import Callable, Dict, FrozenSet, Iterator, List, Optional, Protocol, Sequence

from app_context.i18n import translator
from app_context.routes import report_path
from domain import Feedback, InterviewDraft, Message, PeerBenchmark, Sender, Skill, Stage
from interview_ai import InterviewAIError, format_transcript
from observability import log_event, span
from services.scoring import assign_badges, default_benchmark, overall_score, peer_benchmark
from storage.errors import PersistenceError
from storage.interviews import insert_interview, skills_for_job_role

from .errors import SessionBusyError, SessionNotFoundError, StageError, ValidationError
from .models import SessionPolicy, SessionState

logger = logging.getLogger(__name__)

TRANSITIONS: Dict[Stage, FrozenSet[Stage]] = {
    Stage.SETUP: frozenset({Stage.ANALYZING}),
    Stage.ANALYZING: frozenset({Stage.REVIEW, Stage.SETUP}),
    Stage.REVIEW: frozenset({Stage.INTERVIEW}),
    Stage.INTERVIEW: frozenset({Stage.COMPLETE}),
    Stage.COMPLETE: frozenset(),
}


class InterviewAIClient(Protocol):  # Text operations the session depends on
    def extract_skills(self, resume_text: str) -> List[Skill]: ...

    def next_question(self, job_role: str, skills: Sequence[Skill], prior_context: str) -> str: ...

    def evaluate_answer(self, question: str, answer: str) -> Feedback: ...

    def summarize(self, transcript: Sequence[Message]) -> str: ...


class InterviewRecorder(Protocol):  # Persistence the session depends on
    def save(self, draft: InterviewDraft) -> str: ...

    def peer_history(self, job_role: str) -> List[List[Skill]]: ...


class StoreRecorder:  # Recorder backed by the interviews table
    def save(self, draft: InterviewDraft) -> str:
        return insert_interview(draft)

    def peer_history(self, job_role: str) -> List[List[Skill]]:
        return skills_for_job_role(job_role)


class InterviewSession:  # Drives one candidate through the interview stages
    def __init__(
        self,
        state: SessionState,
        ai: InterviewAIClient,
        *,
        recorder: Optional[InterviewRecorder] = None,
        policy: Optional[SessionPolicy] = None,
        translate: Optional[Callable[[str], str]] = None,
    ) -> None:
        self.state = state
        self._ai = ai
        self._recorder = recorder or StoreRecorder()
        self._policy = policy or SessionPolicy()
        self._t = translate or translator(state.language)
        self._lock = Lock()

    @classmethod
    def start(
        cls,
        candidate_id: str,
        candidate_name: str,
        ai: InterviewAIClient,
        *,
        language: str = "en",
        **kwargs,
    ) -> "InterviewSession":
        state = SessionState(candidate_id=candidate_id, candidate_name=candidate_name, language=language)
        session = cls(state, ai, **kwargs)
        log_event("session_started", state.session_id, to_stage=state.stage.value)
        return session

    @property
    def session_id(self) -> str:
        return self.state.session_id

    @property
    def policy(self) -> SessionPolicy:
        return self._policy

    def update_draft(self, text: str) -> SessionState:
        """Store the answer being composed so a later submit can use it."""
        self._ensure_open()
        self.state.pending_input = text
        self.state.touch()
        return self.state

    def submit_setup(self, resume_text: str, job_role: str) -> SessionState:
        """Validate setup input and extract skills from the resume."""
        with self._round():
            if self.state.stage is not Stage.SETUP:
                raise StageError(self.state.stage.value, Stage.ANALYZING.value)
            resume = (resume_text or "").strip()
            role = (job_role or "").strip()
            if not resume or not role:
                self.state.error = self._t("resumeAndRoleRequired")
                raise ValidationError(self.state.error)
            self.state.resume_text = resume
            self.state.job_role = role
            self.state.error = None
            self._transition(Stage.ANALYZING)
            try:
                with span(self.state, "extract_skills"):
                    skills = self._ai.extract_skills(resume)
            except InterviewAIError as exc:
                if self._dropped("extract_skills"):
                    return self.state
                logger.warning("Skill extraction failed session=%s: %s", self.session_id, exc)
                self.state.error = self._t("analysisFailed")
                self._transition(Stage.SETUP)
                return self.state
            if self._dropped("extract_skills"):
                return self.state
            self.state.skills = list(skills)
            self._transition(Stage.REVIEW)
            return self.state

    def begin_interview(self) -> SessionState:
        """Greet the candidate and ask the first question."""
        with self._round():
            self._transition(Stage.INTERVIEW)
            greeting = self._t("greeting").format(job_role=self.state.job_role)
            self._append("interviewer", greeting)
            self._ask_next(greeting)
            return self.state

    def submit_answer(self, text: Optional[str] = None) -> SessionState:
        """Record an answer, evaluate it, then ask the next question or finish."""
        with self._round():
            if self.state.stage is not Stage.INTERVIEW:
                raise StageError(self.state.stage.value, Stage.INTERVIEW.value)
            answer = (self.state.pending_input if text is None else text).strip()
            if not answer:
                self.state.error = self._t("answerRequired")
                raise ValidationError(self.state.error)
            question = self.state.last_question() or ""
            self.state.error = None
            self.state.pending_input = ""
            message = self._append("candidate", answer)
            feedback = self._evaluate(question, answer)
            if feedback is None:
                return self.state
            message.feedback = feedback
            self.state.confidence_scores.append(feedback.confidence)
            if self.state.answer_count() >= self._policy.max_questions:
                self._complete()
            else:
                self._ask_next(format_transcript(self.state.transcript))
            return self.state

    def close(self) -> None:
        """Discard the session; responses that arrive later are ignored."""
        if self.state.closed:
            return
        self.state.closed = True
        log_event("session_closed", self.session_id, from_stage=self.state.stage.value)

    def snapshot(self) -> SessionState:
        return self.state.model_copy(deep=True)

    # Internal helpers

    @contextmanager
    def _round(self) -> Iterator[None]:
        self._ensure_open()
        if not self._lock.acquire(blocking=False):
            raise SessionBusyError(self.session_id)
        self.state.busy = True
        self.state.touch()
        try:
            yield
        finally:
            self.state.busy = False
            self._lock.release()

    def _ensure_open(self) -> None:
        if self.state.closed:
            raise SessionNotFoundError(self.session_id)

    def _dropped(self, op: str) -> bool:
        if not self.state.closed:
            return False
        log_event("late_response_dropped", self.session_id, op=op)
        return True

    def _transition(self, target: Stage) -> None:
        current = self.state.stage
        if target not in TRANSITIONS[current]:
            raise StageError(current.value, target.value)
        self.state.stage = target
        log_event("stage_transition", self.session_id, from_stage=current.value, to_stage=target.value)

    def _append(self, sender: Sender, text: str) -> Message:
        message = Message(sender=sender, text=text)
        self.state.transcript.append(message)
        return message

    def _ask_next(self, prior_context: str) -> None:
        try:
            with span(self.state, "next_question"):
                question = self._ai.next_question(self.state.job_role, self.state.skills, prior_context)
        except InterviewAIError as exc:
            logger.warning("Question generation failed session=%s: %s", self.session_id, exc)
            question = self._t("questionFallback").format(job_role=self.state.job_role)
        if self._dropped("next_question"):
            return
        self._append("interviewer", question)

    def _evaluate(self, question: str, answer: str) -> Optional[Feedback]:
        try:
            with span(self.state, "evaluate_answer"):
                feedback = self._ai.evaluate_answer(question, answer)
        except InterviewAIError as exc:
            logger.warning("Answer evaluation failed session=%s: %s", self.session_id, exc)
            feedback = Feedback(
                text=self._t("evaluationFallback"),
                score=self._policy.fallback_score,
                confidence=self._policy.fallback_confidence,
            )
        if self._dropped("evaluate_answer"):
            return None
        return feedback

    def _summarize(self) -> Optional[str]:
        try:
            with span(self.state, "summarize"):
                text = self._ai.summarize(self.state.transcript)
        except InterviewAIError as exc:
            logger.warning("Summary failed session=%s: %s", self.session_id, exc)
            text = self._t("summaryFallback")
        if self._dropped("summarize"):
            return None
        return text

    def _benchmark(self) -> List[PeerBenchmark]:
        default = self._policy.default_peer_average
        try:
            history = self._recorder.peer_history(self.state.job_role)
        except PersistenceError as exc:
            logger.warning("Peer history unavailable session=%s: %s", self.session_id, exc)
            return default_benchmark(self.state.skills, default_average=default)
        return peer_benchmark(self.state.skills, history, default_average=default)

    def _complete(self) -> None:
        self._transition(Stage.COMPLETE)
        summary = self._summarize()
        if summary is None:
            return
        state = self.state
        score = overall_score(state.transcript)
        state.summary = summary
        state.overall_score = score
        state.peer_benchmark = self._benchmark()
        state.badges = assign_badges(state.transcript, state.confidence_scores, score, self._policy.badges)
        draft = InterviewDraft(
            candidate_id=state.candidate_id,
            candidate_name=state.candidate_name,
            job_role=state.job_role,
            skills=list(state.skills),
            transcript=list(state.transcript),
            summary=summary,
            overall_score=score,
            confidence_scores=list(state.confidence_scores),
            badges=list(state.badges),
            peer_benchmark=list(state.peer_benchmark),
        )
        try:
            interview_id = self._recorder.save(draft)
        except PersistenceError as exc:
            state.error = exc.user_message()
            log_event("interview_save_failed", self.session_id, outcome="error", error=str(exc))
            return
        state.interview_id = interview_id
        state.redirect_to = report_path(interview_id)
        state.redirect_after_s = self._policy.redirect_delay_s
        log_event("interview_saved", self.session_id, interview_id=interview_id, outcome="ok")


__all__ = ["InterviewAIClient", "InterviewRecorder", "InterviewSession", "StoreRecorder", "TRANSITIONS"]
