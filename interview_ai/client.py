from __future__ import annotations  # Route-bound facade over the AI operations

import logging
from pathlib import Path
from typing import Dict, List, Sequence

from config import LlmRoute, load_config, resolve_route
from domain import Feedback, Message, Skill

from . import evaluation, questions, resume_analysis, speech, summary

logger = logging.getLogger(__name__)

EXTRACT_SKILLS = "interview_ai.extract_skills"
NEXT_QUESTION = "interview_ai.next_question"
EVALUATE_ANSWER = "interview_ai.evaluate_answer"
SUMMARIZE = "interview_ai.summarize"
SPEECH = "interview_ai.speech"

TARGETS = (EXTRACT_SKILLS, NEXT_QUESTION, EVALUATE_ANSWER, SUMMARIZE, SPEECH)


class InterviewAI:  # AI gateway client used by the session orchestrator
    def __init__(self, routes: Dict[str, LlmRoute]) -> None:
        missing = [target for target in TARGETS if target not in routes]
        if missing:
            raise KeyError(f"Routes missing for: {', '.join(missing)}")
        self._routes = dict(routes)

    @classmethod
    def from_config(cls, path: Path) -> "InterviewAI":  # Resolve every operation's route from app config
        cfg = load_config(path)
        routes = {target: resolve_route(cfg, target) for target in TARGETS}
        logger.info("AI routes loaded: %s", {target: route.name for target, route in routes.items()})
        return cls(routes)

    def extract_skills(self, resume_text: str) -> List[Skill]:
        return resume_analysis.extract_skills(resume_text, route=self._routes[EXTRACT_SKILLS])

    def next_question(self, job_role: str, skills: Sequence[Skill], prior_context: str) -> str:
        return questions.next_question(job_role, skills, prior_context, route=self._routes[NEXT_QUESTION])

    def evaluate_answer(self, question: str, answer: str) -> Feedback:
        return evaluation.evaluate_answer(question, answer, route=self._routes[EVALUATE_ANSWER])

    def summarize(self, transcript: Sequence[Message]) -> str:
        return summary.summarize(transcript, route=self._routes[SUMMARIZE])

    def speech_audio(self, text: str) -> bytes:
        return speech.speech_audio(text, route=self._routes[SPEECH])


__all__ = ["InterviewAI", "TARGETS"]
