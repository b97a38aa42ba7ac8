from __future__ import annotations  # Answer evaluation module

from textwrap import dedent

from pydantic import BaseModel, Field

from config import LlmRoute
from domain import Feedback
from llm_gateway import LlmGatewayError, call

from .errors import AnalysisError

MAX_FEEDBACK_WORDS = 20
FEEDBACK_WORD_CAP = 40


class AnswerEvaluation(BaseModel):  # Structured output contract for evaluation
    feedback: str = Field(min_length=1)
    score: float
    confidence: float


def evaluate_answer(question: str, answer: str, *, route: LlmRoute) -> Feedback:  # Score a candidate answer via LLM
    task = _build_task(question, answer)
    try:
        result = call(task, AnswerEvaluation, cfg=route)
    except LlmGatewayError as exc:
        raise AnalysisError("Could not evaluate the answer") from exc
    return Feedback(
        text=_trim_words(result.feedback.strip(), FEEDBACK_WORD_CAP),
        score=_bounded(result.score),
        confidence=_bounded(result.confidence),
    )


def _bounded(value: float) -> int:
    return int(round(max(0.0, min(100.0, value))))


def _trim_words(text: str, limit: int) -> str:
    words = text.split()
    if len(words) <= limit:
        return text
    return " ".join(words[:limit]) + "..."


def _build_task(question: str, answer: str) -> str:  # Compose evaluation prompt
    instructions = dedent(
        f"""
        Please evaluate their answer based on clarity, relevance, and depth.
        Respond with a JSON object following this contract:
        - feedback: a short, constructive feedback sentence (max {MAX_FEEDBACK_WORDS} words).
        - score: a score for the answer from 0 to 100.
        - confidence: a confidence score (0-100) based on the answer's certainty and detail.
        Return only JSON without markdown fences, text, or commentary.
        """
    ).strip()
    return (
        f'A candidate was asked the following interview question: "{question.strip()}".\n'
        f'They provided this answer: "{answer.strip()}".\n\n'
        f"{instructions}"
    )
