from __future__ import annotations  # Interview question generation module

from textwrap import dedent
from typing import Sequence

from pydantic import BaseModel, Field

from config import LlmRoute
from domain import Skill
from llm_gateway import LlmGatewayError, call

from .errors import AnalysisError

SYSTEM_PROMPT = (
    "You are an expert interviewer for technical and behavioral roles. "
    "Your questions should be insightful and encourage detailed responses. "
    "Do not repeat questions. Only return the question itself."
)


class GeneratedQuestion(BaseModel):  # Single interviewer question
    question: str = Field(min_length=1)

    @classmethod
    def from_raw_content(cls, content: str) -> "GeneratedQuestion":  # Plain-text replies carry the question directly
        return cls(question=content.strip().strip('"').strip())


def next_question(job_role: str, skills: Sequence[Skill], prior_context: str, *, route: LlmRoute) -> str:  # Ask LLM for the next question
    task = _build_task(job_role, skills, prior_context)
    try:
        result = call(task, GeneratedQuestion, cfg=route, system=SYSTEM_PROMPT)
    except LlmGatewayError as exc:
        raise AnalysisError("Could not generate the next question") from exc
    return result.question.strip()


def format_skills(skills: Sequence[Skill]) -> str:
    return ", ".join(f"{skill.name} (Proficiency: {skill.proficiency}/100)" for skill in skills) or "(none listed)"


def _build_task(job_role: str, skills: Sequence[Skill], prior_context: str) -> str:  # Compose question prompt
    header = dedent(
        f"""
        Based on the job role of "{job_role}", the candidate's skills ({format_skills(skills)}),
        and the previous conversation context below, generate a single, relevant, open-ended interview question.
        """
    ).strip()
    return f"{header}\n\nContext:\n{prior_context.strip()}"
