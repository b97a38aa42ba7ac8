from __future__ import annotations  # Resume skill extraction module

from textwrap import dedent
from typing import List

from pydantic import BaseModel, Field

from config import LlmRoute
from domain import Skill
from llm_gateway import LlmGatewayError, call

from .errors import AnalysisError

MIN_SKILLS = 5
MAX_SKILLS = 7


class ExtractedSkill(BaseModel):  # Skill entry as returned by the LLM
    skill: str = Field(min_length=1)
    level: float
    justification: str = ""


class SkillExtraction(BaseModel):  # Structured output contract for extraction
    skills: List[ExtractedSkill] = Field(default_factory=list)


def extract_skills(resume_text: str, *, route: LlmRoute) -> List[Skill]:  # Analyze resume via LLM
    task = _build_task(resume_text)
    try:
        result = call(task, SkillExtraction, cfg=route)
    except LlmGatewayError as exc:
        raise AnalysisError("Could not analyze the resume") from exc
    skills = [_to_skill(entry) for entry in result.skills[:MAX_SKILLS]]
    if not skills:
        raise AnalysisError("Resume analysis returned no skills")
    return skills


def _to_skill(entry: ExtractedSkill) -> Skill:
    level = int(round(max(0.0, min(100.0, entry.level))))
    return Skill(name=entry.skill.strip(), proficiency=level, justification=entry.justification.strip())


def _build_task(resume_text: str) -> str:  # Build task prompt for LLM
    header = dedent(
        f"""
        Analyze the following resume text and extract the candidate's top {MIN_SKILLS}-{MAX_SKILLS} skills.
        For each skill, provide a proficiency level from 0 to 100 based on the experience described,
        and a brief justification.

        Respond with a JSON object following this contract:
        - skills: array with {MIN_SKILLS} to {MAX_SKILLS} items.
            Each item must contain:
              - skill: the name of the skill, e.g. "React" or "Project Management".
              - level: proficiency from 0 to 100.
              - justification: one sentence explaining the assigned level.
        Return only JSON without markdown fences, text, or commentary.
        """
    ).strip()
    return f"{header}\n\nResume:\n{resume_text.strip()}"
