"""Aggregate views over persisted interviews."""
from __future__ import annotations

from statistics import mean
from typing import Dict, List, Literal, Sequence

from pydantic import Field

from domain import CamelModel, Interview
from storage.interviews import list_interviews

from .scoring import round_half_up

ScoreBand = Literal["strong", "moderate", "low"]

TOP_SKILLS = 7
RECENT_DECISIONS = 4


class SkillAverage(CamelModel):
    skill: str
    peer_average: int


class SkillPoint(CamelModel):
    interview_id: str
    created_at: str
    level: int


class InterviewRow(CamelModel):  # One line of a dashboard listing
    id: str
    created_at: str
    candidate_name: str
    job_role: str
    overall_score: int
    score_band: ScoreBand


class HrDashboard(CamelModel):
    candidates_screened: int
    average_score: int
    skill_averages: List[SkillAverage] = Field(default_factory=list)
    recent: List[InterviewRow] = Field(default_factory=list)
    interviews: List[InterviewRow] = Field(default_factory=list)


class CandidateDashboard(CamelModel):
    interviews: List[InterviewRow] = Field(default_factory=list)
    skill_history: Dict[str, List[SkillPoint]] = Field(default_factory=dict)


def score_band(score: int) -> ScoreBand:
    if score > 75:
        return "strong"
    if score > 50:
        return "moderate"
    return "low"


def to_row(interview: Interview) -> InterviewRow:
    return InterviewRow(
        id=interview.id,
        created_at=interview.created_at,
        candidate_name=interview.candidate_name,
        job_role=interview.job_role,
        overall_score=interview.overall_score,
        score_band=score_band(interview.overall_score),
    )


def skill_averages(interviews: Sequence[Interview], *, limit: int = TOP_SKILLS) -> List[SkillAverage]:
    """Average proficiency per skill name, in order of first appearance."""

    levels: Dict[str, List[int]] = {}
    for interview in interviews:
        for skill in interview.skills:
            levels.setdefault(skill.name, []).append(skill.proficiency)
    averages = [SkillAverage(skill=name, peer_average=round_half_up(mean(values))) for name, values in levels.items()]
    return averages[:limit]


def build_hr_dashboard(interviews: Sequence[Interview]) -> HrDashboard:
    rows = [to_row(interview) for interview in interviews]
    average = round_half_up(mean(i.overall_score for i in interviews)) if interviews else 0
    return HrDashboard(
        candidates_screened=len(interviews),
        average_score=average,
        skill_averages=skill_averages(interviews),
        recent=rows[:RECENT_DECISIONS],
        interviews=rows,
    )


def build_candidate_dashboard(interviews: Sequence[Interview]) -> CandidateDashboard:
    """Own interviews newest first, plus each skill's level over time (oldest first)."""

    history: Dict[str, List[SkillPoint]] = {}
    for interview in sorted(interviews, key=lambda item: item.created_at):
        for skill in interview.skills:
            history.setdefault(skill.name, []).append(
                SkillPoint(interview_id=interview.id, created_at=interview.created_at, level=skill.proficiency)
            )
    return CandidateDashboard(interviews=[to_row(interview) for interview in interviews], skill_history=history)


def hr_dashboard(*, limit: int = 100) -> HrDashboard:
    return build_hr_dashboard(list_interviews(limit=limit))


def candidate_dashboard(candidate_id: str) -> CandidateDashboard:
    return build_candidate_dashboard(list_interviews(candidate_id=candidate_id))


__all__ = [
    "CandidateDashboard",
    "HrDashboard",
    "InterviewRow",
    "SkillAverage",
    "SkillPoint",
    "build_candidate_dashboard",
    "build_hr_dashboard",
    "candidate_dashboard",
    "hr_dashboard",
    "score_band",
    "skill_averages",
]
