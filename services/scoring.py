"""Score aggregation, peer benchmarking and badge rules."""
from __future__ import annotations

import math
from statistics import mean
from typing import Dict, Iterable, List, Sequence

from pydantic import BaseModel

from domain import Message, PeerBenchmark, Skill

QUICK_THINKER = "Quick Thinker"
STRONG_COMMUNICATOR = "Strong Communicator"
DETAIL_ORIENTED = "Detail-Oriented"


class BadgeRules(BaseModel):
    """Thresholds for the deterministic badge rules."""

    quick_thinker_confidence: int = 75
    communicator_score: int = 75
    detail_words: int = 40


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up."""
    return int(math.floor(value + 0.5))


def candidate_messages(transcript: Sequence[Message]) -> List[Message]:
    return [message for message in transcript if message.sender == "candidate"]


def overall_score(transcript: Sequence[Message]) -> int:
    """Rounded mean feedback score over candidate messages; unscored answers count as 0."""

    answers = candidate_messages(transcript)
    if not answers:
        return 0
    total = sum(message.feedback.score if message.feedback else 0 for message in answers)
    return round_half_up(total / len(answers))


def peer_benchmark(
    skills: Sequence[Skill],
    history: Iterable[Sequence[Skill]],
    *,
    default_average: int = 60,
) -> List[PeerBenchmark]:
    """Compare each skill with the average proficiency of same-role peers."""

    totals: Dict[str, List[int]] = {}
    for past_skills in history:
        for skill in past_skills:
            totals.setdefault(skill.name, []).append(skill.proficiency)
    benchmark: List[PeerBenchmark] = []
    for skill in skills:
        levels = totals.get(skill.name)
        average = round_half_up(mean(levels)) if levels else default_average
        benchmark.append(PeerBenchmark(skill=skill.name, level=skill.proficiency, peer_average=average))
    return benchmark


def default_benchmark(skills: Sequence[Skill], *, default_average: int = 60) -> List[PeerBenchmark]:
    return peer_benchmark(skills, [], default_average=default_average)


def assign_badges(
    transcript: Sequence[Message],
    confidence_scores: Sequence[int],
    score: int,
    rules: BadgeRules | None = None,
) -> List[str]:
    """Award badges from the session's own numbers; the same inputs always give the same badges."""

    rules = rules or BadgeRules()
    badges: List[str] = []
    if confidence_scores and mean(confidence_scores) >= rules.quick_thinker_confidence:
        badges.append(QUICK_THINKER)
    if candidate_messages(transcript) and score >= rules.communicator_score:
        badges.append(STRONG_COMMUNICATOR)
    answers = candidate_messages(transcript)
    if answers and mean(len(message.text.split()) for message in answers) >= rules.detail_words:
        badges.append(DETAIL_ORIENTED)
    return badges


__all__ = [
    "BadgeRules",
    "assign_badges",
    "candidate_messages",
    "default_benchmark",
    "overall_score",
    "peer_benchmark",
    "round_half_up",
]
