"""Persistence helpers for completed interview records.

Rows use snake_case column names; the domain models are camelCase on the wire.
Every translation between the two goes through ``_to_row`` and ``_from_row``.
"""
from __future__ import annotations

import json
import logging
import sqlite3
import uuid
from typing import Any, List, Optional, Sequence

from domain import Interview, InterviewDraft, Message, PeerBenchmark, Skill, UserRole, utc_now

from .errors import AuthorizationError, PersistenceError, RecordNotFoundError
from .sqlite import get_conn

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id, created_at, candidate_id, candidate_name, job_title, skills, transcript, summary, "
    "overall_score, confidence_scores, badges, peer_benchmark"
)


def insert_interview(draft: InterviewDraft) -> str:
    """Insert one completed interview and return its server-generated id."""

    interview_id = str(uuid.uuid4())
    row = _to_row(draft, interview_id=interview_id, created_at=utc_now())
    try:
        with get_conn() as conn:
            conn.execute(
                f"INSERT INTO interviews ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                row,
            )
    except sqlite3.Error as exc:
        logger.error("Interview insert failed candidate=%s: %s", draft.candidate_id, exc)
        raise PersistenceError(f"Could not save interview results: {exc}") from exc
    return interview_id


def get_interview(interview_id: str) -> Interview:
    """Load a single interview without any requester scoping."""

    try:
        with get_conn() as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM interviews WHERE id = ?",
                (interview_id,),
            ).fetchone()
    except sqlite3.Error as exc:
        raise PersistenceError(f"Could not fetch the interview report: {exc}") from exc
    if row is None:
        raise RecordNotFoundError(interview_id)
    return _from_row(row)


def get_interview_for(interview_id: str, *, requester_id: str, role: UserRole) -> Interview:
    """Load an interview on behalf of a requester, enforcing owner-or-HR access."""

    interview = get_interview(interview_id)
    if interview.candidate_id != requester_id and role is not UserRole.HR_ADMIN:
        logger.warning("Report access denied interview=%s requester=%s", interview_id, requester_id)
        raise AuthorizationError()
    return interview


def list_interviews(*, candidate_id: Optional[str] = None, limit: Optional[int] = None) -> List[Interview]:
    """List interviews newest first, optionally for a single candidate."""

    query = f"SELECT {_COLUMNS} FROM interviews"
    params: list[Any] = []
    if candidate_id is not None:
        query += " WHERE candidate_id = ?"
        params.append(candidate_id)
    query += " ORDER BY created_at DESC, rowid DESC"
    if limit is not None:
        query += " LIMIT ?"
        params.append(int(limit))
    try:
        with get_conn() as conn:
            rows = conn.execute(query, params).fetchall()
    except sqlite3.Error as exc:
        raise PersistenceError(f"Failed to fetch interviews: {exc}") from exc
    return [_from_row(row) for row in rows]


def skills_for_job_role(job_role: str) -> List[List[Skill]]:
    """Return the skill lists of every stored interview for ``job_role``."""

    try:
        with get_conn() as conn:
            rows = conn.execute(
                "SELECT skills FROM interviews WHERE job_title = ?",
                (job_role,),
            ).fetchall()
    except sqlite3.Error as exc:
        raise PersistenceError(f"Failed to fetch historical skills: {exc}") from exc
    return [_load_models(Skill, row["skills"]) for row in rows]


def _to_row(draft: InterviewDraft, *, interview_id: str, created_at: str) -> tuple:
    return (
        interview_id,
        created_at,
        draft.candidate_id,
        draft.candidate_name,
        draft.job_role,
        _dump_models(draft.skills),
        _dump_models(draft.transcript),
        draft.summary,
        int(draft.overall_score),
        json.dumps(list(draft.confidence_scores)),
        json.dumps(list(draft.badges)),
        _dump_models(draft.peer_benchmark),
    )


def _from_row(row: sqlite3.Row) -> Interview:
    return Interview(
        id=row["id"],
        created_at=row["created_at"],
        candidate_id=row["candidate_id"],
        candidate_name=row["candidate_name"],
        job_role=row["job_title"],
        skills=_load_models(Skill, row["skills"]),
        transcript=_load_models(Message, row["transcript"]),
        summary=row["summary"],
        overall_score=int(row["overall_score"]),
        confidence_scores=json.loads(row["confidence_scores"] or "[]"),
        badges=json.loads(row["badges"] or "[]"),
        peer_benchmark=_load_models(PeerBenchmark, row["peer_benchmark"]),
    )


def _dump_models(items: Sequence[Any]) -> str:
    return json.dumps([item.model_dump(by_alias=True, exclude_none=True) for item in items], ensure_ascii=False)


def _load_models(model: Any, raw: Optional[str]) -> list:
    return [model.model_validate(item) for item in json.loads(raw or "[]")]


__all__ = [
    "get_interview",
    "get_interview_for",
    "insert_interview",
    "list_interviews",
    "skills_for_job_role",
]
