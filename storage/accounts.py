"""Persistence helpers for accounts, password resets and revoked tokens."""
from __future__ import annotations

import json
import sqlite3
import uuid
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from domain import utc_now

from .errors import PersistenceError, RecordNotFoundError
from .sqlite import get_conn


class AccountExistsError(PersistenceError):
    """An account with this email is already registered."""


class AccountRecord(BaseModel):
    id: str
    email: str
    password_hash: str
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: str
    updated_at: str


def insert_account(*, email: str, password_hash: str, metadata: Dict[str, Any]) -> AccountRecord:
    """Insert an account row and return the stored record."""

    now = utc_now()
    record = AccountRecord(
        id=str(uuid.uuid4()),
        email=email,
        password_hash=password_hash,
        metadata=metadata,
        created_at=now,
        updated_at=now,
    )
    try:
        with get_conn() as conn:
            conn.execute(
                """INSERT INTO accounts (id, email, password_hash, metadata, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (
                    record.id,
                    record.email,
                    record.password_hash,
                    json.dumps(record.metadata),
                    record.created_at,
                    record.updated_at,
                ),
            )
    except sqlite3.IntegrityError as exc:
        raise AccountExistsError("An account with this email already exists", hint="Sign in instead.") from exc
    except sqlite3.Error as exc:
        raise PersistenceError(f"Could not create account: {exc}") from exc
    return record


def find_account_by_email(email: str) -> Optional[AccountRecord]:
    """Return the account registered under ``email`` if any."""

    return _fetch_one("SELECT * FROM accounts WHERE email = ?", (email,))


def get_account(account_id: str) -> AccountRecord:
    """Load an account by id."""

    record = _fetch_one("SELECT * FROM accounts WHERE id = ?", (account_id,))
    if record is None:
        raise RecordNotFoundError(account_id)
    return record


def update_password(account_id: str, password_hash: str) -> None:
    """Replace the stored password hash."""

    try:
        with get_conn() as conn:
            cur = conn.execute(
                "UPDATE accounts SET password_hash = ?, updated_at = ? WHERE id = ?",
                (password_hash, utc_now(), account_id),
            )
    except sqlite3.Error as exc:
        raise PersistenceError(f"Could not update password: {exc}") from exc
    if cur.rowcount == 0:
        raise RecordNotFoundError(account_id)


def insert_reset_token(*, token_hash: str, account_id: str, expires_at: str) -> None:
    """Store a single-use password reset token digest."""

    try:
        with get_conn() as conn:
            conn.execute(
                "INSERT INTO password_resets (token_hash, account_id, expires_at) VALUES (?, ?, ?)",
                (token_hash, account_id, expires_at),
            )
    except sqlite3.Error as exc:
        raise PersistenceError(f"Could not store reset token: {exc}") from exc


def consume_reset_token(token_hash: str, *, now: str) -> Optional[str]:
    """Mark an unexpired token used and return its account id, or None when invalid."""

    try:
        with get_conn() as conn:
            row = conn.execute(
                """SELECT account_id FROM password_resets
                   WHERE token_hash = ? AND used_at IS NULL AND expires_at > ?""",
                (token_hash, now),
            ).fetchone()
            if row is None:
                return None
            conn.execute(
                "UPDATE password_resets SET used_at = ? WHERE token_hash = ?",
                (now, token_hash),
            )
            return str(row["account_id"])
    except sqlite3.Error as exc:
        raise PersistenceError(f"Could not verify reset token: {exc}") from exc


def revoke_token(jti: str) -> None:
    """Record a signed-out access token id."""

    try:
        with get_conn() as conn:
            conn.execute(
                "INSERT OR IGNORE INTO revoked_tokens (jti, revoked_at) VALUES (?, ?)",
                (jti, utc_now()),
            )
    except sqlite3.Error as exc:
        raise PersistenceError(f"Could not sign out: {exc}") from exc


def is_token_revoked(jti: str) -> bool:
    try:
        with get_conn() as conn:
            row = conn.execute("SELECT 1 FROM revoked_tokens WHERE jti = ?", (jti,)).fetchone()
    except sqlite3.Error as exc:
        raise PersistenceError(f"Could not verify session: {exc}") from exc
    return row is not None


def _fetch_one(query: str, params: tuple) -> Optional[AccountRecord]:
    try:
        with get_conn() as conn:
            row = conn.execute(query, params).fetchone()
    except sqlite3.Error as exc:
        raise PersistenceError(f"Could not load account: {exc}") from exc
    if row is None:
        return None
    return AccountRecord(
        id=row["id"],
        email=row["email"],
        password_hash=row["password_hash"],
        metadata=json.loads(row["metadata"] or "{}"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )
