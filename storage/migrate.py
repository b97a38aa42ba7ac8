"""SQLite schema migrations."""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from config.settings import settings

from .sqlite import get_conn

logger = logging.getLogger(__name__)

SCHEMA: Iterable[str] = [
    """
CREATE TABLE IF NOT EXISTS interviews (
  id TEXT PRIMARY KEY,
  created_at TEXT NOT NULL,
  candidate_id TEXT NOT NULL,
  candidate_name TEXT NOT NULL,
  job_title TEXT NOT NULL,
  skills TEXT NOT NULL,
  transcript TEXT NOT NULL,
  summary TEXT NOT NULL,
  overall_score INTEGER NOT NULL,
  confidence_scores TEXT NOT NULL,
  badges TEXT NOT NULL,
  peer_benchmark TEXT NOT NULL
);
""",
    """
CREATE INDEX IF NOT EXISTS idx_interviews_candidate ON interviews (candidate_id, created_at);
""",
    """
CREATE INDEX IF NOT EXISTS idx_interviews_job_title ON interviews (job_title);
""",
    """
CREATE TABLE IF NOT EXISTS accounts (
  id TEXT PRIMARY KEY,
  email TEXT NOT NULL UNIQUE,
  password_hash TEXT NOT NULL,
  metadata TEXT NOT NULL,
  created_at TEXT NOT NULL,
  updated_at TEXT NOT NULL
);
""",
    """
CREATE TABLE IF NOT EXISTS password_resets (
  token_hash TEXT PRIMARY KEY,
  account_id TEXT NOT NULL,
  expires_at TEXT NOT NULL,
  used_at TEXT,
  FOREIGN KEY(account_id) REFERENCES accounts(id) ON DELETE CASCADE
);
""",
    """
CREATE TABLE IF NOT EXISTS revoked_tokens (
  jti TEXT PRIMARY KEY,
  revoked_at TEXT NOT NULL
);
""",
]


def migrate(db_path: Optional[str] = None) -> None:
    """Create any missing tables and indexes; safe to run on every start."""

    with get_conn(db_path) as conn:
        for stmt in SCHEMA:
            conn.execute(stmt)
    logger.info("Database schema ready at %s", db_path or settings.DB_PATH)


if __name__ == "__main__":
    migrate()
