"""Structured event logging for interview sessions.

Every event is written twice: a short human line (console and ``*-human.log``)
and a JSON line (``LOG_FILE`` only) that the admin tooling can grep.
"""
from __future__ import annotations

import json
import logging
import logging.handlers
import sys
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Tuple

from config.settings import settings

HUMAN_FORMAT = "[%(asctime)s] %(levelname)s %(name)s :: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Fields promoted onto the human line, in this order
HUMAN_FIELDS: Tuple[str, ...] = (
    "from_stage",
    "to_stage",
    "op",
    "ms",
    "role",
    "interview_id",
    "reason",
    "outcome",
    "error",
)

_logger = logging.getLogger("fairhire.events")
_logger.propagate = False
_setup_lock = threading.Lock()


class _JsonOnly(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return getattr(record, "is_json", False)


class _HumanOnly(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return not getattr(record, "is_json", False)


def _rotating(path: Path, formatter: logging.Formatter, flt: logging.Filter) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=settings.LOG_MAX_BYTES,
        backupCount=settings.LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(formatter)
    handler.addFilter(flt)
    return handler


def _ensure_handlers() -> None:
    with _setup_lock:
        if _logger.handlers:
            return
        _logger.setLevel(settings.LOG_LEVEL.upper())
        human = logging.Formatter(HUMAN_FORMAT, datefmt=DATE_FORMAT)

        console = logging.StreamHandler(stream=sys.stdout)
        console.setFormatter(human)
        console.addFilter(_HumanOnly())
        _logger.addHandler(console)

        if not settings.ENABLE_FILE_LOGS:
            return
        json_path = Path(settings.LOG_FILE)
        json_path.parent.mkdir(parents=True, exist_ok=True)
        human_path = json_path.with_name(f"{json_path.stem}-human{json_path.suffix or '.log'}")
        _logger.addHandler(_rotating(json_path, logging.Formatter("%(message)s"), _JsonOnly()))
        _logger.addHandler(_rotating(human_path, human, _HumanOnly()))


def _human_line(event: Dict[str, Any]) -> str:
    parts = [f"session={event['session_id']}", f"kind={event['kind']}"]
    parts.extend(f"{key}={event[key]}" for key in HUMAN_FIELDS if key in event)
    return " ".join(parts)


def _level_for(event: Dict[str, Any]) -> int:
    return logging.WARNING if event.get("outcome") == "error" else logging.INFO


def log_event(kind: str, session_id: str, **fields: Any) -> None:
    """Record one structured event; ``outcome="error"`` events log at WARNING."""

    _ensure_handlers()
    event: Dict[str, Any] = {
        "at": datetime.now(timezone.utc).isoformat(),
        "kind": kind,
        "session_id": session_id,
        **fields,
    }
    level = _level_for(event)
    _logger.log(level, _human_line(event), extra={"is_json": False})
    if settings.ENABLE_FILE_LOGS:
        _logger.log(level, json.dumps(event, ensure_ascii=False, default=str), extra={"is_json": True})


__all__ = ["log_event"]
