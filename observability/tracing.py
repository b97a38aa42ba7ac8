"""Latency spans around AI calls, kept on the session's event log."""
from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator

from .logger import log_event


@contextmanager
def span(state, op: str) -> Iterator[None]:
    started = time.perf_counter()
    outcome = "ok"
    try:
        yield
    except Exception:
        outcome = "error"
        raise
    finally:
        ms = int((time.perf_counter() - started) * 1000)
        state.events.append({"span": op, "ms": ms, "outcome": outcome})
        log_event("ai_call", state.session_id, op=op, ms=ms, outcome=outcome)


__all__ = ["span"]
