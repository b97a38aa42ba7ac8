"""Client route table; unknown paths go home."""
from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

HOME = "/"

ROUTES: List[Tuple[str, str]] = [
    ("/", "home"),
    ("/login", "auth"),
    ("/reset-password", "reset_password"),
    ("/interview/new", "interview"),
    ("/report/:id", "report"),
    ("/dashboard", "dashboard"),
    ("/candidate-dashboard", "candidate_dashboard"),
]


def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile("^" + re.sub(r":(\w+)", r"(?P<\1>[^/]+)", pattern) + "/?$")


_COMPILED = [(_compile(pattern), page) for pattern, page in ROUTES]


def resolve(path: str) -> Tuple[str, Dict[str, str], Optional[str]]:
    """Return ``(page, params, redirect)``; unknown paths resolve to home with a redirect."""
    for regex, page in _COMPILED:
        match = regex.match(path)
        if match:
            return page, match.groupdict(), None
    return "home", {}, HOME


def report_path(interview_id: str) -> str:
    return f"/report/{interview_id}"


__all__ = ["HOME", "ROUTES", "report_path", "resolve"]
