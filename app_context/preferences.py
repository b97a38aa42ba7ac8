"""Per-user display preferences kept in a small JSON file."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from threading import Lock
from typing import Dict, Literal

from pydantic import BaseModel

logger = logging.getLogger(__name__)

Theme = Literal["light", "dark"]


class Preferences(BaseModel):
    theme: Theme = "dark"
    language: str = "en"


class PreferenceStore:  # JSON file keyed by user id
    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._lock = Lock()

    def load(self, user_id: str) -> Preferences:
        with self._lock:
            data = self._read()
        raw = data.get(user_id)
        if raw is None:
            return Preferences()
        return Preferences.model_validate(raw)

    def save(self, user_id: str, prefs: Preferences) -> None:
        with self._lock:
            data = self._read()
            data[user_id] = prefs.model_dump()
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def _read(self) -> Dict[str, dict]:
        if not self._path.exists():
            return {}
        try:
            return json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable preferences file %s", self._path)
            return {}


__all__ = ["PreferenceStore", "Preferences", "Theme"]
