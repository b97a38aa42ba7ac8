"""Per-user view state: language, theme and the signed-in identity."""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from auth.models import SessionInfo

from .i18n import DEFAULT_LANGUAGE, LANGUAGES, supported, translate
from .preferences import PreferenceStore, Preferences, Theme


class ViewSnapshot(BaseModel):  # What the client renders its chrome from
    user: Optional[SessionInfo] = None
    language: str = DEFAULT_LANGUAGE
    theme: Theme = "dark"
    languages: List[dict] = Field(default_factory=lambda: list(LANGUAGES))


class ViewContext:  # Created at sign-in, torn down at sign-out
    def __init__(self, user: SessionInfo, store: PreferenceStore) -> None:
        self.user = user
        self._store = store
        self._prefs: Preferences = store.load(user.user_id)

    @property
    def language(self) -> str:
        return self._prefs.language

    @property
    def theme(self) -> Theme:
        return self._prefs.theme

    def translate(self, key: str) -> str:
        return translate(self.language, key)

    def set_language(self, language: str) -> None:
        if not supported(language):
            raise ValueError(f"Unsupported language '{language}'")
        self._prefs = self._prefs.model_copy(update={"language": language})
        self._store.save(self.user.user_id, self._prefs)

    def set_theme(self, theme: Theme) -> None:
        self._prefs = self._prefs.model_copy(update={"theme": theme})
        self._store.save(self.user.user_id, self._prefs)

    def toggle_theme(self) -> Theme:
        self.set_theme("light" if self.theme == "dark" else "dark")
        return self.theme

    def snapshot(self) -> ViewSnapshot:
        return ViewSnapshot(user=self.user, language=self.language, theme=self.theme)


__all__ = ["ViewContext", "ViewSnapshot"]
