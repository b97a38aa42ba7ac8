"""Per-user view context, translations, preferences and the client route table."""
from .i18n import DEFAULT_LANGUAGE, LANGUAGES, TRANSLATIONS, supported, translate, translator
from .preferences import PreferenceStore, Preferences, Theme
from .routes import ROUTES, report_path, resolve
from .view import ViewContext, ViewSnapshot

__all__ = [
    "DEFAULT_LANGUAGE",
    "LANGUAGES",
    "PreferenceStore",
    "Preferences",
    "ROUTES",
    "TRANSLATIONS",
    "Theme",
    "ViewContext",
    "ViewSnapshot",
    "report_path",
    "resolve",
    "supported",
    "translate",
    "translator",
]
