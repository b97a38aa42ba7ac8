"""Translated user-facing strings."""
from __future__ import annotations

from typing import Callable, Dict, List

DEFAULT_LANGUAGE = "en"

LANGUAGES: List[Dict[str, str]] = [
    {"code": "en", "name": "English"},
    {"code": "es", "name": "Español"},
    {"code": "hi", "name": "हिन्दी"},
    {"code": "te", "name": "తెలుగు"},
    {"code": "fr", "name": "Français"},
    {"code": "de", "name": "Deutsch"},
    {"code": "zh", "name": "中文"},
]

TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "en": {
        "greeting": "Hello! I'll be conducting your interview for the {job_role} position today. I've reviewed your skills. Let's begin.",
        "resumeAndRoleRequired": "Please provide both a resume and a job role.",
        "answerRequired": "Please enter an answer before submitting.",
        "analysisFailed": "Could not analyze the resume. Please try again.",
        "evaluationFallback": "Could not evaluate the answer at this time.",
        "questionFallback": "I'm sorry, I encountered an issue. Let's continue: what experience best prepares you for the {job_role} role?",
        "summaryFallback": "Could not generate a summary for this interview.",
        "reportForbidden": "You do not have permission to view this report.",
        "hrOnly": "This dashboard is only available to HR administrators.",
        "checkEmailForReset": "Check your email for the reset link.",
    },
    "es": {
        "greeting": "¡Hola! Hoy realizaré tu entrevista para el puesto de {job_role}. He revisado tus habilidades. Comencemos.",
        "resumeAndRoleRequired": "Proporciona tanto un currículum como un puesto.",
        "answerRequired": "Escribe una respuesta antes de enviar.",
        "analysisFailed": "No se pudo analizar el currículum. Inténtalo de nuevo.",
        "evaluationFallback": "No se pudo evaluar la respuesta en este momento.",
        "summaryFallback": "No se pudo generar un resumen de esta entrevista.",
        "reportForbidden": "No tienes permiso para ver este informe.",
        "checkEmailForReset": "Revisa tu correo para el enlace de restablecimiento.",
    },
    "fr": {
        "greeting": "Bonjour ! Je vais mener votre entretien pour le poste de {job_role} aujourd'hui. J'ai examiné vos compétences. Commençons.",
        "resumeAndRoleRequired": "Veuillez fournir un CV et un poste.",
        "analysisFailed": "Impossible d'analyser le CV. Veuillez réessayer.",
        "evaluationFallback": "Impossible d'évaluer la réponse pour le moment.",
        "summaryFallback": "Impossible de générer un résumé de cet entretien.",
        "reportForbidden": "Vous n'avez pas la permission de consulter ce rapport.",
        "checkEmailForReset": "Consultez votre e-mail pour le lien de réinitialisation.",
    },
    "de": {
        "greeting": "Hallo! Ich führe heute Ihr Interview für die Position {job_role}. Ich habe Ihre Fähigkeiten geprüft. Lassen Sie uns beginnen.",
        "resumeAndRoleRequired": "Bitte geben Sie einen Lebenslauf und eine Stelle an.",
        "analysisFailed": "Der Lebenslauf konnte nicht analysiert werden. Bitte versuchen Sie es erneut.",
        "evaluationFallback": "Die Antwort konnte derzeit nicht bewertet werden.",
        "reportForbidden": "Sie haben keine Berechtigung, diesen Bericht anzusehen.",
    },
}


def supported(language: str) -> bool:
    return any(entry["code"] == language for entry in LANGUAGES)


def translate(language: str, key: str) -> str:
    """Look up ``key`` for ``language``, falling back to English and then to the key itself."""
    table = TRANSLATIONS.get(language, {})
    if key in table:
        return table[key]
    return TRANSLATIONS[DEFAULT_LANGUAGE].get(key, key)


def translator(language: str = DEFAULT_LANGUAGE) -> Callable[[str], str]:
    def _translate(key: str) -> str:
        return translate(language, key)

    return _translate


__all__ = ["DEFAULT_LANGUAGE", "LANGUAGES", "TRANSLATIONS", "supported", "translate", "translator"]
