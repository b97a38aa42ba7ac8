from __future__ import annotations  # Re-export auth public API

from .errors import AuthenticationError, ConfigurationError, RegistrationError
from .mailer import LogMailer, Mailer, SmtpMailer
from .models import AuthEvent, AuthSession, SessionInfo
from .service import AuthService

__all__ = [
    "AuthEvent",
    "AuthService",
    "AuthSession",
    "AuthenticationError",
    "ConfigurationError",
    "LogMailer",
    "Mailer",
    "RegistrationError",
    "SessionInfo",
    "SmtpMailer",
]
