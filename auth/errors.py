from __future__ import annotations  # Authentication failures


class AuthenticationError(RuntimeError):  # Bad credentials or an invalid, expired or revoked token
    pass


class RegistrationError(ValueError):  # Unusable sign-up or password-reset input
    pass


class ConfigurationError(RuntimeError):  # Missing or unusable signing secret
    pass


__all__ = ["AuthenticationError", "ConfigurationError", "RegistrationError"]
