"""Errors raised at the persistence boundary."""
from __future__ import annotations

ACCESS_POLICY_HINT = (
    "A common cause is an access policy on the 'interviews' table that does not allow "
    "this operation for the current account, or a database that has not been migrated."
)


class PersistenceError(RuntimeError):
    """A row read or write failed; the message is shown to the user verbatim."""

    def __init__(self, message: str, *, hint: str = ACCESS_POLICY_HINT) -> None:
        super().__init__(message)
        self.hint = hint

    def user_message(self) -> str:
        return f"{self}. {self.hint}"


class RecordNotFoundError(KeyError):
    """No row exists for the requested identifier."""


class AuthorizationError(PermissionError):
    """The requester neither owns the record nor holds the HR role."""

    def __init__(self, message: str = "You do not have permission to view this report.", *, redirect_to: str = "/") -> None:
        super().__init__(message)
        self.redirect_to = redirect_to


__all__ = ["ACCESS_POLICY_HINT", "AuthorizationError", "PersistenceError", "RecordNotFoundError"]
