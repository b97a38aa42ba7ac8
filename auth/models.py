from __future__ import annotations  # Authentication models

from typing import Literal

from pydantic import BaseModel

from domain import UserRole

AuthEvent = Literal["SIGNED_IN", "SIGNED_OUT", "PASSWORD_RECOVERY", "USER_UPDATED"]


class SessionInfo(BaseModel):  # Authenticated identity with its resolved role
    user_id: str
    email: str
    role: UserRole = UserRole.CANDIDATE

    @property
    def display_name(self) -> str:
        return self.email.split("@", 1)[0] or "Candidate"

    @property
    def is_hr(self) -> bool:
        return self.role is UserRole.HR_ADMIN


class AuthSession(BaseModel):  # Issued access token bundle
    access_token: str
    token_type: str = "bearer"
    expires_at: str
    user: SessionInfo


__all__ = ["AuthEvent", "AuthSession", "SessionInfo"]
