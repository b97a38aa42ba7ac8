from __future__ import annotations  # Signed access tokens

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Tuple

import jwt

from domain import UserRole

from .errors import AuthenticationError
from .models import SessionInfo

ALGORITHM = "HS256"


def issue_token(session: SessionInfo, *, secret: str, ttl_minutes: int) -> Tuple[str, str]:
    """Sign an access token for ``session`` and return it with its ISO expiry."""

    now = datetime.now(timezone.utc)
    expires = now + timedelta(minutes=ttl_minutes)
    claims = {
        "sub": session.user_id,
        "email": session.email,
        "role": session.role.value,
        "jti": uuid.uuid4().hex,
        "iat": now,
        "exp": expires,
    }
    return jwt.encode(claims, secret, algorithm=ALGORITHM), expires.isoformat()


def decode_token(token: str, *, secret: str) -> Dict[str, Any]:
    try:
        return jwt.decode(token, secret, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationError("Session expired") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthenticationError("Invalid session token") from exc


def session_from_claims(claims: Dict[str, Any]) -> SessionInfo:
    return SessionInfo(
        user_id=str(claims["sub"]),
        email=str(claims.get("email", "")),
        role=UserRole.from_metadata({"role": claims.get("role")}),
    )
