from __future__ import annotations  # Email/password authentication backed by the accounts table

import hashlib
import logging
import secrets
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from config.settings import Settings
from domain import UserRole
from observability import log_event
from storage import accounts

from .errors import AuthenticationError, ConfigurationError, RegistrationError
from .mailer import Mailer, mailer_from_settings
from .models import AuthEvent, AuthSession, SessionInfo
from .tokens import decode_token, issue_token, session_from_claims

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
MIN_SECRET_BYTES = 32  # HS256 key length

SessionListener = Callable[[AuthEvent, Optional[SessionInfo]], None]


class AuthService:  # Sign-up, sign-in, session lookup and password recovery
    def __init__(
        self,
        *,
        secret: Optional[str],
        token_ttl_minutes: int,
        reset_ttl_minutes: int,
        reset_redirect_url: str,
        mailer: Mailer,
    ) -> None:
        if not secret or len(secret.encode("utf-8")) < MIN_SECRET_BYTES:
            raise ConfigurationError(f"JWT_SECRET must be set to at least {MIN_SECRET_BYTES} bytes")
        self._secret = secret
        self._token_ttl = token_ttl_minutes
        self._reset_ttl = reset_ttl_minutes
        self._reset_redirect_url = reset_redirect_url
        self._mailer = mailer
        self._listeners: List[SessionListener] = []
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, cfg: Settings) -> "AuthService":
        return cls(
            secret=cfg.JWT_SECRET,
            token_ttl_minutes=cfg.JWT_TTL_MINUTES,
            reset_ttl_minutes=cfg.RESET_TOKEN_TTL_MINUTES,
            reset_redirect_url=cfg.RESET_REDIRECT_URL,
            mailer=mailer_from_settings(cfg),
        )

    def sign_up(self, email: str, password: str, role: UserRole = UserRole.CANDIDATE) -> AuthSession:
        """Register an account; the role lands in account metadata."""

        email = _normalize_email(email)
        _check_password(password)
        record = accounts.insert_account(
            email=email,
            password_hash=generate_password_hash(password),
            metadata={"role": role.value},
        )
        logger.info("Account created id=%s role=%s", record.id, role.value)
        return self._open_session(
            SessionInfo(user_id=record.id, email=record.email, role=UserRole.from_metadata(record.metadata))
        )

    def sign_in(self, email: str, password: str) -> AuthSession:
        try:
            normalized = _normalize_email(email)
        except RegistrationError as exc:
            raise AuthenticationError("Invalid login credentials") from exc
        record = accounts.find_account_by_email(normalized)
        if record is None or not check_password_hash(record.password_hash, password):
            raise AuthenticationError("Invalid login credentials")
        return self._open_session(
            SessionInfo(user_id=record.id, email=record.email, role=UserRole.from_metadata(record.metadata))
        )

    def sign_out(self, token: str) -> None:
        claims = decode_token(token, secret=self._secret)
        accounts.revoke_token(str(claims["jti"]))
        session = session_from_claims(claims)
        log_event("auth.signed_out", session.user_id)
        self._emit("SIGNED_OUT", session)

    def get_session(self, token: str) -> SessionInfo:
        """Resolve the identity behind an access token."""

        claims = decode_token(token, secret=self._secret)
        if accounts.is_token_revoked(str(claims.get("jti", ""))):
            raise AuthenticationError("Session has been signed out")
        return session_from_claims(claims)

    def on_session_change(self, listener: SessionListener) -> Callable[[], None]:
        """Subscribe to auth events; returns the unsubscribe callable."""

        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def request_password_reset(self, email: str) -> None:
        """Email a single-use recovery link; unknown addresses are ignored."""

        record = accounts.find_account_by_email(_normalize_email(email))
        if record is None:
            logger.info("Password reset requested for unknown email")
            return
        token = secrets.token_urlsafe(32)
        expires = datetime.now(timezone.utc) + timedelta(minutes=self._reset_ttl)
        accounts.insert_reset_token(
            token_hash=_digest(token),
            account_id=record.id,
            expires_at=expires.isoformat(),
        )
        separator = "&" if "?" in self._reset_redirect_url else "?"
        link = f"{self._reset_redirect_url}{separator}token={token}"
        self._mailer.send(
            record.email,
            "Reset your FairHire AI password",
            f"Use the link below to choose a new password. It expires in {self._reset_ttl} minutes.\n\n{link}\n",
        )
        session = SessionInfo(user_id=record.id, email=record.email, role=UserRole.from_metadata(record.metadata))
        self._emit("PASSWORD_RECOVERY", session)

    def reset_password(self, token: str, new_password: str) -> SessionInfo:
        _check_password(new_password)
        account_id = accounts.consume_reset_token(_digest(token), now=datetime.now(timezone.utc).isoformat())
        if account_id is None:
            raise RegistrationError("Invalid or expired password reset link. Please request a new one.")
        accounts.update_password(account_id, generate_password_hash(new_password))
        record = accounts.get_account(account_id)
        session = SessionInfo(user_id=record.id, email=record.email, role=UserRole.from_metadata(record.metadata))
        log_event("auth.password_reset", session.user_id)
        self._emit("USER_UPDATED", session)
        return session

    def _open_session(self, session: SessionInfo) -> AuthSession:
        token, expires_at = issue_token(session, secret=self._secret, ttl_minutes=self._token_ttl)
        log_event("auth.signed_in", session.user_id, role=session.role.value)
        self._emit("SIGNED_IN", session)
        return AuthSession(access_token=token, expires_at=expires_at, user=session)

    def _emit(self, event: AuthEvent, session: Optional[SessionInfo]) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event, session)
            except Exception:  # noqa: BLE001
                logger.exception("Session listener failed for event %s", event)


def _normalize_email(email: str) -> str:
    value = (email or "").strip().lower()
    if "@" not in value or value.startswith("@") or value.endswith("@"):
        raise RegistrationError("A valid email address is required")
    return value


def _check_password(password: str) -> None:
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise RegistrationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")


def _digest(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
