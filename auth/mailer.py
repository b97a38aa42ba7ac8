"""Delivery of password recovery links."""
from __future__ import annotations

import logging
import smtplib
import ssl
from email.message import EmailMessage
from typing import Protocol

from config.settings import Settings

logger = logging.getLogger(__name__)


class Mailer(Protocol):
    def send(self, to_addr: str, subject: str, body: str) -> None: ...


class SmtpMailer:
    """Send plain-text mail through an authenticated STARTTLS SMTP server."""

    def __init__(self, host: str, port: int, username: str, password: str, from_name: str | None = None) -> None:
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._from_name = from_name

    def send(self, to_addr: str, subject: str, body: str) -> None:
        message = EmailMessage()
        message["From"] = f"{self._from_name} <{self._username}>" if self._from_name else self._username
        message["To"] = to_addr
        message["Subject"] = subject
        message.set_content(body)
        context = ssl.create_default_context()
        with smtplib.SMTP(self._host, self._port) as server:
            server.starttls(context=context)
            server.login(self._username, self._password)
            server.send_message(message)
        logger.info("Mail sent to=%s subject=%s", to_addr, subject)


class LogMailer:
    """Write outgoing mail to the log; used when no SMTP server is configured."""

    def send(self, to_addr: str, subject: str, body: str) -> None:
        logger.warning("SMTP not configured; mail to=%s subject=%s body=%s", to_addr, subject, body)


def mailer_from_settings(cfg: Settings) -> Mailer:
    if cfg.SMTP_HOST and cfg.SMTP_USERNAME and cfg.SMTP_PASSWORD:
        return SmtpMailer(cfg.SMTP_HOST, cfg.SMTP_PORT, cfg.SMTP_USERNAME, cfg.SMTP_PASSWORD, cfg.SMTP_FROM_NAME)
    return LogMailer()
