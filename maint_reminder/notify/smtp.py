from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from typing import Protocol

from ..errors import TransportError
from ..models.config_models import SmtpConfig

"""Notification transports.

SmtpTransport delivers mail; ConsoleTransport prints it (``--dry-run``).
A failed send raises TransportError and is never retried here.
"""

__all__ = [
    "ConsoleTransport",
    "NotificationTransport",
    "SmtpTransport",
]

logger = logging.getLogger(__name__)

SMTP_TIMEOUT_SECONDS = 30


class NotificationTransport(Protocol):
    def send(self, to: str, subject: str, body: str) -> None: ...


class SmtpTransport:
    def __init__(self, cfg: SmtpConfig) -> None:
        self.cfg = cfg

    def _build_message(self, to: str, subject: str, body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self.cfg.sender or self.cfg.user or to
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content(body)
        return msg

    def send(self, to: str, subject: str, body: str) -> None:
        if not self.cfg.host:
            raise TransportError("SMTP host is not configured (set SMTP_HOST or smtp.host)")
        msg = self._build_message(to, subject, body)
        port = self.cfg.port or (587 if self.cfg.starttls else 25)
        try:
            with smtplib.SMTP(self.cfg.host, port, timeout=SMTP_TIMEOUT_SECONDS) as smtp:
                if self.cfg.starttls:
                    smtp.starttls()
                if self.cfg.user:
                    smtp.login(self.cfg.user, self.cfg.password or "")
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise TransportError(f"failed to send mail to {to} via {self.cfg.host}:{port}: {e}") from e
        logger.debug(f"mail sent to {to} via {self.cfg.host}:{port}")


class ConsoleTransport:
    """Prints the message instead of sending it."""

    def send(self, to: str, subject: str, body: str) -> None:
        print(f"To: {to}")
        print(f"Subject: {subject}")
        print()
        print(body)
