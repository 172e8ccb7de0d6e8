from __future__ import annotations

import asyncio
import logging
import smtplib
import ssl
from email.message import EmailMessage
from typing import Optional, Protocol

from app.core.config import Settings

logger = logging.getLogger(__name__)


class MailTransport(Protocol):
    """Sends structured messages; built once at startup and shared by requests."""

    async def send(self, message: EmailMessage) -> None:
        ...

    async def verify(self) -> None:
        ...


class SMTPTransport:
    """
    STARTTLS SMTP transport authenticated with the service account.

    smtplib is blocking, so every call runs in a worker thread and opens its
    own connection; the instance itself only holds immutable settings and is
    safe to share across concurrent requests.
    """

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        timeout: float = 15.0,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self._password = password
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "SMTPTransport":
        host, port = settings.smtp_endpoint
        return cls(
            host=host,
            port=port,
            username=settings.EMAIL_USER,
            password=settings.EMAIL_PASSWORD.get_secret_value(),
            timeout=settings.MAIL_TIMEOUT_SECONDS,
        )

    def _connect(self) -> smtplib.SMTP:
        server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        try:
            server.starttls(context=ssl.create_default_context())
            server.login(self.username, self._password)
        except Exception:
            server.close()
            raise
        return server

    def _send_sync(self, message: EmailMessage) -> None:
        with self._connect() as server:
            server.send_message(message)

    def _verify_sync(self) -> None:
        with self._connect() as server:
            code, _ = server.noop()
            if code != 250:
                raise smtplib.SMTPResponseException(code, b"NOOP rejected")

    async def send(self, message: EmailMessage) -> None:
        await asyncio.to_thread(self._send_sync, message)

    async def verify(self) -> None:
        await asyncio.to_thread(self._verify_sync)
        logger.info("SMTP transport verified host=%s port=%s", self.host, self.port)


def build_transport(settings: Settings) -> Optional[SMTPTransport]:
    """Return the SMTP transport for the current settings, or None when incomplete."""
    if settings.missing_mail_settings():
        return None
    return SMTPTransport.from_settings(settings)
