from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from typing import TYPE_CHECKING

from app.core.email import MailTransport
from app.core.errors import DeliveryFailure, StartupConfigurationFailure

if TYPE_CHECKING:
    from app.services.contact_service import RenderedMessage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeliveryResult:
    message_id: str
    elapsed_ms: float


class DeliveryGateway:
    """
    Hands rendered contact messages to the mail transport.

    The visible sender is the visitor's name on the service account address,
    Reply-To points at the visitor. One attempt per message, bounded by
    `timeout_seconds`; any error or timeout surfaces as DeliveryFailure.
    """

    def __init__(
        self,
        transport: MailTransport,
        sender_address: str,
        timeout_seconds: float = 15.0,
    ) -> None:
        self.transport = transport
        self.sender_address = sender_address
        self.timeout_seconds = timeout_seconds

    def build_email_message(self, rendered: RenderedMessage) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = formataddr((rendered.sender_name, self.sender_address))
        msg["Reply-To"] = rendered.reply_to
        msg["To"] = rendered.recipient
        msg["Subject"] = rendered.subject
        msg["Message-ID"] = make_msgid(domain=self.sender_address.rpartition("@")[2] or None)
        msg.set_content(rendered.text_body)
        msg.add_alternative(rendered.html_body, subtype="html")
        return msg

    async def deliver(self, rendered: RenderedMessage) -> DeliveryResult:
        start = time.perf_counter()
        try:
            message = self.build_email_message(rendered)
            await asyncio.wait_for(
                self.transport.send(message), timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError as exc:
            raise DeliveryFailure(
                f"mail transport timed out after {self.timeout_seconds}s"
            ) from exc
        except Exception as exc:
            raise DeliveryFailure(f"mail transport error: {exc}") from exc

        elapsed_ms = (time.perf_counter() - start) * 1000
        return DeliveryResult(message_id=message["Message-ID"], elapsed_ms=elapsed_ms)

    async def verify(self) -> None:
        """One-time startup check; the app must not serve traffic if it fails."""
        try:
            await asyncio.wait_for(self.transport.verify(), timeout=self.timeout_seconds)
        except Exception as exc:
            raise StartupConfigurationFailure(
                f"mail transport verification failed: {exc}"
            ) from exc
        logger.info("Mail transport ready to send email")
