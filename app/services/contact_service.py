from __future__ import annotations

import html
import logging
from dataclasses import dataclass
from email import errors as email_errors
from email import policy
from typing import Any, Mapping, Optional

from app.core.email_config import email_config
from app.core.errors import DeliveryFailure, InvalidSubmission
from app.services.delivery_gateway import DeliveryGateway, DeliveryResult

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "email", "message")
HEADER_FIELDS = ("name", "email")


@dataclass(frozen=True)
class ValidatedSubmission:
    """Contact submission that passed validation, with its resolved reason text."""
    name: str
    email: str
    inquiry_reason: str
    reason_text: str
    message: str
    newsletter_signup: bool = False


@dataclass(frozen=True)
class RenderedMessage:
    subject: str
    html_body: str
    text_body: str
    sender_name: str
    reply_to: str
    recipient: str


@dataclass(frozen=True)
class ContactOutcome:
    success: bool
    status_code: int
    message: str


def parse_newsletter_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return False


def _is_parseable_address(value: str) -> bool:
    # The address becomes the Reply-To header; the stdlib parser must accept it.
    try:
        header = policy.default.header_factory("Reply-To", value)
    except (IndexError, ValueError, email_errors.HeaderParseError):
        return False
    return len(header.addresses) == 1


def validate_submission(payload: Mapping[str, Any]) -> ValidatedSubmission:
    """Check required fields and the reason code of a raw submission.

    Raises InvalidSubmission naming the first problem found. Name and email
    end up in mail headers, so line breaks in them are rejected too, as is
    an email the header parser cannot read.
    """
    for field in REQUIRED_FIELDS:
        value = payload.get(field)
        if not isinstance(value, str) or not value.strip():
            raise InvalidSubmission(f"missing field: {field}")

    for field in HEADER_FIELDS:
        if "\r" in payload[field] or "\n" in payload[field]:
            raise InvalidSubmission(f"line break in field: {field}")

    if not _is_parseable_address(payload["email"].strip()):
        raise InvalidSubmission("unparseable email address")

    reason = payload.get("inquiry_reason")
    if not isinstance(reason, str) or reason not in email_config.INQUIRY_REASONS:
        raise InvalidSubmission("unknown inquiry reason")

    return ValidatedSubmission(
        name=payload["name"].strip(),
        email=payload["email"].strip(),
        inquiry_reason=reason,
        reason_text=email_config.INQUIRY_REASONS[reason],
        message=payload["message"],
        newsletter_signup=parse_newsletter_flag(payload.get("newsletter_signup")),
    )


_ROW = (
    '<tr style="border-bottom: 1px solid #eee;">'
    '<td style="padding: 8px; width: 120px;"><strong>{label}:</strong></td>'
    '<td style="padding: 8px;">{value}</td>'
    "</tr>"
)

_NEWSLETTER_ROW = (
    '<tr style="background-color: #eaf7e9; border-bottom: 1px solid #eee;">'
    '<td style="padding: 8px; width: 120px;"><strong>Newsletter:</strong></td>'
    '<td style="padding: 8px;">&#9989; <strong>{notice}</strong></td>'
    "</tr>"
)

_HR = '<hr style="border: 0; border-top: 1px solid #eee; margin: 20px 0;">'


def build_email_html(submission: ValidatedSubmission) -> str:
    """HTML body for the recipient. Every user supplied value is escaped."""
    name = html.escape(submission.name)
    email = html.escape(submission.email)
    reason = html.escape(submission.reason_text)
    message = html.escape(submission.message)

    rows = [
        _ROW.format(label="Nome", value=name),
        _ROW.format(label="Email", value=email),
        _ROW.format(label="Motivo", value=f"<strong>{reason}</strong>"),
    ]
    if submission.newsletter_signup:
        rows.append(_NEWSLETTER_ROW.format(notice=html.escape(email_config.NEWSLETTER_NOTICE)))

    return "\n".join(
        [
            '<div style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">',
            f'<h2 style="color: #1b263b;">{html.escape(email_config.HEADING)}</h2>',
            '<table style="width: 100%; border-collapse: collapse;">',
            *rows,
            "</table>",
            _HR,
            "<p><strong>Messaggio:</strong></p>",
            '<div style="background-color: #f9f9f9; padding: 15px; '
            f'border-radius: 5px; white-space: pre-wrap;">{message}</div>',
            _HR,
            f"<p><small>Email inviata da {email} attraverso il form di contatto.</small></p>",
            "</div>",
        ]
    )


def build_email_text(submission: ValidatedSubmission) -> str:
    lines = [
        email_config.HEADING,
        "",
        f"Nome: {submission.name}",
        f"Email: {submission.email}",
        f"Motivo: {submission.reason_text}",
    ]
    if submission.newsletter_signup:
        lines.append(f"Newsletter: {email_config.NEWSLETTER_NOTICE}")
    lines += [
        "",
        "Messaggio:",
        submission.message,
        "",
        f"Email inviata da {submission.email} attraverso il form di contatto.",
    ]
    return "\n".join(lines)


def render_message(
    submission: ValidatedSubmission, recipient: str, subject_prefix: str
) -> RenderedMessage:
    subject = email_config.SUBJECT_TEMPLATE.format(
        prefix=subject_prefix,
        reason=submission.reason_text,
        name=submission.name,
    )
    return RenderedMessage(
        subject=subject.strip(),
        html_body=build_email_html(submission),
        text_body=build_email_text(submission),
        sender_name=submission.name,
        reply_to=submission.email,
        recipient=recipient,
    )


class ContactService:
    """Validates, renders and delivers one contact submission per call."""

    def __init__(
        self,
        gateway: DeliveryGateway,
        recipient: str,
        subject_prefix: str = "[Sito SOEK]",
    ) -> None:
        self.gateway = gateway
        self.recipient = recipient
        self.subject_prefix = subject_prefix

    async def submit(self, payload: Mapping[str, Any]) -> ContactOutcome:
        try:
            submission = validate_submission(payload)
        except InvalidSubmission as exc:
            logger.info("Contact submission rejected: %s", exc.reason)
            return ContactOutcome(False, 400, email_config.MESSAGE_INVALID)

        if submission.newsletter_signup:
            # Opt-in is only recorded; there is no mailing list integration
            logger.info(
                "NEWSLETTER SIGNUP requested by %s",
                submission.email,
                extra={"log_event": "newsletter_signup_requested"},
            )

        result: Optional[DeliveryResult] = None
        try:
            rendered = render_message(submission, self.recipient, self.subject_prefix)
            result = await self.gateway.deliver(rendered)
        except DeliveryFailure as exc:
            logger.error(
                "Contact delivery failed reason=%s error=%s",
                submission.inquiry_reason,
                exc.__cause__ or exc,
                extra={"log_event": "contact_delivery_failed"},
            )
        except Exception as exc:
            logger.exception(
                "Contact pipeline crashed reason=%s error=%s",
                submission.inquiry_reason,
                exc,
                extra={"log_event": "contact_delivery_failed"},
            )

        if result is None:
            return ContactOutcome(False, 500, email_config.MESSAGE_DELIVERY_FAILED)

        logger.info(
            "Contact email sent from %s (reason=%s, elapsed_ms=%.1f)",
            submission.email,
            submission.reason_text,
            result.elapsed_ms,
            extra={"log_event": "contact_delivered"},
        )
        return ContactOutcome(True, 200, email_config.MESSAGE_SENT)
