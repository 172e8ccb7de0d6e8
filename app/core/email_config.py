"""
=============================================================================
SOEK CONTACT RELAY - CONTACT FORM CATALOGUE
=============================================================================

Fixed texts of the contact pipeline: the inquiry reason codes offered by the
website form and the messages returned to the visitor.
To add a reason or change a label, modify ONLY this file.
=============================================================================
"""

from types import MappingProxyType
from typing import Mapping


class EmailConfig:
    """
    Static configuration shared by the validator, the renderer and the API.

    Usage:
        from app.core.email_config import email_config

        reason_text = email_config.INQUIRY_REASONS["booking"]
    """

    # =========================================================================
    # INQUIRY REASONS
    # =========================================================================

    # Reason code sent by the form -> label shown in the email
    INQUIRY_REASONS: Mapping[str, str] = MappingProxyType(
        {
            "booking": "Booking & Collaborations",
            "licensing": "Music Licensing",
            "press": "Press & Media",
            "feedback": "Feedback & Questions",
            "other": "Other",
        }
    )

    # =========================================================================
    # RESPONSE MESSAGES (shown to the visitor)
    # =========================================================================

    MESSAGE_SENT: str = "Thank you! Your message has been sent."
    MESSAGE_INVALID: str = "Please fill in all required fields."
    MESSAGE_DELIVERY_FAILED: str = "Oops! There was a problem sending your message."
    MESSAGE_ORIGIN_REJECTED: str = "Not allowed by CORS"

    # =========================================================================
    # EMAIL TEMPLATE (shown to the recipient)
    # =========================================================================

    SUBJECT_TEMPLATE: str = "{prefix} Nuovo Messaggio: {reason} da {name}"
    HEADING: str = "Nuovo Contatto dal Sito Web di SOEK"
    NEWSLETTER_NOTICE: str = "Sì, vuole iscriversi!"


# Singleton instance - import this in your code
email_config = EmailConfig()
