"""
SOEK Contact Relay Services Module.

Services:
    - ContactService: validates, renders and relays contact submissions
    - DeliveryGateway: hands rendered messages to the mail transport
"""

from .contact_service import (
    ContactOutcome,
    ContactService,
    RenderedMessage,
    ValidatedSubmission,
    render_message,
    validate_submission,
)
from .delivery_gateway import DeliveryGateway, DeliveryResult

__all__ = [
    "ContactOutcome",
    "ContactService",
    "DeliveryGateway",
    "DeliveryResult",
    "RenderedMessage",
    "ValidatedSubmission",
    "render_message",
    "validate_submission",
]
