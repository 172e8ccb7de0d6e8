"""
Contact form relay.

Public endpoint receiving the website contact form and relaying it by email
to the SOEK inbox.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.schemas.contact import ContactRequest, ContactResponse
from app.services.contact_service import ContactService

logger = logging.getLogger(__name__)

router = APIRouter()


def get_contact_service(request: Request) -> ContactService:
    """Return the contact service bound to the gateway built at startup."""
    return ContactService(
        gateway=request.app.state.delivery_gateway,
        recipient=settings.SOEK_EMAIL,
        subject_prefix=settings.SUBJECT_PREFIX,
    )


@router.post(
    "/send-email",
    response_model=ContactResponse,
    responses={
        400: {"model": ContactResponse, "description": "Invalid submission"},
        500: {"model": ContactResponse, "description": "Delivery failed"},
    },
    summary="Send a contact message",
    description="Validates the contact form and relays it by email to the SOEK inbox.",
)
async def send_email(
    payload: ContactRequest,
    service: ContactService = Depends(get_contact_service),
) -> JSONResponse:
    outcome = await service.submit(payload.model_dump())
    return JSONResponse(
        status_code=outcome.status_code,
        content=ContactResponse(
            success=outcome.success, message=outcome.message
        ).model_dump(),
    )
