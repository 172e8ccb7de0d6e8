"""
=============================================================================
SOEK CONTACT RELAY - ERROR HANDLING MODULE
=============================================================================
Error taxonomy of the contact pipeline and the global exception handlers
that turn it into the `{success, message}` response contract.

Features:
- InvalidSubmission -> 400, DeliveryFailure -> 500
- Malformed request bodies are reported as 400, like any invalid submission
- Catches unhandled exceptions, logs the traceback server-side and returns
  a generic message so transport internals never reach the caller

Usage:
    # In main.py
    from app.core.errors import register_exception_handlers
    register_exception_handlers(app)
=============================================================================
"""

import logging
import traceback

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.email_config import email_config

logger = logging.getLogger(__name__)


class ContactRelayError(Exception):
    """Base class for every error raised by the contact pipeline."""


class InvalidSubmission(ContactRelayError):
    """Client data is incomplete or uses an unrecognized reason code."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class DeliveryFailure(ContactRelayError):
    """The mail transport could not deliver the message (auth, network, quota, timeout)."""


class StartupConfigurationFailure(ContactRelayError):
    """Mail settings are incomplete or the transport failed its startup verification."""


def contact_response(status_code: int, success: bool, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": success, "message": message},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the FastAPI app."""

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.info(
            "Rejected malformed request on %s %s: %s error(s)",
            request.method,
            request.url.path,
            len(exc.errors()),
        )
        return contact_response(
            status.HTTP_400_BAD_REQUEST, False, email_config.MESSAGE_INVALID
        )

    @app.exception_handler(InvalidSubmission)
    async def invalid_submission_handler(request: Request, exc: InvalidSubmission):
        return contact_response(
            status.HTTP_400_BAD_REQUEST, False, email_config.MESSAGE_INVALID
        )

    @app.exception_handler(DeliveryFailure)
    async def delivery_failure_handler(request: Request, exc: DeliveryFailure):
        logger.error("Delivery failed on %s: %s", request.url.path, exc)
        return contact_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            False,
            email_config.MESSAGE_DELIVERY_FAILED,
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all handler for unhandled exceptions.

        - Logs the full traceback for debugging
        - Returns the generic apology to prevent info leakage
        - In debug mode, includes the error type
        """
        logger.error(
            f"Unhandled exception on {request.method} {request.url.path}:\n"
            f"{traceback.format_exc()}"
        )

        content = {
            "success": False,
            "message": email_config.MESSAGE_DELIVERY_FAILED,
        }
        if settings.DEBUG:
            content["error_type"] = type(exc).__name__
        return JSONResponse(status_code=500, content=content)
