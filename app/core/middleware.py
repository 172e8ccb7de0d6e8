import logging
import uuid
from typing import Iterable

import structlog
from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.email_config import email_config

logger = logging.getLogger("contact_relay.requests")


class OriginAllowListMiddleware(BaseHTTPMiddleware):
    """
    Rejects browser requests coming from origins outside the allow-list.

    CORSMiddleware only withholds the CORS response headers, the request
    itself still reaches the route. Requests without an Origin header
    (curl, server-to-server, same-origin GETs) are let through.
    """

    def __init__(self, app, allowed_origins: Iterable[str]):
        super().__init__(app)
        self.allowed_origins = frozenset(allowed_origins)

    async def dispatch(self, request: Request, call_next):
        origin = request.headers.get("Origin")
        if origin and origin.rstrip("/") not in self.allowed_origins:
            logger.warning(
                "ORIGIN_REJECTED | origin=%s | method=%s | path=%s",
                origin,
                request.method,
                request.url.path,
            )
            return JSONResponse(
                status_code=status.HTTP_403_FORBIDDEN,
                content={
                    "success": False,
                    "message": email_config.MESSAGE_ORIGIN_REJECTED,
                },
            )
        return await call_next(request)


class RequestIdMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add X-Request-ID header for distributed tracing.

    If the client sends X-Request-ID, it is preserved.
    Otherwise, a new UUID is generated.

    The request ID is:
    - Available in request.state.request_id for logging
    - Bound to the structlog context so every log line of the request has it
    - Returned in response headers for client correlation
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)
        try:
            logger.info(
                f"REQUEST | method={request.method} | path={request.url.path}"
            )
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")

        response.headers["X-Request-ID"] = request_id
        return response
