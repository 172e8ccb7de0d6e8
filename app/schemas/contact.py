from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class ContactRequest(BaseModel):
    """Raw contact form body; presence and emptiness are checked by the validator."""

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    email: Optional[str] = None
    inquiry_reason: Optional[str] = None
    message: Optional[str] = None
    # Left untyped so numbers are not coerced to booleans before parse_newsletter_flag
    newsletter_signup: Any = None


class ContactResponse(BaseModel):
    success: bool
    message: str
