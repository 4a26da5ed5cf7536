from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, validator

from potluck.services.sanitize import sanitize_slug, sanitize_strict_text, sanitize_text

MAX_COUNT = 1000


def clean_text(value: Optional[str], max_length: int) -> Optional[str]:
    if value is None:
        return None
    return sanitize_text(value, max_length) or None


def require_text(value: str, max_length: int) -> str:
    cleaned = sanitize_text(value, max_length)
    if not cleaned:
        raise ValueError("Must not be empty")
    return cleaned


def require_name(value: str, max_length: int) -> str:
    cleaned = sanitize_strict_text(value, max_length)
    if not cleaned:
        raise ValueError("Must contain letters or digits")
    return cleaned


class EventInput(BaseModel):
    """Fields every mutation carries: the target event and the caller's capabilities."""

    slug: str = Field(..., min_length=1, max_length=100)
    key: Optional[str] = Field(None, max_length=100)
    token: Optional[str] = Field(None, max_length=64)

    @validator("slug")
    def validate_slug(cls, value: str) -> str:
        slug = sanitize_slug(value, 100)
        if not slug:
            raise ValueError("Invalid event slug")
        return slug

    # Presented credentials are compared as sent, never cleaned up first.
    @validator("key", "token")
    def blank_as_missing(cls, value: Optional[str]) -> Optional[str]:
        return value or None


class RecordRef(EventInput):
    id: int = Field(..., ge=1)
