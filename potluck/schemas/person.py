from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, validator

from potluck.schemas.common import MAX_COUNT, EventInput, RecordRef, require_name
from potluck.services.sanitize import sanitize_emoji

RsvpStatus = Literal["confirmed", "declined", "maybe"]


def _clean_emoji(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return sanitize_emoji(value) or None


class PersonCreate(EventInput):
    name: str = Field(..., min_length=1, max_length=50)
    emoji: Optional[str] = Field(None, max_length=16)

    @validator("name")
    def validate_name(cls, value: str) -> str:
        return require_name(value, 50)

    @validator("emoji")
    def validate_emoji(cls, value: Optional[str]) -> Optional[str]:
        return _clean_emoji(value)


class PersonUpdate(RecordRef):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    emoji: Optional[str] = Field(None, max_length=16)

    @validator("name")
    def validate_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return require_name(value, 50)

    @validator("emoji")
    def validate_emoji(cls, value: Optional[str]) -> Optional[str]:
        return _clean_emoji(value)


class PersonDelete(RecordRef):
    pass


class PersonRsvp(RecordRef):
    status: Optional[RsvpStatus] = None
    guest_adults: Optional[int] = Field(None, ge=0, le=MAX_COUNT)
    guest_children: Optional[int] = Field(None, ge=0, le=MAX_COUNT)


class PersonClaim(EventInput):
    person_id: int = Field(..., ge=1)


class PersonOut(BaseModel):
    id: int
    event_id: int
    name: str
    emoji: Optional[str]
    user_id: Optional[int]
    status: Optional[str]
    guest_adults: int
    guest_children: int

    class Config:
        from_attributes = True


class PersonCreated(PersonOut):
    token: str
