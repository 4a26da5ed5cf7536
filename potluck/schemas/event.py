from __future__ import annotations

from datetime import date as date_type, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, validator

from potluck.schemas.common import MAX_COUNT, EventInput, clean_text, require_text
from potluck.schemas.day import DayOut
from potluck.schemas.person import PersonOut
from potluck.services.sanitize import sanitize_key, sanitize_slug

CreationMode = Literal["total", "classique", "apero", "zero"]


class EventCreate(BaseModel):
    slug: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    key: Optional[str] = Field(None, max_length=100)
    creation_mode: Optional[CreationMode] = None
    date: Optional[date_type] = None
    adults: int = Field(0, ge=0, le=MAX_COUNT)
    children: int = Field(0, ge=0, le=MAX_COUNT)

    @validator("slug")
    def validate_slug(cls, value: str) -> str:
        slug = sanitize_slug(value, 100)
        if not slug:
            raise ValueError("Invalid event slug")
        return slug

    @validator("name")
    def validate_name(cls, value: str) -> str:
        return require_text(value, 100)

    @validator("description")
    def validate_description(cls, value: Optional[str]) -> Optional[str]:
        return clean_text(value, 500)

    @validator("key")
    def validate_key(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return sanitize_key(value, 100) or None


class EventUpdate(EventInput):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    adults: Optional[int] = Field(None, ge=0, le=MAX_COUNT)
    children: Optional[int] = Field(None, ge=0, le=MAX_COUNT)
    admin_key: Optional[str] = Field(None, min_length=4, max_length=100)

    @validator("name")
    def validate_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return require_text(value, 100)

    @validator("description")
    def validate_description(cls, value: Optional[str]) -> Optional[str]:
        return clean_text(value, 500)

    @validator("admin_key")
    def validate_admin_key(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        cleaned = sanitize_key(value, 100)
        if len(cleaned) < 4:
            raise ValueError("Admin key must be at least 4 characters (letters, digits, - or _)")
        return cleaned


class EventDelete(EventInput):
    pass


class EventOut(BaseModel):
    id: int
    slug: str
    name: str
    description: Optional[str]
    owner_id: Optional[int]
    adults: int
    children: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class EventCreated(EventOut):
    admin_key: str


class EventTree(EventOut):
    days: List[DayOut] = Field(default_factory=list)
    people: List[PersonOut] = Field(default_factory=list)
    revision: int = 0


class AccessOut(BaseModel):
    can_write: bool
    context: str
    person_id: Optional[int] = None
    reason: Optional[str] = None
