from __future__ import annotations

from datetime import date as date_type
from typing import List, Optional

from pydantic import BaseModel, Field, validator

from potluck.schemas.common import EventInput, RecordRef, clean_text
from potluck.schemas.meal import MealOut


class DayCreate(EventInput):
    date: date_type
    title: Optional[str] = Field(None, max_length=200)

    @validator("title")
    def validate_title(cls, value: Optional[str]) -> Optional[str]:
        return clean_text(value, 200)


class DayUpdate(RecordRef):
    date: Optional[date_type] = None
    title: Optional[str] = Field(None, max_length=200)

    @validator("title")
    def validate_title(cls, value: Optional[str]) -> Optional[str]:
        return clean_text(value, 200)


class DayDelete(RecordRef):
    pass


class DayOut(BaseModel):
    id: int
    event_id: int
    date: date_type
    title: Optional[str]
    order: int
    meals: List[MealOut] = Field(default_factory=list)

    class Config:
        from_attributes = True
