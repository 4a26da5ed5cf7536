from __future__ import annotations

import re
from typing import List, Optional

from pydantic import BaseModel, Field, validator

from potluck.schemas.common import MAX_COUNT, EventInput, RecordRef, clean_text, require_text
from potluck.schemas.item import ItemOut

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _validate_time(value: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return None
    if not TIME_PATTERN.match(value):
        raise ValueError("Time must use HH:MM")
    return value


class MealCreate(EventInput):
    day_id: int = Field(..., ge=1)
    title: str = Field(..., min_length=1, max_length=200)
    time: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = Field(None, max_length=500)
    adults: int = Field(0, ge=0, le=MAX_COUNT)
    children: int = Field(0, ge=0, le=MAX_COUNT)

    @validator("title")
    def validate_title(cls, value: str) -> str:
        return require_text(value, 200)

    @validator("time")
    def validate_time(cls, value: Optional[str]) -> Optional[str]:
        return _validate_time(value)

    @validator("address")
    def validate_address(cls, value: Optional[str]) -> Optional[str]:
        return clean_text(value, 500)


class MealUpdate(RecordRef):
    day_id: Optional[int] = Field(None, ge=1)
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    time: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = Field(None, max_length=500)
    adults: Optional[int] = Field(None, ge=0, le=MAX_COUNT)
    children: Optional[int] = Field(None, ge=0, le=MAX_COUNT)

    @validator("title")
    def validate_title(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return require_text(value, 200)

    @validator("time")
    def validate_time(cls, value: Optional[str]) -> Optional[str]:
        return _validate_time(value)

    @validator("address")
    def validate_address(cls, value: Optional[str]) -> Optional[str]:
        return clean_text(value, 500)


class MealDelete(RecordRef):
    pass


class MealReorder(EventInput):
    day_id: int = Field(..., ge=1)
    meal_ids: List[int] = Field(..., min_length=1)

    @validator("meal_ids")
    def validate_meal_ids(cls, value: List[int]) -> List[int]:
        if len(set(value)) != len(value):
            raise ValueError("Duplicate meal ids detected")
        if any(meal_id < 1 for meal_id in value):
            raise ValueError("Meal ids must be positive")
        return value


class MealOut(BaseModel):
    id: int
    day_id: int
    title: str
    time: Optional[str]
    address: Optional[str]
    adults: int
    children: int
    order: int
    items: List[ItemOut] = Field(default_factory=list)

    class Config:
        from_attributes = True
