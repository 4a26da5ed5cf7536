from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, validator

from potluck.schemas.common import EventInput, RecordRef, clean_text, require_text
from potluck.schemas.ingredient import IngredientOut


class ItemCreate(EventInput):
    meal_id: int = Field(..., ge=1)
    name: str = Field(..., min_length=1, max_length=200)
    quantity: Optional[str] = Field(None, max_length=50)
    note: Optional[str] = Field(None, max_length=500)
    price: Optional[float] = Field(None, ge=0, le=100000)
    person_id: Optional[int] = Field(None, ge=1)

    @validator("name")
    def validate_name(cls, value: str) -> str:
        return require_text(value, 200)

    @validator("quantity")
    def validate_quantity(cls, value: Optional[str]) -> Optional[str]:
        return clean_text(value, 50)

    @validator("note")
    def validate_note(cls, value: Optional[str]) -> Optional[str]:
        return clean_text(value, 500)


class ItemUpdate(RecordRef):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    quantity: Optional[str] = Field(None, max_length=50)
    note: Optional[str] = Field(None, max_length=500)
    price: Optional[float] = Field(None, ge=0, le=100000)
    person_id: Optional[int] = Field(None, ge=1)

    @validator("name")
    def validate_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return require_text(value, 200)

    @validator("quantity")
    def validate_quantity(cls, value: Optional[str]) -> Optional[str]:
        return clean_text(value, 50)

    @validator("note")
    def validate_note(cls, value: Optional[str]) -> Optional[str]:
        return clean_text(value, 500)


class ItemDelete(RecordRef):
    pass


class ItemAssign(RecordRef):
    person_id: Optional[int] = Field(..., ge=1)


class ItemToggle(RecordRef):
    checked: bool


class ItemReorder(EventInput):
    meal_id: int = Field(..., ge=1)
    item_ids: List[int] = Field(..., min_length=1)

    @validator("item_ids")
    def validate_item_ids(cls, value: List[int]) -> List[int]:
        if len(set(value)) != len(value):
            raise ValueError("Duplicate item ids detected")
        if any(item_id < 1 for item_id in value):
            raise ValueError("Item ids must be positive")
        return value


class ItemMove(EventInput):
    item_id: int = Field(..., ge=1)
    target_meal_id: int = Field(..., ge=1)
    target_order: Optional[int] = Field(None, ge=0)


class ItemOut(BaseModel):
    id: int
    meal_id: int
    name: str
    quantity: Optional[str]
    note: Optional[str]
    price: Optional[float]
    checked: bool
    person_id: Optional[int]
    order: int
    ingredients: List[IngredientOut] = Field(default_factory=list)

    class Config:
        from_attributes = True
