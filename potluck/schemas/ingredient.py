from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, validator

from potluck.schemas.common import EventInput, RecordRef, clean_text, require_text


class IngredientCreate(EventInput):
    item_id: int = Field(..., ge=1)
    name: str = Field(..., min_length=1, max_length=100)
    quantity: Optional[str] = Field(None, max_length=50)

    @validator("name")
    def validate_name(cls, value: str) -> str:
        return require_text(value, 100)

    @validator("quantity")
    def validate_quantity(cls, value: Optional[str]) -> Optional[str]:
        return clean_text(value, 50)


class IngredientUpdate(RecordRef):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    quantity: Optional[str] = Field(None, max_length=50)
    checked: Optional[bool] = None

    @validator("name")
    def validate_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return require_text(value, 100)

    @validator("quantity")
    def validate_quantity(cls, value: Optional[str]) -> Optional[str]:
        return clean_text(value, 50)


class IngredientDelete(RecordRef):
    pass


class IngredientClear(EventInput):
    item_id: int = Field(..., ge=1)


class IngredientOut(BaseModel):
    id: int
    item_id: int
    name: str
    quantity: Optional[str]
    checked: bool
    order: int

    class Config:
        from_attributes = True
