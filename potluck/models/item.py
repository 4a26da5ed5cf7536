from __future__ import annotations

from sqlalchemy import Boolean, Column, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from potluck.core.db import Base


class Item(Base):
    __tablename__ = "items"

    id = Column(Integer, primary_key=True)
    meal_id = Column(Integer, ForeignKey("meals.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    quantity = Column(String(50), nullable=True)
    note = Column(Text, nullable=True)
    price = Column(Float, nullable=True)
    checked = Column(Boolean, nullable=False, default=False)
    person_id = Column(Integer, ForeignKey("people.id", ondelete="SET NULL"), nullable=True, index=True)
    order = Column("order_index", Integer, nullable=False, default=0)

    meal = relationship("Meal", back_populates="items")
    person = relationship("Person", back_populates="items")
    ingredients = relationship(
        "Ingredient",
        back_populates="item",
        cascade="all, delete-orphan",
        order_by="Ingredient.id",
    )
