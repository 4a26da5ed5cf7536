from __future__ import annotations

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from potluck.core.db import Base


class Ingredient(Base):
    __tablename__ = "ingredients"

    id = Column(Integer, primary_key=True)
    item_id = Column(Integer, ForeignKey("items.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    quantity = Column(String(50), nullable=True)
    checked = Column(Boolean, nullable=False, default=False)
    order = Column("order_index", Integer, nullable=False, default=0)

    item = relationship("Item", back_populates="ingredients")
