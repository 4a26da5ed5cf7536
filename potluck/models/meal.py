from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from potluck.core.db import Base


class Meal(Base):
    __tablename__ = "meals"

    id = Column(Integer, primary_key=True)
    day_id = Column(Integer, ForeignKey("days.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    time = Column(String(20), nullable=True)
    address = Column(Text, nullable=True)
    adults = Column(Integer, nullable=False, default=0)
    children = Column(Integer, nullable=False, default=0)
    order = Column("order_index", Integer, nullable=False, default=0)

    day = relationship("Day", back_populates="meals")
    items = relationship(
        "Item",
        back_populates="meal",
        cascade="all, delete-orphan",
        order_by="Item.id",
    )
