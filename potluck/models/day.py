from __future__ import annotations

from sqlalchemy import Column, Date, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from potluck.core.db import Base


class Day(Base):
    __tablename__ = "days"

    id = Column(Integer, primary_key=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    title = Column(String(200), nullable=True)
    order = Column("order_index", Integer, nullable=False, default=0)

    event = relationship("Event", back_populates="days")
    meals = relationship(
        "Meal",
        back_populates="day",
        cascade="all, delete-orphan",
        order_by="Meal.id",
    )
