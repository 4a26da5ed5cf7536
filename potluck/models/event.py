from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from potluck.core.db import Base


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True)
    slug = Column(String(100), unique=True, nullable=False, index=True)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    admin_key = Column(String(100), nullable=True)
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    adults = Column(Integer, nullable=False, default=0)
    children = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    owner = relationship("User", back_populates="owned_events")
    days = relationship(
        "Day",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="Day.id",
    )
    people = relationship(
        "Person",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="Person.id",
    )
