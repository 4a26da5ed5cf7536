from __future__ import annotations

import uuid

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from potluck.core.db import Base

RSVP_STATUSES = ("confirmed", "declined", "maybe")


def new_guest_token() -> str:
    return uuid.uuid4().hex


class Person(Base):
    __tablename__ = "people"

    id = Column(Integer, primary_key=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(50), nullable=False)
    emoji = Column(String(16), nullable=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    token = Column(String(64), unique=True, nullable=False, default=new_guest_token)
    status = Column(String(20), nullable=True)
    guest_adults = Column(Integer, nullable=False, default=0)
    guest_children = Column(Integer, nullable=False, default=0)

    event = relationship("Event", back_populates="people")
    user = relationship("User", back_populates="people")
    items = relationship("Item", back_populates="person")
