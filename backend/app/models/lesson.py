# backend/app/models/lesson.py
"""
Lesson catalog model.

A lesson is a bookable offering with a finite, mutable number of spaces.
The store owns the non-negativity invariant on ``spaces`` through a CHECK
constraint; callers never clamp.
"""

from __future__ import annotations

from sqlalchemy import CheckConstraint, Column, DateTime, Float, Integer, String, Text, func
import ulid

from ..core.constants import MAX_LOCATION_LENGTH, MAX_SUBJECT_LENGTH
from ..database import Base


class Lesson(Base):
    """
    Model representing a catalog entry.

    Attributes:
        id: ULID primary key assigned at creation
        subject: Subject taught (e.g., "Math")
        location: Where the lesson takes place
        description: Free-text description
        price: Price per space, non-negative
        spaces: Remaining capacity, non-negative
        image: Optional image filename served under /images
        version: Incremented on every spaces change
    """

    __tablename__ = "lessons"
    __table_args__ = (
        CheckConstraint("spaces >= 0", name="ck_lessons_spaces_non_negative"),
        CheckConstraint("price >= 0", name="ck_lessons_price_non_negative"),
    )

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    subject = Column(String(MAX_SUBJECT_LENGTH), nullable=False, index=True)
    location = Column(String(MAX_LOCATION_LENGTH), nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    price = Column(Float, nullable=False, default=0)
    spaces = Column(Integer, nullable=False, default=0)
    image = Column(String(255), nullable=True)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<Lesson {self.subject} @ {self.location} spaces={self.spaces}>"
