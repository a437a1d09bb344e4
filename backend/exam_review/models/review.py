"""
Exam Review - Review Models
SQLAlchemy models for spaced-repetition review items and timed review sessions
"""
import uuid
from datetime import datetime

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from exam_review.core.database import Base, UTCDateTime, utcnow


def _new_id() -> str:
    return str(uuid.uuid4())


class ReviewItem(Base):
    """
    Review state for a question that was answered incorrectly.
    
    One row per question; retired items (mastery 5) stay in the table with
    is_active=False so statistics keep their history.
    """
    
    __tablename__ = "review_items"
    
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    question_id: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    
    # Scheduler state
    mastery_level: Mapped[int] = mapped_column(Integer, default=0)  # 0 to 5
    review_count: Mapped[int] = mapped_column(Integer, default=0)
    last_reviewed: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    next_review: Mapped[datetime] = mapped_column(UTCDateTime, index=True)
    wrong_count: Mapped[int] = mapped_column(Integer, default=1)
    correct_streak: Mapped[int] = mapped_column(Integer, default=0)
    priority: Mapped[int] = mapped_column(Integer, default=1)  # 1 to 5
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    
    # Timestamps
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, onupdate=utcnow)
    
    def __repr__(self) -> str:
        return (
            f"<ReviewItem question={self.question_id} level={self.mastery_level} "
            f"priority={self.priority} active={self.is_active}>"
        )


class ReviewSession(Base):
    """A timed batch of review practice."""
    
    __tablename__ = "review_sessions"
    
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    device_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True)  # seconds
    total_items: Mapped[int] = mapped_column(Integer, default=0)
    correct_items: Mapped[int] = mapped_column(Integer, default=0)
    
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, index=True)
    
    @property
    def accuracy(self) -> float:
        if self.total_items == 0:
            return 0.0
        return self.correct_items / self.total_items
