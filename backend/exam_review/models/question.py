"""
Exam Review - Question Models
Read-only projection of the question bank (categories, questions) and the
answer history written by the answer flows
"""
import uuid
from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from exam_review.core.database import Base, UTCDateTime, utcnow


class Category(Base):
    """Question category (owned by the question bank)."""
    
    __tablename__ = "categories"
    
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    
    questions: Mapped[list["Question"]] = relationship("Question", back_populates="category")


class Question(Base):
    """Question (owned by the question bank)."""
    
    __tablename__ = "questions"
    
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    category_id: Mapped[str | None] = mapped_column(
        String(64),
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    content: Mapped[str] = mapped_column(Text)
    
    category: Mapped["Category | None"] = relationship("Category", back_populates="questions")


class Answer(Base):
    """One recorded answer to a question."""
    
    __tablename__ = "answers"
    
    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    question_id: Mapped[str] = mapped_column(String(64), index=True)
    is_correct: Mapped[bool] = mapped_column(Boolean)
    time_spent: Mapped[int | None] = mapped_column(Integer, nullable=True)  # seconds
    device_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
