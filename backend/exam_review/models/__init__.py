"""Exam Review - Models initialization."""
from exam_review.models.question import Answer, Category, Question
from exam_review.models.review import ReviewItem, ReviewSession


__all__ = [
    # Question bank models
    "Category",
    "Question",
    "Answer",
    # Review models
    "ReviewItem",
    "ReviewSession",
]
