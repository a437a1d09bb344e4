"""Exam Review - Services initialization."""
from exam_review.services.answer import AnswerResult, AnswerService
from exam_review.services.question_catalog import (
    QuestionCatalog,
    QuestionInfo,
    SqlQuestionCatalog,
)
from exam_review.services.review_errors import (
    ReviewError,
    ReviewNotFoundError,
    ReviewPersistenceError,
    ReviewValidationError,
)
from exam_review.services.review_query import ReviewQueryEngine
from exam_review.services.review_repository import (
    ReviewItemRepository,
    ReviewSessionRepository,
)
from exam_review.services.review_scheduler import ReviewScheduler
from exam_review.services.review_session import ReviewSessionTracker

__all__ = [
    "AnswerResult",
    "AnswerService",
    "QuestionCatalog",
    "QuestionInfo",
    "SqlQuestionCatalog",
    "ReviewError",
    "ReviewNotFoundError",
    "ReviewPersistenceError",
    "ReviewValidationError",
    "ReviewQueryEngine",
    "ReviewItemRepository",
    "ReviewSessionRepository",
    "ReviewScheduler",
    "ReviewSessionTracker",
]
