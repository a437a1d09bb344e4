"""
Exam Review - API Dependencies
FastAPI dependencies wiring database sessions into review services
"""
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from exam_review.core.database import get_db
from exam_review.services.answer import AnswerService
from exam_review.services.question_catalog import SqlQuestionCatalog
from exam_review.services.review_query import ReviewQueryEngine
from exam_review.services.review_repository import (
    ReviewItemRepository,
    ReviewSessionRepository,
)
from exam_review.services.review_scheduler import ReviewScheduler
from exam_review.services.review_session import ReviewSessionTracker


DbSession = Annotated[AsyncSession, Depends(get_db)]


def get_review_scheduler(db: DbSession) -> ReviewScheduler:
    return ReviewScheduler(ReviewItemRepository(db))


def get_answer_service(
    db: DbSession,
    scheduler: Annotated[ReviewScheduler, Depends(get_review_scheduler)],
) -> AnswerService:
    return AnswerService(db, scheduler)


def get_question_catalog(db: DbSession) -> SqlQuestionCatalog:
    return SqlQuestionCatalog(db)


def get_review_query_engine(
    db: DbSession,
    catalog: Annotated[SqlQuestionCatalog, Depends(get_question_catalog)],
) -> ReviewQueryEngine:
    return ReviewQueryEngine(
        ReviewItemRepository(db),
        ReviewSessionRepository(db),
        catalog,
    )


def get_session_tracker(db: DbSession) -> ReviewSessionTracker:
    return ReviewSessionTracker(ReviewSessionRepository(db))


# Type aliases for common dependencies
Answers = Annotated[AnswerService, Depends(get_answer_service)]
Catalog = Annotated[SqlQuestionCatalog, Depends(get_question_catalog)]
QueryEngine = Annotated[ReviewQueryEngine, Depends(get_review_query_engine)]
SessionTracker = Annotated[ReviewSessionTracker, Depends(get_session_tracker)]
