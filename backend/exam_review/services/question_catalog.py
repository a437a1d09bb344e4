"""
Exam Review - Question Catalog
Read-only lookups into the question bank for labelling review items
"""
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from exam_review.models.question import Question
from exam_review.services.review_repository import persistence_errors


@dataclass
class QuestionInfo:
    """What the review layer needs to know about a question."""
    question_id: str
    content: str
    category_id: str | None
    category_name: str | None


class QuestionCatalog(Protocol):
    """Lookup of question data by id."""
    
    async def describe(self, question_ids: Iterable[str]) -> dict[str, QuestionInfo]:
        ...


class SqlQuestionCatalog:
    """QuestionCatalog backed by the questions/categories tables."""
    
    def __init__(self, db: AsyncSession):
        self.db = db
    
    async def describe(self, question_ids: Iterable[str]) -> dict[str, QuestionInfo]:
        ids = list(dict.fromkeys(question_ids))
        if not ids:
            return {}
        
        with persistence_errors("load questions"):
            result = await self.db.execute(
                select(Question)
                .where(Question.id.in_(ids))
                .options(selectinload(Question.category))
            )
            questions = result.scalars().all()
        
        return {
            q.id: QuestionInfo(
                question_id=q.id,
                content=q.content,
                category_id=q.category_id,
                category_name=q.category.name if q.category else None,
            )
            for q in questions
        }
