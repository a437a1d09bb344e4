"""
Exam Review - Review Repositories
Data access for review items and review sessions.

All SQLAlchemy failures are re-raised as ReviewPersistenceError so callers can
apply their own error policy without knowing about the driver.
"""
import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import datetime
from typing import Any

from sqlalchemy import ColumnElement, func, insert, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from exam_review.models.review import ReviewItem, ReviewSession
from exam_review.services.review_errors import ReviewPersistenceError

logger = logging.getLogger(__name__)


@contextmanager
def persistence_errors(action: str) -> Iterator[None]:
    """Translate driver errors raised inside the block."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error("Review store failed to %s: %s", action, e)
        raise ReviewPersistenceError(f"Failed to {action}") from e


class ReviewItemRepository:
    """Review items keyed by question id."""
    
    def __init__(self, db: AsyncSession):
        self.db = db
    
    async def get(self, question_id: str) -> ReviewItem | None:
        with persistence_errors("load review item"):
            result = await self.db.execute(
                select(ReviewItem).where(ReviewItem.question_id == question_id)
            )
            return result.scalar_one_or_none()
    
    def _insert_ignoring_duplicates(self, values: dict[str, Any]):
        """Dialect upsert that skips existing rows, or None where there is none."""
        table = ReviewItem.__table__
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            return pg_insert(table).values(**values).on_conflict_do_nothing(
                index_elements=[table.c.question_id]
            )
        if dialect == "sqlite":
            return sqlite_insert(table).values(**values).on_conflict_do_nothing(
                index_elements=[table.c.question_id]
            )
        return None
    
    async def create_if_absent(self, question_id: str, values: dict[str, Any]) -> bool:
        """
        Insert a review item unless one already exists for the question.
        
        Returns:
            True if this call created the row, False if it was already there
        """
        values = {"question_id": question_id, **values}
        with persistence_errors("create review item"):
            statement = self._insert_ignoring_duplicates(values)
            if statement is not None:
                result = await self.db.execute(statement)
                return result.rowcount == 1
            # No portable upsert; let the unique index reject the duplicate
            try:
                async with self.db.begin_nested():
                    await self.db.execute(insert(ReviewItem.__table__).values(**values))
            except IntegrityError:
                return False
            return True
    
    async def save(self, item: ReviewItem) -> ReviewItem:
        with persistence_errors("update review item"):
            self.db.add(item)
            await self.db.flush()
            return item
    
    async def list_where(
        self,
        *criteria: ColumnElement[bool],
        order_by: Sequence[ColumnElement] = (),
        limit: int | None = None,
    ) -> list[ReviewItem]:
        with persistence_errors("list review items"):
            query = select(ReviewItem).where(*criteria).order_by(*order_by)
            if limit is not None:
                query = query.limit(limit)
            result = await self.db.execute(query)
            return list(result.scalars().all())
    
    async def count_where(self, *criteria: ColumnElement[bool]) -> int:
        with persistence_errors("count review items"):
            result = await self.db.execute(
                select(func.count(ReviewItem.id)).where(*criteria)
            )
            return result.scalar() or 0
    
    async def mastery_breakdown(
        self, *criteria: ColumnElement[bool]
    ) -> list[tuple[int, int, float]]:
        """(mastery_level, item count, average review count) per level."""
        with persistence_errors("aggregate review items"):
            result = await self.db.execute(
                select(
                    ReviewItem.mastery_level,
                    func.count(ReviewItem.id),
                    func.avg(ReviewItem.review_count),
                )
                .where(*criteria)
                .group_by(ReviewItem.mastery_level)
                .order_by(ReviewItem.mastery_level)
            )
            return [
                (level, count, float(avg_reviews or 0))
                for level, count, avg_reviews in result.all()
            ]


class ReviewSessionRepository:
    """Timed review sessions."""
    
    def __init__(self, db: AsyncSession):
        self.db = db
    
    async def add(self, session: ReviewSession) -> ReviewSession:
        with persistence_errors("create review session"):
            self.db.add(session)
            await self.db.flush()
            await self.db.refresh(session)
            return session
    
    async def get(self, session_id: str) -> ReviewSession | None:
        with persistence_errors("load review session"):
            return await self.db.get(ReviewSession, session_id)
    
    async def save(self, session: ReviewSession) -> ReviewSession:
        with persistence_errors("update review session"):
            await self.db.flush()
            return session
    
    async def list_since(self, start: datetime, limit: int) -> list[ReviewSession]:
        """Sessions started at or after `start`, newest first."""
        with persistence_errors("list review sessions"):
            result = await self.db.execute(
                select(ReviewSession)
                .where(ReviewSession.created_at >= start)
                .order_by(ReviewSession.created_at.desc())
                .limit(limit)
            )
            return list(result.scalars().all())
