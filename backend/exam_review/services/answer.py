"""
Exam Review - Answer Service
The two inbound paths that feed the review scheduler.

Ordinary answer submission treats review tracking as a side effect: if it
fails the answer still stands. The dedicated review path exists to update
review state, so there the same failure is the caller's problem.
"""
import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from exam_review.core.database import utcnow
from exam_review.models.question import Answer
from exam_review.models.review import ReviewItem
from exam_review.services.review_errors import ReviewPersistenceError
from exam_review.services.review_repository import persistence_errors
from exam_review.services.review_scheduler import ReviewScheduler

logger = logging.getLogger(__name__)


@dataclass
class AnswerResult:
    """Outcome of one submitted answer."""
    answer_id: str
    question_id: str
    is_correct: bool
    time_spent: int | None
    review_item: ReviewItem | None


class AnswerService:
    """Records answers and forwards them to the review scheduler."""
    
    def __init__(self, db: AsyncSession, scheduler: ReviewScheduler):
        self.db = db
        self.scheduler = scheduler
    
    async def record_answer(
        self,
        question_id: str,
        is_correct: bool,
        time_spent: int | None = None,
        device_type: str | None = None,
        now: datetime | None = None,
    ) -> Answer:
        """Append to the answer history."""
        answer = Answer(
            question_id=question_id,
            is_correct=is_correct,
            time_spent=time_spent,
            device_type=device_type,
            created_at=now or utcnow(),
        )
        with persistence_errors("record answer"):
            self.db.add(answer)
            await self.db.flush()
        return answer
    
    async def submit_answer(
        self,
        question_id: str,
        is_correct: bool,
        time_spent: int | None = None,
        device_type: str | None = None,
        now: datetime | None = None,
    ) -> AnswerResult:
        """
        Answer-submission flow.
        
        The answer is committed first. A review-store failure afterwards is
        logged and rolled back, and the result carries review_item=None.
        """
        now = now or utcnow()
        answer = await self.record_answer(question_id, is_correct, time_spent, device_type, now)
        with persistence_errors("commit answer"):
            await self.db.commit()
        
        result = AnswerResult(
            answer_id=answer.id,
            question_id=question_id,
            is_correct=is_correct,
            time_spent=time_spent,
            review_item=None,
        )
        
        try:
            result.review_item = await self.scheduler.record_review(question_id, is_correct, now)
            with persistence_errors("commit review item"):
                await self.db.commit()
        except ReviewPersistenceError:
            logger.exception("Review tracking failed for question %s", question_id)
            await self.db.rollback()
            result.review_item = None
        
        return result
    
    async def submit_review(
        self,
        question_id: str,
        is_correct: bool,
        time_spent: int | None = None,
        device_type: str | None = None,
        now: datetime | None = None,
    ) -> ReviewItem | None:
        """
        Dedicated review flow: every failure propagates.
        
        Raises:
            ReviewValidationError: If the input is malformed
            ReviewPersistenceError: If the review store fails
        """
        now = now or utcnow()
        review_item = await self.scheduler.record_review(question_id, is_correct, now)
        await self.record_answer(question_id, is_correct, time_spent, device_type, now)
        return review_item
