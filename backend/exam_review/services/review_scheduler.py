"""
Exam Review - Review Scheduler
Applies answer outcomes to review items.
"""
import logging
from dataclasses import asdict
from datetime import datetime

from exam_review.core.database import as_utc, utcnow
from exam_review.models.review import ReviewItem
from exam_review.services.review_errors import ReviewPersistenceError, ReviewValidationError
from exam_review.services.review_repository import ReviewItemRepository
from exam_review.services.spaced_repetition import apply_review, initial_review

logger = logging.getLogger(__name__)


class ReviewScheduler:
    """
    State-transition engine for review items.
    
    A question enters review on its first incorrect answer. Later answers move
    its mastery level up or down one step and reschedule it; reaching the top
    level retires it from the due queue.
    """
    
    def __init__(self, items: ReviewItemRepository):
        self.items = items
    
    async def record_review(
        self,
        question_id: str,
        is_correct: bool,
        now: datetime | None = None,
    ) -> ReviewItem | None:
        """
        Record one answer for a question.
        
        Args:
            question_id: Question that was answered
            is_correct: Whether the answer was correct
            now: Reference time (defaults to the current UTC time)
        
        Returns:
            The created or updated item, or None for a first-attempt success
        
        Raises:
            ReviewValidationError: If the input is malformed
            ReviewPersistenceError: If the review store fails
        """
        self._validate(question_id, is_correct)
        now = as_utc(now) if now else utcnow()
        
        item = await self.items.get(question_id)
        
        if item is None:
            if is_correct:
                return None
            
            created = await self.items.create_if_absent(
                question_id, asdict(initial_review(now))
            )
            item = await self.items.get(question_id)
            if item is None:
                raise ReviewPersistenceError(f"Review item for {question_id} vanished after insert")
            if created:
                logger.info("Question %s added to review queue", question_id)
                return item
            # Lost a race with another first failure; count this one on top
            logger.info("Review item for %s created concurrently, updating", question_id)
        
        return await self._apply(item, is_correct, now)
    
    async def _apply(self, item: ReviewItem, is_correct: bool, now: datetime) -> ReviewItem:
        update = apply_review(
            mastery_level=item.mastery_level,
            review_count=item.review_count,
            wrong_count=item.wrong_count,
            correct_streak=item.correct_streak,
            last_reviewed=item.last_reviewed,
            is_correct=is_correct,
            now=now,
        )
        
        for field, value in asdict(update).items():
            setattr(item, field, value)
        item.updated_at = now
        
        if not item.is_active:
            logger.info("Question %s mastered, retiring from review", item.question_id)
        
        return await self.items.save(item)
    
    @staticmethod
    def _validate(question_id: str, is_correct: bool) -> None:
        if not isinstance(question_id, str) or not question_id.strip():
            raise ReviewValidationError("question_id is required")
        if not isinstance(is_correct, bool):
            raise ReviewValidationError("is_correct must be a boolean")
