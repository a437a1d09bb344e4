"""
Exam Review - Review Session Tracker
Bookkeeping for timed review batches
"""
import logging
from dataclasses import dataclass
from datetime import datetime

from exam_review.core.database import utcnow
from exam_review.models.review import ReviewSession
from exam_review.services.review_errors import (
    ReviewNotFoundError,
    ReviewValidationError,
)
from exam_review.services.review_repository import ReviewSessionRepository
from exam_review.services.spaced_repetition import round_half_up

logger = logging.getLogger(__name__)


@dataclass
class SessionResults:
    """Accuracy and pace for a finished session."""
    total_items: int
    correct_items: int
    accuracy: float  # percent, 2 decimals
    time_per_question: int  # seconds


class ReviewSessionTracker:
    """Starts and finalizes review sessions."""
    
    def __init__(self, sessions: ReviewSessionRepository):
        self.sessions = sessions
    
    async def start_session(
        self,
        device_type: str | None = None,
        now: datetime | None = None,
    ) -> ReviewSession:
        """Open a session with zero totals; its id and created_at are the handle."""
        session = ReviewSession(
            device_type=device_type,
            total_items=0,
            correct_items=0,
            created_at=now or utcnow(),
        )
        session = await self.sessions.add(session)
        logger.info("Review session %s started", session.id)
        return session
    
    async def end_session(
        self,
        session_id: str,
        duration: int | None,
        total_items: int,
        correct_items: int,
    ) -> tuple[ReviewSession, SessionResults]:
        """
        Write final totals onto a session and compute its results.
        
        Raises:
            ReviewValidationError: If the totals are inconsistent
            ReviewNotFoundError: If the session does not exist
        """
        if total_items < 0 or correct_items < 0:
            raise ReviewValidationError("Item counts must not be negative")
        if correct_items > total_items:
            raise ReviewValidationError("correct_items cannot exceed total_items")
        if duration is not None and duration < 0:
            raise ReviewValidationError("duration must not be negative")
        
        session = await self.sessions.get(session_id)
        if session is None:
            raise ReviewNotFoundError(f"Review session {session_id} not found")
        
        session.duration = duration
        session.total_items = total_items
        session.correct_items = correct_items
        session = await self.sessions.save(session)
        
        results = session_results(duration, total_items, correct_items)
        logger.info(
            "Review session %s ended: %d/%d correct",
            session_id, correct_items, total_items,
        )
        return session, results


def session_results(duration: int | None, total_items: int, correct_items: int) -> SessionResults:
    """Accuracy and time per question, both 0 for an empty session."""
    if total_items == 0:
        return SessionResults(
            total_items=total_items,
            correct_items=correct_items,
            accuracy=0,
            time_per_question=0,
        )
    
    return SessionResults(
        total_items=total_items,
        correct_items=correct_items,
        accuracy=round_half_up(correct_items / total_items * 100, 2),
        time_per_question=int(round_half_up((duration or 0) / total_items)),
    )
