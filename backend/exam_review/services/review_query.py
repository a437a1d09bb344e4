"""
Exam Review - Review Query Engine
Read side of the review system: due items, schedule and statistics.
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from exam_review.core.database import utcnow
from exam_review.models.review import ReviewItem, ReviewSession
from exam_review.services.question_catalog import QuestionCatalog
from exam_review.services.review_errors import ReviewValidationError
from exam_review.services.review_repository import (
    ReviewItemRepository,
    ReviewSessionRepository,
)
from exam_review.services.spaced_repetition import (
    MAX_MASTERY_LEVEL,
    MIN_MASTERY_LEVEL,
    round_half_up,
    suggested_daily_reviews,
)


URGENT_PRIORITY = 4
MEDIUM_PRIORITY = 3
MINUTES_PER_REVIEW = 2
RECENT_SESSIONS_LIMIT = 10
UNCATEGORIZED = "Uncategorized"


@dataclass
class DueItems:
    """Items due now, most urgent first."""
    items: list[ReviewItem]
    urgent: int
    medium: int
    low: int
    
    @property
    def total_count(self) -> int:
        return len(self.items)


@dataclass
class Recommendations:
    suggested_daily_reviews: int
    estimated_time_minutes: int
    urgent_items: int


@dataclass
class ReviewSchedule:
    """How many reviews are coming up and when."""
    today: int
    tomorrow: int
    this_week: int
    total_active: int
    mastery_distribution: dict[int, int]
    recommendations: Recommendations


@dataclass
class SessionSummary:
    date: datetime
    total_items: int
    correct_items: int
    accuracy: int
    duration: int | None


@dataclass
class CategoryStat:
    total: int
    avg_mastery_level: float
    avg_review_count: float


@dataclass
class MasteryProgress:
    level: int
    count: int
    avg_review_count: float


@dataclass
class ReviewStats:
    recent_sessions: list[SessionSummary] = field(default_factory=list)
    category_stats: dict[str, CategoryStat] = field(default_factory=dict)
    mastery_progress: list[MasteryProgress] = field(default_factory=list)


class ReviewQueryEngine:
    """
    Answers "what is due" and "how am I doing".
    
    Every method takes the reference time explicitly; nothing here looks at a
    running clock except as a default.
    """
    
    def __init__(
        self,
        items: ReviewItemRepository,
        sessions: ReviewSessionRepository,
        catalog: QuestionCatalog,
    ):
        self.items = items
        self.sessions = sessions
        self.catalog = catalog
    
    async def get_due_items(
        self,
        min_priority: int = 1,
        limit: int = 10,
        now: datetime | None = None,
    ) -> DueItems:
        """
        Active items due at `now` with at least `min_priority`.
        
        Ordered by priority (high first), then the longest-waiting item, then
        the most failed one.
        """
        if limit < 1:
            raise ReviewValidationError("limit must be at least 1")
        now = now or utcnow()
        
        items = await self.items.list_where(
            ReviewItem.is_active.is_(True),
            ReviewItem.priority >= min_priority,
            ReviewItem.next_review <= now,
            order_by=(
                ReviewItem.priority.desc(),
                ReviewItem.next_review.asc(),
                ReviewItem.wrong_count.desc(),
            ),
            limit=limit,
        )
        
        return DueItems(
            items=items,
            urgent=sum(1 for item in items if item.priority >= URGENT_PRIORITY),
            medium=sum(1 for item in items if item.priority == MEDIUM_PRIORITY),
            low=sum(1 for item in items if item.priority < MEDIUM_PRIORITY),
        )
    
    async def get_schedule(self, now: datetime | None = None) -> ReviewSchedule:
        """Upcoming review load bucketed into today, tomorrow and this week."""
        now = now or utcnow()
        tomorrow = now + timedelta(days=1)
        next_week = now + timedelta(days=7)
        active = ReviewItem.is_active.is_(True)
        
        today_count = await self.items.count_where(active, ReviewItem.next_review <= now)
        tomorrow_count = await self.items.count_where(
            active,
            ReviewItem.next_review > now,
            ReviewItem.next_review <= tomorrow,
        )
        week_count = await self.items.count_where(
            active,
            ReviewItem.next_review > tomorrow,
            ReviewItem.next_review <= next_week,
        )
        total_active = await self.items.count_where(active)
        urgent_count = await self.items.count_where(
            active,
            ReviewItem.priority >= URGENT_PRIORITY,
            ReviewItem.next_review <= now,
        )
        
        distribution = {
            level: 0 for level in range(MIN_MASTERY_LEVEL, MAX_MASTERY_LEVEL + 1)
        }
        for level, count, _ in await self.items.mastery_breakdown(active):
            distribution[level] = count
        
        return ReviewSchedule(
            today=today_count,
            tomorrow=tomorrow_count,
            this_week=week_count,
            total_active=total_active,
            mastery_distribution=distribution,
            recommendations=Recommendations(
                suggested_daily_reviews=suggested_daily_reviews(today_count),
                estimated_time_minutes=today_count * MINUTES_PER_REVIEW,
                urgent_items=urgent_count,
            ),
        )
    
    async def get_stats(
        self,
        period_days: int = 7,
        now: datetime | None = None,
    ) -> ReviewStats:
        """
        Session history for the period plus mastery breakdowns.
        
        Only the session list is limited to the period; category and mastery
        figures cover every active item.
        """
        if period_days < 0:
            raise ReviewValidationError("period_days must not be negative")
        now = now or utcnow()
        
        sessions = await self.sessions.list_since(
            now - timedelta(days=period_days), RECENT_SESSIONS_LIMIT
        )
        active = ReviewItem.is_active.is_(True)
        active_items = await self.items.list_where(active)
        breakdown = await self.items.mastery_breakdown(active)
        
        return ReviewStats(
            recent_sessions=[self._summarize_session(s) for s in sessions],
            category_stats=await self._category_stats(active_items),
            mastery_progress=[
                MasteryProgress(
                    level=level,
                    count=count,
                    avg_review_count=round_half_up(avg_reviews, 2),
                )
                for level, count, avg_reviews in breakdown
            ],
        )
    
    @staticmethod
    def _summarize_session(session: ReviewSession) -> SessionSummary:
        return SessionSummary(
            date=session.created_at,
            total_items=session.total_items,
            correct_items=session.correct_items,
            accuracy=int(round_half_up(session.accuracy * 100)),
            duration=session.duration,
        )
    
    async def _category_stats(self, items: list[ReviewItem]) -> dict[str, CategoryStat]:
        questions = await self.catalog.describe(item.question_id for item in items)
        
        totals: dict[str, list[int]] = {}  # name -> [count, mastery sum, review sum]
        for item in items:
            info = questions.get(item.question_id)
            name = info.category_name if info and info.category_name else UNCATEGORIZED
            bucket = totals.setdefault(name, [0, 0, 0])
            bucket[0] += 1
            bucket[1] += item.mastery_level
            bucket[2] += item.review_count
        
        return {
            name: CategoryStat(
                total=count,
                avg_mastery_level=round_half_up(mastery_sum / count, 2),
                avg_review_count=round_half_up(review_sum / count, 2),
            )
            for name, (count, mastery_sum, review_sum) in totals.items()
        }
