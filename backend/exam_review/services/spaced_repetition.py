"""
Exam Review - Spaced Repetition Algorithm
Pure functions for review intervals and urgency scoring.

Mastery runs from 0 (failed, never recovered) to 5 (mastered). Each level maps
to a fixed wait before the question is due again, and a weighted heuristic
turns mastery, failure count and staleness into a 1-5 priority.
"""
import math
from dataclasses import dataclass
from datetime import datetime, timedelta


MIN_MASTERY_LEVEL = 0
MAX_MASTERY_LEVEL = 5

MIN_PRIORITY = 1
MAX_PRIORITY = 5

# Minutes until the next review, indexed by mastery level
REVIEW_INTERVALS_MINUTES = (
    1,      # Level 0: 1 minute
    5,      # Level 1: 5 minutes
    30,     # Level 2: 30 minutes
    180,    # Level 3: 3 hours
    1440,   # Level 4: 24 hours
    4320,   # Level 5: 3 days
)

# Priority weights
WRONG_COUNT_WEIGHT = 0.5
WRONG_COUNT_CAP = 3
STALENESS_WEIGHT = 0.1
STALENESS_CAP = 2


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like a calculator: 2.5 -> 3, not Python's banker's rounding."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def review_interval_minutes(mastery_level: int) -> int:
    """Minutes to wait before reviewing an item at this mastery level."""
    if 0 <= mastery_level < len(REVIEW_INTERVALS_MINUTES):
        return REVIEW_INTERVALS_MINUTES[mastery_level]
    return REVIEW_INTERVALS_MINUTES[0]


def calculate_priority(
    mastery_level: int,
    wrong_count: int,
    days_since_last_review: int,
) -> int:
    """
    Urgency score from 1 (can wait) to 5 (review now).
    
    Lower mastery, more failures and a longer gap since the last review all
    push the score up. The failure and staleness terms are capped.
    """
    priority = 1.0
    priority += MAX_MASTERY_LEVEL - mastery_level
    priority += min(wrong_count * WRONG_COUNT_WEIGHT, WRONG_COUNT_CAP)
    priority += min(days_since_last_review * STALENESS_WEIGHT, STALENESS_CAP)
    
    rounded = int(round_half_up(priority))
    return max(MIN_PRIORITY, min(rounded, MAX_PRIORITY))


def next_mastery_level(mastery_level: int, is_correct: bool) -> int:
    """Move one level up on a correct answer, one down on a miss."""
    if is_correct:
        return min(MAX_MASTERY_LEVEL, mastery_level + 1)
    return max(MIN_MASTERY_LEVEL, mastery_level - 1)


def days_between(earlier: datetime | None, later: datetime) -> int:
    """Whole days elapsed, 0 when there is no earlier timestamp or the clock ran backwards."""
    if earlier is None:
        return 0
    return max(0, math.floor((later - earlier) / timedelta(days=1)))


@dataclass(frozen=True)
class ReviewUpdate:
    """New scheduler state for an item after one answer."""
    mastery_level: int
    review_count: int
    wrong_count: int
    correct_streak: int
    priority: int
    next_review: datetime
    last_reviewed: datetime
    is_active: bool


def initial_review(now: datetime) -> ReviewUpdate:
    """State for a question entering review after its first miss."""
    return ReviewUpdate(
        mastery_level=MIN_MASTERY_LEVEL,
        review_count=1,
        wrong_count=1,
        correct_streak=0,
        priority=calculate_priority(MIN_MASTERY_LEVEL, 1, 0),
        next_review=now + timedelta(minutes=review_interval_minutes(MIN_MASTERY_LEVEL)),
        last_reviewed=now,
        is_active=True,
    )


def apply_review(
    *,
    mastery_level: int,
    review_count: int,
    wrong_count: int,
    correct_streak: int,
    last_reviewed: datetime | None,
    is_correct: bool,
    now: datetime,
) -> ReviewUpdate:
    """
    Transition an existing item on a new answer.
    
    The wait until the next review comes from the NEW mastery level, while
    staleness is measured from the previous review.
    """
    new_level = next_mastery_level(mastery_level, is_correct)
    new_wrong_count = wrong_count if is_correct else wrong_count + 1
    days_since = days_between(last_reviewed, now)
    
    return ReviewUpdate(
        mastery_level=new_level,
        review_count=review_count + 1,
        wrong_count=new_wrong_count,
        correct_streak=correct_streak + 1 if is_correct else 0,
        priority=calculate_priority(new_level, new_wrong_count, days_since),
        next_review=now + timedelta(minutes=review_interval_minutes(new_level)),
        last_reviewed=now,
        is_active=new_level < MAX_MASTERY_LEVEL,
    )


def suggested_daily_reviews(due_today: int) -> int:
    """Daily review target: at least 5, at most 20."""
    return min(max(due_today, 5), 20)
