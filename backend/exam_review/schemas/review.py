"""
Exam Review - Review Schemas
Pydantic schemas for the spaced-repetition review API
"""
from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool


# ============================================================================
# Review Items
# ============================================================================

class ReviewAnswerRequest(BaseModel):
    """An answer submitted through the dedicated review flow."""
    question_id: Annotated[str, Field(min_length=1, max_length=64)]
    is_correct: StrictBool
    time_spent: Annotated[int, Field(ge=0)] | None = None
    device_type: Annotated[str, Field(max_length=50)] | None = None


class QuestionSummary(BaseModel):
    """Question data joined onto a review item for display."""
    content: str
    category_id: Optional[str] = None
    category_name: Optional[str] = None


class ReviewItemResponse(BaseModel):
    """Review state for one question."""
    model_config = ConfigDict(from_attributes=True)
    
    id: str
    question_id: str
    mastery_level: int
    review_count: int
    last_reviewed: Optional[datetime] = None
    next_review: datetime
    wrong_count: int
    correct_streak: int
    priority: int
    is_active: bool
    question: Optional[QuestionSummary] = None


class ReviewAnswerResponse(BaseModel):
    """Result of recording a review answer."""
    success: bool = True
    review_item: Optional[ReviewItemResponse] = None
    message: str


# ============================================================================
# Due Items & Schedule
# ============================================================================

class ReviewPriorityBreakdown(BaseModel):
    urgent: int
    medium: int
    low: int


class DueItemsResponse(BaseModel):
    """Review items due now, most urgent first."""
    questions: List[ReviewItemResponse]
    total_count: int
    review_stats: ReviewPriorityBreakdown


class ScheduleBuckets(BaseModel):
    today: int
    tomorrow: int
    this_week: int
    total_active: int


class ScheduleRecommendations(BaseModel):
    suggested_daily_reviews: int
    estimated_time_minutes: int
    urgent_items: int


class ReviewScheduleResponse(BaseModel):
    """Upcoming review load."""
    model_config = ConfigDict(from_attributes=True)
    
    schedule: ScheduleBuckets
    mastery_distribution: dict[int, int]
    recommendations: ScheduleRecommendations


# ============================================================================
# Sessions & Stats
# ============================================================================

class ReviewSessionStart(BaseModel):
    """Request to start a review session."""
    device_type: Annotated[str, Field(max_length=50)] | None = None


class ReviewSessionStarted(BaseModel):
    session_id: str
    start_time: datetime


class ReviewSessionEnd(BaseModel):
    """Final totals for a review session."""
    duration: Annotated[int, Field(ge=0)] | None = None  # seconds
    total_items: Annotated[int, Field(ge=0)]
    correct_items: Annotated[int, Field(ge=0)]


class ReviewSessionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    
    id: str
    device_type: Optional[str] = None
    duration: Optional[int] = None
    total_items: int
    correct_items: int
    created_at: datetime


class ReviewSessionResults(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    
    total_items: int
    correct_items: int
    accuracy: float
    time_per_question: int


class ReviewSessionEnded(BaseModel):
    session: ReviewSessionResponse
    results: ReviewSessionResults


class SessionSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    
    date: datetime
    total_items: int
    correct_items: int
    accuracy: int
    duration: Optional[int] = None


class CategoryStatResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    
    total: int
    avg_mastery_level: float
    avg_review_count: float


class MasteryProgressResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    
    level: int
    count: int
    avg_review_count: float


class ReviewStatsResponse(BaseModel):
    """Review history and mastery breakdown."""
    model_config = ConfigDict(from_attributes=True)
    
    recent_sessions: List[SessionSummaryResponse]
    category_stats: dict[str, CategoryStatResponse]
    mastery_progress: List[MasteryProgressResponse]
