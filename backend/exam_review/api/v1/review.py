"""
Exam Review - Review API Router
Endpoints for the spaced-repetition review queue and review sessions
"""
from dataclasses import asdict

from fastapi import APIRouter, HTTPException, Query, status

from exam_review.api.deps import Answers, Catalog, QueryEngine, SessionTracker
from exam_review.core.config import settings
from exam_review.schemas.review import (
    DueItemsResponse,
    QuestionSummary,
    ReviewAnswerRequest,
    ReviewAnswerResponse,
    ReviewItemResponse,
    ReviewPriorityBreakdown,
    ReviewScheduleResponse,
    ReviewSessionEnd,
    ReviewSessionEnded,
    ReviewSessionResponse,
    ReviewSessionResults,
    ReviewSessionStart,
    ReviewSessionStarted,
    ReviewStatsResponse,
)
from exam_review.services.review_errors import (
    ReviewNotFoundError,
    ReviewPersistenceError,
    ReviewValidationError,
)

router = APIRouter(prefix="/review", tags=["Review (SRS)"])


def _review_error(e: Exception) -> HTTPException:
    if isinstance(e, ReviewNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    if isinstance(e, ReviewValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Review store unavailable",
    )


@router.post("/items", response_model=ReviewAnswerResponse)
async def add_review_answer(data: ReviewAnswerRequest, answers: Answers):
    """
    Record an answer from review practice.
    
    A first-attempt correct answer is not tracked. Any other answer creates or
    updates the question's review item.
    """
    try:
        item = await answers.submit_review(
            question_id=data.question_id,
            is_correct=data.is_correct,
            time_spent=data.time_spent,
            device_type=data.device_type,
        )
    except (ReviewValidationError, ReviewPersistenceError) as e:
        raise _review_error(e) from e
    
    return ReviewAnswerResponse(
        review_item=ReviewItemResponse.model_validate(item) if item else None,
        message="Correct!" if data.is_correct else "Added to review list",
    )


@router.get("/questions", response_model=DueItemsResponse)
async def get_review_questions(
    engine: QueryEngine,
    catalog: Catalog,
    limit: int = Query(default=settings.REVIEW_DEFAULT_LIMIT, ge=1, le=100),
    priority: int = Query(default=1, ge=1, le=5),
):
    """Review items due now, most urgent first, with their question data."""
    try:
        due = await engine.get_due_items(min_priority=priority, limit=limit)
        questions = await catalog.describe(item.question_id for item in due.items)
    except (ReviewValidationError, ReviewPersistenceError) as e:
        raise _review_error(e) from e
    
    items = []
    for item in due.items:
        response = ReviewItemResponse.model_validate(item)
        info = questions.get(item.question_id)
        if info:
            response.question = QuestionSummary(
                content=info.content,
                category_id=info.category_id,
                category_name=info.category_name,
            )
        items.append(response)
    
    return DueItemsResponse(
        questions=items,
        total_count=due.total_count,
        review_stats=ReviewPriorityBreakdown(
            urgent=due.urgent,
            medium=due.medium,
            low=due.low,
        ),
    )


@router.get("/schedule", response_model=ReviewScheduleResponse)
async def get_review_schedule(engine: QueryEngine):
    """Counts of reviews due today, tomorrow and later this week."""
    try:
        schedule = await engine.get_schedule()
    except ReviewPersistenceError as e:
        raise _review_error(e) from e
    
    return {
        "schedule": {
            "today": schedule.today,
            "tomorrow": schedule.tomorrow,
            "this_week": schedule.this_week,
            "total_active": schedule.total_active,
        },
        "mastery_distribution": schedule.mastery_distribution,
        "recommendations": asdict(schedule.recommendations),
    }


@router.post("/sessions", response_model=ReviewSessionStarted)
async def start_review_session(data: ReviewSessionStart, tracker: SessionTracker):
    """Start a timed review session."""
    try:
        session = await tracker.start_session(device_type=data.device_type)
    except ReviewPersistenceError as e:
        raise _review_error(e) from e
    
    return ReviewSessionStarted(session_id=session.id, start_time=session.created_at)


@router.put("/sessions/{session_id}", response_model=ReviewSessionEnded)
async def end_review_session(
    session_id: str,
    data: ReviewSessionEnd,
    tracker: SessionTracker,
):
    """Finish a review session and report accuracy and pace."""
    try:
        session, results = await tracker.end_session(
            session_id,
            duration=data.duration,
            total_items=data.total_items,
            correct_items=data.correct_items,
        )
    except (ReviewNotFoundError, ReviewValidationError, ReviewPersistenceError) as e:
        raise _review_error(e) from e
    
    return ReviewSessionEnded(
        session=ReviewSessionResponse.model_validate(session),
        results=ReviewSessionResults.model_validate(asdict(results)),
    )


@router.get("/stats", response_model=ReviewStatsResponse)
async def get_review_stats(
    engine: QueryEngine,
    period: int = Query(default=settings.REVIEW_STATS_PERIOD_DAYS, ge=0, le=365),
):
    """Recent sessions plus per-category and per-level mastery."""
    try:
        stats = await engine.get_stats(period_days=period)
    except (ReviewValidationError, ReviewPersistenceError) as e:
        raise _review_error(e) from e
    
    return ReviewStatsResponse.model_validate(asdict(stats))
