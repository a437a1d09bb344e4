"""
Exam Review - Answer Flow Tests
"""
import logging

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from exam_review.api.deps import get_review_scheduler
from exam_review.main import app
from exam_review.models.question import Answer
from exam_review.models.review import ReviewItem
from exam_review.services.answer import AnswerService
from exam_review.services.review_errors import ReviewPersistenceError
from exam_review.services.review_repository import ReviewItemRepository
from exam_review.services.review_scheduler import ReviewScheduler


class FailingScheduler:
    async def record_review(self, question_id, is_correct, now=None):
        raise ReviewPersistenceError("Failed to update review item")


async def _count(db_session, model) -> int:
    result = await db_session.execute(select(func.count(model.id)))
    return result.scalar()


@pytest.mark.asyncio
async def test_submit_incorrect_answer_creates_review_item(client: AsyncClient, db_session):
    response = await client.post("/api/v1/answers", json={
        "question_id": "q-1",
        "is_correct": False,
        "time_spent": 30,
        "device_type": "mobile",
    })
    
    assert response.status_code == 201
    data = response.json()
    assert data["is_correct"] is False
    assert data["answer_id"]
    assert data["review_item"]["mastery_level"] == 0
    assert data["review_item"]["priority"] > 0
    assert await _count(db_session, Answer) == 1
    assert await _count(db_session, ReviewItem) == 1


@pytest.mark.asyncio
async def test_submit_correct_answer_without_history(client: AsyncClient, db_session):
    response = await client.post("/api/v1/answers", json={"question_id": "q-1", "is_correct": True})
    
    assert response.status_code == 201
    assert response.json()["review_item"] is None
    assert await _count(db_session, ReviewItem) == 0


@pytest.mark.asyncio
async def test_answer_flow_survives_review_failure(client: AsyncClient, db_session):
    """The learner still gets their result when review tracking fails."""
    app.dependency_overrides[get_review_scheduler] = lambda: FailingScheduler()
    
    response = await client.post("/api/v1/answers", json={"question_id": "q-1", "is_correct": False})
    
    assert response.status_code == 201
    assert response.json()["review_item"] is None
    assert await _count(db_session, Answer) == 1


@pytest.mark.asyncio
async def test_submit_answer_logs_review_failure(db_session, now, caplog):
    service = AnswerService(db_session, FailingScheduler())
    
    with caplog.at_level(logging.ERROR, logger="exam_review.services.answer"):
        result = await service.submit_answer("q-1", False, now=now)
    
    assert result.review_item is None
    assert result.question_id == "q-1"
    assert "Review tracking failed for question q-1" in caplog.text


@pytest.mark.asyncio
async def test_submit_review_propagates_failure(db_session, now):
    service = AnswerService(db_session, FailingScheduler())
    
    with pytest.raises(ReviewPersistenceError):
        await service.submit_review("q-1", False, now=now)


@pytest.mark.asyncio
async def test_submit_review_records_answer_history(db_session, now):
    scheduler = ReviewScheduler(ReviewItemRepository(db_session))
    service = AnswerService(db_session, scheduler)
    
    item = await service.submit_review("q-1", False, time_spent=12, now=now)
    await service.submit_review("q-1", True, now=now)
    
    assert item.mastery_level == 1
    assert await _count(db_session, Answer) == 2


@pytest.mark.asyncio
async def test_review_commit_failure_does_not_fail_answer(db_session, now, monkeypatch):
    """The answer is already durable when committing the review update fails."""
    service = AnswerService(db_session, ReviewScheduler(ReviewItemRepository(db_session)))
    real_commit = db_session.commit
    commits = 0
    
    async def flaky_commit():
        nonlocal commits
        commits += 1
        if commits == 2:
            raise OperationalError("COMMIT", {}, Exception("connection lost"))
        await real_commit()
    
    monkeypatch.setattr(db_session, "commit", flaky_commit)
    
    result = await service.submit_answer("q-1", False, now=now)
    
    assert result.review_item is None
    assert result.answer_id
    assert await _count(db_session, Answer) == 1
    assert await _count(db_session, ReviewItem) == 0
