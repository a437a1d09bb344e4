"""
Exam Review - Review API Tests
"""
from datetime import timedelta

import pytest
from fastapi import HTTPException
from httpx import AsyncClient

from exam_review.api.deps import get_review_scheduler
from exam_review.api.v1.review import add_review_answer
from exam_review.core.database import utcnow
from exam_review.main import app
from exam_review.models.question import Category, Question
from exam_review.schemas.review import ReviewAnswerRequest
from exam_review.services.answer import AnswerService
from exam_review.services.review_errors import ReviewPersistenceError


API = "/api/v1/review"


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    """Test the health check endpoint."""
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_add_incorrect_answer_creates_review_item(client: AsyncClient):
    response = await client.post(f"{API}/items", json={
        "question_id": "q-1",
        "is_correct": False,
        "time_spent": 45,
        "device_type": "pc",
    })
    
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["message"] == "Added to review list"
    assert data["review_item"]["mastery_level"] == 0
    assert data["review_item"]["wrong_count"] == 1
    assert data["review_item"]["is_active"] is True


@pytest.mark.asyncio
async def test_add_first_correct_answer_is_not_tracked(client: AsyncClient):
    response = await client.post(f"{API}/items", json={"question_id": "q-1", "is_correct": True})
    
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Correct!"
    assert data["review_item"] is None


@pytest.mark.asyncio
async def test_add_then_correct_raises_mastery(client: AsyncClient):
    await client.post(f"{API}/items", json={"question_id": "q-1", "is_correct": False})
    response = await client.post(f"{API}/items", json={"question_id": "q-1", "is_correct": True})
    
    item = response.json()["review_item"]
    assert item["mastery_level"] == 1
    assert item["correct_streak"] == 1
    assert item["wrong_count"] == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    {"is_correct": True},
    {"question_id": "q-1"},
    {"question_id": "q-1", "is_correct": "yes"},
    {"question_id": "", "is_correct": False},
])
async def test_add_validates_request(client: AsyncClient, body):
    response = await client.post(f"{API}/items", json=body)
    assert response.status_code == 422


class FailingScheduler:
    async def record_review(self, question_id, is_correct, now=None):
        raise ReviewPersistenceError("Failed to update review item")


@pytest.mark.asyncio
async def test_review_flow_surfaces_store_failure(client: AsyncClient):
    app.dependency_overrides[get_review_scheduler] = lambda: FailingScheduler()
    
    response = await client.post(f"{API}/items", json={"question_id": "q-1", "is_correct": False})
    
    assert response.status_code == 500


@pytest.mark.asyncio
async def test_review_error_keeps_its_cause(db_session):
    answers = AnswerService(db_session, FailingScheduler())
    
    with pytest.raises(HTTPException) as exc_info:
        await add_review_answer(ReviewAnswerRequest(question_id="q-1", is_correct=False), answers)
    
    assert exc_info.value.status_code == 500
    assert isinstance(exc_info.value.__cause__, ReviewPersistenceError)


@pytest.mark.asyncio
async def test_due_questions_empty(client: AsyncClient):
    response = await client.get(f"{API}/questions")
    
    assert response.status_code == 200
    data = response.json()
    assert data["questions"] == []
    assert data["total_count"] == 0
    assert data["review_stats"] == {"urgent": 0, "medium": 0, "low": 0}


@pytest.mark.asyncio
async def test_due_questions_include_question_data(client: AsyncClient, db_session, make_review_item):
    db_session.add(Category(id="cat-1", name="Networking"))
    db_session.add(Question(id="q-1", category_id="cat-1", content="What is TCP?"))
    await db_session.flush()
    
    past = utcnow() - timedelta(minutes=10)
    await make_review_item("q-1", priority=5, next_review=past)
    await make_review_item("q-2", priority=2, next_review=past + timedelta(minutes=5))
    
    response = await client.get(f"{API}/questions", params={"limit": 5})
    
    data = response.json()
    assert [q["question_id"] for q in data["questions"]] == ["q-1", "q-2"]
    assert data["questions"][0]["question"]["content"] == "What is TCP?"
    assert data["questions"][0]["question"]["category_name"] == "Networking"
    assert data["questions"][1]["question"] is None
    assert data["review_stats"] == {"urgent": 1, "medium": 0, "low": 1}


@pytest.mark.asyncio
async def test_due_questions_priority_filter(client: AsyncClient, make_review_item):
    past = utcnow() - timedelta(minutes=10)
    await make_review_item("q-1", priority=5, next_review=past)
    await make_review_item("q-2", priority=2, next_review=past)
    
    response = await client.get(f"{API}/questions", params={"priority": 4})
    
    assert [q["question_id"] for q in response.json()["questions"]] == ["q-1"]


@pytest.mark.asyncio
async def test_schedule(client: AsyncClient, make_review_item):
    current = utcnow()
    await make_review_item("q-1", priority=4, next_review=current - timedelta(minutes=1))
    await make_review_item("q-2", next_review=current + timedelta(hours=3), mastery_level=2)
    
    response = await client.get(f"{API}/schedule")
    
    assert response.status_code == 200
    data = response.json()
    assert data["schedule"] == {"today": 1, "tomorrow": 1, "this_week": 0, "total_active": 2}
    assert data["mastery_distribution"] == {"0": 1, "1": 0, "2": 1, "3": 0, "4": 0, "5": 0}
    assert data["recommendations"] == {
        "suggested_daily_reviews": 5,
        "estimated_time_minutes": 2,
        "urgent_items": 1,
    }


@pytest.mark.asyncio
async def test_session_lifecycle(client: AsyncClient):
    start = await client.post(f"{API}/sessions", json={"device_type": "tablet"})
    assert start.status_code == 200
    session_id = start.json()["session_id"]
    assert start.json()["start_time"]
    
    end = await client.put(f"{API}/sessions/{session_id}", json={
        "duration": 120,
        "total_items": 4,
        "correct_items": 3,
    })
    
    assert end.status_code == 200
    data = end.json()
    assert data["session"]["id"] == session_id
    assert data["session"]["device_type"] == "tablet"
    assert data["results"] == {
        "total_items": 4,
        "correct_items": 3,
        "accuracy": 75.0,
        "time_per_question": 30,
    }
    
    stats = await client.get(f"{API}/stats")
    sessions = stats.json()["recent_sessions"]
    assert len(sessions) == 1
    assert sessions[0]["accuracy"] == 75


@pytest.mark.asyncio
async def test_end_unknown_session(client: AsyncClient):
    response = await client.put(f"{API}/sessions/does-not-exist", json={
        "duration": 10,
        "total_items": 1,
        "correct_items": 1,
    })
    
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_end_session_inconsistent_totals(client: AsyncClient):
    start = await client.post(f"{API}/sessions", json={})
    session_id = start.json()["session_id"]
    
    response = await client.put(f"{API}/sessions/{session_id}", json={
        "total_items": 1,
        "correct_items": 2,
    })
    
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_stats_empty(client: AsyncClient):
    response = await client.get(f"{API}/stats", params={"period": 30})
    
    assert response.status_code == 200
    assert response.json() == {
        "recent_sessions": [],
        "category_stats": {},
        "mastery_progress": [],
    }
