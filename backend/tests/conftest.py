"""
Exam Review - Test Configuration
Pytest fixtures and configuration for testing
"""
from collections.abc import AsyncGenerator, Callable
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

import exam_review.models  # noqa: F401
from exam_review.core.database import Base, get_db
from exam_review.main import app
from exam_review.models.review import ReviewItem


@pytest.fixture
def now() -> datetime:
    """Fixed reference time for scheduler tests."""
    return datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture(scope="function")
async def db_session(tmp_path: Path) -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh SQLite database and session for each test."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        echo=False,
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session
    
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with database session override."""
    
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session
    
    app.dependency_overrides[get_db] = override_get_db
    
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac
    
    app.dependency_overrides.clear()


@pytest.fixture
def make_review_item(db_session: AsyncSession, now: datetime) -> Callable[..., Any]:
    """Factory inserting a review item directly, bypassing the scheduler."""
    
    async def _make(question_id: str, **overrides: Any) -> ReviewItem:
        values = {
            "mastery_level": 0,
            "review_count": 1,
            "last_reviewed": now - timedelta(minutes=5),
            "next_review": now - timedelta(minutes=1),
            "wrong_count": 1,
            "correct_streak": 0,
            "priority": 3,
            "is_active": True,
        }
        values.update(overrides)
        item = ReviewItem(question_id=question_id, **values)
        db_session.add(item)
        await db_session.flush()
        return item
    
    return _make
