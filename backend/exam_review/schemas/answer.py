"""
Exam Review - Answer Schemas
Pydantic schemas for answer submission
"""
from typing import Annotated, Optional

from pydantic import BaseModel, Field, StrictBool

from exam_review.schemas.review import ReviewItemResponse


class AnswerSubmit(BaseModel):
    """An already-graded answer from the question flow."""
    question_id: Annotated[str, Field(min_length=1, max_length=64)]
    is_correct: StrictBool
    time_spent: Annotated[int, Field(ge=0)] | None = None
    device_type: Annotated[str, Field(max_length=50)] | None = None


class AnswerResponse(BaseModel):
    answer_id: str
    question_id: str
    is_correct: bool
    time_spent: Optional[int] = None
    review_item: Optional[ReviewItemResponse] = None
