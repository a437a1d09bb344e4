"""
Exam Review - Answers API Router
Answer submission; review tracking happens on the side
"""
from fastapi import APIRouter, status

from exam_review.api.deps import Answers
from exam_review.schemas.answer import AnswerResponse, AnswerSubmit
from exam_review.schemas.review import ReviewItemResponse

router = APIRouter(prefix="/answers", tags=["Answers"])


@router.post("", response_model=AnswerResponse, status_code=status.HTTP_201_CREATED)
async def submit_answer(data: AnswerSubmit, answers: Answers):
    """
    Record a graded answer.
    
    If the review queue cannot be updated the answer is still saved and
    returned, with review_item set to null.
    """
    result = await answers.submit_answer(
        question_id=data.question_id,
        is_correct=data.is_correct,
        time_spent=data.time_spent,
        device_type=data.device_type,
    )
    
    return AnswerResponse(
        answer_id=result.answer_id,
        question_id=result.question_id,
        is_correct=result.is_correct,
        time_spent=result.time_spent,
        review_item=(
            ReviewItemResponse.model_validate(result.review_item)
            if result.review_item else None
        ),
    )
