"""
Quiz API endpoints.

Routes: POST /quiz/submit

Dependencies: quizfunnel.application.services.quiz_service, quizfunnel.models
System role: Quiz submission HTTP API
"""

from fastapi import APIRouter, Depends, Response

from quizfunnel.api.deps import get_quiz_service
from quizfunnel.application.services.quiz_service import QuizService
from quizfunnel.models.quiz import QuizSubmitRequest, QuizSubmitResponse

from .error_handling import handle_service_errors

LAST_ATTEMPT_COOKIE = "last_attempt_id"
LAST_ATTEMPT_MAX_AGE = 60 * 60 * 24 * 7

router = APIRouter(prefix="/quiz", tags=["quiz"])


@router.post("/submit", response_model=QuizSubmitResponse)
@handle_service_errors
async def submit_quiz(
    request: QuizSubmitRequest,
    response: Response,
    quiz_service: QuizService = Depends(get_quiz_service),
) -> QuizSubmitResponse:
    """
    Score a completed quiz and create the attempt.

    Sets the ``last_attempt_id`` cookie used to recover the attempt after
    checkout when the provider redirect loses it.

    Args:
        request: QuizSubmitRequest with email, category slug, affiliate, answers
        response: Outgoing response (cookie)
        quiz_service: Injected QuizService

    Returns:
        QuizSubmitResponse: Attempt id, archetype, and teaser

    Raises:
        HTTPException(400): Missing email or category slug
        HTTPException(404): Unknown category or no question set
        HTTPException(500): Attempt could not be recorded
    """
    result = await quiz_service.submit(
        email=request.email,
        category_slug=request.category_slug,
        answers=request.answers,
        affiliate_handle=request.affiliate_handle,
    )

    response.set_cookie(
        key=LAST_ATTEMPT_COOKIE,
        value=str(result["attempt_id"]),
        max_age=LAST_ATTEMPT_MAX_AGE,
        path="/",
        httponly=True,
        samesite="lax",
    )
    return QuizSubmitResponse(**result)
