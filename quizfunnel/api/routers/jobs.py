"""
Job API endpoints.

Routes: GET /jobs/{id}, POST /jobs/{id}/requeue

Dependencies: quizfunnel.application.services.job_service, quizfunnel.models
System role: Job status and operator requeue HTTP API
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from quizfunnel.api.deps import get_job_service
from quizfunnel.application.services.job_service import JobService
from quizfunnel.models.job import JobStatusResponse

from .error_handling import handle_service_errors

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get("/{job_id}", response_model=JobStatusResponse)
@handle_service_errors
async def get_job_status(
    job_id: UUID,
    job_service: JobService = Depends(get_job_service),
) -> JobStatusResponse:
    """
    Get report job status.

    Args:
        job_id: Job UUID
        job_service: Injected JobService

    Returns:
        JobStatusResponse: Job record with status and error detail

    Raises:
        HTTPException(404): Job not found

    Example Response:
        {
            "id": "123e4567-e89b-12d3-a456-426614174000",
            "quiz_attempt_id": "0b6f1f3e-5a43-4c2a-9d0e-3c1b2a4d5e6f",
            "order_id": "9a1c2b3d-4e5f-4a6b-8c7d-0e1f2a3b4c5d",
            "requeued_from_job_id": null,
            "product": "mini_report",
            "status": "error",
            "error": "generation exceeded 120s deadline",
            "created_at": "2025-01-01T12:00:00+00:00",
            "updated_at": "2025-01-01T12:02:00+00:00"
        }
    """
    job = await job_service.get_job_status(job_id)
    return JobStatusResponse(**job)


@router.post(
    "/{job_id}/requeue",
    response_model=JobStatusResponse,
    status_code=status.HTTP_201_CREATED,
)
@handle_service_errors
async def requeue_job(
    job_id: UUID,
    job_service: JobService = Depends(get_job_service),
) -> JobStatusResponse:
    """
    Enqueue a new job for a failed one.

    Args:
        job_id: Failed job UUID
        job_service: Injected JobService

    Returns:
        JobStatusResponse: The new PENDING job

    Raises:
        HTTPException(404): Job not found
        HTTPException(409): Job is not in error, or its report already exists
    """
    job = await job_service.requeue(job_id)
    return JobStatusResponse(**job)
