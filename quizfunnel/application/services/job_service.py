"""
Job service orchestrator.

Job inspection and operator requeue. Terminal jobs are never mutated: a
requeue inserts a fresh PENDING job for the same attempt and product, linked
to the failed job. The order stays linked to the original job only.

Dependencies: quizfunnel.boundary.db.CRUD, quizfunnel.boundary.db.models
System role: Job management orchestration
"""

import logging
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from quizfunnel.boundary.db.CRUD import job_crud, report_crud
from quizfunnel.boundary.db.models import JobStatus
from quizfunnel.core.exceptions import JobNotFoundError, JobStateError, PersistenceError

logger = logging.getLogger(__name__)


class JobService:
    """
    Job service orchestrator.

    Provides abstraction over JobCRUD for job operations exposed over HTTP.
    """

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize job service.

        Args:
            db: AsyncSession for database operations
        """
        self.db = db

    async def get_job_status(self, job_id: UUID) -> dict:
        """
        Get job status.

        Args:
            job_id: Job UUID

        Returns:
            dict: Job record (id, quiz_attempt_id, order_id,
                requeued_from_job_id, product, status, error, created_at,
                updated_at)

        Raises:
            JobNotFoundError: If job not found
        """
        job = await job_crud.get_by_id(self.db, job_id)
        if job is None:
            raise JobNotFoundError(str(job_id))
        return job.to_record()

    async def requeue(self, job_id: UUID) -> dict:
        """
        Enqueue a new attempt at a failed job.

        Args:
            job_id: Failed job UUID

        Returns:
            dict: The new PENDING job record

        Raises:
            JobNotFoundError: If job not found
            JobStateError: Job is not in ERROR, or the report already exists
            PersistenceError: Insert failed
        """
        job = await job_crud.get_by_id(self.db, job_id)
        if job is None:
            raise JobNotFoundError(str(job_id))

        if job.status != JobStatus.ERROR:
            raise JobStateError(
                str(job_id),
                job.status.value,
                f"Job {job_id} is {job.status.value}; only failed jobs can be requeued",
            )

        report = await report_crud.get_for_attempt(self.db, job.quiz_attempt_id, job.product)
        if report is not None:
            raise JobStateError(
                str(job_id),
                job.status.value,
                f"Report for attempt {job.quiz_attempt_id} ({job.product.value}) already exists",
            )

        try:
            new_job = await job_crud.enqueue(
                self.db,
                quiz_attempt_id=job.quiz_attempt_id,
                product=job.product,
                requeued_from_job_id=job.id,
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise PersistenceError(
                "Failed to requeue job",
                operation="requeue_job",
                details={"job_id": str(job_id)},
            ) from e

        logger.info(
            "Failed job requeued",
            extra={"job_id": str(job_id), "new_job_id": str(new_job.id)},
        )
        return new_job.to_record()
