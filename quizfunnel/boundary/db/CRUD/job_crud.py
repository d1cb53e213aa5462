"""
Report job CRUD operations.

Provides enqueue, atomic claim, and terminal transitions for JobModel.
Every status write is a conditional UPDATE guarded by the expected current
status, so a job can be claimed once and finalized once even if more than
one worker ever runs.

Dependencies: sqlalchemy, quizfunnel.boundary.db.models
System role: Job queue persistence operations
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from quizfunnel.boundary.db.base import utcnow
from quizfunnel.boundary.db.CRUD.base_crud import BaseCRUD
from quizfunnel.boundary.db.models.enums import JobStatus, ProductTag
from quizfunnel.boundary.db.models.job_model import JobModel

# Lost races before giving up on a claim cycle
MAX_CLAIM_ATTEMPTS = 5


class JobCRUD(BaseCRUD[JobModel]):
    """
    CRUD operations for JobModel.

    Extends BaseCRUD with queue semantics: oldest-first claim and
    monotonic status transitions.
    """

    def __init__(self) -> None:
        """Initialize JobCRUD with JobModel."""
        super().__init__(JobModel)

    async def enqueue(
        self,
        session: AsyncSession,
        quiz_attempt_id: UUID,
        product: ProductTag,
        order_id: UUID | None = None,
        requeued_from_job_id: UUID | None = None,
    ) -> JobModel:
        """
        Insert a PENDING job.

        Args:
            session: Async database session
            quiz_attempt_id: Attempt to generate for
            product: Report tier
            order_id: Order that paid for the job (unique across jobs)
            requeued_from_job_id: Failed job this one retries

        Returns:
            JobModel: Flushed job row
        """
        return await self.create(
            session,
            quiz_attempt_id=quiz_attempt_id,
            product=product,
            order_id=order_id,
            requeued_from_job_id=requeued_from_job_id,
            status=JobStatus.PENDING,
        )

    async def get_oldest_pending(self, session: AsyncSession) -> JobModel | None:
        """
        Retrieve the pending job that was enqueued first.

        Args:
            session: Async database session

        Returns:
            JobModel if the queue is not empty, None otherwise
        """
        stmt = (
            select(JobModel)
            .where(JobModel.status == JobStatus.PENDING)
            .order_by(JobModel.created_at.asc(), JobModel.id.asc())
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def _transition(
        self,
        session: AsyncSession,
        id: UUID,
        expected: JobStatus,
        target: JobStatus,
        error: str | None = None,
    ) -> bool:
        """Conditionally move a job from ``expected`` to ``target``."""
        values: dict = {"status": target, "updated_at": utcnow()}
        if error is not None:
            values["error"] = error
        stmt = (
            update(JobModel)
            .where(JobModel.id == id, JobModel.status == expected)
            .values(**values)
        )
        result = await session.execute(stmt)
        return result.rowcount == 1

    async def claim(self, session: AsyncSession, id: UUID) -> bool:
        """
        Flip a job PENDING -> PROCESSING.

        Args:
            session: Async database session
            id: Job UUID

        Returns:
            True if this caller won the claim, False if the job was no longer pending
        """
        return await self._transition(session, id, JobStatus.PENDING, JobStatus.PROCESSING)

    async def claim_next(self, session: AsyncSession) -> JobModel | None:
        """
        Claim the oldest pending job and commit the claim.

        The claim is committed before returning so a crash during processing
        leaves the job visibly PROCESSING rather than silently PENDING.

        Args:
            session: Async database session

        Returns:
            JobModel now in PROCESSING, or None when nothing is pending
        """
        for _ in range(MAX_CLAIM_ATTEMPTS):
            candidate = await self.get_oldest_pending(session)
            if candidate is None:
                return None
            job_id = candidate.id
            claimed = await self.claim(session, job_id)
            await session.commit()
            if claimed:
                job = await self.get_by_id(session, job_id)
                if job is not None:
                    await session.refresh(job)
                return job
        return None

    async def mark_done(self, session: AsyncSession, id: UUID) -> bool:
        """
        Flip a job PROCESSING -> DONE.

        Returns:
            True if the transition happened
        """
        return await self._transition(session, id, JobStatus.PROCESSING, JobStatus.DONE)

    async def mark_failed(self, session: AsyncSession, id: UUID, error: str) -> bool:
        """
        Flip a job PROCESSING -> ERROR with failure detail.

        Args:
            session: Async database session
            id: Job UUID
            error: Failure detail shown to operators and pollers

        Returns:
            True if the transition happened
        """
        return await self._transition(
            session, id, JobStatus.PROCESSING, JobStatus.ERROR, error=error
        )

    async def get_latest_for_attempt(
        self,
        session: AsyncSession,
        quiz_attempt_id: UUID,
        product: ProductTag | None = None,
    ) -> JobModel | None:
        """
        Retrieve the most recently enqueued job of an attempt.

        Args:
            session: Async database session
            quiz_attempt_id: Attempt UUID
            product: Restrict to one tier when given

        Returns:
            JobModel if any job exists, None otherwise
        """
        stmt = select(JobModel).where(JobModel.quiz_attempt_id == quiz_attempt_id)
        if product is not None:
            stmt = stmt.where(JobModel.product == product)
        stmt = stmt.order_by(JobModel.created_at.desc()).limit(1)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_order_id(self, session: AsyncSession, order_id: UUID) -> JobModel | None:
        """Retrieve the job an order paid for."""
        stmt = select(JobModel).where(JobModel.order_id == order_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_status(
        self,
        session: AsyncSession,
        status: JobStatus,
        limit: int | None = None,
    ) -> Sequence[JobModel]:
        """
        Retrieve jobs by execution status, oldest first.

        Args:
            session: Async database session
            status: Job execution status to filter by
            limit: Maximum number of jobs to return

        Returns:
            Sequence of JobModels with matching status
        """
        stmt = (
            select(JobModel)
            .where(JobModel.status == status)
            .order_by(JobModel.created_at.asc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_stale_processing(
        self,
        session: AsyncSession,
        older_than: datetime,
    ) -> Sequence[JobModel]:
        """
        Retrieve PROCESSING jobs whose last update predates ``older_than``.

        Args:
            session: Async database session
            older_than: Cutoff timestamp (UTC)

        Returns:
            Sequence of abandoned jobs
        """
        stmt = select(JobModel).where(
            JobModel.status == JobStatus.PROCESSING,
            JobModel.updated_at < older_than,
        )
        result = await session.execute(stmt)
        return result.scalars().all()


job_crud = JobCRUD()
