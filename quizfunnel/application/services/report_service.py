"""
Report polling service.

Read-only view over reports and jobs for clients waiting on generation.

Dependencies: quizfunnel.boundary.db.CRUD
System role: Result poller (server side)
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from quizfunnel.boundary.db.CRUD import attempt_crud, job_crud, report_crud
from quizfunnel.boundary.db.models import JobStatus, ProductTag
from quizfunnel.core.exceptions import AttemptNotFoundError

NOT_ENQUEUED = "not_enqueued"


class ReportService:
    """Result poller orchestrator. Never writes."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize report service.

        Args:
            db: AsyncSession for database operations
        """
        self.db = db

    async def poll(self, attempt_id: UUID, product: ProductTag | None = None) -> dict:
        """
        Report for an attempt, or why it is not there yet.

        Args:
            attempt_id: Quiz attempt UUID
            product: Tier to wait for; newest report of any tier when None

        Returns:
            dict: {"ready": True, "report": {...}} or
                {"ready": False, "status": pending|processing|error|not_enqueued,
                 "error": detail or None}

        Raises:
            AttemptNotFoundError: Unknown attempt
        """
        if not await attempt_crud.exists(self.db, attempt_id):
            raise AttemptNotFoundError(str(attempt_id))

        report = await report_crud.get_for_attempt(self.db, attempt_id, product)
        if report is not None:
            return {"ready": True, "report": report.to_record()}

        job = await job_crud.get_latest_for_attempt(self.db, attempt_id, product)
        if job is None:
            return {"ready": False, "status": NOT_ENQUEUED, "error": None}

        if job.status == JobStatus.ERROR:
            return {"ready": False, "status": job.status.value, "error": job.error}

        # DONE commits together with its report, so a DONE job without one
        # means the report row is not visible to this read yet.
        status = JobStatus.PROCESSING if job.status == JobStatus.DONE else job.status
        return {"ready": False, "status": status.value, "error": None}
