"""
Report job ORM model.

Durable queue entry linking a paid order to report generation. The table
is the only synchronization point between the webhook ingestor and the
generation worker.

Dependencies: sqlalchemy, quizfunnel.boundary.db.base
System role: Persisted job queue for report generation
"""

from uuid import UUID

from sqlalchemy import ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column

from quizfunnel.boundary.db.base import Base, TimestampMixin, UUIDMixin, value_enum
from quizfunnel.boundary.db.models.enums import JobStatus, ProductTag


class JobModel(Base, UUIDMixin, TimestampMixin):
    """
    Report generation job.

    Status only moves forward; DONE and ERROR are terminal. The worker
    claims the oldest PENDING row by created_at.

    Attributes:
        id: UUID primary key (auto-generated)
        quiz_attempt_id: Attempt to generate a report for
        order_id: Order that paid for this job; UNIQUE, so one payment
                  enqueues at most one job (None on requeued jobs)
        requeued_from_job_id: Failed job this one retries (operator requeue)
        product: Report tier to generate
        status: Current execution state
        error: Failure detail when status is ERROR
        created_at: Enqueue timestamp (UTC), defines queue order
        updated_at: Last status change (UTC)

    Workflow:
        1. Webhook ingestor inserts the row with status=PENDING
        2. Worker flips PENDING -> PROCESSING with a conditional update
        3. Worker writes the report and sets DONE, or records ERROR
        4. Client polls /reports/{attempt_id} which reports this status
    """

    __tablename__ = "report_jobs"

    quiz_attempt_id: Mapped[UUID] = mapped_column(
        ForeignKey("quiz_attempts.id"),
        nullable=False,
        index=True,
    )
    order_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("orders.id"),
        nullable=True,
        default=None,
        unique=True,
        doc="Paying order; concurrent deliveries of one order collide here",
    )
    requeued_from_job_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("report_jobs.id"),
        nullable=True,
        default=None,
    )
    product: Mapped[ProductTag] = mapped_column(value_enum(ProductTag), nullable=False)
    status: Mapped[JobStatus] = mapped_column(
        value_enum(JobStatus),
        nullable=False,
        default=JobStatus.PENDING,
        index=True,
    )
    error: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)

    def to_record(self) -> dict:
        """Wire representation of the job."""
        return {
            "id": str(self.id),
            "quiz_attempt_id": str(self.quiz_attempt_id),
            "order_id": str(self.order_id) if self.order_id else None,
            "requeued_from_job_id": (
                str(self.requeued_from_job_id) if self.requeued_from_job_id else None
            ),
            "product": self.product.value,
            "status": self.status.value,
            "error": self.error,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
