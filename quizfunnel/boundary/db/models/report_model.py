"""
Report ORM model.

Generated report for one (attempt, product) pair. Its existence is the
signal polling clients wait for. Written once by the worker, never updated.

Dependencies: sqlalchemy, quizfunnel.boundary.db.base
System role: Durable generation output
"""

from uuid import UUID

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from quizfunnel.boundary.db.base import Base, TimestampMixin, UUIDMixin, value_enum
from quizfunnel.boundary.db.models.enums import ProductTag


class ReportModel(Base, UUIDMixin, TimestampMixin):
    """
    Generated report document.

    Attributes:
        quiz_attempt_id: Attempt the report belongs to
        type: Product tier of the report
        html: Generated document body
        pdf_url: Public link to the rendered PDF
        audio_url: Public link to an audio summary, if one was produced

    Constraints:
        (quiz_attempt_id, type): UNIQUE; one report per attempt and tier
    """

    __tablename__ = "reports"
    __table_args__ = (
        UniqueConstraint("quiz_attempt_id", "type", name="uq_reports_attempt_type"),
    )

    quiz_attempt_id: Mapped[UUID] = mapped_column(
        ForeignKey("quiz_attempts.id"),
        nullable=False,
        index=True,
    )
    type: Mapped[ProductTag] = mapped_column(value_enum(ProductTag), nullable=False)
    html: Mapped[str] = mapped_column(Text, nullable=False)
    pdf_url: Mapped[str | None] = mapped_column(String(2048), nullable=True, default=None)
    audio_url: Mapped[str | None] = mapped_column(String(2048), nullable=True, default=None)

    def to_record(self) -> dict:
        """Wire representation returned to polling clients."""
        return {
            "id": str(self.id),
            "quiz_attempt_id": str(self.quiz_attempt_id),
            "type": self.type.value,
            "html": self.html,
            "pdf_url": self.pdf_url,
            "audio_url": self.audio_url,
        }
