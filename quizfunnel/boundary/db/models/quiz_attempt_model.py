"""
Quiz attempt ORM model.

One completed quiz response. Answers and archetype are fixed at creation;
status is the only column that changes afterwards and it only moves
forward (teaser_shown -> mini_paid -> full_paid).

Dependencies: sqlalchemy, quizfunnel.boundary.db.base
System role: Durable attempt record every pipeline stage hangs off
"""

from uuid import UUID

from sqlalchemy import JSON, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from quizfunnel.boundary.db.base import Base, TimestampMixin, UUIDMixin, value_enum
from quizfunnel.boundary.db.models.enums import AttemptStatus


class QuizAttemptModel(Base, UUIDMixin, TimestampMixin):
    """
    Quiz attempt with scored archetype and payment status.

    Attributes:
        id: UUID primary key, the attempt identifier carried through checkout
        user_id: Owning visitor
        category_id: Quiz category answered
        affiliate_id: Referring affiliate, if any
        question_set_id: Question set version used for scoring
        answers: Ordered list of {"id": question_id, "choice": option_key}
        archetype: Archetype key assigned by the scoring engine
        teaser_html: Free teaser shown after submission
        status: Highest payment tier confirmed
    """

    __tablename__ = "quiz_attempts"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    category_id: Mapped[UUID] = mapped_column(
        ForeignKey("categories.id"),
        nullable=False,
        index=True,
    )
    affiliate_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("affiliates.id", ondelete="SET NULL"),
        nullable=True,
        default=None,
    )
    question_set_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("question_sets.id", ondelete="SET NULL"),
        nullable=True,
        default=None,
    )
    answers: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    archetype: Mapped[str] = mapped_column(String(120), nullable=False)
    teaser_html: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    status: Mapped[AttemptStatus] = mapped_column(
        value_enum(AttemptStatus),
        nullable=False,
        default=AttemptStatus.TEASER_SHOWN,
    )
