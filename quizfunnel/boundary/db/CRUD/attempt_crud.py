"""
Quiz attempt CRUD operations.

Status changes go through advance_status only, which refuses to move an
attempt backwards.

Dependencies: sqlalchemy, quizfunnel.boundary.db.models
System role: Attempt store persistence
"""

from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from quizfunnel.boundary.db.base import utcnow
from quizfunnel.boundary.db.CRUD.base_crud import BaseCRUD
from quizfunnel.boundary.db.models.enums import AttemptStatus
from quizfunnel.boundary.db.models.quiz_attempt_model import QuizAttemptModel


class AttemptCRUD(BaseCRUD[QuizAttemptModel]):
    """CRUD operations for QuizAttemptModel."""

    def __init__(self) -> None:
        """Initialize AttemptCRUD with QuizAttemptModel."""
        super().__init__(QuizAttemptModel)

    async def get_latest_for_user(
        self,
        session: AsyncSession,
        user_id: UUID,
    ) -> QuizAttemptModel | None:
        """
        Retrieve a user's most recently created attempt.

        Args:
            session: Async database session
            user_id: Owning user UUID

        Returns:
            QuizAttemptModel if the user has any attempt, None otherwise
        """
        stmt = (
            select(QuizAttemptModel)
            .where(QuizAttemptModel.user_id == user_id)
            .order_by(QuizAttemptModel.created_at.desc())
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def advance_status(
        self,
        session: AsyncSession,
        id: UUID,
        status: AttemptStatus,
    ) -> bool:
        """
        Raise an attempt's status, never lowering it.

        The conditional WHERE makes the check and the write one statement,
        so a late mini_paid delivery cannot overwrite full_paid.

        Args:
            session: Async database session
            id: Attempt UUID
            status: Target status

        Returns:
            True if the row changed, False if it was already at or above status
        """
        lower = status.statuses_below()
        if not lower:
            return False
        stmt = (
            update(QuizAttemptModel)
            .where(QuizAttemptModel.id == id, QuizAttemptModel.status.in_(lower))
            .values(status=status, updated_at=utcnow())
        )
        result = await session.execute(stmt)
        return result.rowcount > 0


attempt_crud = AttemptCRUD()
