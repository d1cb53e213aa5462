"""
Report CRUD operations.

Dependencies: sqlalchemy, quizfunnel.boundary.db.models
System role: Generated report persistence and polling reads
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quizfunnel.boundary.db.CRUD.base_crud import BaseCRUD
from quizfunnel.boundary.db.models.enums import ProductTag
from quizfunnel.boundary.db.models.report_model import ReportModel


class ReportCRUD(BaseCRUD[ReportModel]):
    """CRUD operations for ReportModel. Reports are insert-only."""

    def __init__(self) -> None:
        """Initialize ReportCRUD with ReportModel."""
        super().__init__(ReportModel)

    async def get_for_attempt(
        self,
        session: AsyncSession,
        quiz_attempt_id: UUID,
        product: ProductTag | None = None,
    ) -> ReportModel | None:
        """
        Retrieve an attempt's report.

        Args:
            session: Async database session
            quiz_attempt_id: Attempt UUID
            product: Tier to fetch; the newest report of any tier when None

        Returns:
            ReportModel if generated, None otherwise
        """
        stmt = select(ReportModel).where(ReportModel.quiz_attempt_id == quiz_attempt_id)
        if product is not None:
            stmt = stmt.where(ReportModel.type == product)
        stmt = stmt.order_by(ReportModel.created_at.desc()).limit(1)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()


report_crud = ReportCRUD()
