"""
Category, question set, and prompt CRUD operations.

Read-only from the pipeline's point of view; content is authored elsewhere.

Dependencies: sqlalchemy, quizfunnel.boundary.db.models
System role: Quiz content lookups for scoring and generation
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quizfunnel.boundary.db.CRUD.base_crud import BaseCRUD
from quizfunnel.boundary.db.models.category_model import (
    CategoryModel,
    PromptModel,
    QuestionSetModel,
)
from quizfunnel.boundary.db.models.enums import ProductTag


class CategoryCRUD(BaseCRUD[CategoryModel]):
    """CRUD operations for CategoryModel."""

    def __init__(self) -> None:
        """Initialize CategoryCRUD with CategoryModel."""
        super().__init__(CategoryModel)

    async def get_by_slug(self, session: AsyncSession, slug: str) -> CategoryModel | None:
        """
        Retrieve category by URL slug.

        Args:
            session: Async database session
            slug: Category slug

        Returns:
            CategoryModel if found, None otherwise
        """
        stmt = select(CategoryModel).where(CategoryModel.slug == slug)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()


class QuestionSetCRUD(BaseCRUD[QuestionSetModel]):
    """CRUD operations for QuestionSetModel."""

    def __init__(self) -> None:
        """Initialize QuestionSetCRUD with QuestionSetModel."""
        super().__init__(QuestionSetModel)

    async def get_latest_for_category(
        self,
        session: AsyncSession,
        category_id: UUID,
    ) -> QuestionSetModel | None:
        """
        Retrieve the highest-version question set of a category.

        Args:
            session: Async database session
            category_id: Category UUID

        Returns:
            QuestionSetModel if the category has one, None otherwise
        """
        stmt = (
            select(QuestionSetModel)
            .where(QuestionSetModel.category_id == category_id)
            .order_by(QuestionSetModel.version.desc())
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()


class PromptCRUD(BaseCRUD[PromptModel]):
    """CRUD operations for PromptModel."""

    def __init__(self) -> None:
        """Initialize PromptCRUD with PromptModel."""
        super().__init__(PromptModel)

    async def get_for_product(
        self,
        session: AsyncSession,
        category_id: UUID,
        product: ProductTag,
    ) -> PromptModel | None:
        """
        Retrieve the prompt template for a (category, product) pair.

        Args:
            session: Async database session
            category_id: Category UUID
            product: Product tier

        Returns:
            PromptModel if configured, None otherwise
        """
        stmt = select(PromptModel).where(
            PromptModel.category_id == category_id,
            PromptModel.type == product,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()


category_crud = CategoryCRUD()
question_set_crud = QuestionSetCRUD()
prompt_crud = PromptCRUD()
