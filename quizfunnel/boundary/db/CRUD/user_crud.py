"""
User and affiliate CRUD operations.

Dependencies: sqlalchemy, quizfunnel.boundary.db.models
System role: Visitor identity lookups
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quizfunnel.boundary.db.CRUD.base_crud import BaseCRUD
from quizfunnel.boundary.db.models.user_model import AffiliateModel, UserModel


def normalize_email(email: str) -> str:
    """Canonical form used for storage and lookup."""
    return email.strip().lower()


class UserCRUD(BaseCRUD[UserModel]):
    """CRUD operations for UserModel."""

    def __init__(self) -> None:
        """Initialize UserCRUD with UserModel."""
        super().__init__(UserModel)

    async def get_by_email(self, session: AsyncSession, email: str) -> UserModel | None:
        """
        Retrieve user by email address (case-insensitive).

        Args:
            session: Async database session
            email: Email address

        Returns:
            UserModel if found, None otherwise
        """
        stmt = select(UserModel).where(UserModel.email == normalize_email(email))
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_or_create(self, session: AsyncSession, email: str) -> UserModel:
        """
        Return the user for an email, creating it on first sight.

        Args:
            session: Async database session
            email: Email address

        Returns:
            UserModel: Existing or newly flushed user
        """
        user = await self.get_by_email(session, email)
        if user is not None:
            return user
        return await self.create(session, email=normalize_email(email))


class AffiliateCRUD(BaseCRUD[AffiliateModel]):
    """CRUD operations for AffiliateModel."""

    def __init__(self) -> None:
        """Initialize AffiliateCRUD with AffiliateModel."""
        super().__init__(AffiliateModel)

    async def get_by_handle(self, session: AsyncSession, handle: str) -> AffiliateModel | None:
        """Retrieve affiliate by public handle."""
        stmt = select(AffiliateModel).where(AffiliateModel.handle == handle)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()


user_crud = UserCRUD()
affiliate_crud = AffiliateCRUD()
