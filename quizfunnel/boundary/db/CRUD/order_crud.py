"""
Order CRUD operations.

Orders are insert-only, with one exception: a pending order synthesized
from a checkout redirect is corrected once when the provider confirms it.

Dependencies: sqlalchemy, quizfunnel.boundary.db.models
System role: Payment ledger lookups for duplicate-delivery detection
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quizfunnel.boundary.db.CRUD.base_crud import BaseCRUD
from quizfunnel.boundary.db.models.enums import ProductTag
from quizfunnel.boundary.db.models.order_model import PAYOUT_PENDING, OrderModel
from quizfunnel.boundary.db.models.quiz_attempt_model import QuizAttemptModel


class OrderCRUD(BaseCRUD[OrderModel]):
    """CRUD operations for OrderModel."""

    def __init__(self) -> None:
        """Initialize OrderCRUD with OrderModel."""
        super().__init__(OrderModel)

    async def get_by_provider_order_id(
        self,
        session: AsyncSession,
        provider_order_id: str,
    ) -> OrderModel | None:
        """
        Retrieve order by provider-assigned id.

        Args:
            session: Async database session
            provider_order_id: Provider order or receipt id

        Returns:
            OrderModel if recorded, None otherwise
        """
        stmt = select(OrderModel).where(OrderModel.provider_order_id == provider_order_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def confirm_pending(
        self,
        session: AsyncSession,
        order: OrderModel,
        attempt: QuizAttemptModel,
        product: ProductTag,
        amount: int,
    ) -> OrderModel:
        """
        Overwrite a redirect-synthesized order with the provider's values.

        Args:
            session: Async database session
            order: Order with payout_status "pending"
            attempt: Attempt the provider says was paid for
            product: Tier the provider says was paid for
            amount: Amount in cents the provider charged

        Returns:
            OrderModel: The flushed, corrected order

        Raises:
            ValueError: If the order was not synthesized from a redirect
        """
        if order.payout_status != PAYOUT_PENDING:
            raise ValueError(f"Order {order.id} is confirmed and cannot be changed")

        order.quiz_attempt_id = attempt.id
        order.user_id = attempt.user_id
        order.category_id = attempt.category_id
        order.affiliate_id = attempt.affiliate_id
        order.product = product
        order.amount = amount
        await session.flush()
        return order


order_crud = OrderCRUD()
