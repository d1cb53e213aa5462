"""
Order ORM model.

One row per confirmed payment. provider_order_id is unique across all
orders and is the only guard against duplicate webhook deliveries. Orders
are never deleted. A pending order synthesized from a checkout redirect is
corrected to the provider's product, amount, and attempt when the webhook
confirms it; an order that already backs a job is never updated.

Dependencies: sqlalchemy, quizfunnel.boundary.db.base
System role: Payment ledger and idempotency key store
"""

from uuid import UUID

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from quizfunnel.boundary.db.base import Base, TimestampMixin, UUIDMixin, value_enum
from quizfunnel.boundary.db.models.enums import ProductTag

PAYOUT_PENDING = "pending"


class OrderModel(Base, UUIDMixin, TimestampMixin):
    """
    Recorded payment for a quiz attempt.

    Attributes:
        user_id: Paying visitor (copied from the attempt)
        category_id: Category of the attempt
        affiliate_id: Referring affiliate of the attempt
        quiz_attempt_id: Attempt the payment unlocks
        product: Purchased tier
        amount: Amount in cents
        provider: Payment provider name
        provider_order_id: Provider-assigned order/receipt id (UNIQUE)
        payout_status: "pending" when synthesized from a checkout redirect
                       before the provider's webhook arrived, else None
    """

    __tablename__ = "orders"

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    category_id: Mapped[UUID] = mapped_column(ForeignKey("categories.id"), nullable=False)
    affiliate_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("affiliates.id", ondelete="SET NULL"),
        nullable=True,
        default=None,
    )
    quiz_attempt_id: Mapped[UUID] = mapped_column(
        ForeignKey("quiz_attempts.id"),
        nullable=False,
        index=True,
    )
    product: Mapped[ProductTag] = mapped_column(value_enum(ProductTag), nullable=False)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    provider: Mapped[str] = mapped_column(String(50), nullable=False)
    provider_order_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        doc="Provider order id; duplicate deliveries collide here",
    )
    payout_status: Mapped[str | None] = mapped_column(String(20), nullable=True, default=None)
