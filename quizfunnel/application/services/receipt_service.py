"""
Attempt identifier recovery after checkout.

The provider's redirect does not always carry a usable attempt id (the
checkout link may leave the template unsubstituted). This service recovers
it from the receipt id or the ``last_attempt_id`` cookie and, when the
provider's webhook has not arrived yet, records a pending order so the
attempt shows as paid. No job is enqueued here; the webhook confirms the
order and enqueues generation.

Dependencies: quizfunnel.boundary.db.CRUD, quizfunnel.core.payments
System role: Post-checkout attempt resolution
"""

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from quizfunnel.boundary.db.CRUD import attempt_crud, order_crud
from quizfunnel.boundary.db.models import PAYOUT_PENDING, AttemptStatus, ProductTag
from quizfunnel.core.exceptions import PersistenceError
from quizfunnel.core.payments import parse_attempt_id

logger = logging.getLogger(__name__)

WAITING_FOR_SYNC_MESSAGE = (
    "We are waiting for your payment to sync. Refresh in a few seconds or "
    "check back from the email once it arrives."
)
MISSING_ATTEMPT_MESSAGE = "No valid quiz attempt identifier was provided."
UNKNOWN_ATTEMPT_MESSAGE = "The quiz attempt could not be found."


def coerce_product(value: str | None) -> ProductTag:
    """Redirect product tag; anything but full_assessment is the mini report."""
    if value == ProductTag.FULL_ASSESSMENT.value:
        return ProductTag.FULL_ASSESSMENT
    return ProductTag.MINI_REPORT


class ReceiptService:
    """Post-checkout attempt resolution orchestrator."""

    def __init__(
        self,
        db: AsyncSession,
        provider: str = "whop",
        mini_report_amount_cents: int = 700,
        full_assessment_amount_cents: int = 2900,
    ) -> None:
        """
        Initialize receipt service.

        Args:
            db: AsyncSession for database operations
            provider: Provider name stored on synthesized orders
            mini_report_amount_cents: Amount recorded for mini report receipts
            full_assessment_amount_cents: Amount recorded for full assessment receipts
        """
        self.db = db
        self._provider = provider
        self._amounts = {
            ProductTag.MINI_REPORT: mini_report_amount_cents,
            ProductTag.FULL_ASSESSMENT: full_assessment_amount_cents,
        }

    async def resolve(
        self,
        attempt_id: str | None,
        product: str | None,
        receipt_id: str | None,
        cookie_attempt_id: str | None = None,
    ) -> dict:
        """
        Resolve the attempt a checkout redirect refers to.

        Order of precedence: redirect attempt id, the order recorded for the
        receipt, then the ``last_attempt_id`` cookie.

        Args:
            attempt_id: Attempt id from the redirect (possibly malformed)
            product: Product tag from the redirect
            receipt_id: Provider receipt id from the redirect
            cookie_attempt_id: Value of the last_attempt_id cookie

        Returns:
            dict: attempt_id (UUID or None), product, linked, message

        Raises:
            PersistenceError: Order synthesis failed
        """
        resolved = parse_attempt_id(attempt_id)
        product_tag = coerce_product(product)
        receipt_id = receipt_id.strip() if receipt_id and receipt_id.strip() else None
        message: str | None = None

        try:
            if resolved is None and receipt_id:
                order = await order_crud.get_by_provider_order_id(self.db, receipt_id)
                if order is not None:
                    resolved = order.quiz_attempt_id
                    product_tag = order.product
                else:
                    message = WAITING_FOR_SYNC_MESSAGE

            if resolved is None:
                resolved = parse_attempt_id(cookie_attempt_id)

            if resolved is None:
                return self._result(None, product_tag, False, message or MISSING_ATTEMPT_MESSAGE)

            if not await attempt_crud.exists(self.db, resolved):
                return self._result(None, product_tag, False, UNKNOWN_ATTEMPT_MESSAGE)

            linked = False
            if receipt_id:
                linked = await self._ensure_order(resolved, product_tag, receipt_id)
        except IntegrityError:
            # The webhook recorded the same receipt between our read and insert
            await self.db.rollback()
            return self._result(resolved, product_tag, True, None)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                "Failed to resolve receipt",
                extra={"error": str(e), "receipt_id": receipt_id},
            )
            raise PersistenceError(
                "Failed to link receipt",
                operation="ensure_order_for_receipt",
                details={"receipt_id": receipt_id},
            ) from e

        return self._result(resolved, product_tag, linked, message)

    async def _ensure_order(
        self,
        attempt_id: UUID,
        product: ProductTag,
        receipt_id: str,
    ) -> bool:
        """
        Record a pending order for the receipt unless one exists.

        Returns:
            True once an order for the receipt exists
        """
        existing = await order_crud.get_by_provider_order_id(self.db, receipt_id)
        if existing is not None:
            return True

        attempt = await attempt_crud.get_by_id(self.db, attempt_id)
        if attempt is None:
            return False

        await order_crud.create(
            self.db,
            user_id=attempt.user_id,
            category_id=attempt.category_id,
            affiliate_id=attempt.affiliate_id,
            quiz_attempt_id=attempt.id,
            product=product,
            amount=self._amounts[product],
            provider=self._provider,
            provider_order_id=receipt_id,
            payout_status=PAYOUT_PENDING,
        )
        await attempt_crud.advance_status(self.db, attempt.id, AttemptStatus.for_product(product))
        await self.db.commit()

        logger.info(
            "Synthesized pending order from receipt",
            extra={"receipt_id": receipt_id, "attempt_id": str(attempt.id), "product": product.value},
        )
        return True

    @staticmethod
    def _result(
        attempt_id: UUID | None,
        product: ProductTag,
        linked: bool,
        message: str | None,
    ) -> dict:
        return {
            "attempt_id": attempt_id,
            "product": product.value,
            "linked": linked,
            "message": message,
        }
