"""
Payment webhook service.

Records a confirmed payment and enqueues report generation. All side
effects of one delivery (order, attempt status, job) commit together, so a
failure leaves nothing behind and the provider's retry starts clean.

Duplicate handling keys on the provider order id:
    - order exists and a job references it -> no-op ("duplicate")
    - order exists without a job (synthesized from a checkout redirect)
      -> correct it to the provider's declared values, enqueue the job
         ("confirmed")
    - unique-constraint collision on the order or its job from a concurrent
      delivery -> "duplicate" once the order and its job are committed,
      otherwise a persistence error so the provider retries

Dependencies: quizfunnel.boundary.db.CRUD, quizfunnel.core.payments
System role: Webhook ingestor orchestration
"""

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from quizfunnel.boundary.db.CRUD import (
    attempt_crud,
    job_crud,
    order_crud,
    user_crud,
)
from quizfunnel.boundary.db.models import (
    PAYOUT_PENDING,
    AttemptStatus,
    OrderModel,
    QuizAttemptModel,
)
from quizfunnel.core.exceptions import (
    AttemptNotFoundError,
    MissingIdentifierError,
    PersistenceError,
    QuizFunnelException,
)
from quizfunnel.core.payments import (
    IgnoredEvent,
    PaymentCompletedEvent,
    parse_payment_event,
)

logger = logging.getLogger(__name__)


def _ack(action: str, job_id=None) -> dict:
    return {"ok": True, "action": action, "job_id": job_id}


class WebhookService:
    """
    Payment webhook orchestrator.

    Parses the delivery, resolves the attempt, and writes order, status,
    and job in one transaction.
    """

    def __init__(
        self,
        db: AsyncSession,
        provider: str = "whop",
        default_amount_cents: int = 700,
    ) -> None:
        """
        Initialize webhook service.

        Args:
            db: AsyncSession for database operations
            provider: Provider name stored on orders
            default_amount_cents: Amount recorded when the event carries none
        """
        self.db = db
        self._provider = provider
        self._default_amount_cents = default_amount_cents

    async def handle_event(self, body: Any) -> dict:
        """
        Process one webhook delivery.

        Args:
            body: Decoded JSON body

        Returns:
            dict: ok, action (ignored | duplicate | confirmed | enqueued), job_id

        Raises:
            MalformedEventError: Body has no recognizable shape
            MissingIdentifierError: No attempt or no provider order id
            AttemptNotFoundError: Metadata names an attempt that does not exist
            PersistenceError: A write failed; nothing was committed
        """
        event = parse_payment_event(body, default_amount_cents=self._default_amount_cents)

        if isinstance(event, IgnoredEvent):
            logger.info("Ignoring webhook event", extra={"event_type": event.event_type})
            return _ack("ignored")

        try:
            return await self._record_payment(event)
        except IntegrityError as e:
            await self.db.rollback()
            if not await self._payment_recorded(event.provider_order_id):
                logger.error(
                    "Integrity failure without a recorded payment",
                    extra={"error": str(e), "provider_order_id": event.provider_order_id},
                )
                raise PersistenceError(
                    "Failed to record order",
                    operation="record_payment",
                    details={"provider_order_id": event.provider_order_id},
                ) from e
            logger.info(
                "Concurrent duplicate delivery",
                extra={"provider_order_id": event.provider_order_id},
            )
            return _ack("duplicate")
        except QuizFunnelException:
            await self.db.rollback()
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                "Failed to record payment",
                extra={"error": str(e), "provider_order_id": event.provider_order_id},
            )
            raise PersistenceError(
                "Failed to record order",
                operation="record_payment",
                details={"provider_order_id": event.provider_order_id},
            ) from e

    async def _payment_recorded(self, provider_order_id: str) -> bool:
        """
        Whether another delivery already committed this order and its job.

        An order without a job (synthesized from a redirect) does not count:
        the delivery fails and the provider's retry confirms it.
        """
        try:
            order = await order_crud.get_by_provider_order_id(self.db, provider_order_id)
            if order is None:
                return False
            return await job_crud.get_by_order_id(self.db, order.id) is not None
        except SQLAlchemyError:
            await self.db.rollback()
            return False

    async def _record_payment(self, event: PaymentCompletedEvent) -> dict:
        if not event.provider_order_id:
            raise MissingIdentifierError(
                "Missing quiz_attempt_id or order id",
                field="data.id",
            )

        existing = await order_crud.get_by_provider_order_id(self.db, event.provider_order_id)
        if existing is not None:
            return await self._confirm_existing_order(existing, event)

        attempt = await self._resolve_attempt(event)

        order = await order_crud.create(
            self.db,
            user_id=attempt.user_id,
            category_id=attempt.category_id,
            affiliate_id=attempt.affiliate_id,
            quiz_attempt_id=attempt.id,
            product=event.product,
            amount=event.amount_cents,
            provider=self._provider,
            provider_order_id=event.provider_order_id,
        )
        await attempt_crud.advance_status(
            self.db, attempt.id, AttemptStatus.for_product(event.product)
        )
        job = await job_crud.enqueue(
            self.db,
            quiz_attempt_id=attempt.id,
            product=event.product,
            order_id=order.id,
        )
        await self.db.commit()

        logger.info(
            "Payment recorded, report job enqueued",
            extra={
                "provider_order_id": event.provider_order_id,
                "attempt_id": str(attempt.id),
                "product": event.product.value,
                "job_id": str(job.id),
            },
        )
        return _ack("enqueued", job.id)

    async def _confirm_existing_order(
        self,
        order: OrderModel,
        event: PaymentCompletedEvent,
    ) -> dict:
        """
        Enqueue the job for an order recorded before this delivery.

        An order without a job was synthesized from the checkout redirect,
        whose product and attempt may be guesses (unsubstituted metadata,
        cookie fallback). What the provider declares here wins; anything it
        leaves out keeps the recorded value.
        """
        job = await job_crud.get_by_order_id(self.db, order.id)
        if job is not None:
            logger.info(
                "Duplicate delivery ignored",
                extra={"provider_order_id": order.provider_order_id, "job_id": str(job.id)},
            )
            return _ack("duplicate")

        attempt_id, product, amount = order.quiz_attempt_id, order.product, order.amount
        if order.payout_status == PAYOUT_PENDING:
            attempt_id = event.quiz_attempt_id or attempt_id
            if event.product_declared:
                product = event.product
            if event.amount_declared:
                amount = event.amount_cents

        attempt = await attempt_crud.get_by_id(self.db, attempt_id)
        if attempt is None:
            raise AttemptNotFoundError(str(attempt_id))

        if (attempt_id, product, amount) != (order.quiz_attempt_id, order.product, order.amount):
            logger.warning(
                "Provider confirmation corrects receipt order",
                extra={
                    "provider_order_id": order.provider_order_id,
                    "recorded_attempt_id": str(order.quiz_attempt_id),
                    "attempt_id": str(attempt_id),
                    "recorded_product": order.product.value,
                    "product": product.value,
                    "recorded_amount": order.amount,
                    "amount": amount,
                },
            )
            await order_crud.confirm_pending(
                self.db, order, attempt=attempt, product=product, amount=amount
            )

        await attempt_crud.advance_status(self.db, attempt.id, AttemptStatus.for_product(product))
        job = await job_crud.enqueue(
            self.db,
            quiz_attempt_id=attempt.id,
            product=product,
            order_id=order.id,
        )
        await self.db.commit()

        logger.info(
            "Receipt order confirmed by provider, report job enqueued",
            extra={
                "provider_order_id": order.provider_order_id,
                "attempt_id": str(attempt.id),
                "product": product.value,
                "job_id": str(job.id),
            },
        )
        return _ack("confirmed", job.id)

    async def _resolve_attempt(self, event: PaymentCompletedEvent) -> QuizAttemptModel:
        """
        Find the attempt a payment belongs to.

        Metadata attempt id first, then the payer's most recent attempt.
        """
        if event.quiz_attempt_id is not None:
            attempt = await attempt_crud.get_by_id(self.db, event.quiz_attempt_id)
            if attempt is None:
                raise AttemptNotFoundError(str(event.quiz_attempt_id))
            return attempt

        if event.payer_email:
            user = await user_crud.get_by_email(self.db, event.payer_email)
            if user is not None:
                attempt = await attempt_crud.get_latest_for_user(self.db, user.id)
                if attempt is not None:
                    logger.info(
                        "Resolved attempt via payer email",
                        extra={"attempt_id": str(attempt.id)},
                    )
                    return attempt

        logger.warning(
            "Webhook missing identifiers",
            extra={"provider_order_id": event.provider_order_id},
        )
        raise MissingIdentifierError(
            "Missing quiz_attempt_id or order id",
            field="metadata.quiz_attempt_id",
        )
