"""
Test suite for ReceiptService.

Tests attempt recovery after checkout from the redirect, the receipt's
order, and the last_attempt_id cookie, plus pending order synthesis.

System role: Verification of post-checkout attempt resolution
"""

import uuid

import pytest
from sqlalchemy import func, select

from quizfunnel.application.services.receipt_service import (
    MISSING_ATTEMPT_MESSAGE,
    UNKNOWN_ATTEMPT_MESSAGE,
    WAITING_FOR_SYNC_MESSAGE,
    ReceiptService,
    coerce_product,
)
from quizfunnel.application.services.webhook_service import WebhookService
from quizfunnel.boundary.db.connection import Database
from quizfunnel.boundary.db.CRUD import attempt_crud, order_crud
from quizfunnel.boundary.db.models import (
    PAYOUT_PENDING,
    AttemptStatus,
    JobModel,
    ProductTag,
)
from tests.sample_data import SeedData


async def resolve(database: Database, **kwargs) -> dict:
    params = {"attempt_id": None, "product": None, "receipt_id": None}
    params.update(kwargs)
    async with database.session() as session:
        service = ReceiptService(
            session,
            provider="whop",
            mini_report_amount_cents=700,
            full_assessment_amount_cents=2900,
        )
        return await service.resolve(**params)


class TestResolve:
    """Test suite for ReceiptService.resolve()."""

    @pytest.mark.asyncio
    async def test_resolve_should_record_pending_order_for_new_receipt(
        self, database: Database, seed: SeedData
    ) -> None:
        """A valid attempt plus unknown receipt synthesizes a pending order."""
        # Act
        result = await resolve(
            database,
            attempt_id=str(seed.attempt_id),
            product="full_assessment",
            receipt_id="rcpt_1",
        )

        # Assert
        assert result == {
            "attempt_id": seed.attempt_id,
            "product": "full_assessment",
            "linked": True,
            "message": None,
        }
        async with database.session() as session:
            order = await order_crud.get_by_provider_order_id(session, "rcpt_1")
            attempt = await attempt_crud.get_by_id(session, seed.attempt_id)
            jobs = (await session.execute(select(func.count()).select_from(JobModel))).scalar_one()
        assert order.payout_status == PAYOUT_PENDING
        assert order.amount == 2900
        assert attempt.status == AttemptStatus.FULL_PAID
        assert jobs == 0

    @pytest.mark.asyncio
    async def test_resolve_should_recover_attempt_from_receipt_order(
        self, database: Database, seed: SeedData
    ) -> None:
        """An unsubstituted attempt id is recovered through the webhook's order."""
        # Arrange
        async with database.session() as session:
            await WebhookService(session).handle_event(
                {
                    "type": "order.completed",
                    "data": {
                        "id": "ord_1",
                        "metadata": {
                            "quiz_attempt_id": str(seed.attempt_id),
                            "product": "full_assessment",
                        },
                    },
                }
            )

        # Act
        result = await resolve(
            database,
            attempt_id="{{metadata.quiz_attempt_id}}",
            product="mini_report",
            receipt_id="ord_1",
        )

        # Assert
        assert result["attempt_id"] == seed.attempt_id
        assert result["product"] == "full_assessment"
        assert result["linked"] is True

    @pytest.mark.asyncio
    async def test_resolve_should_fall_back_to_cookie_while_waiting_for_sync(
        self, database: Database, seed: SeedData
    ) -> None:
        """Unknown receipt and bad attempt id use the cookie and ask to wait."""
        # Act
        result = await resolve(
            database,
            attempt_id="undefined",
            receipt_id="rcpt_unsynced",
            cookie_attempt_id=str(seed.attempt_id),
        )

        # Assert
        assert result["attempt_id"] == seed.attempt_id
        assert result["linked"] is True
        assert result["message"] == WAITING_FOR_SYNC_MESSAGE

    @pytest.mark.asyncio
    async def test_resolve_should_report_missing_attempt(
        self, database: Database, seed: SeedData
    ) -> None:
        """Nothing usable anywhere resolves to no attempt."""
        # Act
        result = await resolve(database, attempt_id="{{metadata.quiz_attempt_id}}")

        # Assert
        assert result["attempt_id"] is None
        assert result["linked"] is False
        assert result["message"] == MISSING_ATTEMPT_MESSAGE

    @pytest.mark.asyncio
    async def test_resolve_should_report_unknown_attempt(
        self, database: Database, seed: SeedData
    ) -> None:
        """A well-formed but unknown attempt id is not linked."""
        # Act
        result = await resolve(database, attempt_id=str(uuid.uuid4()), receipt_id="rcpt_2")

        # Assert
        assert result["attempt_id"] is None
        assert result["message"] == UNKNOWN_ATTEMPT_MESSAGE
        async with database.session() as session:
            assert await order_crud.get_by_provider_order_id(session, "rcpt_2") is None

    @pytest.mark.asyncio
    async def test_resolve_should_not_link_without_receipt(
        self, database: Database, seed: SeedData
    ) -> None:
        """Without a receipt id the attempt resolves but nothing is recorded."""
        # Act
        result = await resolve(database, attempt_id=str(seed.attempt_id))

        # Assert
        assert result["attempt_id"] == seed.attempt_id
        assert result["linked"] is False


class TestCoerceProduct:
    """Test suite for redirect product tags."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("full_assessment", ProductTag.FULL_ASSESSMENT),
            ("mini_report", ProductTag.MINI_REPORT),
            (None, ProductTag.MINI_REPORT),
            ("{{metadata.product}}", ProductTag.MINI_REPORT),
        ],
    )
    def test_coerce_product_should_default_to_mini_report(self, value, expected) -> None:
        """Only an exact full_assessment tag selects the upsell."""
        assert coerce_product(value) == expected
