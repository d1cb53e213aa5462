"""
Test suite for JobCRUD queue operations.

Tests enqueue, oldest-first claim, claim exclusivity, and the one-shot
terminal transitions against an in-memory SQLite database.

System role: Verification of job persistence layer for the report queue
"""

from datetime import timedelta

import pytest
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError

from quizfunnel.boundary.db.base import utcnow
from quizfunnel.boundary.db.connection import Database
from quizfunnel.boundary.db.CRUD import job_crud, order_crud
from quizfunnel.boundary.db.models import JobModel, JobStatus, ProductTag
from tests.sample_data import SeedData


async def enqueue(database: Database, seed: SeedData, product=ProductTag.MINI_REPORT) -> JobModel:
    async with database.session() as session:
        job = await job_crud.enqueue(session, quiz_attempt_id=seed.attempt_id, product=product)
        await session.commit()
        return job


async def reload(database: Database, job_id) -> JobModel:
    async with database.session() as session:
        return await job_crud.get_by_id(session, job_id)


class TestJobCRUDInit:
    """Test suite for JobCRUD initialization."""

    def test_init_should_set_model_to_job_model(self) -> None:
        """Test JobCRUD initializes with JobModel."""
        assert job_crud.model == JobModel


class TestJobCRUDEnqueue:
    """Test suite for JobCRUD.enqueue()."""

    @pytest.mark.asyncio
    async def test_enqueue_should_insert_pending_job(
        self, database: Database, seed: SeedData
    ) -> None:
        """New jobs start PENDING without error detail."""
        # Act
        job = await enqueue(database, seed)

        # Assert
        stored = await reload(database, job.id)
        assert stored.status == JobStatus.PENDING
        assert stored.error is None
        assert stored.product == ProductTag.MINI_REPORT

    @pytest.mark.asyncio
    async def test_enqueue_should_allow_one_job_per_order(
        self, database: Database, seed: SeedData
    ) -> None:
        """A second job for the same order violates the unique order link."""
        # Arrange
        async with database.session() as session:
            order = await order_crud.create(
                session,
                user_id=seed.user_id,
                category_id=seed.category_id,
                quiz_attempt_id=seed.attempt_id,
                product=ProductTag.MINI_REPORT,
                amount=700,
                provider="whop",
                provider_order_id="ord_unique",
            )
            await job_crud.enqueue(
                session,
                quiz_attempt_id=seed.attempt_id,
                product=ProductTag.MINI_REPORT,
                order_id=order.id,
            )
            await session.commit()

        # Act & Assert
        async with database.session() as session:
            with pytest.raises(IntegrityError):
                await job_crud.enqueue(
                    session,
                    quiz_attempt_id=seed.attempt_id,
                    product=ProductTag.MINI_REPORT,
                    order_id=order.id,
                )
            await session.rollback()


class TestJobCRUDClaim:
    """Test suite for JobCRUD.claim() and claim_next()."""

    @pytest.mark.asyncio
    async def test_claim_next_should_take_oldest_pending_job(
        self, database: Database, seed: SeedData
    ) -> None:
        """The job enqueued first is claimed first."""
        # Arrange
        older = await enqueue(database, seed)
        newer = await enqueue(database, seed, ProductTag.FULL_ASSESSMENT)
        async with database.session() as session:
            await session.execute(
                update(JobModel)
                .where(JobModel.id == older.id)
                .values(created_at=utcnow() - timedelta(minutes=5))
            )
            await session.commit()

        # Act
        async with database.session() as session:
            claimed = await job_crud.claim_next(session)

        # Assert
        assert claimed.id == older.id
        assert claimed.status == JobStatus.PROCESSING
        assert (await reload(database, newer.id)).status == JobStatus.PENDING

    @pytest.mark.asyncio
    async def test_claim_next_should_return_none_when_queue_empty(
        self, database: Database, seed: SeedData
    ) -> None:
        """Empty queue yields no job."""
        async with database.session() as session:
            assert await job_crud.claim_next(session) is None

    @pytest.mark.asyncio
    async def test_claim_should_succeed_only_once(
        self, database: Database, seed: SeedData
    ) -> None:
        """A second claim of the same job loses."""
        # Arrange
        job = await enqueue(database, seed)

        # Act
        async with database.session() as session:
            first = await job_crud.claim(session, job.id)
            await session.commit()
        async with database.session() as session:
            second = await job_crud.claim(session, job.id)
            await session.commit()

        # Assert
        assert first is True
        assert second is False

    @pytest.mark.asyncio
    async def test_claim_next_should_skip_claimed_jobs(
        self, database: Database, seed: SeedData
    ) -> None:
        """Two consecutive claim cycles never return the same job."""
        # Arrange
        await enqueue(database, seed)
        await enqueue(database, seed, ProductTag.FULL_ASSESSMENT)

        # Act
        async with database.session() as session:
            first = await job_crud.claim_next(session)
        async with database.session() as session:
            second = await job_crud.claim_next(session)
        async with database.session() as session:
            third = await job_crud.claim_next(session)

        # Assert
        assert first.id != second.id
        assert third is None


class TestJobCRUDTerminalTransitions:
    """Test suite for mark_done() and mark_failed()."""

    @pytest.mark.asyncio
    async def test_mark_done_should_require_processing(
        self, database: Database, seed: SeedData
    ) -> None:
        """A pending job cannot jump to DONE."""
        # Arrange
        job = await enqueue(database, seed)

        # Act
        async with database.session() as session:
            moved = await job_crud.mark_done(session, job.id)
            await session.commit()

        # Assert
        assert moved is False
        assert (await reload(database, job.id)).status == JobStatus.PENDING

    @pytest.mark.asyncio
    async def test_mark_failed_should_record_error_once(
        self, database: Database, seed: SeedData
    ) -> None:
        """ERROR is terminal: later transitions are refused."""
        # Arrange
        job = await enqueue(database, seed)
        async with database.session() as session:
            await job_crud.claim_next(session)

        # Act
        async with database.session() as session:
            failed = await job_crud.mark_failed(session, job.id, "generation failed")
            done = await job_crud.mark_done(session, job.id)
            failed_again = await job_crud.mark_failed(session, job.id, "second failure")
            await session.commit()

        # Assert
        stored = await reload(database, job.id)
        assert (failed, done, failed_again) == (True, False, False)
        assert stored.status == JobStatus.ERROR
        assert stored.error == "generation failed"


class TestJobCRUDQueries:
    """Test suite for JobCRUD read helpers."""

    @pytest.mark.asyncio
    async def test_get_stale_processing_should_return_old_processing_jobs(
        self, database: Database, seed: SeedData
    ) -> None:
        """Only PROCESSING jobs not updated since the cutoff are stale."""
        # Arrange
        stale = await enqueue(database, seed)
        fresh = await enqueue(database, seed, ProductTag.FULL_ASSESSMENT)
        async with database.session() as session:
            await session.execute(
                update(JobModel)
                .where(JobModel.id == stale.id)
                .values(status=JobStatus.PROCESSING, updated_at=utcnow() - timedelta(hours=1))
            )
            await session.execute(
                update(JobModel)
                .where(JobModel.id == fresh.id)
                .values(status=JobStatus.PROCESSING, updated_at=utcnow())
            )
            await session.commit()

        # Act
        async with database.session() as session:
            result = await job_crud.get_stale_processing(
                session, utcnow() - timedelta(minutes=15)
            )

        # Assert
        assert [job.id for job in result] == [stale.id]

    @pytest.mark.asyncio
    async def test_get_latest_for_attempt_should_filter_by_product(
        self, database: Database, seed: SeedData
    ) -> None:
        """Product filter selects the job of that tier."""
        # Arrange
        mini = await enqueue(database, seed)
        full = await enqueue(database, seed, ProductTag.FULL_ASSESSMENT)

        # Act
        async with database.session() as session:
            latest_mini = await job_crud.get_latest_for_attempt(
                session, seed.attempt_id, ProductTag.MINI_REPORT
            )
            latest_full = await job_crud.get_latest_for_attempt(
                session, seed.attempt_id, ProductTag.FULL_ASSESSMENT
            )

        # Assert
        assert latest_mini.id == mini.id
        assert latest_full.id == full.id

    @pytest.mark.asyncio
    async def test_get_by_status_should_respect_limit(
        self, database: Database, seed: SeedData
    ) -> None:
        """limit caps the number of returned jobs."""
        # Arrange
        for _ in range(3):
            await enqueue(database, seed)

        # Act
        async with database.session() as session:
            jobs = await job_crud.get_by_status(session, JobStatus.PENDING, limit=2)

        # Assert
        assert len(jobs) == 2
