"""
Report generation worker.

Single consumer of the report_jobs queue. Each cycle claims the oldest
pending job, generates the report text, renders and stores the PDF, writes
the report row, and marks the job done. Any failure moves the job to error
with its detail; nothing is retried automatically.

Run:
    python -m quizfunnel.workers.report_worker

Dependencies: quizfunnel.boundary, quizfunnel.core.generation, python-dotenv
System role: Generation worker process
"""

import asyncio
import logging
import signal
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Awaitable, Protocol
from uuid import UUID

from dotenv import load_dotenv
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError

from quizfunnel.boundary.aws.s3_client import S3ReportClient
from quizfunnel.boundary.db.base import utcnow
from quizfunnel.boundary.db.connection import Database
from quizfunnel.boundary.db.CRUD import (
    attempt_crud,
    job_crud,
    prompt_crud,
    question_set_crud,
    report_crud,
)
from quizfunnel.boundary.db.models import JobModel, ProductTag
from quizfunnel.boundary.render.pdf_renderer import PdfRenderer
from quizfunnel.configs import Settings, get_settings
from quizfunnel.core.exceptions import (
    AttemptNotFoundError,
    PromptNotFoundError,
    QuizFunnelException,
    StageTimeoutError,
)
from quizfunnel.core.generation import ReportWriter, build_report_prompt
from quizfunnel.models.question_schema import QuestionSchema
from quizfunnel.observability.correlation import clear_correlation_id, set_correlation_id
from quizfunnel.observability.logger import configure_logging

logger = logging.getLogger(__name__)

STALE_JOB_ERROR = "abandoned while processing"


class TextGenerator(Protocol):
    async def generate(self, prompt: str) -> str: ...


class DocumentRenderer(Protocol):
    async def render(self, html: str) -> bytes: ...


class ReportStorage(Protocol):
    async def upload_pdf(self, attempt_id: UUID, product: str, pdf_bytes: bytes) -> str: ...


@dataclass(frozen=True)
class JobContext:
    """Everything generation needs, read before any external call."""

    attempt_id: UUID
    product: ProductTag
    archetype_key: str
    archetype_name: str
    answers: list
    template: str


class ReportWorker:
    """
    Report job consumer.

    One job in flight at a time. The database is the only state shared with
    the API; the claim is a conditional update so a second worker could
    never double-process a job.

    Usage:
        worker = ReportWorker.from_settings(database, settings)
        await worker.run_forever()
    """

    def __init__(
        self,
        database: Database,
        writer: TextGenerator,
        renderer: DocumentRenderer,
        storage: ReportStorage,
        poll_interval_seconds: float = 5.0,
        generation_timeout_seconds: float = 120.0,
        render_timeout_seconds: float = 60.0,
        stale_after_seconds: float = 900.0,
        reap_stale_on_start: bool = True,
    ) -> None:
        """
        Initialize the worker.

        Args:
            database: Persistence client
            writer: Text generator (report HTML)
            renderer: HTML to PDF renderer
            storage: PDF storage returning a public link
            poll_interval_seconds: Idle sleep when the queue is empty
            generation_timeout_seconds: Deadline for text generation
            render_timeout_seconds: Deadline for rendering plus upload
            stale_after_seconds: Age at which a processing job is abandoned
            reap_stale_on_start: Fail abandoned processing jobs before consuming
        """
        self._database = database
        self._writer = writer
        self._renderer = renderer
        self._storage = storage
        self._poll_interval = poll_interval_seconds
        self._generation_timeout = generation_timeout_seconds
        self._render_timeout = render_timeout_seconds
        self._stale_after = stale_after_seconds
        self._reap_stale_on_start = reap_stale_on_start
        self._stop_event = asyncio.Event()

    @classmethod
    def from_settings(cls, database: Database, settings: Settings) -> "ReportWorker":
        """Build a worker with production collaborators."""
        return cls(
            database=database,
            writer=ReportWriter.from_settings(settings.generation),
            renderer=PdfRenderer.from_settings(settings.renderer),
            storage=S3ReportClient.from_settings(settings.s3_reports),
            poll_interval_seconds=settings.worker.poll_interval_seconds,
            generation_timeout_seconds=settings.generation.timeout_seconds,
            render_timeout_seconds=settings.renderer.timeout_seconds,
            stale_after_seconds=settings.worker.stale_after_seconds,
            reap_stale_on_start=settings.worker.reap_stale_on_start,
        )

    def stop(self) -> None:
        """Ask the loop to exit after the job in flight."""
        logger.info(f"{__name__}:stop - Stop requested")
        self._stop_event.set()

    async def run_forever(self) -> None:
        """Consume jobs until stop() is called."""
        logger.info(f"{__name__}:run_forever - Worker started (poll={self._poll_interval}s)")
        if self._reap_stale_on_start:
            await self.reap_stale()

        while not self._stop_event.is_set():
            processed = await self.run_once()
            if processed:
                continue
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self._poll_interval)
            except asyncio.TimeoutError:
                pass

        logger.info(f"{__name__}:run_forever - Worker stopped")

    async def reap_stale(self) -> int:
        """
        Fail PROCESSING jobs that stopped updating.

        A job left in PROCESSING by a crashed worker would otherwise look
        in progress forever to polling clients.

        Returns:
            int: Number of jobs moved to ERROR
        """
        cutoff = utcnow() - timedelta(seconds=self._stale_after)
        reaped = 0
        try:
            async with self._database.session() as session:
                stale_jobs = await job_crud.get_stale_processing(session, cutoff)
                for job in stale_jobs:
                    if await job_crud.mark_failed(session, job.id, STALE_JOB_ERROR):
                        reaped += 1
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"{__name__}:reap_stale - Failed: {type(e).__name__}: {e}")
            return 0

        if reaped:
            logger.warning(f"{__name__}:reap_stale - Moved {reaped} abandoned job(s) to error")
        return reaped

    async def run_once(self) -> bool:
        """
        Claim and process at most one job.

        Returns:
            bool: True if a job was claimed (whatever its outcome)
        """
        try:
            async with self._database.session() as session:
                job = await job_crud.claim_next(session)
        except SQLAlchemyError as e:
            logger.error(f"{__name__}:run_once - Claim failed: {type(e).__name__}: {e}")
            return False

        if job is None:
            return False

        set_correlation_id(f"job-{job.id}")
        try:
            await self.process_job(job)
        finally:
            clear_correlation_id()
        return True

    async def process_job(self, job: JobModel) -> None:
        """
        Produce the report for a claimed job and finalize the job.

        Never raises for job-level failures; they are recorded on the job.

        Args:
            job: Job already flipped to PROCESSING
        """
        logger.info(
            f"{__name__}:process_job - Processing job {job.id} "
            f"(attempt={job.quiz_attempt_id}, product={job.product.value})"
        )
        try:
            context = await self._load_context(job)
            prompt = build_report_prompt(
                context.template,
                archetype_key=context.archetype_key,
                archetype_name=context.archetype_name,
                answers=context.answers,
            )
            html = await self._with_deadline(
                "generation",
                self._writer.generate(prompt),
                self._generation_timeout,
                job,
            )
            pdf_url = await self._with_deadline(
                "rendering",
                self._render_and_store(context, html),
                self._render_timeout,
                job,
            )
            await self._complete(job, html, pdf_url)
        except QuizFunnelException as e:
            logger.error(f"{__name__}:process_job - Job {job.id} failed: {e}")
            await self._fail(job, e.message)
        except SQLAlchemyError as e:
            logger.error(f"{__name__}:process_job - Job {job.id} persistence failure: {e}")
            await self._fail(job, f"persistence failure: {type(e).__name__}")
        except Exception as e:
            logger.exception(f"{__name__}:process_job - Job {job.id} crashed")
            await self._fail(job, f"{type(e).__name__}: {e}")
        else:
            logger.info(f"{__name__}:process_job - Report ready for attempt {job.quiz_attempt_id}")

    async def _load_context(self, job: JobModel) -> JobContext:
        async with self._database.session() as session:
            attempt = await attempt_crud.get_by_id(session, job.quiz_attempt_id)
            if attempt is None:
                raise AttemptNotFoundError(str(job.quiz_attempt_id))

            archetype_name = attempt.archetype
            if attempt.question_set_id is not None:
                question_set = await question_set_crud.get_by_id(session, attempt.question_set_id)
                if question_set is not None:
                    try:
                        schema = QuestionSchema.model_validate(question_set.json_schema)
                        archetype_name = schema.archetype_name(attempt.archetype)
                    except PydanticValidationError:
                        logger.warning(
                            f"{__name__}:_load_context - Question set {question_set.id} "
                            "is malformed, using archetype key as name"
                        )

            prompt = await prompt_crud.get_for_product(session, attempt.category_id, job.product)
            if prompt is None:
                raise PromptNotFoundError(str(attempt.category_id), job.product.value)

            return JobContext(
                attempt_id=attempt.id,
                product=job.product,
                archetype_key=attempt.archetype,
                archetype_name=archetype_name,
                answers=list(attempt.answers or []),
                template=prompt.template,
            )

    async def _render_and_store(self, context: JobContext, html: str) -> str:
        pdf_bytes = await self._renderer.render(html)
        return await self._storage.upload_pdf(context.attempt_id, context.product.value, pdf_bytes)

    async def _with_deadline(
        self,
        stage: str,
        awaitable: Awaitable[Any],
        timeout_seconds: float,
        job: JobModel,
    ) -> Any:
        try:
            return await asyncio.wait_for(awaitable, timeout=timeout_seconds)
        except asyncio.TimeoutError as e:
            raise StageTimeoutError(stage, timeout_seconds, str(job.id)) from e

    async def _complete(self, job: JobModel, html: str, pdf_url: str | None) -> None:
        """Write the report and mark the job done in one transaction."""
        async with self._database.session() as session:
            existing = await report_crud.get_for_attempt(session, job.quiz_attempt_id, job.product)
            if existing is None:
                await report_crud.create(
                    session,
                    quiz_attempt_id=job.quiz_attempt_id,
                    type=job.product,
                    html=html,
                    pdf_url=pdf_url,
                    audio_url=None,
                )
            else:
                logger.warning(
                    f"{__name__}:_complete - Report already exists for attempt "
                    f"{job.quiz_attempt_id} ({job.product.value}), keeping it"
                )
            if not await job_crud.mark_done(session, job.id):
                await session.rollback()
                logger.error(f"{__name__}:_complete - Job {job.id} left processing before done")
                return
            await session.commit()

    async def _fail(self, job: JobModel, error: str) -> None:
        try:
            async with self._database.session() as session:
                await job_crud.mark_failed(session, job.id, error)
                await session.commit()
        except SQLAlchemyError as e:
            # Job stays PROCESSING; reap_stale fails it on the next start
            logger.error(f"{__name__}:_fail - Could not record failure for job {job.id}: {e}")


async def main() -> None:
    """Worker process entry point."""
    # Export .env to os.environ so boto3 and the Google client see credentials
    load_dotenv()
    settings = get_settings()
    configure_logging(settings.log_level, service_name="worker")

    database = Database.from_settings(settings.database)
    worker = ReportWorker.from_settings(database, settings)

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, worker.stop)

    try:
        await worker.run_forever()
    finally:
        await database.dispose()


def run() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
