"""
Dependency injection container.

Factory functions for FastAPI dependencies. Every service is built per
request around a session from the application's Database.

Dependencies: quizfunnel.configs, quizfunnel.application, quizfunnel.boundary
System role: DI container for service injection
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quizfunnel.application.services import (
    JobService,
    QuizService,
    ReceiptService,
    ReportService,
    WebhookService,
)
from quizfunnel.boundary.db import get_async_db
from quizfunnel.configs import Settings, get_settings


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_quiz_service(db: AsyncSession = Depends(get_async_db)) -> QuizService:
    """
    Get quiz service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        QuizService: Quiz service instance
    """
    return QuizService(db=db)


def get_webhook_service(
    db: AsyncSession = Depends(get_async_db),
    settings: Settings = Depends(get_settings_dependency),
) -> WebhookService:
    """
    Get webhook service instance.

    Args:
        db: Async database session (injected via Depends)
        settings: Application settings (injected via Depends)

    Returns:
        WebhookService: Webhook service with provider defaults
    """
    return WebhookService(
        db=db,
        provider=settings.payments.provider,
        default_amount_cents=settings.payments.mini_report_amount_cents,
    )


def get_report_service(db: AsyncSession = Depends(get_async_db)) -> ReportService:
    """
    Get report service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        ReportService: Report polling service instance
    """
    return ReportService(db=db)


def get_receipt_service(
    db: AsyncSession = Depends(get_async_db),
    settings: Settings = Depends(get_settings_dependency),
) -> ReceiptService:
    """
    Get receipt service instance.

    Args:
        db: Async database session (injected via Depends)
        settings: Application settings (injected via Depends)

    Returns:
        ReceiptService: Receipt resolution service with provider defaults
    """
    return ReceiptService(
        db=db,
        provider=settings.payments.provider,
        mini_report_amount_cents=settings.payments.mini_report_amount_cents,
        full_assessment_amount_cents=settings.payments.full_assessment_amount_cents,
    )


def get_job_service(db: AsyncSession = Depends(get_async_db)) -> JobService:
    """
    Get job service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        JobService: Job service instance
    """
    return JobService(db=db)
