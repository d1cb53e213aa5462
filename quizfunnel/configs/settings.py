"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI and the worker.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from quizfunnel.configs.base import BaseSettings
from quizfunnel.configs.database import DatabaseSettings
from quizfunnel.configs.generation import GenerationSettings
from quizfunnel.configs.payments import PaymentsSettings
from quizfunnel.configs.renderer import RendererSettings
from quizfunnel.configs.s3_reports import S3ReportsSettings
from quizfunnel.configs.worker import WorkerSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    database: DatabaseSettings = DatabaseSettings()
    generation: GenerationSettings = GenerationSettings()
    renderer: RendererSettings = RendererSettings()
    s3_reports: S3ReportsSettings = S3ReportsSettings()
    worker: WorkerSettings = WorkerSettings()
    payments: PaymentsSettings = PaymentsSettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from quizfunnel.configs import get_settings
        settings = get_settings()
    """
    return Settings()
