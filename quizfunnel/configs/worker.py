"""
Report worker configuration settings.

Dependencies: pydantic_settings
System role: Consumer loop tuning
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class WorkerSettings(BaseSettings):
    """Generation worker loop configuration."""

    model_config = SettingsConfigDict(
        env_prefix="WORKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    poll_interval_seconds: float = Field(
        default=5.0,
        description="Idle backoff when no pending job exists",
    )
    stale_after_seconds: int = Field(
        default=900,
        description="Age after which a processing job counts as abandoned",
    )
    reap_stale_on_start: bool = Field(
        default=True,
        description="Move abandoned processing jobs to error at startup",
    )
