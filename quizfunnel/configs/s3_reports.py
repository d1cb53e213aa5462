"""
S3 reports bucket configuration.

Settings for rendered report storage and public link construction.

Dependencies: pydantic_settings
System role: S3 reports bucket configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class S3ReportsSettings(BaseSettings):
    """Settings for S3 report bucket operations."""

    model_config = SettingsConfigDict(
        env_prefix="S3_REPORTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    bucket: str = Field(
        default="quizfunnel-dev-reports",
        description="S3 bucket for rendered report PDFs",
    )
    region: str = Field(
        default="us-east-1",
        description="AWS region for S3 bucket",
    )
    key_prefix: str = Field(
        default="reports",
        description="Key prefix under which reports are written",
    )
    public_base_url: str | None = Field(
        default=None,
        description="CDN or bucket website URL; defaults to the virtual-hosted S3 URL",
    )
    upload_attempts: int = Field(
        default=3,
        description="Upload attempts before the job is failed",
    )
