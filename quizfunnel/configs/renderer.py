"""
Document renderer configuration settings.

Headless Chromium options for HTML to PDF rendering.

Dependencies: pydantic_settings
System role: Rendering configuration for report PDFs
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RendererSettings(BaseSettings):
    """Playwright PDF renderer configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RENDERER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    page_format: str = Field(default="A4", description="PDF page size")
    print_background: bool = Field(default=True, description="Render CSS backgrounds")
    margin: str = Field(default="12mm", description="Margin applied to all four sides")
    timeout_seconds: float = Field(
        default=60.0,
        description="Deadline for rendering one document",
    )
    chromium_args: list[str] = Field(
        default=[
            "--no-sandbox",
            "--disable-setuid-sandbox",
            "--disable-dev-shm-usage",
            "--disable-gpu",
        ],
        description="Extra Chromium launch flags for container environments",
    )
