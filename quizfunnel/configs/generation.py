"""
Text generation configuration settings.

Model selection, credentials, and deadline for the report writer LLM.

Dependencies: pydantic_settings
System role: LLM configuration for report generation
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GenerationSettings(BaseSettings):
    """Report text generation configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GENERATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    model_id: str = Field(
        default="gemini-3-flash-preview",
        description="Google Generative AI chat model identifier",
    )
    google_api_key: str | None = Field(
        default=None,
        description="API key for Google Generative AI (falls back to GOOGLE_API_KEY)",
    )
    temperature: float = Field(default=0.7, description="Sampling temperature")
    max_output_tokens: int | None = Field(
        default=None,
        description="Cap on generated tokens (None uses the model default)",
    )
    timeout_seconds: float = Field(
        default=120.0,
        description="Deadline for a single generation call",
    )
    system_prompt: str = Field(
        default="You are a neuroscience-savvy report generator.",
        description="System message sent ahead of every filled template",
    )
