"""
Payment provider configuration settings.

Dependencies: pydantic_settings
System role: Provider defaults applied to recorded orders
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaymentsSettings(BaseSettings):
    """Payment provider defaults."""

    model_config = SettingsConfigDict(
        env_prefix="PAYMENTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    provider: str = Field(default="whop", description="Provider name stored on orders")
    mini_report_amount_cents: int = Field(
        default=700,
        description="Price of the mini report; also the webhook amount fallback",
    )
    full_assessment_amount_cents: int = Field(
        default=2900,
        description="Price of the full assessment",
    )
