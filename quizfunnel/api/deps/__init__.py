"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    get_job_service,
    get_quiz_service,
    get_receipt_service,
    get_report_service,
    get_settings_dependency,
    get_webhook_service,
)

__all__ = [
    "get_job_service",
    "get_quiz_service",
    "get_receipt_service",
    "get_report_service",
    "get_settings_dependency",
    "get_webhook_service",
]
