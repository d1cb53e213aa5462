"""Service orchestrators."""

from .job_service import JobService
from .quiz_service import QuizService
from .receipt_service import ReceiptService
from .report_service import ReportService
from .webhook_service import WebhookService

__all__ = [
    "JobService",
    "QuizService",
    "ReceiptService",
    "ReportService",
    "WebhookService",
]
