"""
Exception hierarchy for the quiz funnel report pipeline.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

The API maps these onto HTTP status codes; the worker records them on the
failed job row.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class QuizFunnelException(Exception):
    """Base exception for all quiz funnel errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# ---------------------------------------------------------------------------
# Malformed input (400)
# ---------------------------------------------------------------------------


class ValidationError(QuizFunnelException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class MalformedEventError(ValidationError):
    """Raised when a payment webhook body has no recognizable shape."""


class MissingIdentifierError(ValidationError):
    """Raised when a payment cannot be tied to an attempt or an order id."""


# ---------------------------------------------------------------------------
# Resolution failures (404)
# ---------------------------------------------------------------------------


class NotFoundError(QuizFunnelException):
    """Base class for lookups that found nothing."""


class AttemptNotFoundError(NotFoundError):
    """Raised when a quiz attempt cannot be found."""

    def __init__(self, attempt_id: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["quiz_attempt_id"] = attempt_id
        super().__init__(f"Quiz attempt not found: {attempt_id}", details)


class CategoryNotFoundError(NotFoundError):
    """Raised when a category slug is unknown."""

    def __init__(self, slug: str) -> None:
        super().__init__(f"Unknown category: {slug}", {"category_slug": slug})


class QuestionSetNotFoundError(NotFoundError):
    """Raised when a category has no question set."""

    def __init__(self, category_id: str) -> None:
        super().__init__(
            f"Question set not found for category {category_id}",
            {"category_id": category_id},
        )


class PromptNotFoundError(NotFoundError):
    """Raised when a category has no prompt template for a product."""

    def __init__(self, category_id: str, product: str) -> None:
        super().__init__(
            f"No {product} prompt for category {category_id}",
            {"category_id": category_id, "product": product},
        )


class JobNotFoundError(NotFoundError):
    """Raised when a report job cannot be found."""

    def __init__(self, job_id: str) -> None:
        super().__init__(f"Job {job_id} does not exist", {"job_id": job_id})


# ---------------------------------------------------------------------------
# State conflicts (409)
# ---------------------------------------------------------------------------


class JobStateError(QuizFunnelException):
    """Raised when a job transition is not allowed from its current status."""

    def __init__(self, job_id: str, status: str, message: str) -> None:
        super().__init__(message, {"job_id": job_id, "status": status})


# ---------------------------------------------------------------------------
# Persistence failures (500)
# ---------------------------------------------------------------------------


class PersistenceError(QuizFunnelException):
    """Raised when a database write fails; callers are expected to retry."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize persistence error.

        Args:
            message: Error message
            operation: Operation that failed (insert_order, enqueue_job, ...)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


# ---------------------------------------------------------------------------
# Downstream failures (recorded on the job)
# ---------------------------------------------------------------------------


class ReportPipelineError(QuizFunnelException):
    """Base exception for failures while producing a report."""

    def __init__(
        self,
        message: str,
        job_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize report pipeline error.

        Args:
            message: Error message
            job_id: ID of the job being processed
            details: Additional context
        """
        details = details or {}
        if job_id:
            details["job_id"] = job_id
        super().__init__(message, details)


class GenerationError(ReportPipelineError):
    """Raised when the text generation service returns no usable content."""


class RenderingError(ReportPipelineError):
    """Raised when HTML to PDF rendering fails."""


class StorageError(ReportPipelineError):
    """Raised when the rendered document cannot be stored."""


class StageTimeoutError(ReportPipelineError):
    """Raised when a pipeline stage exceeds its deadline."""

    def __init__(self, stage: str, timeout_seconds: float, job_id: str | None = None) -> None:
        super().__init__(
            f"{stage} exceeded {timeout_seconds:g}s deadline",
            job_id,
            {"stage": stage, "timeout_seconds": timeout_seconds},
        )
