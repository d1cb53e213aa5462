"""
Core business logic module.

Contains the scoring engine, payment event contracts, report generation,
and the exception hierarchy. Nothing here talks to the database.
"""

from quizfunnel.core.exceptions import (
    AttemptNotFoundError,
    GenerationError,
    JobStateError,
    MalformedEventError,
    MissingIdentifierError,
    NotFoundError,
    PersistenceError,
    QuizFunnelException,
    RenderingError,
    ReportPipelineError,
    StageTimeoutError,
    StorageError,
    ValidationError,
)
from quizfunnel.core.scoring import ArchetypeResult, pick_archetype

__all__ = [
    # Exceptions
    "AttemptNotFoundError",
    "GenerationError",
    "JobStateError",
    "MalformedEventError",
    "MissingIdentifierError",
    "NotFoundError",
    "PersistenceError",
    "QuizFunnelException",
    "RenderingError",
    "ReportPipelineError",
    "StageTimeoutError",
    "StorageError",
    "ValidationError",
    # Scoring
    "ArchetypeResult",
    "pick_archetype",
]
