"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - Database, get_async_db: Injected persistence client and FastAPI dependency
  - Domain models and enums (attempts, orders, jobs, reports)

Dependencies: sqlalchemy, quizfunnel.configs
System role: Database adapter; the only synchronization point between the
webhook ingestor, the generation worker, and polling clients.
"""

from quizfunnel.boundary.db.base import Base, TimestampMixin, UUIDMixin
from quizfunnel.boundary.db.connection import (
    Database,
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from quizfunnel.boundary.db.models import (
    AffiliateModel,
    AttemptStatus,
    CategoryModel,
    JobModel,
    JobStatus,
    OrderModel,
    ProductTag,
    PromptModel,
    QuestionSetModel,
    QuizAttemptModel,
    ReportModel,
    UserModel,
)

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    # Connection
    "Database",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    # Models
    "AffiliateModel",
    "AttemptStatus",
    "CategoryModel",
    "JobModel",
    "JobStatus",
    "OrderModel",
    "ProductTag",
    "PromptModel",
    "QuestionSetModel",
    "QuizAttemptModel",
    "ReportModel",
    "UserModel",
]
