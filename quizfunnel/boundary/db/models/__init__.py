"""
Database models package.

Exports:
  - UserModel, AffiliateModel: Visitor identity and referral handles
  - CategoryModel, QuestionSetModel, PromptModel: Operator-authored quiz content
  - QuizAttemptModel: Scored attempt with payment status
  - OrderModel: Payment ledger (idempotency key store)
  - JobModel: Report generation queue
  - ReportModel: Generated reports
  - ProductTag, AttemptStatus, JobStatus: Enum types for state tracking

Dependencies: sqlalchemy, quizfunnel.boundary.db.base
System role: Database model definitions for domain entities
"""

from quizfunnel.boundary.db.models.enums import AttemptStatus, JobStatus, ProductTag
from quizfunnel.boundary.db.models.user_model import AffiliateModel, UserModel
from quizfunnel.boundary.db.models.category_model import (
    CategoryModel,
    PromptModel,
    QuestionSetModel,
)
from quizfunnel.boundary.db.models.quiz_attempt_model import QuizAttemptModel
from quizfunnel.boundary.db.models.order_model import PAYOUT_PENDING, OrderModel
from quizfunnel.boundary.db.models.job_model import JobModel
from quizfunnel.boundary.db.models.report_model import ReportModel

__all__ = [
    "AffiliateModel",
    "AttemptStatus",
    "CategoryModel",
    "JobModel",
    "JobStatus",
    "OrderModel",
    "PAYOUT_PENDING",
    "ProductTag",
    "PromptModel",
    "QuestionSetModel",
    "QuizAttemptModel",
    "ReportModel",
    "UserModel",
]
