"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from quizfunnel.boundary.db.CRUD import job_crud, report_crud

    job = await job_crud.claim_next(db)
    report = await report_crud.get_for_attempt(db, attempt_id)
"""

from quizfunnel.boundary.db.CRUD.base_crud import BaseCRUD
from quizfunnel.boundary.db.CRUD.user_crud import (
    AffiliateCRUD,
    UserCRUD,
    affiliate_crud,
    user_crud,
)
from quizfunnel.boundary.db.CRUD.category_crud import (
    CategoryCRUD,
    PromptCRUD,
    QuestionSetCRUD,
    category_crud,
    prompt_crud,
    question_set_crud,
)
from quizfunnel.boundary.db.CRUD.attempt_crud import AttemptCRUD, attempt_crud
from quizfunnel.boundary.db.CRUD.order_crud import OrderCRUD, order_crud
from quizfunnel.boundary.db.CRUD.job_crud import JobCRUD, job_crud
from quizfunnel.boundary.db.CRUD.report_crud import ReportCRUD, report_crud

__all__ = [
    "AffiliateCRUD",
    "AttemptCRUD",
    "BaseCRUD",
    "CategoryCRUD",
    "JobCRUD",
    "OrderCRUD",
    "PromptCRUD",
    "QuestionSetCRUD",
    "ReportCRUD",
    "UserCRUD",
    "affiliate_crud",
    "attempt_crud",
    "category_crud",
    "job_crud",
    "order_crud",
    "prompt_crud",
    "question_set_crud",
    "report_crud",
    "user_crud",
]
