"""
Quiz service orchestrator.

Scores a submitted quiz against the category's active question set and
records the attempt every later pipeline stage refers to.

Dependencies: quizfunnel.boundary.db.CRUD, quizfunnel.core.scoring
System role: Quiz submission orchestration
"""

import html
import logging
from typing import Sequence

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from quizfunnel.boundary.db.CRUD import (
    affiliate_crud,
    attempt_crud,
    category_crud,
    question_set_crud,
    user_crud,
)
from quizfunnel.boundary.db.models.enums import AttemptStatus
from quizfunnel.core.exceptions import (
    CategoryNotFoundError,
    PersistenceError,
    QuestionSetNotFoundError,
    QuizFunnelException,
    ValidationError,
)
from quizfunnel.core.scoring import pick_archetype
from quizfunnel.models.question_schema import Answer, QuestionSchema

logger = logging.getLogger(__name__)

TEASER_TEMPLATE = (
    "<h2>{name}</h2>\n"
    "<p>You default to {name} patterns under pressure. One quick win: 60-second "
    "nasal inhale/exhale (4:6) before big decisions. The full report covers stress "
    "triggers, habit stack, and a 7-day plan.</p>"
)


def build_teaser_html(archetype_name: str) -> str:
    """Free teaser shown right after scoring."""
    return TEASER_TEMPLATE.format(name=html.escape(archetype_name))


class QuizService:
    """Quiz submission orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize quiz service with async database session.

        Args:
            db: Async SQLAlchemy session
        """
        self.db = db

    async def submit(
        self,
        email: str | None,
        category_slug: str | None,
        answers: Sequence[Answer],
        affiliate_handle: str | None = None,
    ) -> dict:
        """
        Score a quiz and create the attempt.

        An unknown affiliate handle is ignored rather than rejected.

        Args:
            email: Visitor email (upserted)
            category_slug: Category of the quiz
            answers: Submitted answers
            affiliate_handle: Referring affiliate, optional

        Returns:
            dict: attempt_id, archetype_key, archetype_name, teaser_html

        Raises:
            ValidationError: Email or category slug missing
            CategoryNotFoundError: Unknown category
            QuestionSetNotFoundError: Category has no question set
            PersistenceError: Database write failed
        """
        if not email or not email.strip():
            raise ValidationError("Missing email", field="email")
        if not category_slug or not category_slug.strip():
            raise ValidationError("Missing category slug", field="category_slug")

        try:
            user = await user_crud.get_or_create(self.db, email)

            category = await category_crud.get_by_slug(self.db, category_slug.strip())
            if category is None:
                raise CategoryNotFoundError(category_slug)

            question_set = await question_set_crud.get_latest_for_category(self.db, category.id)
            if question_set is None:
                raise QuestionSetNotFoundError(str(category.id))

            affiliate_id = None
            if affiliate_handle:
                affiliate = await affiliate_crud.get_by_handle(self.db, affiliate_handle)
                affiliate_id = affiliate.id if affiliate else None

            try:
                schema = QuestionSchema.model_validate(question_set.json_schema)
            except PydanticValidationError as e:
                raise QuizFunnelException(
                    "Stored question set is malformed",
                    {"question_set_id": str(question_set.id), "errors": e.error_count()},
                ) from e

            result = pick_archetype(schema, answers)
            teaser_html = build_teaser_html(result.name)

            attempt = await attempt_crud.create(
                self.db,
                user_id=user.id,
                category_id=category.id,
                affiliate_id=affiliate_id,
                question_set_id=question_set.id,
                answers=[answer.model_dump() for answer in answers],
                archetype=result.key,
                teaser_html=teaser_html,
                status=AttemptStatus.TEASER_SHOWN,
            )
            await self.db.commit()
        except QuizFunnelException:
            await self.db.rollback()
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                "Failed to record quiz attempt",
                extra={"error": str(e), "category_slug": category_slug},
            )
            raise PersistenceError(
                "Unable to create attempt",
                operation="create_attempt",
            ) from e

        logger.info(
            "Quiz attempt scored",
            extra={
                "attempt_id": str(attempt.id),
                "category_slug": category_slug,
                "archetype": result.key,
            },
        )
        return {
            "attempt_id": attempt.id,
            "archetype_key": result.key,
            "archetype_name": result.name,
            "teaser_html": teaser_html,
        }
