"""
Test suite for QuizService.

Tests scoring on submission, user upsert, affiliate attribution, and input
validation against an in-memory SQLite database.

System role: Verification of quiz submission orchestration
"""

import pytest

from quizfunnel.application.services.quiz_service import QuizService, build_teaser_html
from quizfunnel.boundary.db.connection import Database
from quizfunnel.boundary.db.CRUD import affiliate_crud, attempt_crud, user_crud
from quizfunnel.boundary.db.models import AttemptStatus
from quizfunnel.core.exceptions import CategoryNotFoundError, ValidationError
from quizfunnel.models.question_schema import Answer
from tests.sample_data import SeedData

SCENARIO_ANSWERS = [
    Answer(id="q1", choice="A"),
    Answer(id="q2", choice="B"),
    Answer(id="q3", choice="A"),
    Answer(id="q4", choice="B"),
    Answer(id="q5", choice="A"),
]


class TestSubmit:
    """Test suite for QuizService.submit()."""

    @pytest.mark.asyncio
    async def test_submit_should_score_and_store_attempt(
        self, database: Database, seed: SeedData
    ) -> None:
        """Three calm answers against two freezer answers store calm_strategist."""
        # Act
        async with database.session() as session:
            result = await QuizService(session).submit(
                email="new.visitor@example.com",
                category_slug="brain",
                answers=SCENARIO_ANSWERS,
            )

        # Assert
        assert result["archetype_key"] == "calm_strategist"
        assert result["archetype_name"] == "Calm Strategist"
        assert "Calm Strategist" in result["teaser_html"]
        async with database.session() as session:
            attempt = await attempt_crud.get_by_id(session, result["attempt_id"])
            user = await user_crud.get_by_email(session, "new.visitor@example.com")
        assert attempt.status == AttemptStatus.TEASER_SHOWN
        assert attempt.user_id == user.id
        assert attempt.question_set_id == seed.question_set_id
        assert attempt.answers[0] == {"id": "q1", "choice": "A"}

    @pytest.mark.asyncio
    async def test_submit_should_attach_known_affiliate(
        self, database: Database, seed: SeedData
    ) -> None:
        """A known affiliate handle is recorded on the attempt."""
        # Arrange
        async with database.session() as session:
            affiliate = await affiliate_crud.create(session, handle="coach_amy")
            await session.commit()

        # Act
        async with database.session() as session:
            result = await QuizService(session).submit(
                email="visitor@example.com",
                category_slug="brain",
                answers=SCENARIO_ANSWERS,
                affiliate_handle="coach_amy",
            )

        # Assert
        async with database.session() as session:
            attempt = await attempt_crud.get_by_id(session, result["attempt_id"])
        assert attempt.affiliate_id == affiliate.id
        assert attempt.user_id == seed.user_id

    @pytest.mark.asyncio
    async def test_submit_should_ignore_unknown_affiliate(
        self, database: Database, seed: SeedData
    ) -> None:
        """An unknown handle does not block submission."""
        async with database.session() as session:
            result = await QuizService(session).submit(
                email="visitor@example.com",
                category_slug="brain",
                answers=SCENARIO_ANSWERS,
                affiliate_handle="nobody",
            )

        async with database.session() as session:
            attempt = await attempt_crud.get_by_id(session, result["attempt_id"])
        assert attempt.affiliate_id is None

    @pytest.mark.parametrize(
        "email,slug",
        [
            (None, "brain"),
            ("  ", "brain"),
            ("visitor@example.com", None),
            ("visitor@example.com", ""),
        ],
    )
    @pytest.mark.asyncio
    async def test_submit_should_require_email_and_category(
        self, database: Database, seed: SeedData, email, slug
    ) -> None:
        """Missing identity or category is a validation error."""
        async with database.session() as session:
            with pytest.raises(ValidationError):
                await QuizService(session).submit(email=email, category_slug=slug, answers=[])

    @pytest.mark.asyncio
    async def test_submit_should_reject_unknown_category(
        self, database: Database, seed: SeedData
    ) -> None:
        """Unknown category slugs are not found."""
        async with database.session() as session:
            with pytest.raises(CategoryNotFoundError):
                await QuizService(session).submit(
                    email="visitor@example.com",
                    category_slug="sleep",
                    answers=SCENARIO_ANSWERS,
                )


def test_build_teaser_html_should_escape_archetype_name() -> None:
    """Archetype names are HTML-escaped in the teaser."""
    assert "&lt;b&gt;" in build_teaser_html("<b>")
