"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory database client, seeded quiz content and attempts,
fake generation/rendering/storage collaborators, ASGI HTTP client
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite, httpx
System role: Test infrastructure and fixture management
"""

from unittest.mock import AsyncMock

import httpx
import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from quizfunnel.boundary.db.connection import Database
from quizfunnel.boundary.db.CRUD import (
    attempt_crud,
    category_crud,
    prompt_crud,
    question_set_crud,
    user_crud,
)
from quizfunnel.boundary.db.models import AttemptStatus, ProductTag
from tests.sample_data import (
    BRAIN_SCHEMA,
    FULL_TEMPLATE,
    MINI_TEMPLATE,
    VISITOR_EMAIL,
    SeedData,
)

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def database():
    """
    Create in-memory SQLite database client for testing.

    StaticPool keeps every session on the one connection that holds the
    in-memory schema.

    Yields:
        Database: Client with all tables created
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    db = Database(engine)
    await db.create_all()

    yield db

    await db.dispose()

@pytest.fixture
async def db_session(database: Database):
    """
    Provide a session on the test database.

    Yields:
        AsyncSession: Session rolled back on exit
    """
    async with database.session() as session:
        yield session
        await session.rollback()

@pytest.fixture
async def seed(database: Database) -> SeedData:
    """
    Seed the brain category with a question set, both prompts, a visitor,
    and one scored attempt.

    Returns:
        SeedData: Identifiers of the committed rows
    """
    async with database.session() as session:
        user = await user_crud.create(session, email=VISITOR_EMAIL)
        category = await category_crud.create(session, slug="brain", name="Brain Type")
        question_set = await question_set_crud.create(
            session,
            category_id=category.id,
            version=1,
            json_schema=BRAIN_SCHEMA,
        )
        await prompt_crud.create(
            session,
            category_id=category.id,
            type=ProductTag.MINI_REPORT,
            template=MINI_TEMPLATE,
        )
        await prompt_crud.create(
            session,
            category_id=category.id,
            type=ProductTag.FULL_ASSESSMENT,
            template=FULL_TEMPLATE,
        )
        attempt = await attempt_crud.create(
            session,
            user_id=user.id,
            category_id=category.id,
            question_set_id=question_set.id,
            answers=[
                {"id": "q1", "choice": "B"},
                {"id": "q2", "choice": "B"},
                {"id": "q3", "choice": "A"},
            ],
            archetype="stress_freezer",
            teaser_html="<h2>Stress Freezer</h2>",
            status=AttemptStatus.TEASER_SHOWN,
        )
        await session.commit()

        return SeedData(
            user_id=user.id,
            category_id=category.id,
            question_set_id=question_set.id,
            attempt_id=attempt.id,
        )

@pytest.fixture
def fake_writer() -> AsyncMock:
    """Text generator returning a fixed report document."""
    writer = AsyncMock()
    writer.generate = AsyncMock(return_value="<h1>Your Stress Freezer Report</h1>")
    return writer

@pytest.fixture
def fake_renderer() -> AsyncMock:
    """Renderer returning minimal PDF bytes."""
    renderer = AsyncMock()
    renderer.render = AsyncMock(return_value=b"%PDF-1.4\n%test\n")
    return renderer

@pytest.fixture
def fake_storage() -> AsyncMock:
    """Storage returning a link built from attempt id and product."""

    async def _upload(attempt_id, product, pdf_bytes):
        return f"https://cdn.test/reports/{attempt_id}/{product}.pdf"

    storage = AsyncMock()
    storage.upload_pdf = AsyncMock(side_effect=_upload)
    return storage

@pytest.fixture
async def api_client(database: Database):
    """
    HTTP client bound to an application using the test database.

    Yields:
        httpx.AsyncClient: Client with base_url http://test
    """
    from quizfunnel.api.main import create_app

    app = create_app(database=database)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
