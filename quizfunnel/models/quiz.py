"""
Quiz domain models and schemas.

Request/response schemas for quiz submission.

Dependencies: pydantic
System role: Quiz submission API contracts
"""

import uuid

from pydantic import AliasChoices, BaseModel, Field

from quizfunnel.models.question_schema import Answer


class QuizSubmitRequest(BaseModel):
    """
    Request schema for submitting a completed quiz.

    email and category_slug are optional at the schema level so a missing
    value is reported as a 400 by the service rather than a 422.
    """

    email: str | None = Field(default=None, description="Visitor email")
    category_slug: str | None = Field(
        default=None,
        validation_alias=AliasChoices("category_slug", "categorySlug"),
        description="Category slug of the quiz taken",
    )
    affiliate_handle: str | None = Field(
        default=None,
        validation_alias=AliasChoices("affiliate_handle", "affiliateHandle"),
        description="Referring affiliate handle",
    )
    answers: list[Answer] = Field(default_factory=list, description="Ordered answers")


class QuizSubmitResponse(BaseModel):
    """Response schema for a scored attempt."""

    attempt_id: uuid.UUID
    archetype_key: str
    archetype_name: str
    teaser_html: str
