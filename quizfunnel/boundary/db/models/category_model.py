"""
Category, question set, and prompt ORM models.

A category is one quiz funnel (e.g. "brain"). Each category owns versioned
question sets and one prompt template per product tier.

Dependencies: sqlalchemy, quizfunnel.boundary.db.base
System role: Operator-authored quiz content consumed by scoring and generation
"""

from uuid import UUID

from sqlalchemy import JSON, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from quizfunnel.boundary.db.base import Base, TimestampMixin, UUIDMixin, value_enum
from quizfunnel.boundary.db.models.enums import ProductTag


class CategoryModel(Base, UUIDMixin, TimestampMixin):
    """
    Quiz category.

    Attributes:
        id: UUID primary key (auto-generated)
        slug: Unique URL slug used by the funnel
        name: Display name
    """

    __tablename__ = "categories"

    slug: Mapped[str] = mapped_column(String(120), nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)


class QuestionSetModel(Base, UUIDMixin, TimestampMixin):
    """
    Versioned question schema for a category.

    The highest version is the active one. json_schema follows
    quizfunnel.models.question_schema.QuestionSchema.

    Attributes:
        category_id: Owning category
        version: Monotonic version number within the category
        json_schema: Questions, archetypes, and scoring map
    """

    __tablename__ = "question_sets"
    __table_args__ = (UniqueConstraint("category_id", "version", name="uq_question_sets_version"),)

    category_id: Mapped[UUID] = mapped_column(
        ForeignKey("categories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    json_schema: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)


class PromptModel(Base, UUIDMixin, TimestampMixin):
    """
    Generation prompt template for one (category, product) pair.

    Templates use ``{{archetype_name}}``, ``{{archetype_key}}`` and
    ``{{answers_json}}`` placeholders.

    Attributes:
        category_id: Owning category
        type: Product tier the template generates
        template: Prompt text with placeholders
    """

    __tablename__ = "prompts"
    __table_args__ = (UniqueConstraint("category_id", "type", name="uq_prompts_category_type"),)

    category_id: Mapped[UUID] = mapped_column(
        ForeignKey("categories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    type: Mapped[ProductTag] = mapped_column(value_enum(ProductTag), nullable=False)
    template: Mapped[str] = mapped_column(Text, nullable=False)
