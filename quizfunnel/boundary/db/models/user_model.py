"""
User and affiliate ORM models.

Users are identified by email only; there is no login. Affiliates are
referral handles attached to attempts and orders for payout accounting.

Dependencies: sqlalchemy, quizfunnel.boundary.db.base
System role: Visitor identity and referral attribution
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from quizfunnel.boundary.db.base import Base, TimestampMixin, UUIDMixin


class UserModel(Base, UUIDMixin, TimestampMixin):
    """
    Funnel visitor keyed by email address.

    Attributes:
        id: UUID primary key (auto-generated)
        email: Unique email, the only identity a visitor has
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(320),
        nullable=False,
        unique=True,
        index=True,
    )


class AffiliateModel(Base, UUIDMixin, TimestampMixin):
    """
    Referral partner.

    Attributes:
        id: UUID primary key (auto-generated)
        handle: Unique public handle carried in funnel links
    """

    __tablename__ = "affiliates"

    handle: Mapped[str] = mapped_column(
        String(120),
        nullable=False,
        unique=True,
        index=True,
    )
