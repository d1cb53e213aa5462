"""
Receipt resolution schemas.

Request/response schemas for recovering the attempt id after checkout.

Dependencies: pydantic
System role: Post-checkout redirect API contracts
"""

import uuid

from pydantic import AliasChoices, BaseModel, Field


class ReceiptResolveRequest(BaseModel):
    """Identifiers carried on the post-checkout redirect."""

    attempt_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("attempt_id", "attemptId"),
        description="Attempt id from the redirect; may be unsubstituted template text",
    )
    product: str | None = Field(default=None, description="Product tag from the redirect")
    receipt_id: str | None = Field(default=None, description="Provider receipt/order id")


class ReceiptResolveResponse(BaseModel):
    """Resolved attempt for the thank-you page."""

    attempt_id: uuid.UUID | None = None
    product: str
    linked: bool = Field(description="True when an order for the receipt exists")
    message: str | None = None
