"""
Payment webhook event parsing.

Turns a provider webhook body into one of two typed events. Parsing fails
closed: a body without a recognizable event tag is rejected instead of being
treated as a no-op, and a completion event naming an unknown product is
rejected instead of silently defaulting.

Accepted shapes (Whop and compatible providers):
    {"type": "order.completed", "data": {"id": ..., "metadata": {...}, ...}}
    {"event": "payment.succeeded", "id": ..., "metadata": {...}}

Dependencies: pydantic, quizfunnel.core.exceptions
System role: Webhook ingestor input contract
"""

from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, Field

from quizfunnel.boundary.db.models.enums import ProductTag
from quizfunnel.core.exceptions import MalformedEventError

COMPLETION_EVENTS = frozenset({"order.completed", "payment.succeeded"})

# Checked in order; the first non-null key names the event
EVENT_TAG_KEYS = ("type", "event", "action")

DEFAULT_AMOUNT_CENTS = 700


class IgnoredEvent(BaseModel):
    """Provider event that does not confirm a payment."""

    kind: Literal["ignored"] = "ignored"
    event_type: str = Field(description="Provider event tag")


class PaymentCompletedEvent(BaseModel):
    """Confirmed payment that should unlock a report."""

    kind: Literal["payment_completed"] = "payment_completed"
    event_type: str = Field(description="Provider event tag")
    provider_order_id: str | None = Field(
        default=None,
        description="Provider order id (data.id, else top-level id)",
    )
    product: ProductTag = Field(default=ProductTag.MINI_REPORT)
    product_declared: bool = Field(
        default=False,
        description="metadata.product was sent; False means the entry-tier default",
    )
    amount_cents: int = Field(default=DEFAULT_AMOUNT_CENTS)
    amount_declared: bool = Field(
        default=False,
        description="data.amount_cents or data.final_amount was sent",
    )
    quiz_attempt_id: UUID | None = Field(
        default=None,
        description="Attempt id from checkout metadata, None when absent or not a UUID",
    )
    payer_email: str | None = Field(default=None)
    metadata: dict[str, Any] = Field(default_factory=dict)


PaymentEvent = IgnoredEvent | PaymentCompletedEvent


def _event_tag(body: dict[str, Any]) -> str:
    for key in EVENT_TAG_KEYS:
        value = body.get(key)
        if value is None:
            continue
        if not isinstance(value, str) or not value.strip():
            raise MalformedEventError(
                f"Event tag '{key}' must be a non-empty string",
                field=key,
            )
        return value.strip()
    raise MalformedEventError(
        "Webhook body carries no event tag",
        field="type",
        details={"expected_keys": list(EVENT_TAG_KEYS)},
    )


def _optional_object(value: Any, field: str) -> dict[str, Any] | None:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise MalformedEventError(f"'{field}' must be an object", field=field)
    return value


def _first_present(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def parse_attempt_id(value: Any) -> UUID | None:
    """
    Interpret a metadata value as an attempt id.

    Unsubstituted checkout templates such as ``{{metadata.quiz_attempt_id}}``
    and any other non-UUID text count as absent.

    Args:
        value: Raw metadata value

    Returns:
        UUID if well-formed, None otherwise
    """
    if isinstance(value, UUID):
        return value
    if not isinstance(value, str):
        return None
    try:
        return UUID(value.strip())
    except ValueError:
        return None


def parse_product(value: Any) -> ProductTag:
    """
    Interpret a metadata product tag.

    Args:
        value: Raw metadata value; None means the entry tier

    Returns:
        ProductTag

    Raises:
        MalformedEventError: If the tag names no known product
    """
    if value is None:
        return ProductTag.MINI_REPORT
    try:
        return ProductTag(value)
    except ValueError:
        raise MalformedEventError(
            f"Unknown product: {value}",
            field="metadata.product",
            details={"allowed": [tag.value for tag in ProductTag]},
        )


def _amount(value: Any, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool):
        raise MalformedEventError("Amount must be numeric", field="data.amount_cents")
    try:
        return int(round(float(value)))
    except (TypeError, ValueError):
        raise MalformedEventError(
            f"Amount must be numeric, got {value!r}",
            field="data.amount_cents",
        )


def parse_payment_event(
    body: Any,
    default_amount_cents: int = DEFAULT_AMOUNT_CENTS,
) -> PaymentEvent:
    """
    Parse a decoded webhook body into a typed event.

    Args:
        body: Decoded JSON request body
        default_amount_cents: Amount recorded when the provider sends none

    Returns:
        IgnoredEvent for non-completion tags, PaymentCompletedEvent otherwise

    Raises:
        MalformedEventError: Body is not an object, has no event tag,
            has non-object data/metadata, an unknown product, or a
            non-numeric amount
    """
    if not isinstance(body, dict):
        raise MalformedEventError("Webhook body must be a JSON object")

    event_type = _event_tag(body)
    if event_type not in COMPLETION_EVENTS:
        return IgnoredEvent(event_type=event_type)

    data = _optional_object(body.get("data"), "data") or {}
    metadata = _optional_object(
        _first_present(data.get("metadata"), body.get("metadata")),
        "metadata",
    ) or {}

    order_id = _first_present(data.get("id"), body.get("id"))
    raw_amount = _first_present(data.get("amount_cents"), data.get("final_amount"))
    payer_email = data.get("user_email")

    return PaymentCompletedEvent(
        event_type=event_type,
        provider_order_id=str(order_id) if order_id not in (None, "") else None,
        product=parse_product(metadata.get("product")),
        product_declared=metadata.get("product") is not None,
        amount_cents=_amount(raw_amount, default_amount_cents),
        amount_declared=raw_amount is not None,
        quiz_attempt_id=parse_attempt_id(metadata.get("quiz_attempt_id")),
        payer_email=payer_email if isinstance(payer_email, str) and payer_email.strip() else None,
        metadata=metadata,
    )
