"""Payment provider event contracts."""

from quizfunnel.core.payments.webhook_event import (
    COMPLETION_EVENTS,
    IgnoredEvent,
    PaymentCompletedEvent,
    PaymentEvent,
    parse_attempt_id,
    parse_payment_event,
    parse_product,
)

__all__ = [
    "COMPLETION_EVENTS",
    "IgnoredEvent",
    "PaymentCompletedEvent",
    "PaymentEvent",
    "parse_attempt_id",
    "parse_payment_event",
    "parse_product",
]
