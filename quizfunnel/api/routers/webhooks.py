"""
Payment webhook API endpoints.

Routes: POST /webhooks/payments

Signature verification is not performed here; deploy behind a gateway that
checks the provider's HMAC header.

Dependencies: quizfunnel.application.services.webhook_service
System role: Webhook ingestor HTTP API
"""

import logging

from fastapi import APIRouter, Depends, Request

from quizfunnel.api.deps import get_webhook_service
from quizfunnel.application.services.webhook_service import WebhookService
from quizfunnel.core.exceptions import MalformedEventError
from quizfunnel.models.webhook import WebhookResponse
from quizfunnel.observability.log_utils import safe_log_payload

from .error_handling import handle_service_errors

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post("/payments", response_model=WebhookResponse)
@handle_service_errors
async def receive_payment_webhook(
    request: Request,
    webhook_service: WebhookService = Depends(get_webhook_service),
) -> WebhookResponse:
    """
    Record a provider payment event.

    Returns 200 for processed, ignored, and duplicate deliveries so the
    provider stops retrying; every error status invites a retry.

    Args:
        request: Raw request (body decoded here so bad JSON maps to 400)
        webhook_service: Injected WebhookService

    Returns:
        WebhookResponse: ok, action, job_id

    Raises:
        HTTPException(400): Malformed body or missing identifiers
        HTTPException(404): Attempt named in metadata does not exist
        HTTPException(500): Order/job could not be recorded

    Example Response:
        {"ok": true, "action": "enqueued", "job_id": "123e4567-e89b-12d3-a456-426614174000"}
    """
    try:
        body = await request.json()
    except ValueError:
        raise MalformedEventError("Webhook body is not valid JSON")

    logger.info("Payment webhook received", extra={"payload": safe_log_payload(body)})

    result = await webhook_service.handle_event(body)
    return WebhookResponse(**result)
