"""
Receipt API endpoints.

Routes: POST /receipts/resolve

Dependencies: quizfunnel.application.services.receipt_service, quizfunnel.models
System role: Post-checkout attempt recovery HTTP API
"""

from fastapi import APIRouter, Cookie, Depends

from quizfunnel.api.deps import get_receipt_service
from quizfunnel.application.services.receipt_service import ReceiptService
from quizfunnel.models.receipt import ReceiptResolveRequest, ReceiptResolveResponse

from .error_handling import handle_service_errors

router = APIRouter(prefix="/receipts", tags=["receipts"])


@router.post("/resolve", response_model=ReceiptResolveResponse)
@handle_service_errors
async def resolve_receipt(
    request: ReceiptResolveRequest,
    last_attempt_id: str | None = Cookie(default=None),
    receipt_service: ReceiptService = Depends(get_receipt_service),
) -> ReceiptResolveResponse:
    """
    Recover the attempt id after the provider redirect.

    Args:
        request: Redirect parameters (attempt id, product, receipt id)
        last_attempt_id: Cookie set at quiz submission
        receipt_service: Injected ReceiptService

    Returns:
        ReceiptResolveResponse: Resolved attempt, product, whether the
            receipt is linked to an order, and a message for the visitor

    Raises:
        HTTPException(500): Pending order could not be recorded
    """
    result = await receipt_service.resolve(
        attempt_id=request.attempt_id,
        product=request.product,
        receipt_id=request.receipt_id,
        cookie_attempt_id=last_attempt_id,
    )
    return ReceiptResolveResponse(**result)
