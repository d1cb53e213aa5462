"""
Report API endpoints.

Routes: GET /reports/{attempt_id}

Dependencies: quizfunnel.application.services.report_service, quizfunnel.models
System role: Result poller HTTP API
"""

from fastapi import APIRouter, Depends, Response, status

from quizfunnel.api.deps import get_report_service
from quizfunnel.application.services.report_service import ReportService
from quizfunnel.boundary.db.models import ProductTag
from quizfunnel.core.exceptions import AttemptNotFoundError
from quizfunnel.core.payments import parse_attempt_id
from quizfunnel.models.report import ReportPendingResponse, ReportReadyResponse

from .error_handling import handle_service_errors

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get(
    "/{attempt_id}",
    response_model=ReportReadyResponse | ReportPendingResponse,
    responses={202: {"model": ReportPendingResponse}},
)
@handle_service_errors
async def get_report(
    attempt_id: str,
    response: Response,
    product: ProductTag | None = None,
    report_service: ReportService = Depends(get_report_service),
) -> ReportReadyResponse | ReportPendingResponse:
    """
    Get an attempt's report, or why it is not ready.

    Clients poll this endpoint after checkout. The call never writes.

    Args:
        attempt_id: Quiz attempt UUID
        response: Outgoing response (status code)
        product: Tier to wait for; newest report of any tier when omitted
        report_service: Injected ReportService

    Returns:
        200 ReportReadyResponse when the report exists, otherwise
        202 ReportPendingResponse with the latest job status

    Raises:
        HTTPException(404): Unknown attempt

    Example Responses:
        202 {"ready": false, "status": "processing", "error": null}
        202 {"ready": false, "status": "error", "error": "generation exceeded 120s deadline"}
        200 {"ready": true, "report": {"id": "...", "type": "mini_report", "html": "...", ...}}
    """
    parsed_id = parse_attempt_id(attempt_id)
    if parsed_id is None:
        raise AttemptNotFoundError(attempt_id)

    result = await report_service.poll(parsed_id, product)
    if result["ready"]:
        return ReportReadyResponse(report=result["report"])

    response.status_code = status.HTTP_202_ACCEPTED
    return ReportPendingResponse(status=result["status"], error=result["error"])
