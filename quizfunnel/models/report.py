"""
Report domain models and schemas.

Response schemas for the result poller.

Dependencies: pydantic
System role: Report polling API contracts
"""

import uuid
from typing import Literal

from pydantic import BaseModel, Field

PendingStatus = Literal["pending", "processing", "error", "not_enqueued"]


class ReportRecord(BaseModel):
    """Generated report as returned to clients."""

    id: uuid.UUID
    quiz_attempt_id: uuid.UUID
    type: str = Field(description="Product tag of the report")
    html: str
    pdf_url: str | None = None
    audio_url: str | None = None


class ReportReadyResponse(BaseModel):
    """200 body: the report exists."""

    ready: Literal[True] = True
    report: ReportRecord


class ReportPendingResponse(BaseModel):
    """202 body: no report yet, with the reason."""

    ready: Literal[False] = False
    status: PendingStatus = Field(description="Latest job status, or not_enqueued")
    error: str | None = Field(default=None, description="Failure detail when status is error")
