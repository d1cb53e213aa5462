"""
Job domain models and schemas.

Response schemas for report job inspection.

Dependencies: pydantic
System role: Job status API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel


class JobStatusResponse(BaseModel):
    """Response schema for job status."""

    id: uuid.UUID
    quiz_attempt_id: uuid.UUID
    order_id: uuid.UUID | None = None
    requeued_from_job_id: uuid.UUID | None = None
    product: str
    status: str
    error: str | None = None
    created_at: datetime
    updated_at: datetime
