"""
Payment webhook response schema.

Dependencies: pydantic
System role: Webhook ingestor API contract
"""

import uuid
from typing import Literal

from pydantic import BaseModel, Field

WebhookAction = Literal["ignored", "duplicate", "confirmed", "enqueued"]


class WebhookResponse(BaseModel):
    """Acknowledgement returned to the payment provider."""

    ok: bool = True
    action: WebhookAction = Field(description="What the delivery caused")
    job_id: uuid.UUID | None = Field(default=None, description="Job enqueued by this delivery")
