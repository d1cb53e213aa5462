"""API routers."""

from .health import router as health_router
from .jobs import router as jobs_router
from .quiz import router as quiz_router
from .receipts import router as receipts_router
from .reports import router as reports_router
from .webhooks import router as webhooks_router

__all__ = [
    "health_router",
    "jobs_router",
    "quiz_router",
    "receipts_router",
    "reports_router",
    "webhooks_router",
]
