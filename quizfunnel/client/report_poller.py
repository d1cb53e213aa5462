"""
Client for waiting on a paid report.

Polls GET /api/v1/reports/{attempt_id} on a finite budget: a short first
delay, then a fixed interval that can grow by a backoff factor up to a cap.
A failed job ends the wait immediately instead of polling until the budget
runs out.

Usage:
    async with httpx.AsyncClient(base_url="https://quiz.example.com") as http:
        poller = ReportPoller(http)
        result = await poller.wait_for_report(attempt_id, product="mini_report")
        if result.outcome is PollOutcome.READY:
            render(result.report)

Dependencies: httpx, tenacity
System role: Result poller (client contract)
"""

import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterator
from uuid import UUID

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

logger = logging.getLogger(__name__)

REPORTS_PATH = "/api/v1/reports/{attempt_id}"


class PollOutcome(str, enum.Enum):
    """How a wait ended."""

    READY = "ready"
    FAILED = "failed"
    EXHAUSTED = "exhausted"


@dataclass
class PollResult:
    """
    Result of waiting for a report.

    Attributes:
        outcome: ready, failed, or exhausted
        polls: Number of requests made
        report: Report payload when ready
        status: Last job status reported by the server
        error: Failure detail when failed
    """

    outcome: PollOutcome
    polls: int
    report: dict[str, Any] | None = None
    status: str | None = None
    error: str | None = None


class ReportPoller:
    """Polls the report endpoint until the report exists, fails, or the budget is spent."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        initial_delay: float = 1.0,
        interval: float = 4.0,
        backoff_factor: float = 1.0,
        max_interval: float = 30.0,
        max_polls: int = 45,
        request_attempts: int = 3,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Initialize the poller.

        Args:
            client: HTTP client with base_url pointing at the API
            initial_delay: Seconds before the first poll
            interval: Seconds between later polls
            backoff_factor: Multiplier applied to the interval after each poll
            max_interval: Upper bound on the interval
            max_polls: Poll budget
            request_attempts: Attempts per poll on transport errors
            sleep: Awaitable sleep (injectable for tests)
        """
        if max_polls < 1:
            raise ValueError("max_polls must be at least 1")
        self._client = client
        self._initial_delay = initial_delay
        self._interval = interval
        self._backoff_factor = max(1.0, backoff_factor)
        self._max_interval = max(interval, max_interval)
        self._max_polls = max_polls
        self._request_attempts = max(1, request_attempts)
        self._sleep = sleep

    def delays(self) -> Iterator[float]:
        """Sleep before each poll, in order; one value per poll."""
        yield self._initial_delay
        interval = self._interval
        for _ in range(self._max_polls - 1):
            yield interval
            interval = min(interval * self._backoff_factor, self._max_interval)

    async def fetch(self, attempt_id: UUID | str, product: str | None = None) -> httpx.Response:
        """
        One poll request, retried on transport errors.

        Raises:
            httpx.TransportError: Every attempt failed to reach the server
        """
        params = {"product": product} if product else None
        url = REPORTS_PATH.format(attempt_id=attempt_id)
        retrying = AsyncRetrying(
            retry=retry_if_exception_type(httpx.TransportError),
            stop=stop_after_attempt(self._request_attempts),
            wait=wait_exponential_jitter(initial=0.5, max=5, jitter=0.5),
            sleep=self._sleep,
            reraise=True,
        )
        return await retrying(
            self._client.get,
            url,
            params=params,
            headers={"cache-control": "no-cache"},
        )

    async def wait_for_report(
        self,
        attempt_id: UUID | str,
        product: str | None = None,
    ) -> PollResult:
        """
        Poll until the report is ready, the job fails, or the budget is spent.

        Cancelling the calling task stops polling immediately.

        Args:
            attempt_id: Quiz attempt UUID
            product: Product tag to wait for

        Returns:
            PollResult
        """
        last_status: str | None = None
        polls = 0

        for delay in self.delays():
            await self._sleep(delay)
            polls += 1

            try:
                response = await self.fetch(attempt_id, product)
            except httpx.HTTPError as e:
                logger.warning(f"{__name__}:wait_for_report - Request failed: {e}")
                return PollResult(PollOutcome.FAILED, polls, status=last_status, error=str(e))

            if response.status_code not in (200, 202):
                return PollResult(
                    PollOutcome.FAILED,
                    polls,
                    status=last_status,
                    error=_error_detail(response),
                )

            payload = _json_object(response)
            if payload is None:
                return PollResult(
                    PollOutcome.FAILED,
                    polls,
                    status=last_status,
                    error=f"HTTP {response.status_code}: unreadable body",
                )

            if response.status_code == 200 and payload.get("ready"):
                return PollResult(
                    PollOutcome.READY,
                    polls,
                    report=payload.get("report"),
                    status="done",
                )

            last_status = payload.get("status")
            if last_status == "error":
                return PollResult(
                    PollOutcome.FAILED,
                    polls,
                    status=last_status,
                    error=payload.get("error") or "Report generation failed",
                )

        logger.info(
            f"{__name__}:wait_for_report - Budget of {self._max_polls} polls spent "
            f"for attempt {attempt_id} (last status: {last_status})"
        )
        return PollResult(PollOutcome.EXHAUSTED, polls, status=last_status)


def _json_object(response: httpx.Response) -> dict[str, Any] | None:
    try:
        body = response.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


def _error_detail(response: httpx.Response) -> str:
    body = _json_object(response) or {}
    detail = body.get("detail")
    return f"HTTP {response.status_code}: {detail or 'Report lookup failed'}"
