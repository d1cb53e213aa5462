"""
Test suite for the funnel HTTP API.

Drives quiz submission, payment webhooks, report polling, receipt
resolution, and job endpoints through the ASGI app on an in-memory SQLite
database. The worker runs in-process with fake collaborators for the
end-to-end cases.

System role: Verification of HTTP contracts and status codes
"""

import uuid
from unittest.mock import AsyncMock

import httpx
import pytest

from quizfunnel.boundary.db.connection import Database
from quizfunnel.core.exceptions import GenerationError
from quizfunnel.workers.report_worker import ReportWorker
from tests.sample_data import SeedData


def payment(order_id: str, attempt_id, product: str = "mini_report") -> dict:
    return {
        "type": "order.completed",
        "data": {
            "id": order_id,
            "amount_cents": 700,
            "metadata": {"quiz_attempt_id": str(attempt_id), "product": product},
        },
    }


@pytest.fixture
def worker(
    database: Database,
    fake_writer: AsyncMock,
    fake_renderer: AsyncMock,
    fake_storage: AsyncMock,
) -> ReportWorker:
    """Provide an in-process worker on the test database."""
    return ReportWorker(
        database=database,
        writer=fake_writer,
        renderer=fake_renderer,
        storage=fake_storage,
        poll_interval_seconds=0.01,
    )


class TestHealth:
    """Test suite for health endpoints."""

    @pytest.mark.asyncio
    async def test_health_should_report_healthy(self, api_client: httpx.AsyncClient) -> None:
        response = await api_client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_health_db_should_reach_database(self, api_client: httpx.AsyncClient) -> None:
        response = await api_client.get("/api/v1/health/db")

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_responses_should_echo_correlation_id(
        self, api_client: httpx.AsyncClient
    ) -> None:
        """A caller-supplied correlation id is returned unchanged."""
        response = await api_client.get(
            "/api/v1/health", headers={"X-Correlation-ID": "trace-123"}
        )

        assert response.headers["X-Correlation-ID"] == "trace-123"


class TestQuizSubmit:
    """Test suite for POST /quiz/submit."""

    @pytest.mark.asyncio
    async def test_submit_should_score_and_set_cookie(
        self, api_client: httpx.AsyncClient, seed: SeedData
    ) -> None:
        """Scenario: three calm answers against two freezer answers."""
        # Act
        response = await api_client.post(
            "/api/v1/quiz/submit",
            json={
                "email": "new@example.com",
                "categorySlug": "brain",
                "answers": [
                    {"id": "q1", "choice": "A"},
                    {"id": "q2", "choice": "B"},
                    {"id": "q3", "choice": "A"},
                    {"id": "q4", "choice": "B"},
                    {"id": "q5", "choice": "A"},
                ],
            },
        )

        # Assert
        assert response.status_code == 200
        body = response.json()
        assert body["archetype_key"] == "calm_strategist"
        set_cookie = response.headers["set-cookie"]
        assert f"last_attempt_id={body['attempt_id']}" in set_cookie
        assert "HttpOnly" in set_cookie

    @pytest.mark.asyncio
    async def test_submit_should_reject_missing_email(
        self, api_client: httpx.AsyncClient, seed: SeedData
    ) -> None:
        response = await api_client.post(
            "/api/v1/quiz/submit", json={"category_slug": "brain", "answers": []}
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_submit_should_return_404_for_unknown_category(
        self, api_client: httpx.AsyncClient, seed: SeedData
    ) -> None:
        response = await api_client.post(
            "/api/v1/quiz/submit",
            json={"email": "new@example.com", "category_slug": "sleep", "answers": []},
        )

        assert response.status_code == 404


class TestPaymentWebhook:
    """Test suite for POST /webhooks/payments."""

    @pytest.mark.asyncio
    async def test_webhook_should_enqueue_once_for_duplicate_deliveries(
        self, api_client: httpx.AsyncClient, seed: SeedData
    ) -> None:
        """Both deliveries succeed; only the first enqueues."""
        # Act
        first = await api_client.post(
            "/api/v1/webhooks/payments", json=payment("ord_1", seed.attempt_id)
        )
        second = await api_client.post(
            "/api/v1/webhooks/payments", json=payment("ord_1", seed.attempt_id)
        )

        # Assert
        assert first.status_code == 200
        assert first.json()["action"] == "enqueued"
        assert second.status_code == 200
        assert second.json() == {"ok": True, "action": "duplicate", "job_id": None}

    @pytest.mark.asyncio
    async def test_webhook_should_return_400_for_invalid_json(
        self, api_client: httpx.AsyncClient
    ) -> None:
        response = await api_client.post(
            "/api/v1/webhooks/payments",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_webhook_should_return_400_for_untagged_body(
        self, api_client: httpx.AsyncClient
    ) -> None:
        response = await api_client.post("/api/v1/webhooks/payments", json={"data": {"id": "x"}})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_webhook_should_return_404_for_unknown_attempt(
        self, api_client: httpx.AsyncClient, seed: SeedData
    ) -> None:
        response = await api_client.post(
            "/api/v1/webhooks/payments", json=payment("ord_2", uuid.uuid4())
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_webhook_should_acknowledge_ignored_events(
        self, api_client: httpx.AsyncClient
    ) -> None:
        response = await api_client.post(
            "/api/v1/webhooks/payments", json={"type": "membership.went_valid"}
        )

        assert response.status_code == 200
        assert response.json()["action"] == "ignored"


class TestReports:
    """Test suite for GET /reports/{attempt_id}."""

    @pytest.mark.asyncio
    async def test_report_should_move_from_202_to_200_after_worker_runs(
        self, api_client: httpx.AsyncClient, seed: SeedData, worker: ReportWorker
    ) -> None:
        """Happy path: pending until the worker completes, then the report."""
        # Arrange
        await api_client.post("/api/v1/webhooks/payments", json=payment("ord_1", seed.attempt_id))

        # Act
        pending = await api_client.get(
            f"/api/v1/reports/{seed.attempt_id}", params={"product": "mini_report"}
        )
        await worker.run_once()
        ready = await api_client.get(
            f"/api/v1/reports/{seed.attempt_id}", params={"product": "mini_report"}
        )

        # Assert
        assert pending.status_code == 202
        assert pending.json() == {"ready": False, "status": "pending", "error": None}
        assert ready.status_code == 200
        report = ready.json()["report"]
        assert report["quiz_attempt_id"] == str(seed.attempt_id)
        assert report["type"] == "mini_report"
        assert report["pdf_url"].endswith(f"/{seed.attempt_id}/mini_report.pdf")

    @pytest.mark.asyncio
    async def test_report_should_expose_generation_failure(
        self,
        api_client: httpx.AsyncClient,
        seed: SeedData,
        worker: ReportWorker,
        fake_writer: AsyncMock,
    ) -> None:
        """A failed job keeps ready=false and reports the error."""
        # Arrange
        fake_writer.generate.side_effect = GenerationError("Text generation failed: 503")
        await api_client.post("/api/v1/webhooks/payments", json=payment("ord_1", seed.attempt_id))

        # Act
        await worker.run_once()
        response = await api_client.get(f"/api/v1/reports/{seed.attempt_id}")

        # Assert
        assert response.status_code == 202
        assert response.json() == {
            "ready": False,
            "status": "error",
            "error": "Text generation failed: 503",
        }

    @pytest.mark.asyncio
    async def test_report_should_report_not_enqueued_before_payment(
        self, api_client: httpx.AsyncClient, seed: SeedData
    ) -> None:
        response = await api_client.get(f"/api/v1/reports/{seed.attempt_id}")

        assert response.status_code == 202
        assert response.json()["status"] == "not_enqueued"

    @pytest.mark.parametrize("attempt_id", ["not-a-uuid", str(uuid.uuid4())])
    @pytest.mark.asyncio
    async def test_report_should_return_404_for_unknown_attempt(
        self, api_client: httpx.AsyncClient, seed: SeedData, attempt_id: str
    ) -> None:
        response = await api_client.get(f"/api/v1/reports/{attempt_id}")

        assert response.status_code == 404


class TestReceipts:
    """Test suite for POST /receipts/resolve."""

    @pytest.mark.asyncio
    async def test_resolve_should_use_cookie_when_redirect_lost_attempt(
        self, api_client: httpx.AsyncClient, seed: SeedData
    ) -> None:
        """The last_attempt_id cookie recovers an unsubstituted attempt id."""
        # Act
        response = await api_client.post(
            "/api/v1/receipts/resolve",
            json={"attemptId": "{{metadata.quiz_attempt_id}}", "product": "mini_report"},
            headers={"Cookie": f"last_attempt_id={seed.attempt_id}"},
        )

        # Assert
        assert response.status_code == 200
        body = response.json()
        assert body["attempt_id"] == str(seed.attempt_id)
        assert body["linked"] is False

    @pytest.mark.asyncio
    async def test_resolve_should_link_receipt_and_webhook_should_confirm(
        self, api_client: httpx.AsyncClient, seed: SeedData
    ) -> None:
        """A receipt recorded at checkout is confirmed, not duplicated, by the webhook."""
        # Arrange
        resolved = await api_client.post(
            "/api/v1/receipts/resolve",
            json={
                "attempt_id": str(seed.attempt_id),
                "product": "mini_report",
                "receipt_id": "rcpt_1",
            },
        )

        # Act
        webhook = await api_client.post(
            "/api/v1/webhooks/payments", json=payment("rcpt_1", seed.attempt_id)
        )

        # Assert
        assert resolved.json()["linked"] is True
        assert webhook.json()["action"] == "confirmed"
        assert webhook.json()["job_id"] is not None


class TestJobs:
    """Test suite for job endpoints."""

    @pytest.mark.asyncio
    async def test_get_job_should_return_status(
        self, api_client: httpx.AsyncClient, seed: SeedData
    ) -> None:
        # Arrange
        enqueued = await api_client.post(
            "/api/v1/webhooks/payments", json=payment("ord_1", seed.attempt_id)
        )
        job_id = enqueued.json()["job_id"]

        # Act
        response = await api_client.get(f"/api/v1/jobs/{job_id}")

        # Assert
        assert response.status_code == 200
        assert response.json()["status"] == "pending"
        assert response.json()["quiz_attempt_id"] == str(seed.attempt_id)

    @pytest.mark.asyncio
    async def test_get_job_should_return_404_for_unknown_job(
        self, api_client: httpx.AsyncClient
    ) -> None:
        response = await api_client.get(f"/api/v1/jobs/{uuid.uuid4()}")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_requeue_should_conflict_for_pending_job(
        self, api_client: httpx.AsyncClient, seed: SeedData
    ) -> None:
        # Arrange
        enqueued = await api_client.post(
            "/api/v1/webhooks/payments", json=payment("ord_1", seed.attempt_id)
        )

        # Act
        response = await api_client.post(f"/api/v1/jobs/{enqueued.json()['job_id']}/requeue")

        # Assert
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_requeue_should_create_job_after_failure(
        self,
        api_client: httpx.AsyncClient,
        seed: SeedData,
        worker: ReportWorker,
        fake_writer: AsyncMock,
    ) -> None:
        """A failed job can be retried by an operator."""
        # Arrange
        fake_writer.generate.side_effect = [GenerationError("first try failed"), "<h1>Ok</h1>"]
        enqueued = await api_client.post(
            "/api/v1/webhooks/payments", json=payment("ord_1", seed.attempt_id)
        )
        await worker.run_once()

        # Act
        response = await api_client.post(f"/api/v1/jobs/{enqueued.json()['job_id']}/requeue")
        await worker.run_once()
        report = await api_client.get(f"/api/v1/reports/{seed.attempt_id}")

        # Assert
        assert response.status_code == 201
        assert response.json()["status"] == "pending"
        assert response.json()["requeued_from_job_id"] == enqueued.json()["job_id"]
        assert response.json()["order_id"] is None
        assert report.status_code == 200
