"""Client helpers for consumers of the report API."""

from quizfunnel.client.report_poller import PollOutcome, PollResult, ReportPoller

__all__ = ["PollOutcome", "PollResult", "ReportPoller"]
