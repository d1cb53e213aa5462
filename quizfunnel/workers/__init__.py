"""
Workers module.

Long-running consumer of the report_jobs queue.

Dependencies: quizfunnel.boundary, quizfunnel.core
System role: Background report generation
"""

from quizfunnel.workers.report_worker import ReportWorker

__all__ = ["ReportWorker"]
