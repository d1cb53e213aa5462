"""
Quiz funnel report pipeline.

Scores quiz attempts, ingests payment webhooks, queues report jobs, and
serves generated reports to polling clients.
"""

__version__ = "0.1.0"
