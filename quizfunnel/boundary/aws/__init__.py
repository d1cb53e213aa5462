"""
AWS boundary modules.

Exports: S3ReportClient
"""

from .s3_client import S3ReportClient

__all__ = ["S3ReportClient"]
