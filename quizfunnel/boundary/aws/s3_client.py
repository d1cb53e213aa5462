"""
S3 client for the reports bucket.

Uploads rendered PDFs and builds their public links. Keys are scoped by
attempt and product so a full assessment never overwrites the mini report
of the same attempt.

Dependencies: boto3, tenacity
System role: Storage step of the report pipeline
"""

import asyncio
import logging
from uuid import UUID

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from quizfunnel.configs.s3_reports import S3ReportsSettings
from quizfunnel.core.exceptions import StorageError

logger = logging.getLogger(__name__)


class S3ReportClient:
    """S3 client for report bucket operations (upload and public links)."""

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        key_prefix: str = "reports",
        public_base_url: str | None = None,
        upload_attempts: int = 3,
        s3_client=None,
    ) -> None:
        """
        Initialize S3 client for the reports bucket.

        Args:
            bucket: S3 bucket name for report storage
            region: AWS region for S3 bucket
            key_prefix: Key prefix for report objects
            public_base_url: CDN/website base URL; virtual-hosted S3 URL when None
            upload_attempts: Attempts per upload before giving up
            s3_client: Pre-built boto3 client (tests)
        """
        self._bucket = bucket
        self._region = region
        self._key_prefix = key_prefix.strip("/")
        self._public_base_url = (
            public_base_url or f"https://{bucket}.s3.{region}.amazonaws.com"
        ).rstrip("/")
        self._upload_attempts = max(1, upload_attempts)
        self._s3_client = s3_client or boto3.client("s3", region_name=region)

    @classmethod
    def from_settings(cls, settings: S3ReportsSettings) -> "S3ReportClient":
        """Build a client from reports bucket settings."""
        return cls(
            bucket=settings.bucket,
            region=settings.region,
            key_prefix=settings.key_prefix,
            public_base_url=settings.public_base_url,
            upload_attempts=settings.upload_attempts,
        )

    def report_key(self, attempt_id: UUID | str, product: str) -> str:
        """
        Object key of an attempt's report PDF.

        Returns:
            str: ``{prefix}/{attempt_id}/{product}.pdf``
        """
        return f"{self._key_prefix}/{attempt_id}/{product}.pdf"

    def public_url(self, s3_key: str) -> str:
        """Public link for an object key."""
        return f"{self._public_base_url}/{s3_key}"

    async def upload_pdf(
        self,
        attempt_id: UUID | str,
        product: str,
        pdf_bytes: bytes,
    ) -> str:
        """
        Upload a report PDF and return its public link.

        Transient S3 failures are retried with exponential backoff; the
        upload overwrites an existing object at the same key.

        Args:
            attempt_id: Quiz attempt the report belongs to
            product: Product tag of the report
            pdf_bytes: Rendered document

        Returns:
            str: Public URL of the uploaded PDF

        Raises:
            StorageError: Every attempt failed
        """
        s3_key = self.report_key(attempt_id, product)
        logger.info(
            f"{__name__}:upload_pdf - Uploading to S3 "
            f"s3_key={s3_key}, size={len(pdf_bytes)} bytes"
        )

        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception_type((ClientError, BotoCoreError)),
                stop=stop_after_attempt(self._upload_attempts),
                wait=wait_exponential_jitter(initial=1, max=10, jitter=1),
                before_sleep=lambda retry_state: logger.warning(
                    f"{__name__}:upload_pdf - Retry {retry_state.attempt_number}/"
                    f"{self._upload_attempts} for s3_key={s3_key}"
                ),
                reraise=True,
            ):
                with attempt:
                    # Upload to S3 (wrap sync call in thread executor)
                    await asyncio.to_thread(
                        self._s3_client.put_object,
                        Bucket=self._bucket,
                        Key=s3_key,
                        Body=pdf_bytes,
                        ContentType="application/pdf",
                        Metadata={
                            "quiz_attempt_id": str(attempt_id),
                            "product": product,
                        },
                    )
        except (ClientError, BotoCoreError, RetryError) as e:
            logger.error(f"{__name__}:upload_pdf - Upload failed for s3_key={s3_key}: {e}")
            raise StorageError(
                f"Report upload failed: {e}",
                details={"bucket": self._bucket, "s3_key": s3_key},
            ) from e

        logger.info(f"{__name__}:upload_pdf - Successfully uploaded s3_key={s3_key}")
        return self.public_url(s3_key)
