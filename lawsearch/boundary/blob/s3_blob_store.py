"""
S3 blob store for raw document bytes.

Documents reference their content as s3://bucket/key URLs. boto3 is
blocking, so every call runs in a worker thread.

Dependencies: boto3
System role: Raw document storage
"""

import asyncio
import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from lawsearch.configs.blob_store import BlobStoreSettings
from lawsearch.core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

URL_SCHEME = "s3://"


class S3BlobStore:
    """BlobStore backed by one S3 bucket."""

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        client=None,
    ) -> None:
        """
        Initialize S3 client for the document bucket.

        Args:
            bucket: S3 bucket name for document storage
            region: AWS region for S3 bucket
            endpoint_url: Custom endpoint (MinIO, LocalStack)
            client: Preconfigured boto3 S3 client
        """
        self._bucket = bucket
        self._region = region
        self._s3_client = client or boto3.client("s3", region_name=region, endpoint_url=endpoint_url)

    @classmethod
    def from_settings(cls, settings: BlobStoreSettings) -> "S3BlobStore":
        return cls(bucket=settings.bucket, region=settings.region, endpoint_url=settings.endpoint_url)

    def url_for(self, key: str) -> str:
        return f"{URL_SCHEME}{self._bucket}/{key}"

    def parse_url(self, content_url: str) -> tuple[str, str]:
        """
        Split a content URL into bucket and key.

        Bare keys resolve against the configured bucket.
        """
        if content_url.startswith(URL_SCHEME):
            bucket, _, key = content_url[len(URL_SCHEME) :].partition("/")
            if not bucket or not key:
                raise ValueError(f"Malformed S3 URL: {content_url}")
            return bucket, key
        return self._bucket, content_url

    async def put(self, key: str, content: bytes, content_type: str = "application/pdf") -> str:
        """
        Upload document bytes.

        Returns:
            str: s3:// URL of the stored object

        Raises:
            ExternalServiceError: When the upload fails
        """
        try:
            await asyncio.to_thread(
                self._s3_client.put_object,
                Bucket=self._bucket,
                Key=key,
                Body=content,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            raise ExternalServiceError(
                f"Failed to upload {key}: {e}", service="blob_store", operation="put"
            ) from e

        logger.info(f"{__name__}:put - Stored {len(content)} bytes at {key}")
        return self.url_for(key)

    async def get(self, content_url: str) -> bytes:
        """
        Download document bytes.

        Raises:
            ExternalServiceError: When the object cannot be read
        """
        bucket, key = self.parse_url(content_url)

        def _download() -> bytes:
            response = self._s3_client.get_object(Bucket=bucket, Key=key)
            return response["Body"].read()

        try:
            return await asyncio.to_thread(_download)
        except (ClientError, BotoCoreError) as e:
            raise ExternalServiceError(
                f"Failed to download {content_url}: {e}", service="blob_store", operation="get"
            ) from e

    async def delete(self, content_url: str) -> None:
        bucket, key = self.parse_url(content_url)
        try:
            await asyncio.to_thread(self._s3_client.delete_object, Bucket=bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise ExternalServiceError(
                f"Failed to delete {content_url}: {e}", service="blob_store", operation="delete"
            ) from e

    async def exists(self, content_url: str) -> bool:
        """
        Check if an object exists.

        Returns:
            bool: True if the object exists, False on 404
        """
        bucket, key = self.parse_url(content_url)
        try:
            await asyncio.to_thread(self._s3_client.head_object, Bucket=bucket, Key=key)
            return True
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("404", "NoSuchKey"):
                return False
            raise ExternalServiceError(
                f"Failed to check {content_url}: {e}", service="blob_store", operation="exists"
            ) from e

    async def health_check(self) -> bool:
        try:
            await asyncio.to_thread(self._s3_client.head_bucket, Bucket=self._bucket)
        except (ClientError, BotoCoreError) as e:
            logger.warning(f"{__name__}:health_check - Bucket {self._bucket} unreachable: {e}")
            return False
        return True
