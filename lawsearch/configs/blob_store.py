"""
Blob store configuration.

Settings for the raw document bucket.

Dependencies: pydantic_settings
System role: S3 documents bucket configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BlobStoreSettings(BaseSettings):
    """Settings for the S3 bucket holding uploaded document bytes."""

    model_config = SettingsConfigDict(
        env_prefix="BLOB_STORE_",
        case_sensitive=False,
        extra="ignore",
    )

    bucket: str = Field(
        default="legal-documents",
        description="S3 bucket for raw document storage",
    )
    region: str = Field(
        default="us-east-1",
        description="AWS region for S3 bucket",
    )
    endpoint_url: str | None = Field(
        default=None,
        description="Custom S3 endpoint (MinIO, LocalStack)",
    )
