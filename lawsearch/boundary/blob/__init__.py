"""
Blob storage boundary.

Exports:
  - S3BlobStore: boto3-backed BlobStore
"""

from lawsearch.boundary.blob.s3_blob_store import S3BlobStore

__all__ = ["S3BlobStore"]
