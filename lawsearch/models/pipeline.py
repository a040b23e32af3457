"""
Pipeline result models for document processing.

Dependencies: pydantic
System role: Return types for the indexing service
"""

import uuid

from pydantic import BaseModel, Field


class PipelineResult(BaseModel):
    """Result of processing one document through the ingestion pipeline."""

    document_id: uuid.UUID = Field(description="Processed document identifier")
    page_count: int = Field(description="Pages returned by text extraction")
    chunk_count: int = Field(description="Number of chunks generated")
    processing_time_ms: float = Field(description="Total processing time in milliseconds")


class ReindexResult(BaseModel):
    """Tally of a bulk reprocessing run."""

    success: int = Field(default=0, description="Documents reprocessed successfully")
    failed: int = Field(default=0, description="Documents whose reprocessing raised")

    @property
    def total(self) -> int:
        return self.success + self.failed
