"""
Indexing configuration settings.

Segmenter window sizes and embedding batch sizing for the ingestion pipeline.

Dependencies: pydantic, pydantic_settings
System role: Ingestion pipeline configuration
"""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class IndexingSettings(BaseSettings):
    """Settings for segmenting pages and batching embeddings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="INDEXING_",
        case_sensitive=False,
        extra="ignore",
    )

    # Segmenter settings
    chunk_size: int = Field(
        default=512,
        description="Sliding window length in characters for oversized segments",
        gt=0,
    )
    chunk_overlap: int = Field(
        default=128,
        description="Characters shared by consecutive sliding windows",
        ge=0,
    )
    max_chunk_length: int = Field(
        default=1024,
        description="Segments longer than this are split by the sliding window",
        gt=0,
    )

    # Embedding batch settings
    embedding_batch_size: int = Field(
        default=10,
        description="Chunk texts submitted per embedding request",
        gt=0,
    )
    max_concurrent_batches: int = Field(
        default=4,
        description="Embedding requests in flight per document",
        gt=0,
    )

    @model_validator(mode="after")
    def _check_window(self) -> "IndexingSettings":
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be smaller than "
                f"chunk_size ({self.chunk_size})"
            )
        return self
