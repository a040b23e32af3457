"""
Chunk domain model.

Represents an offset-tracked slice of one document page.

Dependencies: pydantic
System role: Retrieval unit produced by the segmenter
"""

import uuid

from pydantic import BaseModel, ConfigDict, Field, model_validator


def chunk_id_for(document_id: uuid.UUID, page: int, start_offset: int, end_offset: int) -> uuid.UUID:
    """
    Derive a deterministic chunk identifier.

    The same document page slice always maps to the same UUID, so repeated
    upserts into the vector and keyword indexes overwrite rather than duplicate.
    """
    return uuid.uuid5(document_id, f"{page}:{start_offset}:{end_offset}")


class Chunk(BaseModel):
    """Document chunk with optional embedding vector."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID = Field(description="Deterministic chunk identifier (UUIDv5)")
    document_id: uuid.UUID = Field(description="Owning document")
    page: int = Field(ge=1, description="1-based page number")
    text: str = Field(description="Chunk text content")
    start_offset: int = Field(ge=0, description="Start character offset within the page")
    end_offset: int = Field(ge=1, description="End character offset within the page (exclusive)")
    embedding: list[float] = Field(default_factory=list, description="Embedding vector")

    @model_validator(mode="after")
    def _check_offsets(self) -> "Chunk":
        if self.start_offset >= self.end_offset:
            raise ValueError(
                f"start_offset ({self.start_offset}) must be < end_offset ({self.end_offset})"
            )
        return self
