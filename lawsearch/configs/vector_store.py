"""
Vector store configuration settings.

Manages Qdrant connection and collection settings for chunk embeddings.

Dependencies: pydantic, pydantic_settings
System role: Vector database configuration for semantic retrieval
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class VectorStoreSettings(BaseSettings):
    """Vector store configuration (in-process Qdrant for dev, Qdrant server for prod)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="VECTOR_STORE_",
        case_sensitive=False,
        extra="ignore",
    )

    store_type: str = Field(
        default="qdrant",
        description="Vector store type: 'memory' for local dev, 'qdrant' for a Qdrant server",
    )
    url: str = Field(default="http://localhost:6333", description="Qdrant server URL")
    api_key: str | None = Field(default=None, description="Qdrant API key")
    collection_name: str = Field(default="legal-documents", description="Qdrant collection name")
    vector_dimension: int = Field(
        default=1536,
        description="Embedding vector dimension (must match the embedding model)",
    )
    upsert_batch_size: int = Field(
        default=50,
        description="Points per upsert request",
        gt=0,
    )
