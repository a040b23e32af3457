"""
Embedding service configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Embedding model configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EmbeddingSettings(BaseSettings):
    """Google Gemini embedding model configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="EMBEDDING_",
        case_sensitive=False,
        extra="ignore",
    )

    model: str = Field(
        default="models/gemini-embedding-001",
        description="Google embedding model ID",
    )
    output_dimensionality: int = Field(
        default=1536,
        description="Fixed vector dimension requested from the model",
    )
    google_api_key: str | None = Field(
        default=None,
        description="Google API key (falls back to GOOGLE_API_KEY when unset)",
    )
