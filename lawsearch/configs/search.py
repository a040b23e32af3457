"""
Search configuration settings.

Hybrid ranking defaults and keyword index tuning.

Dependencies: pydantic, pydantic_settings
System role: Query-time configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SearchSettings(BaseSettings):
    """Defaults applied by the hybrid ranker when the caller omits them."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SEARCH_",
        case_sensitive=False,
        extra="ignore",
    )

    default_top_k: int = Field(default=10, description="Results returned when top_k is omitted", gt=0)
    backend_timeout_seconds: float = Field(
        default=10.0,
        description="Per-channel timeout for vector and keyword lookups",
        gt=0,
    )


class KeywordIndexSettings(BaseSettings):
    """BM25 keyword index tuning."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="KEYWORD_INDEX_",
        case_sensitive=False,
        extra="ignore",
    )

    body_weight: float = Field(default=2.0, description="BM25 weight of chunk body text", ge=0)
    title_weight: float = Field(default=1.0, description="BM25 weight of document title", ge=0)
    fuzzy_cutoff: float = Field(
        default=0.8,
        description="Similarity ratio for fuzzy query-term expansion (1.0 disables)",
        ge=0.0,
        le=1.0,
    )
    fragment_size: int = Field(default=150, description="Highlight fragment length", gt=0)
    max_fragments: int = Field(default=3, description="Highlight fragments per hit", gt=0)
