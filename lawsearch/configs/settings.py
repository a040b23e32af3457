"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from lawsearch.configs.base import BaseSettings
from lawsearch.configs.blob_store import BlobStoreSettings
from lawsearch.configs.database import DatabaseSettings
from lawsearch.configs.embeddings import EmbeddingSettings
from lawsearch.configs.indexing import IndexingSettings
from lawsearch.configs.search import KeywordIndexSettings, SearchSettings
from lawsearch.configs.vector_store import VectorStoreSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    database: DatabaseSettings = DatabaseSettings()
    indexing: IndexingSettings = IndexingSettings()
    embeddings: EmbeddingSettings = EmbeddingSettings()
    vector_store: VectorStoreSettings = VectorStoreSettings()
    keyword_index: KeywordIndexSettings = KeywordIndexSettings()
    blob_store: BlobStoreSettings = BlobStoreSettings()
    search: SearchSettings = SearchSettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for the process lifetime.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from lawsearch.configs import get_settings
        settings = get_settings()
    """
    return Settings()
