"""
Vector index factory selecting between in-process Qdrant (dev) and a
Qdrant server (prod).

Depends on VECTOR_STORE_STORE_TYPE environment variable.

Dependencies: qdrant_client, lawsearch.boundary.vdb, lawsearch.configs
System role: Vector index instantiation and selection
"""

import logging

from qdrant_client import AsyncQdrantClient

from lawsearch.boundary.vdb.qdrant_store import QdrantVectorIndex
from lawsearch.configs import get_settings
from lawsearch.configs.vector_store import VectorStoreSettings

logger = logging.getLogger(__name__)


def get_vector_index(config: VectorStoreSettings | None = None) -> QdrantVectorIndex:
    """
    Factory function to get the vector index based on configuration.

    Args:
        config: Vector store settings (defaults to application settings)

    Returns:
        QdrantVectorIndex: Adapter over an in-memory or remote Qdrant client

    Raises:
        ValueError: If store_type is invalid
    """
    config = config or get_settings().vector_store
    store_type = config.store_type.lower()

    if store_type == "memory":
        logger.info(f"{__name__}:get_vector_index - Creating in-process Qdrant index (local dev mode)")
        client = AsyncQdrantClient(location=":memory:")

    elif store_type == "qdrant":
        logger.info(f"{__name__}:get_vector_index - Connecting to Qdrant at {config.url}")
        client = AsyncQdrantClient(url=config.url, api_key=config.api_key)

    else:
        raise ValueError(
            f"Invalid VECTOR_STORE_STORE_TYPE: {store_type}. "
            f"Must be 'memory' (dev) or 'qdrant' (production)."
        )

    return QdrantVectorIndex(
        client=client,
        collection_name=config.collection_name,
        vector_dimension=config.vector_dimension,
        upsert_batch_size=config.upsert_batch_size,
    )
