"""
Embedding boundary.

Exports:
  - GeminiEmbeddingService: EmbeddingService with runtime model switching
  - FixedDimensionEmbeddings: Gemini embeddings pinned to one vector size
"""

from lawsearch.boundary.embeddings.embeddings_wrapper import FixedDimensionEmbeddings
from lawsearch.boundary.embeddings.gemini_embeddings import GeminiEmbeddingService

__all__ = ["FixedDimensionEmbeddings", "GeminiEmbeddingService"]
