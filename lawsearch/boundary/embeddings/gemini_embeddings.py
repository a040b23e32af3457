"""
Gemini embedding service.

Adapts a LangChain Embeddings client to the EmbeddingService contract and
allows swapping the active model at runtime. Each call captures the client
in effect when it starts, so a model switch only affects later calls.

Dependencies: langchain_core, langchain_google_genai, asyncio
System role: Embedding collaborator for ingestion and query
"""

import asyncio
import logging
from typing import Callable

from langchain_core.embeddings import Embeddings

from lawsearch.boundary.embeddings.embeddings_wrapper import FixedDimensionEmbeddings
from lawsearch.configs.embeddings import EmbeddingSettings
from lawsearch.core.exceptions import ExternalServiceError, ValidationError

logger = logging.getLogger(__name__)

EmbeddingsFactory = Callable[[str], Embeddings]


class GeminiEmbeddingService:
    """EmbeddingService over Google Gemini embeddings."""

    def __init__(
        self,
        model_name: str = "models/gemini-embedding-001",
        output_dimensionality: int = 1536,
        google_api_key: str | None = None,
        embeddings_factory: EmbeddingsFactory | None = None,
    ) -> None:
        """
        Initialize service with an initial model.

        Args:
            model_name: Google embedding model ID
            output_dimensionality: Vector size requested from the model
            google_api_key: API key (GOOGLE_API_KEY environment variable when None)
            embeddings_factory: Builds a LangChain Embeddings client for a model name
        """
        self.output_dimensionality = output_dimensionality
        self._google_api_key = google_api_key
        self._factory = embeddings_factory or self._default_factory
        self._model_name = model_name
        self._client = self._factory(model_name)

    @classmethod
    def from_settings(cls, settings: EmbeddingSettings) -> "GeminiEmbeddingService":
        return cls(
            model_name=settings.model,
            output_dimensionality=settings.output_dimensionality,
            google_api_key=settings.google_api_key,
        )

    @property
    def model_name(self) -> str:
        return self._model_name

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """
        Embed texts with positional correspondence.

        Raises:
            ExternalServiceError: When the embedding API call fails
        """
        if not texts:
            return []
        client, model_name = self._client, self._model_name

        try:
            return await asyncio.to_thread(client.embed_documents, texts)
        except Exception as e:
            raise ExternalServiceError(
                f"Embedding {len(texts)} texts with {model_name} failed: {e}",
                service="embedding",
                operation="embed_batch",
                details={"model": model_name},
            ) from e

    async def embed_one(self, text: str) -> list[float]:
        """
        Embed a single query text.

        Raises:
            ExternalServiceError: When the embedding API call fails
        """
        client, model_name = self._client, self._model_name

        try:
            return await asyncio.to_thread(client.embed_query, text)
        except Exception as e:
            raise ExternalServiceError(
                f"Embedding query with {model_name} failed: {e}",
                service="embedding",
                operation="embed_one",
                details={"model": model_name},
            ) from e

    async def set_model(self, model_name: str) -> None:
        """
        Switch the active model for subsequent calls.

        Raises:
            ValidationError: When model_name is blank
        """
        if not model_name or not model_name.strip():
            raise ValidationError("Embedding model name cannot be empty", field="model_name")

        client = self._factory(model_name)
        previous = self._model_name
        self._client, self._model_name = client, model_name
        logger.info(f"{__name__}:set_model - Switched embedding model {previous} -> {model_name}")

    def _default_factory(self, model_name: str) -> Embeddings:
        kwargs = {}
        if self._google_api_key:
            kwargs["google_api_key"] = self._google_api_key
        return FixedDimensionEmbeddings(
            model=model_name,
            output_dimensionality=self.output_dimensionality,
            **kwargs,
        )
