"""
Google Generative AI embeddings with fixed output dimensionality.

GoogleGenerativeAIEmbeddings ignores output_dimensionality passed to the
constructor, so this subclass forwards it on every embed call. The vector
index collection is created with the same dimension.

Dependencies: langchain_google_genai, python-dotenv
System role: Embedding dimension consistency for the Qdrant collection
"""

import logging

from dotenv import load_dotenv
from langchain_google_genai import GoogleGenerativeAIEmbeddings

logger = logging.getLogger(__name__)

# GOOGLE_API_KEY may live in .env rather than the process environment
load_dotenv()


class FixedDimensionEmbeddings(GoogleGenerativeAIEmbeddings):
    """GoogleGenerativeAIEmbeddings that always requests one vector size."""

    _output_dimensionality: int = 1536

    def __init__(
        self,
        model: str = "models/gemini-embedding-001",
        output_dimensionality: int = 1536,
        **kwargs,
    ) -> None:
        """
        Initialize embeddings with fixed output dimensionality.

        Args:
            model: Google embedding model ID
            output_dimensionality: Dimension requested on every call
            **kwargs: Additional arguments for GoogleGenerativeAIEmbeddings
        """
        super().__init__(model=model, **kwargs)
        self._output_dimensionality = output_dimensionality
        logger.info(
            f"{__name__}:__init__ - Initialized with model={model}, "
            f"output_dimensionality={output_dimensionality}"
        )

    def embed_documents(
        self,
        texts: list[str],
        *,
        batch_size: int = 100,
        task_type: str | None = None,
        titles: list[str] | None = None,
        output_dimensionality: int | None = None,
    ) -> list[list[float]]:
        dim = output_dimensionality or self._output_dimensionality
        return super().embed_documents(
            texts,
            batch_size=batch_size,
            task_type=task_type,
            titles=titles,
            output_dimensionality=dim,
        )

    def embed_query(
        self,
        text: str,
        task_type: str | None = None,
        title: str | None = None,
        output_dimensionality: int | None = None,
    ) -> list[float]:
        dim = output_dimensionality or self._output_dimensionality
        return super().embed_query(
            text,
            task_type=task_type,
            title=title,
            output_dimensionality=dim,
        )
