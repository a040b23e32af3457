"""
Test suite for GeminiEmbeddingService.

Injects fake LangChain clients through the embeddings factory so no
Google API calls are made.

System role: Verification of the embedding collaborator
"""

from unittest.mock import MagicMock

import pytest

from lawsearch.boundary.embeddings.gemini_embeddings import GeminiEmbeddingService
from lawsearch.core.exceptions import ExternalServiceError, ValidationError


@pytest.fixture
def clients() -> dict[str, MagicMock]:
    """Fake LangChain Embeddings clients keyed by model name."""
    return {}


@pytest.fixture
def service(clients) -> GeminiEmbeddingService:
    def factory(model_name: str) -> MagicMock:
        client = MagicMock()
        client.embed_documents.side_effect = lambda texts: [[float(len(t))] for t in texts]
        client.embed_query.return_value = [0.5]
        clients[model_name] = client
        return client

    return GeminiEmbeddingService(model_name="model-a", embeddings_factory=factory)


class TestEmbed:
    @pytest.mark.asyncio
    async def test_embed_batch_should_return_vectors_in_order(self, service, clients):
        vectors = await service.embed_batch(["a", "bbb"])

        assert vectors == [[1.0], [3.0]]
        clients["model-a"].embed_documents.assert_called_once_with(["a", "bbb"])

    @pytest.mark.asyncio
    async def test_embed_batch_should_skip_client_for_empty_input(self, service, clients):
        assert await service.embed_batch([]) == []
        clients["model-a"].embed_documents.assert_not_called()

    @pytest.mark.asyncio
    async def test_embed_one_should_use_query_embedding(self, service, clients):
        assert await service.embed_one("lien") == [0.5]
        clients["model-a"].embed_query.assert_called_once_with("lien")

    @pytest.mark.asyncio
    async def test_embed_batch_should_wrap_client_errors(self, service, clients):
        clients["model-a"].embed_documents.side_effect = RuntimeError("429 quota")

        with pytest.raises(ExternalServiceError) as exc_info:
            await service.embed_batch(["text"])

        assert exc_info.value.service == "embedding"
        assert exc_info.value.details["model"] == "model-a"


class TestSetModel:
    @pytest.mark.asyncio
    async def test_set_model_should_route_later_calls_to_new_client(self, service, clients):
        """Test that a model switch swaps the underlying client."""
        # Act
        await service.set_model("model-b")
        await service.embed_one("lien")

        # Assert
        assert service.model_name == "model-b"
        clients["model-b"].embed_query.assert_called_once_with("lien")
        clients["model-a"].embed_query.assert_not_called()

    @pytest.mark.asyncio
    async def test_set_model_should_reject_blank_name(self, service):
        with pytest.raises(ValidationError):
            await service.set_model("  ")

        assert service.model_name == "model-a"
