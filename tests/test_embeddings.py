"""Tests for embeddings generation with mocked OpenAI API."""

from unittest.mock import MagicMock

import pytest

from docmind.core.embeddings import OpenAIEmbedder


@pytest.fixture
def mock_openai_response():
    """Create a mock OpenAI embeddings response."""

    def _create_response(num_embeddings: int, dimension: int = 1536):
        mock_response = MagicMock()
        mock_response.data = []

        for _ in range(num_embeddings):
            mock_embedding = MagicMock()
            mock_embedding.embedding = [0.1] * dimension
            mock_response.data.append(mock_embedding)

        return mock_response

    return _create_response


@pytest.fixture
def embedder():
    embedder = OpenAIEmbedder(api_key="test-key", model="text-embedding-3-small", dimension=1536)
    embedder._client = MagicMock()
    return embedder


def test_embed_texts_multiple(embedder, mock_openai_response):
    embedder._client.embeddings.create.return_value = mock_openai_response(3)

    embeddings = embedder.embed_texts(["Text one", "Text two", "Text three"])

    assert len(embeddings) == 3
    for embedding in embeddings:
        assert len(embedding) == 1536


def test_embed_texts_empty(embedder):
    assert embedder.embed_texts([]) == []
    embedder._client.embeddings.create.assert_not_called()


def test_embed_texts_dimension_validation(embedder, mock_openai_response):
    embedder._client.embeddings.create.return_value = mock_openai_response(1, dimension=512)

    with pytest.raises(ValueError, match="Embedding dimension mismatch"):
        embedder.embed_texts(["Test text"])


def test_embed_texts_api_failure(embedder):
    embedder._client.embeddings.create.side_effect = Exception("API Error")

    with pytest.raises(Exception, match="API Error"):
        embedder.embed_texts(["Test text"])


def test_embed_texts_uses_configured_model(embedder, mock_openai_response):
    embedder._client.embeddings.create.return_value = mock_openai_response(1)

    embedder.embed_texts(["Test"])

    call_args = embedder._client.embeddings.create.call_args
    assert call_args[1]["model"] == "text-embedding-3-small"
    assert call_args[1]["input"] == ["Test"]


@pytest.mark.asyncio
async def test_embed_single_text_async(embedder, mock_openai_response):
    embedder._client.embeddings.create.return_value = mock_openai_response(1)

    vector = await embedder.embed("Hello world")

    assert len(vector) == 1536


def test_from_settings(settings):
    embedder = OpenAIEmbedder.from_settings(settings)

    assert embedder.model == settings.EMBEDDING_MODEL
    assert embedder.dimension == settings.EMBEDDING_DIM
