"""OpenAI embeddings generation with validation."""

import asyncio
from typing import Protocol

from openai import OpenAI

from docmind.core.config import Settings
from docmind.core.logging import get_logger

logger = get_logger(__name__)


class Embedder(Protocol):
    """Anything that turns text into a fixed-dimension vector."""

    dimension: int

    async def embed(self, text: str) -> list[float]: ...


class OpenAIEmbedder:
    """Embedding provider backed by the OpenAI embeddings endpoint."""

    def __init__(
        self,
        api_key: str,
        model: str = "text-embedding-3-small",
        dimension: int = 1536,
        timeout: float = 30.0,
    ):
        self.model = model
        self.dimension = dimension
        self._client = OpenAI(api_key=api_key, timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Settings) -> "OpenAIEmbedder":
        return cls(
            api_key=settings.OPENAI_API_KEY,
            model=settings.EMBEDDING_MODEL,
            dimension=settings.EMBEDDING_DIM,
            timeout=settings.EMBEDDING_TIMEOUT_SECONDS,
        )

    def embed_texts(self, texts: list[str]) -> list[list[float]]:
        """
        Generate embeddings for a list of texts using OpenAI.

        Args:
            texts: List of text strings to embed

        Returns:
            List of embedding vectors (each vector is list of floats)

        Raises:
            ValueError: If embedding dimension doesn't match the configured dimension
            Exception: If OpenAI API call fails
        """
        if not texts:
            return []

        try:
            response = self._client.embeddings.create(
                model=self.model,
                input=texts,
            )

            embeddings = []
            for i, embedding_obj in enumerate(response.data):
                embedding = embedding_obj.embedding

                if len(embedding) != self.dimension:
                    raise ValueError(
                        f"Embedding dimension mismatch for text {i}: "
                        f"expected {self.dimension}, got {len(embedding)}"
                    )

                embeddings.append(embedding)

            logger.debug(
                f"Generated {len(embeddings)} embeddings using {self.model}",
                extra={"extra_data": {"model": self.model, "count": len(embeddings)}},
            )

            return embeddings

        except Exception as e:
            logger.error(f"Failed to generate embeddings: {e}")
            raise

    async def embed(self, text: str) -> list[float]:
        """Embed one text on a worker thread so the event loop stays free."""
        vectors = await asyncio.to_thread(self.embed_texts, [text])
        return vectors[0]
