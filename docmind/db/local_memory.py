"""In-process memory backend with brute-force cosine search."""

from typing import Any

from docmind.core.embeddings import Embedder
from docmind.core.logging import get_logger
from docmind.core.schemas_assistant import MemoryStats
from docmind.core.similarity import rank_by_similarity
from docmind.db.memory_store import MemoryRecord, new_record

logger = get_logger(__name__)


class LocalMemoryStore:
    """
    Memory store kept in a dict for the lifetime of the process.

    Records are fully built before insertion and queries score a snapshot
    of the dict, so a concurrent writer is never observed half-written.
    """

    def __init__(
        self,
        embedder: Embedder,
        dimension: int | None = None,
        similarity_threshold: float = 0.7,
    ):
        self.embedder = embedder
        self.dimension = dimension
        self.similarity_threshold = similarity_threshold
        self._records: dict[str, MemoryRecord] = {}

    def _check_dimension(self, embedding: list[float]) -> None:
        if self.dimension is None:
            self.dimension = len(embedding)
        if len(embedding) != self.dimension:
            raise ValueError(
                f"Embedding dimension mismatch: store holds {self.dimension}, got {len(embedding)}"
            )

    async def store(
        self,
        content: str,
        metadata: dict[str, Any] | None = None,
        embedding: list[float] | None = None,
    ) -> str | None:
        try:
            vector = embedding if embedding is not None else await self.embedder.embed(content)
            self._check_dimension(vector)
            record = new_record(content, vector, metadata)
            self._records[record.id] = record
        except Exception as e:
            logger.error(f"Memory store error: {e}")
            return None

        logger.debug(
            "Stored memory record",
            extra={"extra_data": {"record_id": record.id, "kind": record.metadata.get("kind")}},
        )
        return record.id

    async def query(
        self,
        text: str,
        top_k: int = 3,
        embedding: list[float] | None = None,
    ) -> list[str]:
        try:
            if not self._records:
                return []
            vector = embedding if embedding is not None else await self.embedder.embed(text)
            snapshot = list(self._records.values())
            by_id = {record.id: record for record in snapshot}
            ranked = rank_by_similarity(
                vector,
                [(record.id, record.embedding) for record in snapshot],
                threshold=self.similarity_threshold,
                top_k=top_k,
            )
        except Exception as e:
            logger.error(f"Memory search error: {e}")
            return []

        contents = [by_id[record_id].content or by_id[record_id].excerpt for record_id, _ in ranked]
        return [content for content in contents if content]

    async def clear_all(self) -> bool:
        self._records = {}
        logger.info("Local memory cleared")
        return True

    async def stats(self) -> MemoryStats:
        return MemoryStats(
            total_records=len(self._records),
            backend_detail={
                "backend": "local",
                "dimension": self.dimension,
                "similarity_threshold": self.similarity_threshold,
            },
        )
