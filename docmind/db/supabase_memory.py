"""Supabase (pgvector) memory backend.

Records live in a single table; similarity search goes through a SQL
function (see migrations/0001_assistant_memories.sql). The Supabase client
is synchronous, so every call runs on a worker thread.
"""

import asyncio
from typing import Any

from supabase import Client

from docmind.core.embeddings import Embedder
from docmind.core.logging import get_logger
from docmind.core.schemas_assistant import MemoryStats
from docmind.db.memory_store import new_record

logger = get_logger(__name__)

# PostgREST refuses unfiltered deletes; no record ever has this id
_NIL_UUID = "00000000-0000-0000-0000-000000000000"


class SupabaseMemoryStore:
    """Memory store backed by a Supabase table with a pgvector column."""

    def __init__(
        self,
        client: Client,
        embedder: Embedder,
        table: str = "assistant_memories",
        match_function: str = "match_assistant_memories",
        similarity_threshold: float = 0.7,
    ):
        self.client = client
        self.embedder = embedder
        self.table = table
        self.match_function = match_function
        self.similarity_threshold = similarity_threshold

    async def store(
        self,
        content: str,
        metadata: dict[str, Any] | None = None,
        embedding: list[float] | None = None,
    ) -> str | None:
        try:
            vector = embedding if embedding is not None else await self.embedder.embed(content)
            if len(vector) != self.embedder.dimension:
                raise ValueError(
                    f"Embedding dimension mismatch: index expects {self.embedder.dimension}, "
                    f"got {len(vector)}"
                )
            record = new_record(content, vector, metadata)
            row = {
                "id": record.id,
                "content": record.content,
                "excerpt": record.excerpt,
                "embedding": record.embedding,
                "metadata": record.metadata,
                "created_at": record.created_at,
            }
            await asyncio.to_thread(lambda: self.client.table(self.table).insert(row).execute())
        except Exception as e:
            logger.error(f"Supabase memory store error: {e}")
            return None

        logger.debug(
            "Stored memory record",
            extra={"extra_data": {"record_id": record.id, "table": self.table}},
        )
        return record.id

    async def query(
        self,
        text: str,
        top_k: int = 3,
        embedding: list[float] | None = None,
    ) -> list[str]:
        if top_k <= 0:
            return []

        try:
            vector = embedding if embedding is not None else await self.embedder.embed(text)
            response = await asyncio.to_thread(
                lambda: self.client.rpc(
                    self.match_function,
                    {
                        "query_embedding": vector,
                        "match_count": top_k,
                        "match_threshold": self.similarity_threshold,
                    },
                ).execute()
            )
        except Exception as e:
            logger.error(f"Supabase memory search error: {e}")
            return []

        rows = [
            row
            for row in (response.data or [])
            if (row.get("similarity") or 0.0) >= self.similarity_threshold
        ]
        rows.sort(key=lambda row: row.get("similarity") or 0.0, reverse=True)

        contents = []
        for row in rows[:top_k]:
            content = row.get("content") or row.get("excerpt") or ""
            if isinstance(content, str) and content:
                contents.append(content)
        return contents

    async def clear_all(self) -> bool:
        try:
            await asyncio.to_thread(
                lambda: self.client.table(self.table).delete().neq("id", _NIL_UUID).execute()
            )
        except Exception as e:
            logger.error(f"Supabase memory clear error: {e}")
            return False

        logger.info(f"Cleared memory table {self.table}")
        return True

    async def stats(self) -> MemoryStats:
        response = await asyncio.to_thread(
            lambda: self.client.table(self.table).select("id", count="exact").limit(1).execute()
        )
        return MemoryStats(
            total_records=response.count or 0,
            backend_detail={
                "backend": "supabase",
                "table": self.table,
                "match_function": self.match_function,
                "dimension": self.embedder.dimension,
            },
        )
