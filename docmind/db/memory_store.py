"""Memory store contract shared by the local and Supabase backends.

A memory store maps text to its embedding and answers nearest-neighbour
queries. Every operation is best-effort: failures are logged and reported
as an empty result, never raised to the caller, so a memory outage cannot
take the assistant down with it.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Protocol
from uuid import uuid4

from docmind.core.schemas_assistant import MemoryStats

# Characters of content kept as the short excerpt alongside the full text
EXCERPT_CHARS = 1000


@dataclass(frozen=True)
class MemoryRecord:
    """One stored piece of content and its embedding."""

    id: str
    embedding: list[float]
    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: str = ""

    @property
    def excerpt(self) -> str:
        return self.content[:EXCERPT_CHARS]


def new_record(content: str, embedding: list[float], metadata: dict[str, Any] | None = None) -> MemoryRecord:
    """Build a record with a fresh id and creation timestamp."""
    created_at = datetime.now(timezone.utc).isoformat()
    return MemoryRecord(
        id=str(uuid4()),
        embedding=list(embedding),
        content=content,
        metadata={"created_at": created_at, **(metadata or {})},
        created_at=created_at,
    )


class MemoryStore(Protocol):
    """Read/write contract the orchestrator relies on."""

    async def store(
        self,
        content: str,
        metadata: dict[str, Any] | None = None,
        embedding: list[float] | None = None,
    ) -> str | None:
        """Persist content; returns the new record id, or None on failure."""
        ...

    async def query(
        self,
        text: str,
        top_k: int = 3,
        embedding: list[float] | None = None,
    ) -> list[str]:
        """Most similar stored contents first; empty on failure or no match."""
        ...

    async def clear_all(self) -> bool: ...

    async def stats(self) -> MemoryStats: ...
