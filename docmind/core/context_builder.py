"""Memory context assembly for prompts.

Pulls prior content related to the current request from the memory store,
both by topic (the input itself) and by conversation (the tail of the
history), and renders it as a labeled block for the task prompts.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

from docmind.core.embeddings import Embedder
from docmind.core.logging import get_logger
from docmind.core.schemas_assistant import ConversationTurn
from docmind.db.memory_store import MemoryStore

logger = get_logger(__name__)

HISTORY_WINDOW_CHARS = 1000
MEMORY_CONTEXT_HEADER = "Relevant context from memory:"


@dataclass(frozen=True)
class ContextResult:
    embedding_vector: list[float] = field(default_factory=list)
    retrieved_context: list[str] = field(default_factory=list)
    memory_context_text: str = ""


def history_window(history: Sequence[ConversationTurn], max_chars: int = HISTORY_WINDOW_CHARS) -> str:
    """Last `max_chars` characters of the space-joined history contents."""
    joined = " ".join(turn.content for turn in history)
    return joined[-max_chars:] if max_chars > 0 else ""


def merge_matches(*groups: Sequence[str], limit: int = 5) -> list[str]:
    """Concatenate match groups in order, dropping exact duplicates (first seen wins)."""
    merged: list[str] = []
    seen: set[str] = set()
    for group in groups:
        for content in group:
            if content in seen:
                continue
            seen.add(content)
            merged.append(content)
    return merged[:limit]


def render_memory_context(matches: Sequence[str]) -> str:
    if not matches:
        return ""
    return f"{MEMORY_CONTEXT_HEADER}\n" + "\n\n".join(matches)


async def build_context(
    user_input: str,
    history: Sequence[ConversationTurn],
    memory: MemoryStore,
    embedder: Embedder,
    top_k: int = 3,
    max_items: int = 5,
) -> ContextResult:
    """
    Build the memory context for one request.

    Never raises: any failure yields an empty ContextResult.
    """
    try:
        embedding = await embedder.embed(user_input)
        input_matches = await memory.query(user_input, top_k=top_k, embedding=embedding)

        history_matches: list[str] = []
        window = history_window(history)
        if window.strip():
            history_matches = await memory.query(window, top_k=top_k)

        matches = merge_matches(input_matches, history_matches, limit=max_items)
    except Exception as e:
        logger.error(f"Context building error: {e}")
        return ContextResult()

    logger.debug(
        f"Retrieved {len(matches)} memory matches",
        extra={
            "extra_data": {
                "input_matches": len(input_matches),
                "history_matches": len(history_matches),
            }
        },
    )
    return ContextResult(
        embedding_vector=embedding,
        retrieved_context=matches,
        memory_context_text=render_memory_context(matches),
    )
