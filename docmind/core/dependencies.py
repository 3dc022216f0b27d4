"""Provider wiring for the assistant.

Clients are built once and handed to the orchestrator explicitly, so tests
can swap any of them for a fake.
"""

from dataclasses import dataclass

from langchain_core.language_models.chat_models import BaseChatModel

from docmind.core.config import Settings
from docmind.core.embeddings import Embedder, OpenAIEmbedder
from docmind.core.llm import get_chat_llm, get_generative_llm
from docmind.core.logging import get_logger
from docmind.db.local_memory import LocalMemoryStore
from docmind.db.memory_store import MemoryStore

logger = get_logger(__name__)


@dataclass
class AssistantDependencies:
    settings: Settings
    embedder: Embedder
    chat_llm: BaseChatModel
    generative_llm: BaseChatModel
    memory: MemoryStore


def build_memory_store(settings: Settings, embedder: Embedder) -> MemoryStore:
    """Memory backend selected by MEMORY_BACKEND."""
    if settings.MEMORY_BACKEND == "supabase":
        from docmind.db.supabase_client import get_supabase
        from docmind.db.supabase_memory import SupabaseMemoryStore

        return SupabaseMemoryStore(
            client=get_supabase(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY),
            embedder=embedder,
            table=settings.SUPABASE_MEMORY_TABLE,
            match_function=settings.SUPABASE_MATCH_FUNCTION,
            similarity_threshold=settings.MEMORY_SIMILARITY_THRESHOLD,
        )

    return LocalMemoryStore(
        embedder=embedder,
        dimension=settings.EMBEDDING_DIM,
        similarity_threshold=settings.MEMORY_SIMILARITY_THRESHOLD,
    )


def build_dependencies(settings: Settings) -> AssistantDependencies:
    """Construct the real providers from settings."""
    embedder = OpenAIEmbedder.from_settings(settings)
    memory = build_memory_store(settings, embedder)

    logger.info(
        "Assistant providers configured",
        extra={
            "extra_data": {
                "chat_model": settings.CHAT_MODEL,
                "generative_model": settings.GENERATIVE_MODEL,
                "embedding_model": settings.EMBEDDING_MODEL,
                "memory_backend": settings.MEMORY_BACKEND,
            }
        },
    )

    return AssistantDependencies(
        settings=settings,
        embedder=embedder,
        chat_llm=get_chat_llm(settings),
        generative_llm=get_generative_llm(settings),
        memory=memory,
    )
