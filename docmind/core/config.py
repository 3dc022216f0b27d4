"""Configuration management for DocMind."""

from functools import lru_cache
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file (only if accessible)
try:
    load_dotenv()
except (PermissionError, OSError):
    # In sandboxed environments, .env might not be accessible
    # Environment variables should be set directly
    pass


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Provider credentials (required)
    OPENAI_API_KEY: str = Field(..., description="OpenAI API key (embeddings + chat model)")
    ANTHROPIC_API_KEY: str = Field(..., description="Anthropic API key (generative model)")

    # Environment
    DOCMIND_ENV: str = Field(default="dev", description="Environment: dev, staging, prod, test")

    # Embedding configuration
    EMBEDDING_MODEL: str = Field(
        default="text-embedding-3-small", description="OpenAI embedding model"
    )
    EMBEDDING_DIM: int = Field(default=1536, description="Embedding vector dimension")
    EMBEDDING_TIMEOUT_SECONDS: float = Field(
        default=30.0, description="Deadline for a single embedding request"
    )

    # Chat-style model: classification, Q&A, reasoning
    CHAT_MODEL: str = Field(default="gpt-4o-mini", description="Chat completion model")
    CHAT_TEMPERATURE: float = Field(default=0.2, description="Chat model temperature")

    # Generative model: writing, reading, creative
    GENERATIVE_MODEL: str = Field(
        default="claude-sonnet-4-20250514", description="Long-form generation model"
    )
    GENERATIVE_TEMPERATURE: float = Field(default=0.7, description="Generative model temperature")
    GENERATIVE_MAX_TOKENS: int = Field(default=2048, description="Max tokens per generation")

    LLM_TIMEOUT_SECONDS: float = Field(
        default=60.0, description="Deadline for a single completion call"
    )

    # Classification
    CLASSIFIER_USE_MODEL: bool = Field(
        default=True, description="Ask the chat model before falling back to keyword rules"
    )

    # Memory configuration
    MEMORY_BACKEND: Literal["local", "supabase"] = Field(
        default="local", description="Memory backend: local (in-process) or supabase (pgvector)"
    )
    MEMORY_SIMILARITY_THRESHOLD: float = Field(
        default=0.7, description="Minimum cosine similarity for a memory match"
    )
    MEMORY_TOP_K: int = Field(default=3, description="Matches per memory query")
    MEMORY_CONTEXT_MAX_ITEMS: int = Field(
        default=5, description="Max merged matches injected into a prompt"
    )

    # Supabase configuration (required when MEMORY_BACKEND=supabase)
    SUPABASE_URL: str | None = Field(default=None, description="Supabase project URL")
    SUPABASE_SERVICE_ROLE_KEY: str | None = Field(
        default=None, description="Supabase service role key"
    )
    SUPABASE_MEMORY_TABLE: str = Field(
        default="assistant_memories", description="Table holding memory records"
    )
    SUPABASE_MATCH_FUNCTION: str = Field(
        default="match_assistant_memories", description="RPC used for similarity search"
    )

    @model_validator(mode="after")
    def _require_supabase_credentials(self) -> "Settings":
        if self.MEMORY_BACKEND == "supabase":
            missing = [
                name
                for name in ("SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY")
                if not getattr(self, name)
            ]
            if missing:
                raise ValueError(
                    f"MEMORY_BACKEND=supabase requires: {', '.join(missing)}"
                )
        return self


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance

    Raises:
        ValidationError: If required environment variables are missing
    """
    return Settings()
