"""Pytest configuration and fixtures."""

import os

import pytest

from docmind.core.config import Settings, get_settings
from docmind.core.dependencies import AssistantDependencies
from docmind.db.local_memory import LocalMemoryStore
from tests.fakes.fake_providers import FakeChatModel, FakeEmbedder


@pytest.fixture(scope="session", autouse=True)
def setup_test_env():
    """Set up test environment variables."""
    os.environ["OPENAI_API_KEY"] = "test-openai-key"
    os.environ["ANTHROPIC_API_KEY"] = "test-anthropic-key"
    os.environ["DOCMIND_ENV"] = "test"
    os.environ["MEMORY_BACKEND"] = "local"
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        OPENAI_API_KEY="test-openai-key",
        ANTHROPIC_API_KEY="test-anthropic-key",
        DOCMIND_ENV="test",
        MEMORY_BACKEND="local",
        LLM_TIMEOUT_SECONDS=5.0,
    )


@pytest.fixture
def embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def memory(embedder) -> LocalMemoryStore:
    return LocalMemoryStore(embedder=embedder, dimension=embedder.dimension)


@pytest.fixture
def failing_chat() -> FakeChatModel:
    """Chat model that is down: classification falls back to keywords."""
    return FakeChatModel(error=RuntimeError("chat provider unavailable"))


@pytest.fixture
def generative() -> FakeChatModel:
    return FakeChatModel(replies=["Waves roll in under a silver moon."])


@pytest.fixture
def make_deps(settings, embedder, memory):
    """Build AssistantDependencies around fakes; override models per test."""

    def _make(chat_llm=None, generative_llm=None, memory_store=None) -> AssistantDependencies:
        return AssistantDependencies(
            settings=settings,
            embedder=embedder,
            chat_llm=chat_llm or FakeChatModel(error=RuntimeError("chat provider unavailable")),
            generative_llm=generative_llm or FakeChatModel(replies=["Generated text."]),
            memory=memory_store or memory,
        )

    return _make
