"""End-to-end tests for the assistant graph with fake providers."""

import pytest

from docmind.chains.task_handlers import RESPONSE_LABELS
from docmind.core.dependencies import AssistantDependencies
from docmind.core.schemas_assistant import ConversationTurn, TaskCategory
from docmind.db.local_memory import LocalMemoryStore
from docmind.graphs.assistant_graph import (
    DEFAULT_ROUTE,
    TASK_ROUTES,
    AssistantOrchestrator,
    AssistantState,
    route_by_category,
)
from tests.fakes.fake_providers import FakeChatModel, FakeEmbedder


class TestRouting:
    def test_every_category_has_a_route(self):
        assert set(TASK_ROUTES) == set(TaskCategory)

    def test_analysis_goes_to_reading_handler(self):
        state = AssistantState(input="x", task_category=TaskCategory.ANALYSIS)
        assert route_by_category(state) == "handle_reading"

    def test_missing_category_defaults_to_qa(self):
        assert route_by_category(AssistantState(input="x")) == DEFAULT_ROUTE == "handle_qa"

    def test_unknown_category_defaults_to_qa(self):
        state = AssistantState(input="x", task_category="translation")
        assert route_by_category(state) == "handle_qa"


class TestRun:
    @pytest.mark.asyncio
    async def test_writing_request_with_keyword_fallback(self, make_deps, failing_chat, generative):
        orchestrator = AssistantOrchestrator(make_deps(chat_llm=failing_chat, generative_llm=generative))

        result = await orchestrator.run("Write a short poem about the ocean")

        assert result.success is True
        assert result.task_type == TaskCategory.WRITING
        assert result.response.startswith(RESPONSE_LABELS[TaskCategory.WRITING])
        assert len(result.response) > len(RESPONSE_LABELS[TaskCategory.WRITING])
        assert len(result.conversation_history) == 2
        assert result.conversation_history[0] == ConversationTurn(
            role="user", content="Write a short poem about the ocean"
        )
        assert len(generative.calls) == 1

    @pytest.mark.asyncio
    async def test_summarize_with_file_routes_to_reading(
        self, make_deps, failing_chat, generative, tmp_path
    ):
        path = tmp_path / "quarterly.txt"
        path.write_text("Revenue grew 12% while costs stayed flat.")
        orchestrator = AssistantOrchestrator(make_deps(chat_llm=failing_chat, generative_llm=generative))

        result = await orchestrator.run("Can you summarize this?", file_paths=[str(path)])

        assert result.success is True
        assert result.task_type == TaskCategory.ANALYSIS
        assert result.response.startswith(RESPONSE_LABELS[TaskCategory.READING])
        prompt = generative.prompts[0]
        assert "expert reading assistant" in prompt
        assert "quarterly.txt" in prompt
        assert "Revenue grew 12%" in prompt

    @pytest.mark.asyncio
    async def test_files_and_responses_are_stored(self, make_deps, memory, tmp_path):
        path = tmp_path / "a.txt"
        path.write_text("alpha beta gamma")
        orchestrator = AssistantOrchestrator(make_deps())

        await orchestrator.run("What does this say?", file_paths=[str(path), str(tmp_path / "gone.txt")])

        kinds = sorted(r.metadata["kind"] for r in memory._records.values())
        assert kinds == ["file", "response"]
        file_record = next(r for r in memory._records.values() if r.metadata["kind"] == "file")
        assert file_record.metadata["filename"] == "a.txt"
        assert file_record.metadata["source"] == "file-upload"

    @pytest.mark.asyncio
    async def test_history_is_append_only(self, make_deps):
        chat = FakeChatModel(replies=["qa", "Sure, here you go."])
        orchestrator = AssistantOrchestrator(make_deps(chat_llm=chat))
        history = [
            ConversationTurn(role="user", content="Hello"),
            ConversationTurn(role="assistant", content="Hi! What can I do?"),
        ]
        before = list(history)

        result = await orchestrator.run("What time zone is Tokyo in?", conversation_history=history)

        assert result.success is True
        assert result.task_type == TaskCategory.QA
        assert len(result.conversation_history) == len(before) + 2
        assert result.conversation_history[: len(before)] == before
        assert history == before

    @pytest.mark.asyncio
    async def test_reasoning_run_returns_steps(self, make_deps):
        chat = FakeChatModel(replies=["reasoning", "Step 1: x\nStep 2: y\nStep 3: z"])
        orchestrator = AssistantOrchestrator(make_deps(chat_llm=chat))

        result = await orchestrator.run("Which is heavier, a kilo of feathers or steel?")

        assert result.task_type == TaskCategory.REASONING
        assert result.reasoning_steps == ["Step 1: x", "Step 2: y", "Step 3: z"]

    @pytest.mark.asyncio
    async def test_memory_from_earlier_run_is_injected(self, settings):
        embedder = FakeEmbedder(
            vectors={
                "Remember that my favourite colour is teal": [1.0, 0.0],
                "Teal it is.": [0.0, 1.0],
                "What is my favourite colour?": [0.95, 0.05],
            },
            dimension=2,
        )
        memory = LocalMemoryStore(embedder=embedder, dimension=2)
        chat = FakeChatModel(replies=["qa", "Teal it is."])

        deps = AssistantDependencies(
            settings=settings,
            embedder=embedder,
            chat_llm=chat,
            generative_llm=FakeChatModel(),
            memory=memory,
        )
        orchestrator = AssistantOrchestrator(deps)
        await memory.store("Remember that my favourite colour is teal")

        result = await orchestrator.run("What is my favourite colour?")

        assert result.similar_content == ["Remember that my favourite colour is teal"]
        assert result.memory_context.startswith("Relevant context from memory:")
        assert "favourite colour is teal" in chat.prompts[1]

    @pytest.mark.asyncio
    async def test_handler_failure_is_structured(self, make_deps, failing_chat):
        orchestrator = AssistantOrchestrator(
            make_deps(chat_llm=failing_chat, generative_llm=FakeChatModel(error=RuntimeError("boom")))
        )
        history = [ConversationTurn(role="user", content="Earlier")]
        before = list(history)

        result = await orchestrator.run("Write a limerick", conversation_history=history)

        assert result.success is False
        assert result.error
        assert result.response is None
        assert result.conversation_history is None
        assert history == before

    @pytest.mark.asyncio
    async def test_memory_outage_does_not_fail_request(self, make_deps, generative):
        broken_embedder = FakeEmbedder(error=RuntimeError("embeddings down"))
        memory = LocalMemoryStore(embedder=broken_embedder)
        deps = make_deps(generative_llm=generative, memory_store=memory)
        deps.embedder = broken_embedder
        orchestrator = AssistantOrchestrator(deps)

        result = await orchestrator.run("Compose a toast for a wedding")

        assert result.success is True
        assert result.task_type == TaskCategory.WRITING
        assert result.similar_content == []
        assert result.memory_context == ""

    @pytest.mark.asyncio
    async def test_blank_input_rejected(self, make_deps):
        result = await AssistantOrchestrator(make_deps()).run("   ")

        assert result.success is False

    @pytest.mark.asyncio
    async def test_dict_history_accepted(self, make_deps, generative):
        orchestrator = AssistantOrchestrator(make_deps(generative_llm=generative))

        result = await orchestrator.run(
            "Create a tagline", conversation_history=[{"role": "user", "content": "hi"}]
        )

        assert result.success is True
        assert result.conversation_history[0].content == "hi"


class TestMemoryAdmin:
    @pytest.mark.asyncio
    async def test_clear_then_query_is_empty(self, make_deps, memory):
        await memory.store("something worth remembering")
        orchestrator = AssistantOrchestrator(make_deps())

        cleared = await orchestrator.clear_all()

        assert cleared.success is True
        assert await memory.query("anything") == []
        assert (await orchestrator.get_stats()).total_records == 0

    @pytest.mark.asyncio
    async def test_stats_failure_is_reported(self, make_deps):
        class BrokenMemory(LocalMemoryStore):
            async def stats(self):
                raise RuntimeError("backend down")

            async def clear_all(self):
                return False

        orchestrator = AssistantOrchestrator(
            make_deps(memory_store=BrokenMemory(embedder=FakeEmbedder()))
        )

        stats = await orchestrator.get_stats()
        cleared = await orchestrator.clear_all()

        assert stats.total_records == 0
        assert "error" in stats.backend_detail
        assert cleared.success is False
