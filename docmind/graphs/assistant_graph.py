"""Document Assistant Graph.

LangGraph workflow for a single assistant request:
1. Read attached files and store them in memory
2. Retrieve related memories and build the context block
3. Classify the request into a task category
4. Dispatch to exactly one task handler
5. Return the final state

Every stage before dispatch absorbs its own failures. Only a handler's
completion failure ends the run early, and the orchestrator turns it into
a structured failure result.
"""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field, fields
from typing import Any
from uuid import uuid4

from langgraph.graph import END, StateGraph

from docmind.chains.classify_task import classify_task
from docmind.chains.task_handlers import (
    TaskHandlerError,
    TaskRequest,
    TaskResult,
    handle_creative,
    handle_qa,
    handle_reading,
    handle_reasoning,
    handle_writing,
)
from docmind.core.context_builder import build_context
from docmind.core.dependencies import AssistantDependencies
from docmind.core.file_text import read_file_blobs
from docmind.core.logging import get_logger, log_with_context, run_context
from docmind.core.schemas_assistant import (
    AssistantRunResponse,
    ConversationTurn,
    FileBlob,
    MemoryClearResult,
    MemoryStats,
    TaskCategory,
)

logger = get_logger(__name__)

GENERIC_FAILURE = "Failed to process request"

# Category -> handler node. "analysis" has no handler of its own.
TASK_ROUTES: dict[TaskCategory, str] = {
    TaskCategory.WRITING: "handle_writing",
    TaskCategory.READING: "handle_reading",
    TaskCategory.ANALYSIS: "handle_reading",
    TaskCategory.QA: "handle_qa",
    TaskCategory.REASONING: "handle_reasoning",
    TaskCategory.CREATIVE: "handle_creative",
}
DEFAULT_ROUTE = TASK_ROUTES[TaskCategory.QA]

_unrouted = set(TaskCategory) - set(TASK_ROUTES)
if _unrouted:
    raise RuntimeError(f"Task categories without a handler route: {sorted(c.value for c in _unrouted)}")


@dataclass(frozen=True)
class AssistantState:
    """State for one assistant run. Nodes return partial updates."""

    # Input
    input: str
    files: list[str] = field(default_factory=list)
    conversation_history: list[ConversationTurn] = field(default_factory=list)

    # Ingestion
    file_contents: list[FileBlob] = field(default_factory=list)

    # Memory context
    embedding_vector: list[float] = field(default_factory=list)
    retrieved_context: list[str] = field(default_factory=list)
    memory_context_text: str = ""

    # Classification
    task_category: TaskCategory | None = None

    # Output
    response_text: str = ""
    reasoning_steps: list[str] = field(default_factory=list)


def route_by_category(state: AssistantState) -> str:
    """Handler node for the classified category; unknown or missing goes to Q&A."""
    if state.task_category is None:
        return DEFAULT_ROUTE
    try:
        return TASK_ROUTES[TaskCategory(state.task_category)]
    except (KeyError, ValueError):
        return DEFAULT_ROUTE


def _task_request(state: AssistantState) -> TaskRequest:
    return TaskRequest(
        input=state.input,
        file_contents=tuple(state.file_contents),
        memory_context=state.memory_context_text,
        conversation_history=tuple(state.conversation_history),
    )


def _result_update(result: TaskResult) -> dict[str, Any]:
    return {
        "response_text": result.response_text,
        "conversation_history": result.conversation_history,
        "reasoning_steps": result.reasoning_steps,
    }


def build_assistant_graph(deps: AssistantDependencies):
    """Build and compile the assistant graph around injected providers."""
    settings = deps.settings
    timeout = settings.LLM_TIMEOUT_SECONDS

    async def ingest_files(state: AssistantState) -> dict[str, Any]:
        """Read attached files and store each one in memory."""
        blobs = await read_file_blobs(state.files)
        await asyncio.gather(
            *(
                deps.memory.store(
                    blob.content,
                    {
                        "kind": "file",
                        "filename": blob.name,
                        "source": "file-upload",
                        "source_excerpt": blob.content[:200],
                    },
                )
                for blob in blobs
            )
        )
        if state.files:
            logger.info(f"Ingested {len(blobs)}/{len(state.files)} files")
        return {"file_contents": blobs}

    async def build_memory_context(state: AssistantState) -> dict[str, Any]:
        """Retrieve related memories for the input and the recent conversation."""
        context = await build_context(
            state.input,
            state.conversation_history,
            deps.memory,
            deps.embedder,
            top_k=settings.MEMORY_TOP_K,
            max_items=settings.MEMORY_CONTEXT_MAX_ITEMS,
        )
        return {
            "embedding_vector": context.embedding_vector,
            "retrieved_context": context.retrieved_context,
            "memory_context_text": context.memory_context_text,
        }

    async def classify(state: AssistantState) -> dict[str, Any]:
        category = await classify_task(
            state.input,
            has_files=bool(state.file_contents),
            chat_llm=deps.chat_llm,
            memory_context=state.memory_context_text,
            use_model=settings.CLASSIFIER_USE_MODEL,
            timeout=timeout,
        )
        logger.info(f"Classified request as {category.value}")
        return {"task_category": category}

    async def writing_node(state: AssistantState) -> dict[str, Any]:
        return _result_update(
            await handle_writing(_task_request(state), deps.generative_llm, deps.memory, timeout)
        )

    async def reading_node(state: AssistantState) -> dict[str, Any]:
        return _result_update(
            await handle_reading(_task_request(state), deps.generative_llm, deps.memory, timeout)
        )

    async def qa_node(state: AssistantState) -> dict[str, Any]:
        return _result_update(
            await handle_qa(_task_request(state), deps.chat_llm, deps.memory, timeout)
        )

    async def reasoning_node(state: AssistantState) -> dict[str, Any]:
        return _result_update(
            await handle_reasoning(_task_request(state), deps.chat_llm, deps.memory, timeout)
        )

    async def creative_node(state: AssistantState) -> dict[str, Any]:
        return _result_update(
            await handle_creative(_task_request(state), deps.generative_llm, deps.memory, timeout)
        )

    workflow = StateGraph(AssistantState)

    workflow.add_node("ingest_files", ingest_files)
    workflow.add_node("build_context", build_memory_context)
    workflow.add_node("classify_task", classify)
    workflow.add_node("handle_writing", writing_node)
    workflow.add_node("handle_reading", reading_node)
    workflow.add_node("handle_qa", qa_node)
    workflow.add_node("handle_reasoning", reasoning_node)
    workflow.add_node("handle_creative", creative_node)

    workflow.set_entry_point("ingest_files")
    workflow.add_edge("ingest_files", "build_context")
    workflow.add_edge("build_context", "classify_task")

    handler_nodes = sorted(set(TASK_ROUTES.values()))
    workflow.add_conditional_edges(
        "classify_task",
        route_by_category,
        {node: node for node in handler_nodes},
    )
    for node in handler_nodes:
        workflow.add_edge(node, END)

    return workflow.compile()


class AssistantOrchestrator:
    """Entry point for assistant runs and memory administration."""

    def __init__(self, deps: AssistantDependencies):
        self.deps = deps
        self.graph = build_assistant_graph(deps)

    async def run(
        self,
        input: str,
        file_paths: Sequence[str] = (),
        conversation_history: Sequence[ConversationTurn | dict] = (),
    ) -> AssistantRunResponse:
        """
        Run one request through the graph.

        Args:
            input: Free-text user request
            file_paths: Paths of uploaded files to read
            conversation_history: Prior turns; never modified

        Returns:
            AssistantRunResponse; success=False with an error message when a
            handler fails. Never raises.
        """
        run_id = str(uuid4())

        if not input or not input.strip():
            return AssistantRunResponse(success=False, error="Input is required")

        try:
            history = [ConversationTurn.model_validate(turn) for turn in conversation_history]
        except Exception as e:
            logger.warning(f"Invalid conversation history: {e}", extra={"run_id": run_id})
            return AssistantRunResponse(success=False, error="Invalid conversation history")

        log_with_context(
            logger,
            logging.INFO,
            "Assistant run started",
            run_id=run_id,
            files=len(file_paths),
            history_turns=len(history),
        )

        initial_state = AssistantState(
            input=input,
            files=list(file_paths),
            conversation_history=history,
        )

        try:
            with run_context(run_id):
                result = await self.graph.ainvoke(initial_state)
        except TaskHandlerError as e:
            log_with_context(
                logger,
                logging.ERROR,
                "Assistant run failed in handler",
                run_id=run_id,
                task_type=e.category.value,
                error=e.message,
            )
            return AssistantRunResponse(success=False, error=e.message)
        except Exception:
            logger.exception("Assistant workflow error", extra={"run_id": run_id})
            return AssistantRunResponse(success=False, error=GENERIC_FAILURE)

        # LangGraph StateGraph.ainvoke() returns a dict, not the typed state object
        if not isinstance(result, dict):
            result = {f.name: getattr(result, f.name) for f in fields(result)}

        task_category = result.get("task_category")
        log_with_context(
            logger,
            logging.INFO,
            "Assistant run completed",
            run_id=run_id,
            task_type=task_category.value if task_category else None,
            memory_matches=len(result.get("retrieved_context") or []),
        )

        return AssistantRunResponse(
            success=True,
            response=result.get("response_text"),
            conversation_history=result.get("conversation_history"),
            task_type=task_category,
            reasoning_steps=result.get("reasoning_steps") or None,
            similar_content=result.get("retrieved_context"),
            memory_context=result.get("memory_context_text"),
        )

    async def get_stats(self) -> MemoryStats:
        try:
            return await self.deps.memory.stats()
        except Exception as e:
            logger.error(f"Memory stats error: {e}")
            return MemoryStats(total_records=0, backend_detail={"error": "Failed to get memory stats"})

    async def clear_all(self) -> MemoryClearResult:
        try:
            cleared = await self.deps.memory.clear_all()
        except Exception as e:
            logger.error(f"Memory clear error: {e}")
            cleared = False

        if cleared:
            return MemoryClearResult(success=True, message="Memory cleared")
        return MemoryClearResult(success=False, message="Failed to clear memory")
