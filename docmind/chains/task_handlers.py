"""Task handlers: one prompt + one completion call per task category.

Writing, reading and creative requests go to the generative model as a
single prompt. Q&A and reasoning go to the chat model, where message
structure matters (Q&A replays the conversation turn by turn).

Every handler stores its raw reply in memory (best-effort) and appends the
user and assistant turns to a copy of the history. A failed completion call
raises TaskHandlerError.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from docmind.core.llm import generate_text, invoke_chat
from docmind.core.logging import get_logger
from docmind.core.schemas_assistant import ConversationTurn, FileBlob, TaskCategory
from docmind.db.memory_store import MemoryStore

logger = get_logger(__name__)

FILE_EXCERPT_CHARS = 1000
SOURCE_EXCERPT_CHARS = 200
HISTORY_TRANSCRIPT_TURNS = 6
HISTORY_TURN_CHARS = 500

RESPONSE_LABELS: dict[TaskCategory, str] = {
    TaskCategory.WRITING: "✍️ Writing Assistant:\n",
    TaskCategory.READING: "📖 Reading Assistant:\n",
    TaskCategory.QA: "💬 Q&A Assistant:\n",
    TaskCategory.REASONING: "🤔 Reasoning Process:\n",
    TaskCategory.CREATIVE: "🎨 Creative Assistant:\n",
}

STEP_PATTERN = re.compile(r"^(step\s*\d+\s*:|[•◦‣]|[-*]\s|\d+[.)])", re.IGNORECASE)


class TaskHandlerError(RuntimeError):
    """A handler's completion call failed; the request has nothing to return."""

    def __init__(self, category: TaskCategory, message: str):
        super().__init__(message)
        self.category = category
        self.message = message


@dataclass(frozen=True)
class TaskRequest:
    """Everything a handler reads from the orchestration state."""

    input: str
    file_contents: Sequence[FileBlob] = ()
    memory_context: str = ""
    conversation_history: Sequence[ConversationTurn] = ()


@dataclass(frozen=True)
class TaskResult:
    response_text: str
    conversation_history: list[ConversationTurn]
    reasoning_steps: list[str] = field(default_factory=list)


# =============================================================================
# Prompt pieces
# =============================================================================


def render_file_context(files: Sequence[FileBlob], intro: str) -> str:
    """File names, then each file's leading excerpt."""
    if not files:
        return ""
    names = ", ".join(f.name for f in files)
    excerpts = "\n\n".join(
        f"File: {f.name}\nContent: {f.content[:FILE_EXCERPT_CHARS]}..." for f in files
    )
    return f"{intro}: {names}\n\n{excerpts}"


def render_history_transcript(history: Sequence[ConversationTurn]) -> str:
    """Plain-text summary of the most recent turns."""
    if not history:
        return ""
    lines = []
    for turn in list(history)[-HISTORY_TRANSCRIPT_TURNS:]:
        speaker = "User" if turn.role == "user" else "Assistant"
        lines.append(f"{speaker}: {turn.content[:HISTORY_TURN_CHARS]}")
    return "Conversation so far:\n" + "\n".join(lines)


def _join_sections(*sections: str) -> str:
    return "\n\n".join(s for s in sections if s)


def replay_history(history: Sequence[ConversationTurn]) -> list[BaseMessage]:
    return [
        HumanMessage(content=turn.content) if turn.role == "user" else AIMessage(content=turn.content)
        for turn in history
    ]


def extract_reasoning_steps(response: str) -> list[str]:
    """
    Pull step-marked lines out of a reasoning reply.

    A line counts if it starts with "Step N:", a bullet, "N." or "N)", or
    contains "reasoning:". With no such line the whole reply is one step.
    """
    steps = []
    for line in response.splitlines():
        stripped = line.strip()
        if not stripped:
            continue
        if STEP_PATTERN.match(stripped) or "reasoning:" in stripped.lower():
            steps.append(stripped)
    return steps if steps else [response]


# =============================================================================
# Shared completion + persistence
# =============================================================================


async def _complete(category: TaskCategory, call, failure_message: str) -> str:
    try:
        return await call
    except Exception as e:
        logger.error(f"{category.value} handler error: {e}")
        raise TaskHandlerError(category, failure_message) from e


async def _finish(
    category: TaskCategory,
    request: TaskRequest,
    reply: str,
    memory: MemoryStore,
    reasoning_steps: list[str] | None = None,
) -> TaskResult:
    await memory.store(
        reply,
        {
            "kind": "response",
            "task_category": category.value,
            "source_excerpt": request.input[:SOURCE_EXCERPT_CHARS],
        },
    )

    history = [
        *request.conversation_history,
        ConversationTurn(role="user", content=request.input),
        ConversationTurn(role="assistant", content=reply),
    ]
    return TaskResult(
        response_text=f"{RESPONSE_LABELS[category]}{reply}",
        conversation_history=history,
        reasoning_steps=reasoning_steps or [],
    )


# =============================================================================
# Handlers
# =============================================================================


async def handle_writing(
    request: TaskRequest, llm: BaseChatModel, memory: MemoryStore, timeout: float = 60.0
) -> TaskResult:
    context = _join_sections(
        render_file_context(request.file_contents, "Based on these files"),
        request.memory_context,
        render_history_transcript(request.conversation_history),
    )
    prompt = f"""You are an expert writing assistant. Create high-quality, context-aware content.

{context}

User request: {request.input}

Please provide a well-structured, engaging response that builds on previous context:"""

    reply = await _complete(
        TaskCategory.WRITING,
        generate_text(llm, prompt, timeout),
        "Failed to generate writing content",
    )
    return await _finish(TaskCategory.WRITING, request, reply, memory)


async def handle_reading(
    request: TaskRequest, llm: BaseChatModel, memory: MemoryStore, timeout: float = 60.0
) -> TaskResult:
    context = _join_sections(
        render_file_context(request.file_contents, "Here are the files for reading and analysis"),
        request.memory_context,
        render_history_transcript(request.conversation_history),
    )
    prompt = f"""You are an expert reading assistant. Carefully read and analyze the provided content.

{context}

User request: {request.input}

Please provide a thorough, insightful response based on the above content:"""

    reply = await _complete(
        TaskCategory.READING,
        generate_text(llm, prompt, timeout),
        "Failed to generate reading content",
    )
    return await _finish(TaskCategory.READING, request, reply, memory)


async def handle_qa(
    request: TaskRequest, llm: BaseChatModel, memory: MemoryStore, timeout: float = 60.0
) -> TaskResult:
    context = _join_sections(
        render_file_context(request.file_contents, "Files shared in this conversation"),
        request.memory_context,
    )
    system_prompt = _join_sections(
        "You are a friendly, knowledgeable assistant. Provide helpful, human-like responses.",
        context,
        "Be conversational, empathetic, and engaging in your responses.",
    )
    messages = [
        SystemMessage(content=system_prompt),
        *replay_history(request.conversation_history),
        HumanMessage(content=request.input),
    ]

    reply = await _complete(
        TaskCategory.QA,
        invoke_chat(llm, messages, timeout),
        "Failed to generate response",
    )
    return await _finish(TaskCategory.QA, request, reply, memory)


async def handle_reasoning(
    request: TaskRequest, llm: BaseChatModel, memory: MemoryStore, timeout: float = 60.0
) -> TaskResult:
    context = _join_sections(
        render_file_context(request.file_contents, "Files to reason about"),
        f"Relevant context:\n{request.memory_context}" if request.memory_context else "",
        render_history_transcript(request.conversation_history),
    )
    system_prompt = _join_sections(
        "You are an advanced reasoning assistant. Use chain-of-thought reasoning.",
        context,
        "Please think step by step and explain your reasoning process.",
    )
    messages = [SystemMessage(content=system_prompt), HumanMessage(content=request.input)]

    reply = await _complete(
        TaskCategory.REASONING,
        invoke_chat(llm, messages, timeout),
        "Failed to process reasoning task",
    )
    return await _finish(
        TaskCategory.REASONING, request, reply, memory, extract_reasoning_steps(reply)
    )


async def handle_creative(
    request: TaskRequest, llm: BaseChatModel, memory: MemoryStore, timeout: float = 60.0
) -> TaskResult:
    context = _join_sections(
        render_file_context(request.file_contents, "Inspiration files"),
        request.memory_context,
        render_history_transcript(request.conversation_history),
    )
    prompt = f"""You are a creative assistant. Use imagination and creativity to respond.

{context}

User request: {request.input}

Please provide a creative, original response:"""

    reply = await _complete(
        TaskCategory.CREATIVE,
        generate_text(llm, prompt, timeout),
        "Failed to generate creative content",
    )
    return await _finish(TaskCategory.CREATIVE, request, reply, memory)
