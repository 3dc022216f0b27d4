"""Pydantic schemas for the document assistant."""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class TaskCategory(str, Enum):
    """Closed set of categories a request can be classified into."""

    WRITING = "writing"
    READING = "reading"
    QA = "qa"
    ANALYSIS = "analysis"
    REASONING = "reasoning"
    CREATIVE = "creative"


# =============================================================================
# Conversation and file payloads
# =============================================================================


class ConversationTurn(BaseModel):
    """One message in a conversation. Never mutated once created."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str


class FileBlob(BaseModel):
    """Decoded text of one attached file."""

    model_config = ConfigDict(frozen=True)

    name: str
    content: str


# =============================================================================
# Orchestrator entry point
# =============================================================================


class AssistantRunRequest(BaseModel):
    """Request body for a single assistant run."""

    input: str = Field(..., min_length=1, description="Free-text user request")
    file_paths: list[str] = Field(default_factory=list, description="Paths of uploaded files")
    conversation_history: list[ConversationTurn] = Field(default_factory=list)


class AssistantRunResponse(BaseModel):
    """Result of a single assistant run."""

    success: bool
    response: str | None = None
    conversation_history: list[ConversationTurn] | None = None
    task_type: TaskCategory | None = None
    reasoning_steps: list[str] | None = None
    similar_content: list[str] | None = None
    memory_context: str | None = None
    error: str | None = None


# =============================================================================
# Memory administration
# =============================================================================


class MemoryStats(BaseModel):
    """Size of the memory store plus backend-specific detail."""

    total_records: int = 0
    backend_detail: dict[str, Any] = Field(default_factory=dict)


class MemoryClearResult(BaseModel):
    success: bool
    message: str


# =============================================================================
# One-shot document tools
# =============================================================================


class ChatMessage(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: str


class DocumentChatRequest(BaseModel):
    """Direct chat with the document assistant persona."""

    messages: list[ChatMessage] = Field(default_factory=list)
    file_content: str | None = Field(None, description="Text of an uploaded file, if any")


class DocumentChatResponse(BaseModel):
    success: bool = True
    message: str


class TextToolRequest(BaseModel):
    feature: str = Field("", description="summarize | autocorrect | suggest | generate")
    text: str = ""


class TextToolResponse(BaseModel):
    success: bool = True
    result: str
