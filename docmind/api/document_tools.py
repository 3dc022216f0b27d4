"""API endpoints for one-shot document chat and text tools."""

from fastapi import APIRouter, Depends, HTTPException

from docmind.api.dependencies import get_orchestrator
from docmind.chains.document_tools import chat_with_document, run_text_tool
from docmind.core.logging import get_logger
from docmind.core.schemas_assistant import (
    DocumentChatRequest,
    DocumentChatResponse,
    TextToolRequest,
    TextToolResponse,
)
from docmind.graphs.assistant_graph import AssistantOrchestrator

logger = get_logger(__name__)

router = APIRouter()


@router.post("/chat", response_model=DocumentChatResponse)
async def document_chat(
    request: DocumentChatRequest,
    orchestrator: AssistantOrchestrator = Depends(get_orchestrator),
) -> DocumentChatResponse:
    """
    Chat with the document assistant, optionally over an uploaded file.

    Raises:
        HTTPException 400: If no messages are given
        HTTPException 500: If the model call fails
    """
    if not request.messages:
        raise HTTPException(status_code=400, detail="Messages array is required")

    try:
        message = await chat_with_document(
            request.messages,
            orchestrator.deps.chat_llm,
            file_content=request.file_content,
            timeout=orchestrator.deps.settings.LLM_TIMEOUT_SECONDS,
        )
    except Exception:
        logger.exception("Document chat failed")
        raise HTTPException(status_code=500, detail="Failed to process your request")

    return DocumentChatResponse(message=message)


@router.post("/text-tools", response_model=TextToolResponse)
async def text_tool(
    request: TextToolRequest,
    orchestrator: AssistantOrchestrator = Depends(get_orchestrator),
) -> TextToolResponse:
    """
    Summarize, autocorrect, suggest improvements for, or expand a text.

    Raises:
        HTTPException 400: If feature or text is missing
        HTTPException 500: If the model call fails
    """
    if not request.feature or not request.text:
        raise HTTPException(status_code=400, detail="Feature and text are required")

    try:
        result = await run_text_tool(
            request.feature,
            request.text,
            orchestrator.deps.chat_llm,
            timeout=orchestrator.deps.settings.LLM_TIMEOUT_SECONDS,
        )
    except Exception:
        logger.exception(f"Text tool {request.feature} failed")
        raise HTTPException(status_code=500, detail="Failed to process request with AI")

    return TextToolResponse(result=result)
