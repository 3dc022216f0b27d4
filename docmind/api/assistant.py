"""API endpoints for assistant runs and memory administration."""

from fastapi import APIRouter, Depends

from docmind.api.dependencies import get_orchestrator
from docmind.core.logging import get_logger
from docmind.core.schemas_assistant import (
    AssistantRunRequest,
    AssistantRunResponse,
    MemoryClearResult,
    MemoryStats,
)
from docmind.graphs.assistant_graph import AssistantOrchestrator

logger = get_logger(__name__)

router = APIRouter()


@router.post("/assistant/run", response_model=AssistantRunResponse)
async def run_assistant(
    request: AssistantRunRequest,
    orchestrator: AssistantOrchestrator = Depends(get_orchestrator),
) -> AssistantRunResponse:
    """
    Run one request through classify, retrieve, dispatch and persist.

    Handler failures come back as success=False with an error message,
    not as an HTTP error.
    """
    return await orchestrator.run(
        request.input,
        file_paths=request.file_paths,
        conversation_history=request.conversation_history,
    )


@router.get("/memory/stats", response_model=MemoryStats)
async def get_memory_stats(
    orchestrator: AssistantOrchestrator = Depends(get_orchestrator),
) -> MemoryStats:
    return await orchestrator.get_stats()


@router.delete("/memory", response_model=MemoryClearResult)
async def clear_memory(
    orchestrator: AssistantOrchestrator = Depends(get_orchestrator),
) -> MemoryClearResult:
    """Delete every stored memory record."""
    result = await orchestrator.clear_all()
    logger.info(f"Memory clear requested: success={result.success}")
    return result
