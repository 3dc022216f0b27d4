"""FastAPI dependencies resolving the shared orchestrator."""

from fastapi import HTTPException, Request

from docmind.graphs.assistant_graph import AssistantOrchestrator


def get_orchestrator(request: Request) -> AssistantOrchestrator:
    """Orchestrator built at startup and kept on app.state."""
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise HTTPException(status_code=503, detail="Assistant not initialized")
    return orchestrator
