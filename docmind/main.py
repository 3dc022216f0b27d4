"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from docmind.api import router as api_router
from docmind.core.config import get_settings
from docmind.core.dependencies import build_dependencies
from docmind.core.logging import get_logger
from docmind.graphs.assistant_graph import AssistantOrchestrator

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Missing credentials raise here, before any request is served
    settings = get_settings()
    app.state.orchestrator = AssistantOrchestrator(build_dependencies(settings))
    logger.info(f"DocMind started (env={settings.DOCMIND_ENV})")
    yield


app = FastAPI(
    title="DocMind Assistant Engine",
    description="LangGraph-based document assistant with task routing and vector memory",
    version="0.1.0",
    lifespan=lifespan,
)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(content={"status": "ok"}, status_code=200)


# Include v1 API router
app.include_router(api_router, prefix="/v1", tags=["v1"])
