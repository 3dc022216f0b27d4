"""API router for v1 endpoints."""

from fastapi import APIRouter

from docmind.api import assistant, document_tools

router = APIRouter()

# Orchestrated assistant runs + memory administration
router.include_router(assistant.router, tags=["assistant"])

# One-shot document chat and text tools
router.include_router(document_tools.router, tags=["document_tools"])
