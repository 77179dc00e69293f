"""
Health check endpoint for the ModSentinel auditor service.

Exposes a /health endpoint returning service status and reference
dataset readiness.
"""

from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health(request: Request) -> dict[str, object]:
    """Return service status; ``dataset_loaded`` is ``False`` until the first load finishes."""
    runtime = request.app.state.runtime
    status = runtime.store.status()
    return {
        "service": "auditor",
        "status": "ok",
        "dataset_loaded": status.loaded,
        "dataset_source": status.source.value if status.source else None,
        "in_session": runtime.provider.in_session,
    }
