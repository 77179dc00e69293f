"""
Auditor service entry point for ModSentinel.

Configures logging, builds the auditor runtime, starts the dataset
fetch, detection dispatcher, and classification scheduler, and exposes
health, query, session-feed, and metrics endpoints.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
import uvicorn
from fastapi import FastAPI
from prometheus_client import make_asgi_app

from ms_common.config import get_settings
from ms_common.logging import configure_logging

from auditor.health import router as health_router
from auditor.routes import router as api_router
from auditor.runtime import AuditorRuntime, build_runtime

logger = structlog.get_logger()


def create_app(runtime: AuditorRuntime | None = None) -> FastAPI:
    """Build the FastAPI application around *runtime* (built from settings if omitted)."""
    runtime = runtime or build_runtime()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Startup / shutdown lifecycle for the auditor service."""
        settings = runtime.settings
        configure_logging("auditor", settings.log_level, settings.log_json)
        logger.info("auditor_service_starting", dataset_url=settings.dataset_url)
        await runtime.start()
        yield
        logger.info("auditor_service_stopping")
        await runtime.stop()

    app = FastAPI(title="ModSentinel Auditor Service", lifespan=lifespan)
    app.state.runtime = runtime
    app.include_router(health_router)
    app.include_router(api_router)
    app.mount("/metrics", make_asgi_app())
    return app


if __name__ == "__main__":
    _settings = get_settings()
    uvicorn.run(
        create_app(),
        host=_settings.api_host,
        port=_settings.api_port,
        log_level="info",
    )
