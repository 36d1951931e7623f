"""FastAPI application factory.

Instantiate with:
    uvicorn elemental.backend.api.app:app --port 3000
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from elemental import __version__
from elemental.backend.api.router import router
from elemental.backend.schemas import BackendSettings

logger = logging.getLogger(__name__)

# Configurable via environment; the default allows the dev server only.
# Override in production:  CORS_ORIGINS="https://your-domain.com"
_CORS_ORIGINS: list[str] = os.getenv("CORS_ORIGINS", "http://localhost:5178").split(",")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: BackendSettings = app.state.settings
    logger.info("Backend server listening at http://%s:%d", settings.host, settings.port)
    yield


def create_app(settings: BackendSettings | None = None) -> FastAPI:
    """Create and configure the backend application."""
    application = FastAPI(
        title="Elemental Backend",
        version=__version__,
        lifespan=lifespan,
        # `/` is the only route; no schema or docs pages
        openapi_url=None,
        docs_url=None,
        redoc_url=None,
    )
    application.state.settings = settings or BackendSettings()

    application.add_middleware(
        CORSMiddleware,
        allow_origins=_CORS_ORIGINS,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    application.include_router(router)

    return application


# Module-level instance used by uvicorn and tests.
app = create_app()
