"""Development server application factory.

Instantiate with:
    uvicorn elemental.frontend.devserver:app --port 5178

Requests that match a proxy rule go to the rule's target; everything else
is left to the build plugins (and to the framework's 404 when no plugin
answers).
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import asynccontextmanager
from pathlib import Path

import httpx
from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles

from elemental.backend.core.utils.config import ConfigError
from elemental.backend.schemas import DevServerSettings
from elemental.frontend.proxy import find_rule, forward, request_url

logger = logging.getLogger(__name__)


# ── Build plugins ──────────────────────────────────────────────────────────


def sveltekit(app: FastAPI, settings: DevServerSettings) -> None:
    """Serve the SvelteKit build output, if it has been built."""
    build_dir = Path(settings.build_dir)
    if not build_dir.is_dir():
        app.state.startup_warnings.append(
            f"SvelteKit build output not found at {build_dir}; nothing to serve"
        )
        return
    app.mount("/", StaticFiles(directory=str(build_dir), html=True), name="sveltekit")


PLUGINS: dict[str, Callable[[FastAPI, DevServerSettings], None]] = {
    "sveltekit": sveltekit,
}


def resolve_plugins(names: list[str]) -> list[Callable[[FastAPI, DevServerSettings], None]]:
    unknown = [name for name in names if name not in PLUGINS]
    if unknown:
        raise ConfigError(f"Unknown dev-server plugin(s): {', '.join(unknown)}")
    return [PLUGINS[name] for name in names]


# ── Application ────────────────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Own one upstream client for the lifetime of the server."""
    settings: DevServerSettings = app.state.settings
    # No timeout policy; redirects are relayed, not followed.
    async with httpx.AsyncClient(
        transport=app.state.transport,
        timeout=None,
        follow_redirects=False,
    ) as client:
        app.state.client = client
        logger.info("Dev server listening at http://%s:%d", settings.host, settings.port)
        for rule in settings.proxy:
            logger.info("  proxy %s -> %s", rule.context, rule.target)
        for message in app.state.startup_warnings:
            logger.warning(message)
        yield


def create_app(
    settings: DevServerSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create the dev server.

    Args:
        settings: Port, plugins and proxy rules.
        transport: Upstream transport override (``httpx.MockTransport`` in tests).
    """
    settings = settings or DevServerSettings()
    plugins = resolve_plugins(settings.plugins)

    application = FastAPI(
        title="Elemental Dev Server",
        lifespan=lifespan,
        openapi_url=None,
        docs_url=None,
        redoc_url=None,
    )
    application.state.settings = settings
    application.state.transport = transport
    application.state.startup_warnings = []

    @application.middleware("http")
    async def proxy_middleware(request: Request, call_next):
        rule = find_rule(settings.proxy, request_url(request))
        if rule is None:
            return await call_next(request)
        return await forward(request.app.state.client, rule, request)

    for plugin in plugins:
        plugin(application, settings)

    return application


# Module-level instance used by uvicorn.
app = create_app()
