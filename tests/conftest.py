"""Shared pytest fixtures for the test suite.

Fixture overview
----------------
settings        — default application settings (backend 3000, dev server 5178)
backend_client  — TestClient bound to a fresh backend app
upstream        — records requests the dev server forwards; answers via MockTransport
dev_client      — TestClient for the dev server, wired to ``upstream``
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

from elemental.backend.api.app import create_app as create_backend
from elemental.backend.schemas import AppSettings, DevServerSettings
from elemental.frontend.devserver import create_app as create_devserver

REPO_ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture
def default_config_path() -> Path:
    return REPO_ROOT / "configs" / "default_config.yaml"


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings()


# ── Backend ──────────────────────────────────────────────────────────────────


@pytest.fixture
def backend_client(settings: AppSettings):
    with TestClient(create_backend(settings.backend)) as client:
        yield client


# ── Dev server ───────────────────────────────────────────────────────────────


@dataclass
class Upstream:
    """Stand-in for the backend behind the proxy."""

    requests: list[httpx.Request] = field(default_factory=list)
    status_code: int = 200
    body: bytes = b"upstream ok"
    headers: dict[str, str] = field(default_factory=lambda: {"content-type": "text/plain"})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, content=self.body, headers=self.headers)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def upstream() -> Upstream:
    return Upstream()


@pytest.fixture
def devserver_settings(tmp_path: Path) -> DevServerSettings:
    # Build output absent unless a test creates it
    return DevServerSettings(build_dir=str(tmp_path / "build"))


@pytest.fixture
def dev_client(devserver_settings: DevServerSettings, upstream: Upstream):
    app = create_devserver(devserver_settings, transport=upstream.transport)
    with TestClient(app) as client:
        yield client
