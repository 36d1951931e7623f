"""Pydantic schemas for the YAML configuration."""

from __future__ import annotations

import re
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

LOCAL_HOSTS = ("localhost", "127.0.0.1", "::1", "0.0.0.0")

# ── Backend ─────────────────────────────────────────────────────────────────


class BackendSettings(BaseModel):
    host: str = "localhost"
    port: int = Field(default=3000, ge=0, le=65535)


# ── Dev server ──────────────────────────────────────────────────────────────


class ProxyRuleIn(BaseModel):
    """A single forwarding rule of the dev server.

    ``context`` is a path prefix, or a regular expression when it starts
    with ``^``.
    """

    model_config = ConfigDict(frozen=True)

    context: str
    target: str
    change_origin: bool = False

    @field_validator("context")
    @classmethod
    def _context_compiles(cls, value: str) -> str:
        if value.startswith("^"):
            try:
                re.compile(value)
            except re.error as exc:
                raise ValueError(f"invalid proxy context pattern {value!r}: {exc}") from exc
        elif not value.startswith("/"):
            raise ValueError(f"proxy context must start with '/' or '^': {value!r}")
        return value

    @field_validator("target")
    @classmethod
    def _target_is_http(cls, value: str) -> str:
        parts = urlsplit(value)
        if parts.scheme not in ("http", "https") or not parts.hostname:
            raise ValueError(f"proxy target must be an http(s) URL: {value!r}")
        return value.rstrip("/")

    @property
    def target_port(self) -> int:
        parts = urlsplit(self.target)
        return parts.port or (443 if parts.scheme == "https" else 80)

    @property
    def targets_local_host(self) -> bool:
        return urlsplit(self.target).hostname in LOCAL_HOSTS


class DevServerSettings(BaseModel):
    host: str = "localhost"
    port: int = Field(default=5178, ge=0, le=65535)
    plugins: list[str] = Field(default_factory=lambda: ["sveltekit"])
    build_dir: str = "frontend/build"
    proxy: list[ProxyRuleIn] = Field(
        default_factory=lambda: [
            ProxyRuleIn(context="/api", target="http://localhost:3000", change_origin=True)
        ]
    )


# ── Theme ───────────────────────────────────────────────────────────────────


class ThemeSettings(BaseModel):
    content: list[str] = Field(default_factory=lambda: ["./frontend/src/**/*.{html,js,svelte,ts}"])


# ── Root ────────────────────────────────────────────────────────────────────


class AppSettings(BaseModel):
    backend: BackendSettings = BackendSettings()
    devserver: DevServerSettings = DevServerSettings()
    theme: ThemeSettings = ThemeSettings()

    @model_validator(mode="after")
    def _proxy_reaches_backend(self) -> "AppSettings":
        # Local proxy targets must point at the backend listener.
        for rule in self.devserver.proxy:
            if rule.targets_local_host and rule.target_port != self.backend.port:
                raise ValueError(
                    f"proxy rule {rule.context!r} targets port {rule.target_port}, "
                    f"but the backend listens on {self.backend.port}"
                )
        return self
