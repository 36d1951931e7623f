"""Schema package – re-exports all public symbols for convenient imports."""

from __future__ import annotations

from elemental.backend.schemas.settings import (
    AppSettings,
    BackendSettings,
    DevServerSettings,
    ProxyRuleIn,
    ThemeSettings,
)

__all__ = [
    "AppSettings",
    "BackendSettings",
    "DevServerSettings",
    "ProxyRuleIn",
    "ThemeSettings",
]
