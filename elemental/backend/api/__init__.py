"""HTTP listener package."""

from __future__ import annotations

from elemental.backend.api.app import app, create_app

__all__ = ["app", "create_app"]
