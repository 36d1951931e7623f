"""Development server package – re-exports the public helpers."""

from __future__ import annotations

from elemental.frontend.devserver import PLUGINS, create_app
from elemental.frontend.proxy import find_rule, rule_matches, upstream_headers, upstream_url

__all__ = [
    "PLUGINS",
    "create_app",
    "find_rule",
    "rule_matches",
    "upstream_headers",
    "upstream_url",
]
