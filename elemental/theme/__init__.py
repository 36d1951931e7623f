"""Theme package – re-exports all public symbols for convenient imports."""

from __future__ import annotations

from elemental.theme.tokens import (
    CONTENT_GLOBS,
    ELEMENT_COLORS,
    build_theme,
    content_files,
    expand_braces,
    tailwind_config,
    to_css_variables,
    used_colors,
)

__all__ = [
    "CONTENT_GLOBS",
    "ELEMENT_COLORS",
    "build_theme",
    "content_files",
    "expand_braces",
    "tailwind_config",
    "to_css_variables",
    "used_colors",
]
