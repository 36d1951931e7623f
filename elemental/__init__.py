"""Top-level elemental package.

Sub-packages
------------
elemental.backend
    FastAPI listener (api/), settings schemas/, config and logging (core/), cli/
elemental.frontend
    Development server: build plugins and the ``/api`` reverse proxy
elemental.theme
    Design-system color tokens named after chemical elements
"""

from __future__ import annotations

__version__ = "0.1.0"
