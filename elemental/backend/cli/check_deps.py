#!/usr/bin/env python3
"""Dependency doctor — verifies every runtime package can be imported.

Run as ``elemental check-deps``.  Exit-code 0 means all good; 1 means at
least one package is missing, and the output names it along with the
``pip install`` line that fixes it.
"""

from __future__ import annotations

import importlib
import sys

# Mapping:  import-name  →  pip-install-name
PACKAGES: dict[str, str] = {
    "fastapi": "fastapi",
    "uvicorn": "uvicorn",
    "pydantic": "pydantic",
    "httpx": "httpx",
    "yaml": "pyyaml",
    "rich": "rich",
    "click": "click",
}


def probe(packages: dict[str, str] = PACKAGES) -> dict[str, str | None]:
    """Map each pip name to its installed version, or None when missing."""
    found: dict[str, str | None] = {}
    for mod, pip_name in packages.items():
        try:
            found[pip_name] = getattr(importlib.import_module(mod), "__version__", "?")
        except ImportError:
            found[pip_name] = None
    return found


def main(packages: dict[str, str] = PACKAGES) -> int:
    versions = probe(packages)
    for pip_name, version in versions.items():
        if version is None:
            print(f"  \033[31m✗\033[0m {pip_name:20s} MISSING  →  pip install {pip_name}")
        else:
            print(f"  \033[32m✓\033[0m {pip_name:20s} {version}")

    print()
    if None in versions.values():
        print("\033[33mFix: pip install -e . installs everything at once.\033[0m")
        return 1

    print("\033[32mAll dependencies present ✓\033[0m")
    return 0


if __name__ == "__main__":
    sys.exit(main())
