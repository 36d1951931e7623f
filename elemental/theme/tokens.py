"""
Theme Tokens.

Static color tokens named after chemical elements, merged into the
design system's theme.  The values follow the usual CPK/Jmol atom
coloring.
"""

from __future__ import annotations

import copy
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set

# Chemical element colors
ELEMENT_COLORS: Dict[str, str] = {
    "carbon": "#000000",
    "oxygen": "#ff0d0d",
    "nitrogen": "#3050f8",
    "sulfur": "#ffff30",
    "phosphorus": "#ff8000",
    "fluorine": "#90e050",
    "chlorine": "#1ff01f",
    "bromine": "#a62929",
    "iodine": "#940094",
}

# Files scanned for style classes
CONTENT_GLOBS: tuple = ("./frontend/src/**/*.{html,js,svelte,ts}",)

_BRACES = re.compile(r"\{([^{}]*)\}")


def expand_braces(pattern: str) -> List[str]:
    """
    Expand ``{a,b}`` alternatives into plain glob patterns.

    ``"src/*.{js,ts}"`` becomes ``["src/*.js", "src/*.ts"]``.
    """
    match = _BRACES.search(pattern)
    if match is None:
        return [pattern]

    head, tail = pattern[: match.start()], pattern[match.end() :]
    expanded = []
    for option in match.group(1).split(","):
        expanded.extend(expand_braces(f"{head}{option}{tail}"))
    return expanded


def content_files(root: Path, patterns: Iterable[str] = CONTENT_GLOBS) -> List[Path]:
    """
    Collect the files matched by the content globs.

    Args:
        root: Directory the globs are relative to
        patterns: Content globs, brace alternatives allowed

    Returns:
        Sorted, de-duplicated file paths
    """
    root = Path(root)
    found: Set[Path] = set()
    for pattern in patterns:
        for glob in expand_braces(pattern):
            glob = glob[2:] if glob.startswith("./") else glob
            found.update(p for p in root.glob(glob) if p.is_file())
    return sorted(found)


def used_colors(root: Path, patterns: Iterable[str] = CONTENT_GLOBS) -> Set[str]:
    """Element colors referenced by utility classes (``text-oxygen``, ``bg-carbon/50``)."""
    utility = re.compile(r"[a-z]+-(%s)\b" % "|".join(ELEMENT_COLORS))
    names: Set[str] = set()
    for path in content_files(root, patterns):
        text = path.read_text(encoding="utf-8", errors="replace")
        names.update(utility.findall(text))
    return names


def build_theme(base: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Merge the element colors into a base theme.

    Element keys are added (or replace a base color of the same name);
    every other base token is kept.
    """
    theme = copy.deepcopy(base) if base else {}
    colors = dict(theme.get("colors", {}))
    colors.update(ELEMENT_COLORS)
    theme["colors"] = colors
    return theme


def tailwind_config(content: Optional[Iterable[str]] = None) -> Dict[str, Any]:
    """Theme configuration in the shape the Tailwind toolchain reads."""
    return {
        "content": list(content if content is not None else CONTENT_GLOBS),
        "theme": {"extend": {"colors": dict(ELEMENT_COLORS)}},
        "plugins": [],
    }


def to_css_variables(colors: Optional[Dict[str, str]] = None) -> str:
    colors = ELEMENT_COLORS if colors is None else colors
    lines = [":root {"]
    lines.extend(f"  --color-{name}: {value};" for name, value in colors.items())
    lines.append("}")
    return "\n".join(lines) + "\n"
