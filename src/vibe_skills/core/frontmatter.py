"""Frontmatter parsing for SKILL.md files.

Only the flat ``key: value`` subset is understood. Values stay strings, so
``version: 2.0`` is ``"2.0"`` rather than a float.
"""

from __future__ import annotations

import re

from .workspace import Workspace

MARKER = "---"

# Opening marker on the first line, then the shortest (possibly empty) run
# of lines up to a line that is exactly the marker.
_BLOCK = re.compile(r"\A---[ \t]*\r?\n(?:(.*?)\r?\n)??---[ \t]*(?:\r?\n|\Z)", re.DOTALL)


def split_frontmatter(text: str) -> tuple[dict[str, str], str]:
    """Return ``(metadata, body)``. Without a complete block the body is the whole text."""
    match = _BLOCK.match(text)
    if match is None:
        return {}, text

    metadata: dict[str, str] = {}
    for line in (match.group(1) or "").splitlines():
        key, sep, value = line.partition(":")
        key = key.strip()
        if not sep or not key:
            continue
        metadata[key] = value.strip()
    return metadata, text[match.end():]


def parse_frontmatter(text: str) -> dict[str, str]:
    """Parse the leading frontmatter block; empty if it is missing or unterminated."""
    return split_frontmatter(text)[0]


def read_frontmatter(workspace: Workspace, path: str) -> dict[str, str]:
    return parse_frontmatter(workspace.read_text(path))
