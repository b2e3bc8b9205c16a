"""Template loading and ``{KEY}`` placeholder substitution."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

BUILTIN_TEMPLATE_DIR = Path(__file__).parent.parent / "templates"

Bindings = Mapping[str, str]


def project_bindings(project_name: str) -> dict[str, str]:
    """Bindings every scaffolded template receives."""
    return {"PROJECT_NAME": project_name}


def fallback_content(name: str) -> str:
    return f"# {name}\n\nTODO: Configure this file.\n"


def substitute(content: str, bindings: Bindings) -> str:
    """Replace every ``{KEY}`` for each bound key. Unbound tokens are left as-is."""
    for key, value in bindings.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise TypeError(f"Template bindings must map str to str, got {key!r}: {value!r}")
        content = content.replace("{" + key + "}", value)
    return content


class TemplateEngine:
    """Renders named templates from a single template root."""

    def __init__(self, root: str | Path | None = None):
        self.root = Path(root) if root is not None else BUILTIN_TEMPLATE_DIR

    def render(self, name: str, bindings: Bindings | None = None) -> str:
        """Render ``name``; a missing template yields a minimal placeholder file."""
        path = self.root / name
        if not path.is_file():
            logger.warning("Template %s not found in %s, using placeholder", name, self.root)
            return fallback_content(name)
        content = path.read_text(encoding="utf-8")
        return substitute(content, bindings or {})
