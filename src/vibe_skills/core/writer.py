"""Create-only file writes: existing files are never touched."""

from __future__ import annotations

import enum
import logging

from .workspace import Workspace

logger = logging.getLogger(__name__)


class WriteResult(str, enum.Enum):
    CREATED = "created"
    SKIPPED = "skipped"


class IdempotentWriter:
    """Writes files and directories only when they are absent.

    Scaffolding and ``add`` can therefore run any number of times without
    losing hand edits.
    """

    def __init__(self, workspace: Workspace):
        self.workspace = workspace

    def write(self, path: str, content: str) -> WriteResult:
        parent = path.rpartition("/")[0]
        if parent:
            self.workspace.make_dirs(parent)
        if self.workspace.exists(path):
            logger.debug("Skipped %s (already exists)", path)
            return WriteResult.SKIPPED
        self.workspace.write_text(path, content)
        logger.debug("Created %s", path)
        return WriteResult.CREATED

    def ensure_dir(self, path: str) -> WriteResult:
        if self.workspace.is_dir(path):
            return WriteResult.SKIPPED
        self.workspace.make_dirs(path)
        return WriteResult.CREATED
