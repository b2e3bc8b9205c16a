"""Filesystem seam for commands: a real project directory or an in-memory tree.

All paths handed to a workspace are POSIX-style and relative to the project
root (``".context/project.md"``). Commands never touch ``os``/``pathlib``
directly, so the scaffolder and synchronizer run unchanged against
``MemoryWorkspace`` in tests.
"""

from __future__ import annotations

import shutil
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath

from ..errors import FilesystemError, TextDecodeError


def _norm(path: str) -> str:
    parts = [p for p in PurePosixPath(path).parts if p not in ("", ".")]
    if any(p == ".." for p in parts) or PurePosixPath(path).is_absolute():
        raise FilesystemError(f"Path escapes the workspace: {path}", path=path)
    return "/".join(parts)


class Workspace(ABC):
    """Abstract project tree."""

    @abstractmethod
    def exists(self, path: str) -> bool: ...

    @abstractmethod
    def is_dir(self, path: str) -> bool: ...

    @abstractmethod
    def read_text(self, path: str) -> str: ...

    @abstractmethod
    def write_text(self, path: str, content: str) -> None:
        """Write (or overwrite) a file. The parent directory must exist."""

    @abstractmethod
    def make_dirs(self, path: str) -> None:
        """Create a directory and any missing parents; no error if present."""

    @abstractmethod
    def list_dirs(self, path: str) -> list[str]:
        """Names of the immediate subdirectories of ``path``, sorted."""

    @abstractmethod
    def remove_tree(self, path: str) -> None: ...

    def is_file(self, path: str) -> bool:
        return self.exists(path) and not self.is_dir(path)


class LocalWorkspace(Workspace):
    """A project directory on disk."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def _abs(self, path: str) -> Path:
        rel = _norm(path)
        return self.root / rel if rel else self.root

    def exists(self, path: str) -> bool:
        return self._abs(path).exists()

    def is_dir(self, path: str) -> bool:
        return self._abs(path).is_dir()

    def read_text(self, path: str) -> str:
        try:
            return self._abs(path).read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise TextDecodeError.from_unicode_error(e, path) from e
        except OSError as e:
            raise FilesystemError.wrap(e, path) from e

    def write_text(self, path: str, content: str) -> None:
        try:
            with open(self._abs(path), "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as e:
            raise FilesystemError.wrap(e, path) from e

    def make_dirs(self, path: str) -> None:
        try:
            self._abs(path).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError.wrap(e, path) from e

    def list_dirs(self, path: str) -> list[str]:
        try:
            return sorted(p.name for p in self._abs(path).iterdir() if p.is_dir())
        except OSError as e:
            raise FilesystemError.wrap(e, path) from e

    def remove_tree(self, path: str) -> None:
        try:
            shutil.rmtree(self._abs(path))
        except OSError as e:
            raise FilesystemError.wrap(e, path) from e


class MemoryWorkspace(Workspace):
    """In-memory project tree.

    File contents may be ``bytes`` to model files that are not valid UTF-8.
    ``deny_writes`` lists paths whose creation fails with a permission error,
    for exercising partially-failed runs.
    """

    def __init__(
        self,
        files: dict[str, str | bytes] | None = None,
        deny_writes: set[str] | None = None,
    ) -> None:
        self.files: dict[str, str | bytes] = {}
        self.dirs: set[str] = {""}
        self.deny_writes = {_norm(p) for p in (deny_writes or set())}
        for path, content in (files or {}).items():
            rel = _norm(path)
            self._add_parents(rel)
            self.files[rel] = content

    def _add_parents(self, rel: str) -> None:
        parts = rel.split("/")[:-1]
        for i in range(1, len(parts) + 1):
            self.dirs.add("/".join(parts[:i]))

    def _check_writable(self, rel: str) -> None:
        if rel in self.deny_writes:
            raise FilesystemError(f"Permission denied: {rel}", path=rel)

    def exists(self, path: str) -> bool:
        rel = _norm(path)
        return rel in self.files or rel in self.dirs

    def is_dir(self, path: str) -> bool:
        return _norm(path) in self.dirs

    def read_text(self, path: str) -> str:
        rel = _norm(path)
        if rel not in self.files:
            raise FilesystemError(f"No such file or directory: {rel}", path=rel)
        content = self.files[rel]
        if isinstance(content, bytes):
            try:
                return content.decode("utf-8")
            except UnicodeDecodeError as e:
                raise TextDecodeError.from_unicode_error(e, rel) from e
        return content

    def write_text(self, path: str, content: str) -> None:
        rel = _norm(path)
        self._check_writable(rel)
        parent = rel.rpartition("/")[0]
        if parent not in self.dirs:
            raise FilesystemError(f"No such file or directory: {rel}", path=rel)
        if rel in self.dirs:
            raise FilesystemError(f"Is a directory: {rel}", path=rel)
        self.files[rel] = content

    def make_dirs(self, path: str) -> None:
        rel = _norm(path)
        if rel in self.files:
            raise FilesystemError(f"File exists: {rel}", path=rel)
        if rel in self.dirs:
            return
        self._check_writable(rel)
        self._add_parents(rel)
        self.dirs.add(rel)

    def list_dirs(self, path: str) -> list[str]:
        rel = _norm(path)
        if rel not in self.dirs:
            raise FilesystemError(f"No such file or directory: {rel}", path=rel)
        prefix = f"{rel}/" if rel else ""
        names = {
            d[len(prefix):]
            for d in self.dirs
            if d and d.startswith(prefix) and "/" not in d[len(prefix):]
        }
        return sorted(names)

    def remove_tree(self, path: str) -> None:
        rel = _norm(path)
        if rel not in self.dirs or not rel:
            raise FilesystemError(f"No such file or directory: {rel}", path=rel)
        prefix = f"{rel}/"
        self.dirs = {d for d in self.dirs if d != rel and not d.startswith(prefix)}
        self.files = {f: c for f, c in self.files.items() if not f.startswith(prefix)}

    def snapshot(self) -> dict[str, str | bytes]:
        """Copy of every file path and its content."""
        return dict(self.files)
