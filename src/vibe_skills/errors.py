"""Error taxonomy shared by the scaffolder, synchronizer and CLI."""

from __future__ import annotations


class VibeSkillsError(Exception):
    """Base class for errors reported to the user by the CLI."""

    exit_code = 1


class UsageError(VibeSkillsError):
    """Bad or missing command-line arguments."""


class MissingPrerequisite(VibeSkillsError):
    """A command needs state that an earlier command creates (e.g. init --full)."""


class FilesystemError(VibeSkillsError):
    """An OS-level read/write failure, surfaced with its original message."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path

    @classmethod
    def wrap(cls, exc: OSError, path: str | None = None) -> FilesystemError:
        message = exc.strerror or str(exc)
        if path:
            message = f"{message}: {path}"
        err = cls(message, path=path)
        err.__cause__ = exc
        return err


class MalformedManifest(VibeSkillsError):
    """The persisted skills manifest could not be parsed or validated."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Could not parse {path}: {reason}")
        self.path = path
        self.reason = reason


class TextDecodeError(FilesystemError):
    """A file exists but its bytes are not valid UTF-8 text."""

    @classmethod
    def from_unicode_error(cls, exc: UnicodeDecodeError, path: str) -> TextDecodeError:
        err = cls(f"{path} is not valid UTF-8 ({exc.reason} at byte {exc.start})", path=path)
        err.__cause__ = exc
        return err
