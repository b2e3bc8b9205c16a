"""Configuration management with TOML loading."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..errors import UsageError

DEFAULT_CONFIG_DIR = ".agents"
DEFAULT_CONFIG_FILE = "config.toml"
DEFAULT_SCHEMA_URI = "https://vibecoding.dev/schemas/skills.json"
MANIFEST_VERSION = "1.0.0"
MODES = ("lite", "full")


@dataclass
class PathsConfig:
    """Project-relative locations of the context and skills trees."""

    context_dir: str = ".context"
    skills_dir: str = ".agents/skills"
    manifest_file: str = "skills.json"
    skill_file: str = "SKILL.md"

    @property
    def specs_dir(self) -> str:
        return f"{self.context_dir}/specs"

    @property
    def archive_dir(self) -> str:
        return f"{self.specs_dir}/.archive"

    @property
    def manifest_path(self) -> str:
        return f"{self.skills_dir}/{self.manifest_file}"

    def skill_path(self, name: str) -> str:
        return f"{self.skills_dir}/{name}/{self.skill_file}"


@dataclass
class Settings:
    paths: PathsConfig = field(default_factory=PathsConfig)
    template_dir: str | None = None  # None = bundled templates
    schema_uri: str = DEFAULT_SCHEMA_URI
    default_mode: str = "lite"
    project_dir: str = field(default_factory=lambda: os.getcwd())

    def __post_init__(self):
        if self.default_mode not in MODES:
            raise UsageError(
                f"Invalid default_mode {self.default_mode!r} (expected one of: {', '.join(MODES)})"
            )

    @classmethod
    def load(
        cls,
        config_path: str | Path | None = None,
        project_dir: str | Path | None = None,
    ) -> Settings:
        """Load settings from a TOML config file, falling back to defaults."""
        project_dir = Path(project_dir) if project_dir is not None else Path(os.getcwd())
        if config_path is None:
            config_path = project_dir / DEFAULT_CONFIG_DIR / DEFAULT_CONFIG_FILE

        config_path = Path(config_path)
        raw: dict[str, Any] = {}

        if config_path.exists():
            try:
                with open(config_path, "rb") as f:
                    raw = tomllib.load(f)
            except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
                raise UsageError(f"Invalid config file {config_path}: {e}") from e

        return cls._from_dict(raw, project_dir=project_dir, source=config_path)

    @classmethod
    def _from_dict(
        cls,
        data: dict[str, Any],
        project_dir: str | Path,
        source: str | Path = DEFAULT_CONFIG_FILE,
    ) -> Settings:
        def invalid(reason: str) -> UsageError:
            return UsageError(f"Invalid config file {source}: {reason}")

        def string(table: dict[str, Any], key: str, default: str | None, where: str = "") -> str | None:
            value = table.get(key, default)
            if value is not None and not isinstance(value, str):
                raise invalid(f"{where}{key} must be a string, got {type(value).__name__}")
            return value

        defaults = PathsConfig()
        paths_data = data.get("paths", {})
        if not isinstance(paths_data, dict):
            raise invalid("[paths] must be a table")
        paths = PathsConfig(
            context_dir=string(paths_data, "context_dir", defaults.context_dir, "paths.").strip("/"),
            skills_dir=string(paths_data, "skills_dir", defaults.skills_dir, "paths.").strip("/"),
            manifest_file=string(paths_data, "manifest_file", defaults.manifest_file, "paths."),
            skill_file=string(paths_data, "skill_file", defaults.skill_file, "paths."),
        )

        template_dir = string(data, "template_dir", None)
        if template_dir is not None and not os.path.isabs(template_dir):
            template_dir = os.path.join(str(project_dir), template_dir)

        return cls(
            paths=paths,
            template_dir=template_dir,
            schema_uri=string(data, "schema_uri", DEFAULT_SCHEMA_URI),
            default_mode=string(data, "default_mode", "lite"),
            project_dir=str(project_dir),
        )
