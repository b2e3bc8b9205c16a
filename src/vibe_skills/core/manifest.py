"""Skills manifest models and the skills.json codec."""

from __future__ import annotations

import enum
import json
import logging

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..config.settings import DEFAULT_SCHEMA_URI, MANIFEST_VERSION
from ..errors import MalformedManifest, TextDecodeError
from .workspace import Workspace

logger = logging.getLogger(__name__)

DEFAULT_SKILL_VERSION = "1.0.0"
DEFAULT_DESCRIPTION = "No description provided"


class SkillSource(str, enum.Enum):
    LOCAL = "local"
    REGISTRY = "registry"
    CORE = "core"
    LEGACY = "legacy"


class SkillRecord(BaseModel):
    """One installed skill, keyed by name in the manifest."""
    version: str = DEFAULT_SKILL_VERSION
    source: SkillSource = SkillSource.LOCAL
    description: str = DEFAULT_DESCRIPTION


class Manifest(BaseModel):
    """The persisted skills.json document."""
    model_config = ConfigDict(populate_by_name=True)

    schema_ref: str = Field(default=DEFAULT_SCHEMA_URI, alias="$schema")
    version: str = MANIFEST_VERSION
    skills: dict[str, SkillRecord] = Field(default_factory=dict)

    def by_source(self, source: SkillSource) -> list[tuple[str, SkillRecord]]:
        return [(name, rec) for name, rec in self.skills.items() if rec.source == source]


def dump_manifest(manifest: Manifest) -> str:
    """Serialize with a stable key order so identical manifests are identical bytes."""
    data = manifest.model_dump(mode="json", by_alias=True)
    data["skills"] = {name: data["skills"][name] for name in sorted(data["skills"])}
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def parse_manifest(text: str, path: str = "skills.json") -> Manifest:
    """Parse skills.json text.

    Entries that fail validation are dropped with a warning so that one bad
    record does not discard the rest. A document that is not a JSON object,
    or whose ``skills`` is not an object, raises ``MalformedManifest``.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedManifest(path, str(e)) from e
    if not isinstance(data, dict):
        raise MalformedManifest(path, "top-level value is not an object")
    raw_skills = data.get("skills", {})
    if not isinstance(raw_skills, dict):
        raise MalformedManifest(path, '"skills" is not an object')

    skills: dict[str, SkillRecord] = {}
    for name, raw in raw_skills.items():
        try:
            skills[name] = SkillRecord.model_validate(raw)
        except ValidationError as e:
            logger.warning("Ignoring invalid entry %r in %s (%d validation error(s))", name, path, e.error_count())

    try:
        return Manifest.model_validate({**data, "skills": skills})
    except ValidationError as e:
        raise MalformedManifest(path, f"{e.error_count()} validation error(s)") from e


def load_manifest(workspace: Workspace, path: str) -> Manifest | None:
    """Read the manifest at ``path``; ``None`` when the file does not exist."""
    if not workspace.is_file(path):
        return None
    try:
        text = workspace.read_text(path)
    except TextDecodeError as e:
        raise MalformedManifest(path, str(e)) from e
    return parse_manifest(text, path)


def save_manifest(workspace: Workspace, path: str, manifest: Manifest) -> None:
    """Overwrite ``path`` with ``manifest`` in full."""
    parent = path.rpartition("/")[0]
    if parent:
        workspace.make_dirs(parent)
    workspace.write_text(path, dump_manifest(manifest))
