"""Adding and removing skills in the project's skills directory.

Both operations change the skill directories and then re-run sync, so the
manifest is always derived from disk.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

import frontmatter

from ..config.settings import Settings
from ..core.manifest import DEFAULT_SKILL_VERSION, load_manifest
from ..core.sync import ManifestSynchronizer, SyncReport, SyncReporter
from ..core.workspace import Workspace
from ..core.writer import IdempotentWriter
from ..errors import MalformedManifest, MissingPrerequisite, UsageError

REGISTRY_BROWSE_URL = "https://github.com/vibecoding/skills-registry"
STUB_DESCRIPTION = "TODO — describe what this skill does"

_NAME = re.compile(r"[A-Za-z0-9][A-Za-z0-9._-]*")


class ChangeStatus(str, enum.Enum):
    APPLIED = "applied"
    UNCHANGED = "unchanged"


@dataclass
class SkillChange:
    name: str
    status: ChangeStatus
    skill_path: str
    sync: SyncReport | None = None


def validate_skill_name(name: str) -> str:
    if not name or not _NAME.fullmatch(name):
        raise UsageError(
            f"Invalid skill name {name!r}: use letters, digits, '.', '_' or '-' "
            "and start with a letter or digit"
        )
    return name


def skill_stub(name: str) -> str:
    """SKILL.md content for a newly added local skill."""
    post = frontmatter.Post(
        f"# {name}\n\nTODO: Add skill instructions here.",
        name=name,
        description=STUB_DESCRIPTION,
        version=DEFAULT_SKILL_VERSION,
    )
    return frontmatter.dumps(post, sort_keys=False) + "\n"


class LocalSkills:
    def __init__(self, workspace: Workspace, settings: Settings, reporter: SyncReporter | None = None):
        self.workspace = workspace
        self.settings = settings
        self.synchronizer = ManifestSynchronizer(workspace, settings, reporter=reporter)

    def require_root(self) -> None:
        skills_dir = self.settings.paths.skills_dir
        if not self.workspace.is_dir(skills_dir):
            raise MissingPrerequisite(
                f"No {skills_dir}/ directory found. Run 'vibe-skills init --full' first."
            )

    def _manifest_names(self) -> set[str]:
        try:
            manifest = load_manifest(self.workspace, self.settings.paths.manifest_path)
        except MalformedManifest:
            return set()
        return set(manifest.skills) if manifest else set()

    def is_installed(self, name: str) -> bool:
        """A skill file exists or the manifest already lists the name."""
        return self.workspace.is_file(self.settings.paths.skill_path(name)) or name in self._manifest_names()

    def exists(self, name: str) -> bool:
        """Anything left to remove: a skill directory or a manifest entry."""
        skill_dir = f"{self.settings.paths.skills_dir}/{name}"
        return self.workspace.is_dir(skill_dir) or name in self._manifest_names()

    def add(self, name: str) -> SkillChange:
        """Create a stub SKILL.md for ``name`` and record it in the manifest."""
        validate_skill_name(name)
        self.require_root()
        skill_path = self.settings.paths.skill_path(name)
        if self.is_installed(name):
            return SkillChange(name, ChangeStatus.UNCHANGED, skill_path)

        IdempotentWriter(self.workspace).write(skill_path, skill_stub(name))
        return SkillChange(name, ChangeStatus.APPLIED, skill_path, sync=self.synchronizer.sync())

    def remove(self, name: str) -> SkillChange:
        """Delete the skill directory for ``name`` and drop it from the manifest."""
        validate_skill_name(name)
        self.require_root()
        skill_path = self.settings.paths.skill_path(name)
        if not self.exists(name):
            return SkillChange(name, ChangeStatus.UNCHANGED, skill_path)

        skill_dir = f"{self.settings.paths.skills_dir}/{name}"
        if self.workspace.is_dir(skill_dir):
            self.workspace.remove_tree(skill_dir)
        return SkillChange(name, ChangeStatus.APPLIED, skill_path, sync=self.synchronizer.sync())
