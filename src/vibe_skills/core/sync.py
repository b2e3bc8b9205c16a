"""Rebuild skills.json from the skill directories that exist on disk."""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from ..config.settings import Settings
from ..errors import MalformedManifest, MissingPrerequisite
from .frontmatter import read_frontmatter
from .manifest import (
    DEFAULT_DESCRIPTION,
    DEFAULT_SKILL_VERSION,
    Manifest,
    SkillRecord,
    SkillSource,
    load_manifest,
    save_manifest,
)
from .workspace import Workspace

logger = logging.getLogger(__name__)


class SyncEvent(str, enum.Enum):
    DETECTED = "detected"
    SKIPPED = "skipped"
    MALFORMED = "malformed"


SyncReporter = Callable[[SyncEvent, str], None]


@dataclass
class SyncReport:
    manifest: Manifest
    detected: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    previous_malformed: bool = False


class ManifestSynchronizer:
    """Reconciles the manifest with ``<skills_dir>/<name>/SKILL.md`` files.

    The skills mapping is rebuilt from scratch on every pass. Only ``source``
    is carried over from the previous manifest, since it cannot be recovered
    from the skill file itself.
    """

    def __init__(self, workspace: Workspace, settings: Settings, reporter: SyncReporter | None = None):
        self.workspace = workspace
        self.settings = settings
        self._reporter = reporter

    def _emit(self, event: SyncEvent, subject: str) -> None:
        if self._reporter is not None:
            self._reporter(event, subject)

    def load_previous(self) -> tuple[Manifest, bool]:
        """Previous manifest, or an empty one. The flag is set when the file was unreadable."""
        path = self.settings.paths.manifest_path
        try:
            previous = load_manifest(self.workspace, path)
        except MalformedManifest as e:
            logger.warning("%s; starting fresh", e)
            self._emit(SyncEvent.MALFORMED, path)
            return Manifest(schema_ref=self.settings.schema_uri), True
        return previous or Manifest(schema_ref=self.settings.schema_uri), False

    def build_record(self, name: str, previous: Manifest) -> SkillRecord:
        meta = read_frontmatter(self.workspace, self.settings.paths.skill_path(name))
        prior = previous.skills.get(name)
        return SkillRecord(
            version=meta.get("version") or DEFAULT_SKILL_VERSION,
            source=prior.source if prior is not None else SkillSource.LOCAL,
            description=meta.get("description") or DEFAULT_DESCRIPTION,
        )

    def sync(self) -> SyncReport:
        paths = self.settings.paths
        if not self.workspace.is_dir(paths.skills_dir):
            raise MissingPrerequisite(
                f"No {paths.skills_dir}/ directory found. Run 'vibe-skills init --full' first."
            )

        previous, malformed = self.load_previous()
        report = SyncReport(
            manifest=Manifest(schema_ref=self.settings.schema_uri),
            previous_malformed=malformed,
        )

        for name in self.workspace.list_dirs(paths.skills_dir):
            if not self.workspace.is_file(paths.skill_path(name)):
                logger.debug("Skipping %s: no %s", name, paths.skill_file)
                report.skipped.append(name)
                self._emit(SyncEvent.SKIPPED, name)
                continue
            report.manifest.skills[name] = self.build_record(name, previous)
            report.detected.append(name)
            self._emit(SyncEvent.DETECTED, name)

        report.removed = sorted(set(previous.skills) - set(report.manifest.skills))
        save_manifest(self.workspace, paths.manifest_path, report.manifest)
        logger.info(
            "Synced %d skill(s) into %s (%d skipped, %d removed)",
            len(report.detected), paths.manifest_path, len(report.skipped), len(report.removed),
        )
        return report
