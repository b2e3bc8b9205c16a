"""Project scaffolding: the context directory, agent entry point and stubs."""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from ..config.settings import Settings
from .manifest import Manifest, dump_manifest
from .templates import TemplateEngine, project_bindings
from .workspace import Workspace
from .writer import IdempotentWriter, WriteResult

logger = logging.getLogger(__name__)

ENTRY_POINT = "AGENTS.md"
CURSOR_STUB = ".cursorrules"
CI_DIR = ".github"
COPILOT_STUB = f"{CI_DIR}/copilot-instructions.md"


class ScaffoldMode(str, enum.Enum):
    LITE = "lite"
    FULL = "full"


Reporter = Callable[[str, WriteResult], None]


@dataclass
class ScaffoldReport:
    """Ordered outcome of every directory and file the scaffolder touched."""

    project_name: str
    mode: ScaffoldMode
    entries: list[tuple[str, WriteResult]] = field(default_factory=list)

    @property
    def created(self) -> list[str]:
        return [path for path, result in self.entries if result is WriteResult.CREATED]

    @property
    def skipped(self) -> list[str]:
        return [path for path, result in self.entries if result is WriteResult.SKIPPED]


def redirect_stub(settings: Settings) -> str:
    """Literal text for agent-specific files that defer to AGENTS.md."""
    return "\n".join([
        f"Read and follow all instructions in {ENTRY_POINT} at the project root.",
        f"Read the {settings.paths.context_dir}/ directory for project-specific knowledge.",
        f"Skills are in {settings.paths.skills_dir}/ and should be loaded only when relevant to the current task.",
        "",
    ])


class Scaffolder:
    """Builds the initial context tree for a project.

    Every step goes through ``IdempotentWriter``, so a second run (or a run
    after a partial failure) only fills in what is missing.
    """

    def __init__(
        self,
        workspace: Workspace,
        settings: Settings,
        engine: TemplateEngine | None = None,
        reporter: Reporter | None = None,
    ):
        self.workspace = workspace
        self.settings = settings
        self.engine = engine or TemplateEngine(settings.template_dir)
        self.writer = IdempotentWriter(workspace)
        self._reporter = reporter

    def directories(self, mode: ScaffoldMode) -> list[str]:
        paths = self.settings.paths
        dirs = [paths.context_dir, paths.specs_dir, paths.skills_dir]
        if mode is ScaffoldMode.FULL:
            dirs += [paths.archive_dir, CI_DIR]
        return dirs

    def templated_files(self, mode: ScaffoldMode) -> list[tuple[str, str]]:
        """``(template name, output path)`` pairs, in creation order."""
        ctx = self.settings.paths.context_dir
        files = [
            (ENTRY_POINT, ENTRY_POINT),
            ("project.md", f"{ctx}/project.md"),
            ("conventions.md", f"{ctx}/conventions.md"),
        ]
        if mode is ScaffoldMode.FULL:
            files += [
                ("architecture.md", f"{ctx}/architecture.md"),
                ("stack.md", f"{ctx}/stack.md"),
                ("_template.md", f"{self.settings.paths.specs_dir}/_template.md"),
            ]
        return files

    def scaffold(self, project_name: str, mode: ScaffoldMode | str = ScaffoldMode.LITE) -> ScaffoldReport:
        mode = ScaffoldMode(mode)
        report = ScaffoldReport(project_name=project_name, mode=mode)
        logger.info("Scaffolding %s (%s)", project_name, mode.value)

        for directory in self.directories(mode):
            self._record(report, f"{directory}/", self.writer.ensure_dir(directory))

        bindings = project_bindings(project_name)
        for template, output in self.templated_files(mode):
            content = self.engine.render(template, bindings)
            self._record(report, output, self.writer.write(output, content))

        if mode is ScaffoldMode.FULL:
            stub = redirect_stub(self.settings)
            for output in (CURSOR_STUB, COPILOT_STUB):
                self._record(report, output, self.writer.write(output, stub))

            # An existing manifest (possibly populated by sync) is left alone.
            manifest_path = self.settings.paths.manifest_path
            manifest = Manifest(schema_ref=self.settings.schema_uri)
            self._record(report, manifest_path, self.writer.write(manifest_path, dump_manifest(manifest)))

        return report

    def _record(self, report: ScaffoldReport, path: str, result: WriteResult) -> None:
        report.entries.append((path, result))
        if self._reporter is not None:
            self._reporter(path, result)
