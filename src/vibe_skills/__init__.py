"""vibe-skills: scaffold an AI-agent context directory and keep its skills manifest in sync.

Usage:
    from vibe_skills import LocalWorkspace, ManifestSynchronizer, Scaffolder, Settings

    settings = Settings.load()
    workspace = LocalWorkspace(settings.project_dir)
    Scaffolder(workspace, settings).scaffold("acme", "full")
    ManifestSynchronizer(workspace, settings).sync()
"""

__version__ = "0.2.0"

from .config.settings import Settings
from .core.frontmatter import parse_frontmatter
from .core.manifest import Manifest, SkillRecord, SkillSource
from .core.scaffold import Scaffolder, ScaffoldMode
from .core.sync import ManifestSynchronizer
from .core.templates import TemplateEngine
from .core.workspace import LocalWorkspace, MemoryWorkspace
from .core.writer import IdempotentWriter, WriteResult

__all__ = [
    "IdempotentWriter",
    "LocalWorkspace",
    "Manifest",
    "ManifestSynchronizer",
    "MemoryWorkspace",
    "Scaffolder",
    "ScaffoldMode",
    "Settings",
    "SkillRecord",
    "SkillSource",
    "TemplateEngine",
    "WriteResult",
    "parse_frontmatter",
]
