"""Shared test fixtures for the vibe-skills test suite."""

from __future__ import annotations

import pytest

from vibe_skills.config.settings import Settings
from vibe_skills.core.templates import TemplateEngine
from vibe_skills.core.workspace import LocalWorkspace, MemoryWorkspace


# ---------------------------------------------------------------------------
# Skill file helpers
# ---------------------------------------------------------------------------


def skill_md(name: str, description: str = "Does things", version: str = "1.0.0", body: str = "Body") -> str:
    return f"---\nname: {name}\ndescription: {description}\nversion: {version}\n---\n\n{body}\n"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def settings(tmp_path):
    return Settings(project_dir=str(tmp_path))


@pytest.fixture
def memory_workspace():
    return MemoryWorkspace()


@pytest.fixture
def local_workspace(tmp_path):
    return LocalWorkspace(tmp_path)


@pytest.fixture
def template_root(tmp_path):
    """A template root with a couple of small templates."""
    root = tmp_path / "templates"
    root.mkdir()
    (root / "AGENTS.md").write_text("# {PROJECT_NAME}\n\nRead .context/ first.\n")
    (root / "project.md").write_text("Project {PROJECT_NAME} ({PROJECT_NAME}) owned by {OWNER}\n")
    return root


@pytest.fixture
def engine(template_root):
    return TemplateEngine(template_root)


@pytest.fixture
def skills_workspace():
    """Workspace with an initialized skills directory and two skills."""
    return MemoryWorkspace({
        ".agents/skills/alpha/SKILL.md": skill_md("alpha", "First skill", "2.0.0"),
        ".agents/skills/beta/SKILL.md": skill_md("beta", "Second skill"),
    })


@pytest.fixture
def make_skill():
    """The ``skill_md`` helper, for tests that write their own skill files."""
    return skill_md
