"""Tests for vibe_skills.core.sync."""

from __future__ import annotations

import json
import logging

import pytest

from vibe_skills.core.manifest import Manifest, SkillRecord, SkillSource, dump_manifest
from vibe_skills.core.sync import ManifestSynchronizer, SyncEvent
from vibe_skills.core.workspace import MemoryWorkspace
from vibe_skills.errors import MissingPrerequisite

MANIFEST = ".agents/skills/skills.json"


def read_manifest(ws) -> dict:
    return json.loads(ws.read_text(MANIFEST))


class TestSyncBasics:
    def test_missing_skills_dir_fails_fast(self, memory_workspace, settings):
        with pytest.raises(MissingPrerequisite, match="init --full"):
            ManifestSynchronizer(memory_workspace, settings).sync()
        assert not memory_workspace.exists(MANIFEST)

    def test_builds_records_from_frontmatter(self, skills_workspace, settings):
        report = ManifestSynchronizer(skills_workspace, settings).sync()
        assert report.detected == ["alpha", "beta"]
        assert read_manifest(skills_workspace)["skills"] == {
            "alpha": {"version": "2.0.0", "source": "local", "description": "First skill"},
            "beta": {"version": "1.0.0", "source": "local", "description": "Second skill"},
        }

    def test_defaults_when_frontmatter_missing(self, settings):
        ws = MemoryWorkspace({
            ".agents/skills/bare/SKILL.md": "# No frontmatter here\n",
            ".agents/skills/unclosed/SKILL.md": "---\nversion: 9.9.9\ndescription: never closed\n",
            ".agents/skills/blank/SKILL.md": "---\nversion:\ndescription:\n---\n",
        })
        ManifestSynchronizer(ws, settings).sync()
        skills = read_manifest(ws)["skills"]
        for name in ["bare", "unclosed", "blank"]:
            assert skills[name] == {
                "version": "1.0.0",
                "source": "local",
                "description": "No description provided",
            }

    def test_key_is_directory_name(self, settings, make_skill):
        ws = MemoryWorkspace({".agents/skills/dir-name/SKILL.md": make_skill("frontmatter-name")})
        ManifestSynchronizer(ws, settings).sync()
        assert list(read_manifest(ws)["skills"]) == ["dir-name"]

    def test_empty_skills_dir(self, settings):
        ws = MemoryWorkspace()
        ws.make_dirs(".agents/skills")
        report = ManifestSynchronizer(ws, settings).sync()
        assert report.manifest.skills == {}
        assert read_manifest(ws)["skills"] == {}


class TestSkipping:
    def test_directory_without_skill_file_skipped(self, skills_workspace, settings):
        skills_workspace.make_dirs(".agents/skills/gamma")
        skills_workspace.write_text(".agents/skills/gamma/README.md", "not a skill")
        events = []
        report = ManifestSynchronizer(
            skills_workspace, settings, reporter=lambda e, s: events.append((e, s))
        ).sync()
        assert report.skipped == ["gamma"]
        assert "gamma" not in read_manifest(skills_workspace)["skills"]
        assert (SyncEvent.SKIPPED, "gamma") in events

    def test_root_files_ignored(self, skills_workspace, settings):
        skills_workspace.write_text(".agents/skills/notes.md", "---\nname: notes\n---\n")
        report = ManifestSynchronizer(skills_workspace, settings).sync()
        assert "notes.md" not in report.manifest.skills
        assert report.skipped == []


class TestReconciliation:
    def test_source_preserved(self, skills_workspace, settings, make_skill):
        sync = ManifestSynchronizer(skills_workspace, settings)
        sync.sync()
        data = read_manifest(skills_workspace)
        data["skills"]["alpha"]["source"] = "registry"
        skills_workspace.write_text(MANIFEST, json.dumps(data))

        skills_workspace.write_text(
            ".agents/skills/alpha/SKILL.md", make_skill("alpha", "Edited description", "2.1.0")
        )
        sync.sync()
        alpha = read_manifest(skills_workspace)["skills"]["alpha"]
        assert alpha == {"version": "2.1.0", "source": "registry", "description": "Edited description"}

    def test_only_source_carried_forward(self, skills_workspace, settings):
        previous = Manifest(skills={
            "alpha": SkillRecord(version="0.0.1", source=SkillSource.CORE, description="stale"),
        })
        skills_workspace.write_text(MANIFEST, dump_manifest(previous))
        report = ManifestSynchronizer(skills_workspace, settings).sync()
        alpha = report.manifest.skills["alpha"]
        assert alpha.source is SkillSource.CORE
        assert alpha.version == "2.0.0"
        assert alpha.description == "First skill"

    def test_removed_directory_drops_record(self, skills_workspace, settings):
        sync = ManifestSynchronizer(skills_workspace, settings)
        sync.sync()
        skills_workspace.remove_tree(".agents/skills/alpha")
        report = sync.sync()
        assert report.removed == ["alpha"]
        assert list(read_manifest(skills_workspace)["skills"]) == ["beta"]

    def test_stale_entries_without_directories_vanish(self, skills_workspace, settings):
        previous = Manifest(skills={"ghost": SkillRecord(source=SkillSource.REGISTRY)})
        skills_workspace.write_text(MANIFEST, dump_manifest(previous))
        report = ManifestSynchronizer(skills_workspace, settings).sync()
        assert "ghost" not in report.manifest.skills
        assert report.removed == ["ghost"]

    def test_schema_and_version_reset(self, skills_workspace, settings):
        skills_workspace.write_text(MANIFEST, '{"$schema": "old", "version": "0.1.0", "skills": {}}')
        ManifestSynchronizer(skills_workspace, settings).sync()
        data = read_manifest(skills_workspace)
        assert data["$schema"] == settings.schema_uri
        assert data["version"] == "1.0.0"


class TestDeterminism:
    def test_two_syncs_are_byte_identical(self, skills_workspace, settings):
        sync = ManifestSynchronizer(skills_workspace, settings)
        sync.sync()
        first = skills_workspace.read_text(MANIFEST)
        sync.sync()
        assert skills_workspace.read_text(MANIFEST) == first

    def test_order_independent_of_creation_order(self, settings, make_skill):
        ws_a = MemoryWorkspace({
            ".agents/skills/b/SKILL.md": make_skill("b"),
            ".agents/skills/a/SKILL.md": make_skill("a"),
        })
        ws_b = MemoryWorkspace({
            ".agents/skills/a/SKILL.md": make_skill("a"),
            ".agents/skills/b/SKILL.md": make_skill("b"),
        })
        ManifestSynchronizer(ws_a, settings).sync()
        ManifestSynchronizer(ws_b, settings).sync()
        assert ws_a.read_text(MANIFEST) == ws_b.read_text(MANIFEST)


class TestMalformedManifest:
    def test_unparsable_manifest_treated_as_empty(self, skills_workspace, settings, caplog):
        skills_workspace.write_text(MANIFEST, "{ this is not json")
        events = []
        with caplog.at_level(logging.WARNING, logger="vibe_skills.core.sync"):
            report = ManifestSynchronizer(
                skills_workspace, settings, reporter=lambda e, s: events.append((e, s))
            ).sync()
        assert report.previous_malformed
        assert (SyncEvent.MALFORMED, MANIFEST) in events
        assert "starting fresh" in caplog.text
        assert set(read_manifest(skills_workspace)["skills"]) == {"alpha", "beta"}

    def test_undecodable_manifest_treated_as_empty(self, skills_workspace, settings):
        skills_workspace.files[MANIFEST] = b"\xff\xfe{not json"
        report = ManifestSynchronizer(skills_workspace, settings).sync()
        assert report.previous_malformed
        assert set(read_manifest(skills_workspace)["skills"]) == {"alpha", "beta"}

    def test_invalid_record_only_loses_its_own_source(self, skills_workspace, settings, caplog):
        skills_workspace.write_text(
            MANIFEST,
            '{"skills": {"alpha": {"source": "somewhere-else"}, "beta": {"source": "registry"}}}',
        )
        with caplog.at_level(logging.WARNING, logger="vibe_skills.core.manifest"):
            report = ManifestSynchronizer(skills_workspace, settings).sync()
        assert not report.previous_malformed
        assert report.manifest.skills["alpha"].source is SkillSource.LOCAL
        assert report.manifest.skills["beta"].source is SkillSource.REGISTRY
        assert "alpha" in caplog.text


def test_on_disk(local_workspace, tmp_path, settings, make_skill):
    skill_dir = tmp_path / ".agents" / "skills" / "disk-skill"
    skill_dir.mkdir(parents=True)
    (skill_dir / "SKILL.md").write_text(make_skill("disk-skill", "From disk", "3.0.0"))

    report = ManifestSynchronizer(local_workspace, settings).sync()
    assert report.detected == ["disk-skill"]
    data = json.loads((tmp_path / ".agents" / "skills" / "skills.json").read_text())
    assert data["skills"]["disk-skill"]["version"] == "3.0.0"
