"""Tests for vibe_skills.core.frontmatter."""

from __future__ import annotations

from vibe_skills.core.frontmatter import parse_frontmatter, read_frontmatter, split_frontmatter
from vibe_skills.core.workspace import MemoryWorkspace


class TestParseFrontmatter:
    def test_basic_block(self):
        text = "---\nname: foo\ndescription: bar\nversion: 2.0.0\n---\nbody"
        assert parse_frontmatter(text) == {"name": "foo", "description": "bar", "version": "2.0.0"}

    def test_splits_on_first_colon_only(self):
        text = "---\ndescription: Use when: tests fail: badly\n---\n"
        assert parse_frontmatter(text) == {"description": "Use when: tests fail: badly"}

    def test_keys_and_values_are_trimmed(self):
        assert parse_frontmatter("---\n  name  :   spaced out   \n---\n") == {"name": "spaced out"}

    def test_lines_without_colon_ignored(self):
        text = "---\nname: foo\njust some words\n\n---\n"
        assert parse_frontmatter(text) == {"name": "foo"}

    def test_empty_block(self):
        assert parse_frontmatter("---\n---\n") == {}
        assert parse_frontmatter("---\n---\n# Body\nkey: leaked\n---\nmore\n") == {}

    def test_empty_key_ignored(self):
        assert parse_frontmatter("---\n: orphan\nname: x\n---\n") == {"name": "x"}

    def test_values_stay_strings(self):
        meta = parse_frontmatter("---\nversion: 2\nenabled: true\n---\n")
        assert meta == {"version": "2", "enabled": "true"}

    def test_empty_value(self):
        assert parse_frontmatter("---\ndescription:\n---\n") == {"description": ""}

    def test_later_duplicate_wins(self):
        assert parse_frontmatter("---\nname: a\nname: b\n---\n") == {"name": "b"}

    def test_missing_closing_marker_returns_empty(self):
        text = "---\nname: foo\ndescription: bar\n\n# Body without a closing marker\n"
        assert parse_frontmatter(text) == {}

    def test_block_must_start_at_beginning(self):
        assert parse_frontmatter("\n---\nname: foo\n---\n") == {}
        assert parse_frontmatter("# Title\n---\nname: foo\n---\n") == {}

    def test_no_frontmatter(self):
        assert parse_frontmatter("# Just markdown\n") == {}
        assert parse_frontmatter("") == {}

    def test_crlf_line_endings(self):
        text = "---\r\nname: foo\r\nversion: 1.2.3\r\n---\r\nbody\r\n"
        assert parse_frontmatter(text) == {"name": "foo", "version": "1.2.3"}

    def test_closing_marker_must_be_whole_line(self):
        # "----" and "--- x" are not markers; the block is never closed
        assert parse_frontmatter("---\nname: foo\n----\n") == {}
        assert parse_frontmatter("---\nname: foo\n--- x\n") == {}

    def test_stops_at_first_closing_marker(self):
        text = "---\nname: foo\n---\nbody\n---\nname: bar\n---\n"
        assert parse_frontmatter(text) == {"name": "foo"}


class TestSplitFrontmatter:
    def test_returns_body(self):
        meta, body = split_frontmatter("---\nname: foo\n---\n\n# Foo\n")
        assert meta == {"name": "foo"}
        assert body == "\n# Foo\n"

    def test_body_is_whole_text_without_block(self):
        meta, body = split_frontmatter("# Foo\n")
        assert meta == {}
        assert body == "# Foo\n"

    def test_closing_marker_at_end_of_text(self):
        meta, body = split_frontmatter("---\nname: foo\n---")
        assert meta == {"name": "foo"}
        assert body == ""

    def test_empty_block_body_starts_after_it(self):
        meta, body = split_frontmatter("---\n---\n# Body\nkey: leaked\n---\nmore\n")
        assert meta == {}
        assert body == "# Body\nkey: leaked\n---\nmore\n"


def test_read_frontmatter_from_workspace():
    ws = MemoryWorkspace({"skills/a/SKILL.md": "---\nname: a\n---\n"})
    assert read_frontmatter(ws, "skills/a/SKILL.md") == {"name": "a"}
