"""Tests for splitting Markdown into titled sections."""

from __future__ import annotations

from data_model.documents import Section
from interchange.sections import has_top_level_heading, split_into_sections


def test_splits_on_top_level_headings() -> None:
    assert split_into_sections("# First\nContent 1\n# Second\nContent 2") == [
        Section(title="First", content="Content 1"),
        Section(title="Second", content="Content 2"),
    ]


def test_preamble_is_dropped() -> None:
    markdown = "front matter\n\n# Only\n\nbody\n"
    assert split_into_sections(markdown) == [Section(title="Only", content="body")]


def test_falls_back_to_level_two() -> None:
    sections = split_into_sections("## One\na\n## Two\nb")
    assert [s.title for s in sections] == ["One", "Two"]


def test_deeper_headings_stay_in_content() -> None:
    [section] = split_into_sections("# Main\n## Sub\ntext\n### Deeper\nmore")
    assert section.title == "Main"
    assert section.content == "## Sub\ntext\n### Deeper\nmore"


def test_level_two_ignored_when_level_one_exists() -> None:
    sections = split_into_sections("## Intro\nx\n# Real\ny")
    assert sections == [Section(title="Real", content="y")]


def test_heading_without_body_has_empty_content() -> None:
    assert split_into_sections("# Title") == [Section(title="Title", content="")]


def test_text_without_headings_uses_fallback_title() -> None:
    assert split_into_sections("  just text\n") == [Section(title="Playbook", content="just text")]
    assert split_into_sections("notes", "Team notes") == [Section(title="Team notes", content="notes")]


def test_empty_text_gives_one_empty_section() -> None:
    assert split_into_sections("") == [Section(title="Playbook", content="")]


def test_has_top_level_heading() -> None:
    assert has_top_level_heading("intro\n# Title\n")
    assert not has_top_level_heading("## Sub only\n#hashtag")


def test_blank_heading_drops_its_body() -> None:
    assert split_into_sections("#  \nfoo\n# A\nbar") == [Section(title="A", content="bar")]


def test_only_blank_headings_fall_back() -> None:
    assert split_into_sections("#  \nfoo") == [Section(title="Playbook", content="#  \nfoo")]
