"""
interchange/sections.py — splitting Markdown into titled sections.

Split level:
  1. "# " lines, if the text has at least one;
  2. otherwise "## " lines;
  3. otherwise the whole text is one section titled `fallback_title`.

Text before the first split heading (preamble/front matter) is dropped, and so
is the body of a heading whose text is blank.
Deeper headings stay verbatim in the owning section's content.
"""

from __future__ import annotations

import re

from data_model.documents import Section

DEFAULT_FALLBACK_TITLE = "Playbook"

_H1_RE     = re.compile(r"^# (.+)")
_H2_RE     = re.compile(r"^## (.+)")
_HAS_H1_RE = re.compile(r"^# .+", re.MULTILINE)


def split_into_sections(
    markdown: str,
    fallback_title: str = DEFAULT_FALLBACK_TITLE,
) -> list[Section]:
    heading_re = _H1_RE if _HAS_H1_RE.search(markdown) else _H2_RE

    sections: list[Section] = []
    current_title = ""
    current_lines: list[str] = []

    def _flush() -> None:
        if current_title:
            sections.append(Section(
                title=current_title,
                content="\n".join(current_lines).strip(),
            ))

    for line in markdown.split("\n"):
        m = heading_re.match(line)
        if m:
            _flush()
            current_title = m.group(1).strip()
            current_lines = []
        else:
            current_lines.append(line)

    _flush()

    if not sections:
        sections.append(Section(title=fallback_title, content=markdown.strip()))

    return sections


def has_top_level_heading(markdown: str) -> bool:
    """True when the text already has a "# " heading (no structuring needed)."""
    return bool(_HAS_H1_RE.search(markdown))
