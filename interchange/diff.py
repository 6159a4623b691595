"""
interchange/diff.py — word-level diff of two Markdown versions for review.

Tokens are words, punctuation runs and whitespace runs, so the joined
values of all changes rebuild `before` (unchanged + removed) and `after`
(unchanged + added) exactly.

Public API:
  diff_words(before, after) -> list[Change]
  inline_diff(before, after) -> str          # <del>…</del><ins>…</ins> merged
  highlighted_before(before, after) -> str   # before panel: <del> only
  highlighted_after(before, after) -> str    # after panel: <ins> only
  contains_table(markdown) -> bool
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from difflib import SequenceMatcher

_TOKEN_RE     = re.compile(r"\s+|\w+|[^\w\s]")
_TABLE_ROW_RE = re.compile(r"^\|.+\|$", re.MULTILINE)
_TABLE_SEP_RE = re.compile(r"^\|[\s:]*-+[\s:]*", re.MULTILINE)


@dataclass(slots=True)
class Change:
    value: str
    added: bool = False
    removed: bool = False


def _tokenize(text: str) -> list[str]:
    return _TOKEN_RE.findall(text)


def _append(changes: list[Change], value: str, added: bool = False, removed: bool = False) -> None:
    if not value:
        return
    last = changes[-1] if changes else None
    if last is not None and last.added == added and last.removed == removed:
        last.value += value
    else:
        changes.append(Change(value=value, added=added, removed=removed))


def diff_words(before: str, after: str) -> list[Change]:
    a = _tokenize(before)
    b = _tokenize(after)
    changes: list[Change] = []

    matcher = SequenceMatcher(None, a, b, autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            _append(changes, "".join(a[i1:i2]))
            continue
        if tag in ("delete", "replace"):
            _append(changes, "".join(a[i1:i2]), removed=True)
        if tag in ("insert", "replace"):
            _append(changes, "".join(b[j1:j2]), added=True)

    return changes


def inline_diff(before: str, after: str) -> str:
    parts: list[str] = []
    for change in diff_words(before, after):
        if change.removed:
            parts.append(f"<del>{change.value}</del>")
        elif change.added:
            parts.append(f"<ins>{change.value}</ins>")
        else:
            parts.append(change.value)
    return "".join(parts)


def highlighted_before(before: str, after: str) -> str:
    parts: list[str] = []
    for change in diff_words(before, after):
        if change.added:
            continue
        parts.append(f"<del>{change.value}</del>" if change.removed else change.value)
    return "".join(parts)


def highlighted_after(before: str, after: str) -> str:
    parts: list[str] = []
    for change in diff_words(before, after):
        if change.removed:
            continue
        parts.append(f"<ins>{change.value}</ins>" if change.added else change.value)
    return "".join(parts)


def contains_table(markdown: str) -> bool:
    """True when the text has a pipe table (a |…| row and a |--- separator)."""
    return bool(_TABLE_ROW_RE.search(markdown)) and bool(_TABLE_SEP_RE.search(markdown))
