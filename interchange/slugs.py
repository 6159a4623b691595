"""
interchange/slugs.py — URL-safe anchors for heading text.

Public API:
  slugify(text) -> str
  unique_slug(base, counts) -> str
  SlugCounter

The same dedup rule is used by every place that produces heading anchors
(extract_headings, heading_anchors, the Markdown and tree viewers), so one
document gets the same ids whichever renderer shows it.
"""

from __future__ import annotations

import re

_STRIP_RE      = re.compile(r"[^\w\s-]")
_WHITESPACE_RE = re.compile(r"\s+")
_HYPHENS_RE    = re.compile(r"-+")


def slugify(text: str) -> str:
    """
    Turns heading text into a slug.

    "Hello World & Friends!" → "hello-world-friends"
    """
    slug = _STRIP_RE.sub("", text.lower())
    slug = _WHITESPACE_RE.sub("-", slug)
    slug = _HYPHENS_RE.sub("-", slug)
    return slug.strip("-")


def unique_slug(base: str, counts: dict[str, int]) -> str:
    """
    Dedups `base` against `counts` (base slug → occurrences so far).

    First occurrence is returned as is, the N-th as "base-N". `counts` must be
    created by the caller for one traversal and not shared between documents.
    """
    n = counts.get(base, 0) + 1
    counts[base] = n
    return base if n == 1 else f"{base}-{n}"


class SlugCounter:
    """Per-traversal slug table: slugify + unique_slug in one call."""

    __slots__ = ("counts",)

    def __init__(self) -> None:
        self.counts: dict[str, int] = {}

    def __call__(self, text: str) -> str:
        return unique_slug(slugify(text), self.counts)
