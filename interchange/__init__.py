"""
interchange — document tree ↔ Markdown and the views derived from Markdown.

Modules:
  slugs      — slugify, unique_slug, SlugCounter
  headings   — extract_headings (h2–h4 anchors), heading_anchors, assign_heading_ids
  sections   — split_into_sections
  serializer — tree_to_markdown
  parser     — markdown_to_tree
  diff       — word diff for before/after review
"""

from .diff import Change, contains_table, diff_words, highlighted_after, highlighted_before, inline_diff
from .headings import assign_heading_ids, extract_headings, heading_anchors
from .parser import markdown_to_tree, parse_inline
from .sections import DEFAULT_FALLBACK_TITLE, has_top_level_heading, split_into_sections
from .serializer import serialize_inline, tree_to_markdown
from .slugs import SlugCounter, slugify, unique_slug

__all__ = [
    # slugs
    "slugify",
    "unique_slug",
    "SlugCounter",
    # headings
    "extract_headings",
    "heading_anchors",
    "assign_heading_ids",
    # sections
    "split_into_sections",
    "has_top_level_heading",
    "DEFAULT_FALLBACK_TITLE",
    # tree ↔ markdown
    "tree_to_markdown",
    "serialize_inline",
    "markdown_to_tree",
    "parse_inline",
    # diff
    "Change",
    "diff_words",
    "inline_diff",
    "highlighted_before",
    "highlighted_after",
    "contains_table",
]
