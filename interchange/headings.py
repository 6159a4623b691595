"""
interchange/headings.py — navigable headings for the anchor menu.

Public API:
  extract_headings(markdown) -> list[Heading]     # h2–h4 from Markdown
  heading_anchors(tree) -> list[Heading]          # h1–h6 from a document tree
  assign_heading_ids(tree) -> Node                # writes attrs["id"] in place
"""

from __future__ import annotations

import re
from typing import Any

from data_model.documents import Heading, Node, NodeType, as_node, heading_level
from interchange.slugs import unique_slug, slugify

# h1 is the section title (owned by the splitter), h5+ is too deep to navigate.
_HEADING_RE = re.compile(r"^(#{2,4})\s+(.+)")


def _clean_heading_text(text: str) -> str:
    return text.replace("**", "").replace("`", "").strip()


def extract_headings(markdown: str) -> list[Heading]:
    headings: list[Heading] = []
    counts: dict[str, int] = {}

    for line in markdown.split("\n"):
        m = _HEADING_RE.match(line)
        if not m:
            continue
        text = _clean_heading_text(m.group(2))
        headings.append(Heading(
            text=text,
            level=len(m.group(1)),
            slug=unique_slug(slugify(text), counts),
        ))

    return headings


# ---------------------------------------------------------------------------
# Tree side
# ---------------------------------------------------------------------------

def _plain_text(node: Node) -> str:
    if node.kind is NodeType.TEXT:
        return node.text or ""
    return "".join(_plain_text(c) for c in node.children)


def _iter_headings(root: Node, counts: dict[str, int]):
    for node in root.walk():
        if node.kind is not NodeType.HEADING:
            continue
        text = _clean_heading_text(_plain_text(node))
        yield node, Heading(
            text=text,
            level=heading_level(node),
            slug=unique_slug(slugify(text), counts),
        )


def heading_anchors(tree: Node | dict[str, Any]) -> list[Heading]:
    """Headings of every level in document order, slugged like extract_headings."""
    counts: dict[str, int] = {}
    return [h for _, h in _iter_headings(as_node(tree), counts)]


def assign_heading_ids(tree: Node | dict[str, Any]) -> Node:
    """Stores each heading's slug in attrs["id"]; returns the (converted) tree."""
    root = as_node(tree)
    counts: dict[str, int] = {}
    for node, heading in _iter_headings(root, counts):
        node.attrs["id"] = heading.slug
    return root
