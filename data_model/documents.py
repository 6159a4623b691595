"""
data_model/documents.py — document tree, headings, sections, PDF fragments.

Node is the editor's rich-text tree (TipTap/ProseMirror JSON shape):
  {"type": "doc", "content": [{"type": "paragraph", "content": [...]}, ...]}

The node set is closed by NodeType; any other type string maps to
NodeType.UNKNOWN, while the raw string is kept in Node.type so that a
round-trip through from_dict/to_dict does not lose it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


# ---------------------------------------------------------------------------
# Node / mark types
# ---------------------------------------------------------------------------

class NodeType(StrEnum):
    DOC             = "doc"
    PARAGRAPH       = "paragraph"
    HEADING         = "heading"
    BULLET_LIST     = "bulletList"
    ORDERED_LIST    = "orderedList"
    LIST_ITEM       = "listItem"
    CODE_BLOCK      = "codeBlock"
    BLOCKQUOTE      = "blockquote"
    TABLE           = "table"
    TABLE_ROW       = "tableRow"
    TABLE_HEADER    = "tableHeader"
    TABLE_CELL      = "tableCell"
    HORIZONTAL_RULE = "horizontalRule"
    TEXT            = "text"
    UNKNOWN         = "unknown"


class MarkType(StrEnum):
    BOLD      = "bold"
    ITALIC    = "italic"
    CODE      = "code"
    LINK      = "link"
    STRIKE    = "strike"
    UNDERLINE = "underline"
    UNKNOWN   = "unknown"


# Alternative spellings accepted on input.
_NODE_ALIASES: dict[str, NodeType] = {
    "tableHeaderCell": NodeType.TABLE_HEADER,
}

_NODE_VALUES = {t.value for t in NodeType} - {NodeType.UNKNOWN.value}
_MARK_VALUES = {t.value for t in MarkType} - {MarkType.UNKNOWN.value}

LIST_TYPES   = frozenset({NodeType.BULLET_LIST, NodeType.ORDERED_LIST})
CELL_TYPES   = frozenset({NodeType.TABLE_HEADER, NodeType.TABLE_CELL})


def _attrs_of(data: dict[str, Any]) -> dict[str, Any]:
    attrs = data.get("attrs")
    return dict(attrs) if isinstance(attrs, dict) else {}


def node_kind(type_name: str) -> NodeType:
    """Maps a raw node type string onto NodeType (UNKNOWN if not recognised)."""
    if type_name in _NODE_VALUES:
        return NodeType(type_name)
    return _NODE_ALIASES.get(type_name, NodeType.UNKNOWN)


# ---------------------------------------------------------------------------
# Tree
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class Mark:
    type: str
    attrs: dict[str, Any] = field(default_factory=dict)

    @property
    def kind(self) -> MarkType:
        return MarkType(self.type) if self.type in _MARK_VALUES else MarkType.UNKNOWN

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Mark:
        return cls(type=str(data.get("type", "")), attrs=_attrs_of(data))

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"type": self.type}
        if self.attrs:
            out["attrs"] = dict(self.attrs)
        return out


@dataclass(slots=True)
class Node:
    """
    Single node of the document tree.

    - type:    raw type string ("paragraph", "heading", ...)
    - content: owned children; None for leaves
    - text:    only for text nodes
    - marks:   ordered marks of a text node
    - attrs:   level (heading), language (codeBlock), id (heading anchor), ...
    """
    type: str
    content: list[Node] | None = None
    text: str | None = None
    marks: list[Mark] = field(default_factory=list)
    attrs: dict[str, Any] = field(default_factory=dict)

    @property
    def kind(self) -> NodeType:
        return node_kind(self.type)

    @property
    def children(self) -> list[Node]:
        return self.content or []

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Node:
        content = data.get("content")
        text = data.get("text")
        marks = data.get("marks")
        return cls(
            type=str(data.get("type", "")),
            content=[cls.from_dict(c) for c in content if isinstance(c, dict)]
            if isinstance(content, list) else None,
            # non-string text is treated as absent
            text=text if isinstance(text, str) else None,
            marks=[Mark.from_dict(m) for m in marks if isinstance(m, dict)]
            if isinstance(marks, list) else [],
            attrs=_attrs_of(data),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"type": self.type}
        if self.attrs:
            out["attrs"] = dict(self.attrs)
        if self.text is not None:
            out["text"] = self.text
        if self.marks:
            out["marks"] = [m.to_dict() for m in self.marks]
        if self.content is not None:
            out["content"] = [c.to_dict() for c in self.content]
        return out

    def walk(self):
        """Yields this node and all descendants in document order."""
        yield self
        for child in self.children:
            yield from child.walk()


def heading_level(node: Node) -> int:
    """attrs["level"] clamped to 1..6; missing or malformed → 1."""
    try:
        level = int(node.attrs.get("level") or 1)
    except (TypeError, ValueError, OverflowError):
        return 1
    return min(max(level, 1), 6)


def text_node(text: str, *marks: Mark) -> Node:
    return Node(type=NodeType.TEXT, text=text, marks=list(marks))


def doc(*children: Node) -> Node:
    return Node(type=NodeType.DOC, content=list(children))


def as_node(value: Node | dict[str, Any]) -> Node:
    """Accepts a Node or its JSON dict form."""
    return value if isinstance(value, Node) else Node.from_dict(value)


# ---------------------------------------------------------------------------
# Derived records
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class Heading:
    text: str
    level: int           # 2..4 from extract_headings, 1..6 from heading_anchors
    slug: str


@dataclass(slots=True)
class Section:
    title: str
    content: str         # heading line excluded, stripped


@dataclass(slots=True, frozen=True)
class TextFragment:
    """Span of extracted text with the layout metadata needed to rebuild lines."""
    text: str
    font_size: float
    y: float             # vertical position (bbox top)
    page: int            # 1-based
