"""
interchange/serializer.py — document tree → Markdown.

Architecture:
  tree (Node | dict) → _serialize_nodes() → per-type rules → str
  → rstrip + exactly one trailing "\n"

Tables always come out as a valid pipe table (header row, one "---"
separator row, body rows, padded to the widest row); there is no
"[table]" placeholder for tables with odd shapes.

Node types without a rule pass through: children are serialized in place,
leaves contribute their raw text. Malformed trees never raise.

Public API:
  tree_to_markdown(doc) -> str
  serialize_inline(nodes) -> str
"""

from __future__ import annotations

import re
from typing import Any, Iterable

from data_model.documents import LIST_TYPES, MarkType, Node, NodeType, as_node, heading_level

_INDENT = "  "


def tree_to_markdown(doc: Node | dict[str, Any]) -> str:
    root = as_node(doc)
    return _serialize_nodes(root.children).rstrip() + "\n"


def _serialize_nodes(nodes: Iterable[Node], list_indent: int = 0) -> str:
    return "".join(_serialize_node(n, list_indent) for n in nodes)


def _serialize_node(node: Node, list_indent: int = 0) -> str:
    match node.kind:
        case NodeType.PARAGRAPH:
            return serialize_inline(node.children) + "\n\n"

        case NodeType.HEADING:
            level = heading_level(node)
            return "#" * level + " " + serialize_inline(node.children) + "\n\n"

        case NodeType.BULLET_LIST | NodeType.ORDERED_LIST:
            return _serialize_list(node, list_indent)

        case NodeType.LIST_ITEM:
            # only meaningful inside a list; handled by _serialize_list
            return ""

        case NodeType.CODE_BLOCK:
            lang = node.attrs.get("language") or ""
            code = "".join(c.text or "" for c in node.children)
            return f"```{lang}\n{code}\n```\n\n"

        case NodeType.BLOCKQUOTE:
            inner = _serialize_nodes(node.children).rstrip("\n")
            quoted = "\n".join(f"> {line}" if line else ">" for line in inner.split("\n"))
            return quoted + "\n\n"

        case NodeType.TABLE:
            table = _serialize_table(node)
            return table + "\n" if table else ""

        case NodeType.HORIZONTAL_RULE:
            return "---\n\n"

        case NodeType.TEXT:
            return _serialize_text(node)

        case _:
            if node.content is not None:
                return _serialize_nodes(node.content, list_indent)
            return node.text or ""


# ---------------------------------------------------------------------------
# Lists
# ---------------------------------------------------------------------------

def _serialize_list(node: Node, indent: int) -> str:
    ordered = node.kind is NodeType.ORDERED_LIST
    pad = _INDENT * indent
    out: list[str] = []

    for i, item in enumerate(node.children, start=1):
        marker = f"{i}. " if ordered else "- "
        for j, child in enumerate(item.children):
            if child.kind is NodeType.PARAGRAPH:
                text = serialize_inline(child.children)
                if j == 0:
                    out.append(pad + marker + text + "\n")
                else:
                    out.append(pad + " " * len(marker) + text + "\n")
            elif child.kind in LIST_TYPES:
                out.append(_serialize_list(child, indent + 1))
            else:
                # tables, code and quotes hang under the marker
                block = _serialize_node(child, indent + 1).rstrip("\n")
                if block:
                    hang = pad + " " * len(marker)
                    out.extend(f"{hang}{line}\n" if line else "\n" for line in block.split("\n"))

    # one blank line after the outermost list only
    if indent == 0:
        out.append("\n")
    return "".join(out)


# ---------------------------------------------------------------------------
# Inline
# ---------------------------------------------------------------------------

def serialize_inline(nodes: Iterable[Node]) -> str:
    return "".join(_serialize_text(n) for n in nodes)


def _serialize_text(node: Node) -> str:
    if node.kind is not NodeType.TEXT or not node.text:
        return ""
    text = node.text

    # marks wrap each other in declaration order (first mark innermost)
    for mark in node.marks:
        match mark.kind:
            case MarkType.BOLD:
                text = f"**{text}**"
            case MarkType.ITALIC:
                text = f"_{text}_"
            case MarkType.CODE:
                text = f"`{text}`"
            case MarkType.LINK:
                href = mark.attrs.get("href") or ""
                text = f"[{text}]({href})"
            case _:
                pass

    return text


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

_CELL_NEWLINE_RE = re.compile(r"\s*\n\s*")


def _cell_text(cell: Node) -> str:
    """Inline text of a cell; wrapping paragraphs are dropped, pipes escaped."""
    parts: list[str] = []
    for child in cell.children:
        if child.kind is NodeType.TEXT:
            parts.append(_serialize_text(child))
        else:
            parts.append(serialize_inline(child.children))
    text = " ".join(p for p in parts if p)
    text = _CELL_NEWLINE_RE.sub(" ", text)
    return text.replace("|", "\\|")


def _pad_row(cells: list[str], width: int) -> list[str]:
    row = [c or " " for c in cells]
    row.extend(" " for _ in range(width - len(row)))
    return row


def _format_row(cells: list[str]) -> str:
    return "| " + " | ".join(cells) + " |"


def _serialize_table(node: Node) -> str:
    rows = node.children
    if not rows:
        return ""

    table_data = [[_cell_text(cell) for cell in row.children] for row in rows]
    width = max(len(r) for r in table_data)
    if width == 0:
        return ""

    has_header = any(c.kind is NodeType.TABLE_HEADER for c in rows[0].children)
    if has_header:
        header, body = table_data[0], table_data[1:]
    else:
        header, body = [], table_data

    lines = [
        _format_row(_pad_row(header, width)),
        _format_row(["---"] * width),
    ]
    lines.extend(_format_row(_pad_row(r, width)) for r in body)
    return "\n".join(lines) + "\n"
