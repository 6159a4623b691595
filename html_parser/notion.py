"""
html_parser/notion.py — Notion block API objects ↔ document tree.

Architecture:
  blocks (list of block dicts, children already fetched) → notion_to_tree()
    consecutive list-item blocks are grouped into one list node
  tree → tree_to_notion() → list of block dicts ready for "append block children"

Block mapping:
  paragraph, heading_1–3, bulleted_list_item / numbered_list_item (nested
  children), to_do → bullet item with "[x] " / "[ ] ", code, quote,
  callout / toggle → blockquote, divider, table / table_row.
  Other block types (images, embeds, ...) are skipped.
Rich text annotations map to marks: bold, italic, code, strikethrough →
strike, underline, text.link → link.

Public API:
  notion_to_tree(blocks) -> Node
  tree_to_notion(doc) -> list[dict]
"""

from __future__ import annotations

from typing import Any

from data_model.documents import (
    LIST_TYPES,
    Mark,
    MarkType,
    Node,
    NodeType,
    as_node,
    heading_level,
    text_node,
)

_HEADING_BLOCKS: dict[str, int] = {"heading_1": 1, "heading_2": 2, "heading_3": 3}

_LIST_BLOCKS: dict[str, NodeType] = {
    "bulleted_list_item": NodeType.BULLET_LIST,
    "numbered_list_item": NodeType.ORDERED_LIST,
    "to_do":              NodeType.BULLET_LIST,
}

# Notion annotation → mark, in the order marks are attached (code innermost)
_ANNOTATION_MARKS: list[tuple[str, MarkType]] = [
    ("code",          MarkType.CODE),
    ("bold",          MarkType.BOLD),
    ("italic",        MarkType.ITALIC),
    ("strikethrough", MarkType.STRIKE),
    ("underline",     MarkType.UNDERLINE),
]
_ANNOTATION_KEYS: dict[MarkType, str] = {mark: key for key, mark in _ANNOTATION_MARKS}

_PLAIN_LANGUAGE = "plain text"


# ---------------------------------------------------------------------------
# Notion → tree
# ---------------------------------------------------------------------------

def notion_to_tree(blocks: list[dict[str, Any]]) -> Node:
    nodes = _blocks_to_nodes([b for b in blocks if isinstance(b, dict)])
    return Node(type=NodeType.DOC, content=nodes or [Node(type=NodeType.PARAGRAPH)])


def _payload(block: dict[str, Any]) -> dict[str, Any]:
    payload = block.get(str(block.get("type")))
    return payload if isinstance(payload, dict) else {}


def _child_blocks(block: dict[str, Any]) -> list[dict[str, Any]]:
    """Children nested in the payload, or attached to the block by the fetcher."""
    children = _payload(block).get("children") or block.get("children") or []
    return [c for c in children if isinstance(c, dict)]


def _blocks_to_nodes(blocks: list[dict[str, Any]]) -> list[Node]:
    nodes: list[Node] = []
    i = 0

    while i < len(blocks):
        block = blocks[i]
        block_type = block.get("type")

        if block_type in _LIST_BLOCKS:
            items: list[Node] = []
            while i < len(blocks) and blocks[i].get("type") == block_type:
                items.append(_list_item(blocks[i]))
                i += 1
            nodes.append(Node(type=_LIST_BLOCKS[block_type], content=items))
            continue

        node = _block_to_node(block)
        if node is not None:
            nodes.append(node)
        i += 1

    return nodes


def _block_to_node(block: dict[str, Any]) -> Node | None:
    payload = _payload(block)
    rich_text = payload.get("rich_text") or []
    block_type = block.get("type")

    match block_type:
        case "paragraph":
            if not _plain_text(rich_text):
                return None
            return Node(type=NodeType.PARAGRAPH, content=_rich_text_to_inline(rich_text))

        case "heading_1" | "heading_2" | "heading_3":
            return Node(
                type=NodeType.HEADING,
                attrs={"level": _HEADING_BLOCKS[block_type]},
                content=_rich_text_to_inline(rich_text),
            )

        case "code":
            code = _plain_text(rich_text)
            lang = payload.get("language") or ""
            return Node(
                type=NodeType.CODE_BLOCK,
                attrs={"language": lang} if lang and lang != _PLAIN_LANGUAGE else {},
                content=[text_node(code)] if code else None,
            )

        case "quote" | "callout" | "toggle":
            content: list[Node] = []
            if _plain_text(rich_text):
                content.append(Node(type=NodeType.PARAGRAPH, content=_rich_text_to_inline(rich_text)))
            if block_type == "quote":
                content.extend(_blocks_to_nodes(_child_blocks(block)))
            return Node(type=NodeType.BLOCKQUOTE, content=content or [Node(type=NodeType.PARAGRAPH)])

        case "divider":
            return Node(type=NodeType.HORIZONTAL_RULE)

        case "table":
            return _table(block)

        case _:
            return None


def _list_item(block: dict[str, Any]) -> Node:
    payload = _payload(block)
    inline = _rich_text_to_inline(payload.get("rich_text") or [])

    if block.get("type") == "to_do":
        box = "[x] " if payload.get("checked") else "[ ] "
        first = inline[0]
        if first.marks:
            inline.insert(0, text_node(box))
        else:
            first.text = box + (first.text or "").lstrip()

    content = [Node(type=NodeType.PARAGRAPH, content=inline)]
    content.extend(_blocks_to_nodes(_child_blocks(block)))
    return Node(type=NodeType.LIST_ITEM, content=content)


def _table(block: dict[str, Any]) -> Node | None:
    payload = _payload(block)
    has_header = bool(payload.get("has_column_header"))
    rows: list[Node] = []

    for r, row in enumerate(_child_blocks(block)):
        cell_type = NodeType.TABLE_HEADER if r == 0 and has_header else NodeType.TABLE_CELL
        cells = _payload(row).get("cells") or []
        rows.append(Node(type=NodeType.TABLE_ROW, content=[
            Node(type=cell_type, content=[
                Node(type=NodeType.PARAGRAPH, content=_rich_text_to_inline(cell or [])),
            ])
            for cell in cells
        ]))

    return Node(type=NodeType.TABLE, content=rows) if rows else None


def _plain_text(rich_text: list[dict[str, Any]]) -> str:
    return "".join(_rt_text(rt) for rt in rich_text if isinstance(rt, dict))


def _rt_text(rt: dict[str, Any]) -> str:
    text = rt.get("plain_text")
    if text is None:
        text = (rt.get("text") or {}).get("content")
    return text if isinstance(text, str) else ""


def _rich_text_to_inline(rich_text: list[dict[str, Any]]) -> list[Node]:
    nodes: list[Node] = []

    for rt in rich_text:
        text = _rt_text(rt) if isinstance(rt, dict) else ""
        if not text:
            continue

        annotations = rt.get("annotations") or {}
        marks = [Mark(mark) for key, mark in _ANNOTATION_MARKS if annotations.get(key)]

        link = (rt.get("text") or {}).get("link") or {}
        if link.get("url"):
            marks.append(Mark(MarkType.LINK, {"href": link["url"]}))

        nodes.append(text_node(text, *marks))

    return nodes or [text_node(" ")]


# ---------------------------------------------------------------------------
# Tree → Notion
# ---------------------------------------------------------------------------

def tree_to_notion(doc: Node | dict[str, Any]) -> list[dict[str, Any]]:
    return _nodes_to_blocks(as_node(doc).children)


def _block(block_type: str, payload: dict[str, Any]) -> dict[str, Any]:
    return {"object": "block", "type": block_type, block_type: payload}


def _nodes_to_blocks(nodes: list[Node]) -> list[dict[str, Any]]:
    blocks: list[dict[str, Any]] = []
    for node in nodes:
        blocks.extend(_node_to_blocks(node))
    return blocks


def _node_to_blocks(node: Node) -> list[dict[str, Any]]:
    match node.kind:
        case NodeType.PARAGRAPH:
            return [_block("paragraph", {"rich_text": _inline_to_rich_text(node.children)})]

        case NodeType.HEADING:
            # Notion has three heading levels
            block_type = f"heading_{min(heading_level(node), 3)}"
            return [_block(block_type, {"rich_text": _inline_to_rich_text(node.children)})]

        case NodeType.BULLET_LIST:
            return [_list_item_block(item, "bulleted_list_item") for item in node.children]

        case NodeType.ORDERED_LIST:
            return [_list_item_block(item, "numbered_list_item") for item in node.children]

        case NodeType.CODE_BLOCK:
            code = "".join(c.text or "" for c in node.children)
            return [_block("code", {
                "rich_text": [_rich_text(code)],
                "language": str(node.attrs.get("language") or _PLAIN_LANGUAGE),
            })]

        case NodeType.BLOCKQUOTE:
            children = _nodes_to_blocks(node.children)
            # a quote block carries its first paragraph as rich text
            if children and children[0]["type"] == "paragraph":
                first, rest = children[0]["paragraph"]["rich_text"], children[1:]
            else:
                first, rest = [_rich_text("")], children
            payload: dict[str, Any] = {"rich_text": first}
            if rest:
                payload["children"] = rest
            return [_block("quote", payload)]

        case NodeType.TABLE:
            return _table_block(node)

        case NodeType.HORIZONTAL_RULE:
            return [_block("divider", {})]

        case _:
            if node.content is not None:
                return _nodes_to_blocks(node.content)
            return []


def _list_item_block(item: Node, block_type: str) -> dict[str, Any]:
    first = next((c for c in item.children if c.kind is NodeType.PARAGRAPH), None)
    rich_text = _inline_to_rich_text(first.children) if first else [_rich_text("")]
    nested = _nodes_to_blocks([c for c in item.children if c.kind in LIST_TYPES])

    payload: dict[str, Any] = {"rich_text": rich_text}
    if nested:
        payload["children"] = nested
    return _block(block_type, payload)


def _table_block(node: Node) -> list[dict[str, Any]]:
    rows = node.children
    if not rows:
        return []
    width = max(max(len(r.children) for r in rows), 1)
    has_header = any(c.kind is NodeType.TABLE_HEADER for c in rows[0].children)

    table_rows = []
    for row in rows:
        cells = [_inline_to_rich_text(_cell_inline(cell)) for cell in row.children]
        cells.extend([_rich_text("")] for _ in range(width - len(cells)))
        table_rows.append(_block("table_row", {"cells": cells}))

    return [_block("table", {
        "table_width": width,
        "has_column_header": has_header,
        "has_row_header": False,
        "children": table_rows,
    })]


def _cell_inline(cell: Node) -> list[Node]:
    """Text runs of a cell, with wrapping paragraphs dropped."""
    runs: list[Node] = []
    for child in cell.children:
        runs.extend([child] if child.kind is NodeType.TEXT else child.children)
    return runs


def _rich_text(content: str, link: str | None = None) -> dict[str, Any]:
    text: dict[str, Any] = {"content": content}
    if link:
        text["link"] = {"url": link}
    return {"type": "text", "text": text}


def _inline_to_rich_text(nodes: list[Node]) -> list[dict[str, Any]]:
    result: list[dict[str, Any]] = []

    for node in nodes:
        if node.kind is not NodeType.TEXT or not node.text:
            continue
        annotations: dict[str, bool] = {}
        link: str | None = None
        for mark in node.marks:
            match mark.kind:
                case MarkType.LINK:
                    link = str(mark.attrs.get("href") or "")
                case MarkType.UNKNOWN:
                    pass
                case _:
                    annotations[_ANNOTATION_KEYS[mark.kind]] = True

        rt = _rich_text(node.text, link)
        if annotations:
            rt["annotations"] = annotations
        result.append(rt)

    return result or [_rich_text("")]

