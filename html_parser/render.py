"""
html_parser/render.py — document tree → Confluence storage format (XHTML).

Node-to-tag mapping, the inverse of html_parser.parser.storage_to_tree();
code blocks become the "code" structured macro with a CDATA body.
"""

from __future__ import annotations

from html import escape
from typing import Any, Iterable

from data_model.documents import MarkType, Node, NodeType, as_node, heading_level


def tree_to_storage(doc: Node | dict[str, Any]) -> str:
    return _render_nodes(as_node(doc).children)


def _render_nodes(nodes: Iterable[Node]) -> str:
    return "".join(_render_node(n) for n in nodes)


def _render_node(node: Node) -> str:
    match node.kind:
        case NodeType.PARAGRAPH:
            return f"<p>{_render_inline(node.children)}</p>\n"
        case NodeType.HEADING:
            level = heading_level(node)
            return f"<h{level}>{_render_inline(node.children)}</h{level}>\n"
        case NodeType.BULLET_LIST:
            return f"<ul>\n{_render_nodes(node.children)}</ul>\n"
        case NodeType.ORDERED_LIST:
            return f"<ol>\n{_render_nodes(node.children)}</ol>\n"
        case NodeType.LIST_ITEM:
            return f"<li>{_render_flattened(node.children)}</li>\n"
        case NodeType.CODE_BLOCK:
            return _render_code(node)
        case NodeType.BLOCKQUOTE:
            return f"<blockquote>{_render_nodes(node.children)}</blockquote>\n"
        case NodeType.TABLE:
            return f"<table><tbody>\n{_render_nodes(node.children)}</tbody></table>\n"
        case NodeType.TABLE_ROW:
            return f"<tr>{_render_nodes(node.children)}</tr>\n"
        case NodeType.TABLE_HEADER:
            return f"<th>{_render_flattened(node.children)}</th>"
        case NodeType.TABLE_CELL:
            return f"<td>{_render_flattened(node.children)}</td>"
        case NodeType.HORIZONTAL_RULE:
            return "<hr />\n"
        case NodeType.TEXT:
            return _render_text(node)
        case _:
            if node.content is not None:
                return _render_nodes(node.content)
            return escape(node.text or "", quote=False)


def _render_flattened(children: list[Node]) -> str:
    """A single paragraph in a list item or cell is rendered without <p>."""
    if len(children) == 1 and children[0].kind is NodeType.PARAGRAPH:
        return _render_inline(children[0].children)
    return _render_nodes(children)


def _render_code(node: Node) -> str:
    code = "".join(c.text or "" for c in node.children)
    # "]]>" cannot appear inside one CDATA section
    code = code.replace("]]>", "]]]]><![CDATA[>")
    lang = node.attrs.get("language") or ""
    param = (
        f'<ac:parameter ac:name="language">{escape(str(lang))}</ac:parameter>' if lang else ""
    )
    return (
        f'<ac:structured-macro ac:name="code">{param}'
        f"<ac:plain-text-body><![CDATA[{code}]]></ac:plain-text-body>"
        f"</ac:structured-macro>\n"
    )


def _render_inline(nodes: Iterable[Node]) -> str:
    return "".join(_render_text(n) for n in nodes)


def _render_text(node: Node) -> str:
    if node.kind is not NodeType.TEXT or not node.text:
        return ""
    text = escape(node.text, quote=False)

    for mark in node.marks:
        match mark.kind:
            case MarkType.BOLD:
                text = f"<strong>{text}</strong>"
            case MarkType.ITALIC:
                text = f"<em>{text}</em>"
            case MarkType.CODE:
                text = f"<code>{text}</code>"
            case MarkType.LINK:
                href = escape(str(mark.attrs.get("href") or ""))
                text = f'<a href="{href}">{text}</a>'
            case MarkType.STRIKE:
                text = f"<s>{text}</s>"
            case MarkType.UNDERLINE:
                text = f"<u>{text}</u>"
            case _:
                pass

    return text
