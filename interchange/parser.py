"""
interchange/parser.py — Markdown → document tree.

Architecture:
  markdown → MarkdownIt("commonmark") + table rule → block tokens
  → _build_blocks() (open/close tokens drive a node stack) → Node tree (doc)
  inline tokens → _build_inline() (open marks kept on a stack) → text runs

Token mapping:
  heading_open → heading (level from the tag), paragraph_open → paragraph,
  bullet_list/ordered_list/list_item → lists (nested), blockquote_open,
  table/tr/th/td → table (th → tableHeader, cell text wrapped in a
  paragraph), fence/code_block → codeBlock, hr → horizontalRule;
  strong/em/link/code_inline → bold/italic/link/code marks.

Raw HTML is kept as text. Softbreaks become spaces.

Public API:
  markdown_to_tree(markdown) -> Node
  parse_inline(text) -> list[Node]
"""

from __future__ import annotations

from markdown_it import MarkdownIt
from markdown_it.token import Token

from data_model.documents import Mark, MarkType, Node, NodeType, text_node

_md = MarkdownIt("commonmark", {"html": False}).enable("table")

# "<name>_open" / "<name>_close" pairs that become a node
_CONTAINERS: dict[str, NodeType] = {
    "paragraph":    NodeType.PARAGRAPH,
    "heading":      NodeType.HEADING,
    "bullet_list":  NodeType.BULLET_LIST,
    "ordered_list": NodeType.ORDERED_LIST,
    "list_item":    NodeType.LIST_ITEM,
    "blockquote":   NodeType.BLOCKQUOTE,
    "table":        NodeType.TABLE,
    "tr":           NodeType.TABLE_ROW,
    "th":           NodeType.TABLE_HEADER,
    "td":           NodeType.TABLE_CELL,
}

_INLINE_MARKS: dict[str, MarkType] = {
    "strong": MarkType.BOLD,
    "em":     MarkType.ITALIC,
    "link":   MarkType.LINK,
}


def markdown_to_tree(markdown: str) -> Node:
    root = Node(type=NodeType.DOC, content=[])
    _build_blocks(_md.parse(markdown), root)
    if not root.content:
        root.content = [Node(type=NodeType.PARAGRAPH)]
    return root


def parse_inline(text: str) -> list[Node]:
    """Text runs of one line of Markdown; empty text gives a single space run."""
    children: list[Token] = []
    for tok in _md.parseInline(text):
        children.extend(tok.children or [])
    return _build_inline(children)


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------

def _container_name(tok: Token) -> str:
    return tok.type.rsplit("_", 1)[0]


def _build_blocks(tokens: list[Token], root: Node) -> None:
    stack = [root]

    for tok in tokens:
        top = stack[-1]

        if tok.nesting == 1:
            kind = _CONTAINERS.get(_container_name(tok))
            if kind is None:
                continue  # thead / tbody
            node = Node(type=kind, content=[])
            if kind is NodeType.HEADING:
                node.attrs["level"] = int(tok.tag[1:])
            top.content.append(node)
            stack.append(node)
            continue

        if tok.nesting == -1:
            if _container_name(tok) in _CONTAINERS:
                stack.pop()
            continue

        match tok.type:
            case "inline":
                runs = _build_inline(tok.children or [])
                if top.kind in (NodeType.TABLE_HEADER, NodeType.TABLE_CELL):
                    top.content.append(Node(type=NodeType.PARAGRAPH, content=runs))
                else:
                    top.content.extend(runs)
            case "fence" | "code_block":
                top.content.append(_code_block(tok))
            case "hr":
                top.content.append(Node(type=NodeType.HORIZONTAL_RULE))
            case _:
                pass


def _code_block(tok: Token) -> Node:
    code = tok.content.removesuffix("\n")
    info = tok.info.split()
    return Node(
        type=NodeType.CODE_BLOCK,
        attrs={"language": info[0]} if info else {},
        content=[text_node(code)] if code else None,
    )


# ---------------------------------------------------------------------------
# Inline
# ---------------------------------------------------------------------------

def _build_inline(tokens: list[Token]) -> list[Node]:
    nodes: list[Node] = []
    open_marks: list[Mark] = []

    def _add(text: str, *inner: Mark) -> None:
        # innermost mark first, matching the serializer's wrapping order
        marks = [*inner, *reversed(open_marks)]
        last = nodes[-1] if nodes else None
        if last is not None and last.marks == marks:
            last.text = (last.text or "") + text
        else:
            nodes.append(text_node(text, *marks))

    for tok in tokens:
        match tok.type:
            case "text" | "text_special" | "html_inline":
                if tok.content:
                    _add(tok.content)
            case "softbreak":
                _add(" ")
            case "hardbreak":
                _add("\n")
            case "code_inline":
                _add(tok.content, Mark(MarkType.CODE))
            case "image":
                if tok.content:
                    _add(tok.content)
            case _:
                name = _container_name(tok)
                mark_type = _INLINE_MARKS.get(name)
                if mark_type is None:
                    continue
                if tok.nesting == 1:
                    attrs = {"href": str(tok.attrGet("href") or "")} if mark_type is MarkType.LINK else {}
                    open_marks.append(Mark(mark_type, attrs))
                elif tok.nesting == -1:
                    for i in range(len(open_marks) - 1, -1, -1):
                        if open_marks[i].type == mark_type:
                            del open_marks[i]
                            break

    return nodes or [text_node(" ")]
