"""
html_parser/parser.py — wiki pages (Confluence storage format / HTML) → document tree.

Architecture:
  url → fetch_page() → HTML
  HTML → BeautifulSoup → _parse_blocks() → Node tree (doc)

Block mapping:
  h1–h6 → heading, p → paragraph, ul/ol/li → lists (nested), blockquote,
  table/tr/th/td → table, hr → horizontalRule, pre → codeBlock,
  ac:structured-macro "code"/"noformat" → codeBlock (language parameter +
  CDATA body); other macros unwrap their rich-text body.
Transparent wrappers (div, section, ins, del, ac:inline-comment-marker, ...)
are unwrapped; script/style/noscript are dropped.

Public API:
  storage_to_tree(html) -> Node
  fetch_page(url) -> str
  parse_html_url(url) -> Node
"""

from __future__ import annotations

import re
from html import escape

import requests
from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from data_model.documents import Mark, MarkType, Node, NodeType, text_node

_HEADING_LEVEL: dict[str, int] = {"h1": 1, "h2": 2, "h3": 3, "h4": 4, "h5": 5, "h6": 6}

# Inline tags → mark (None = transparent wrapper)
_INLINE_MARKS: dict[str, MarkType | None] = {
    "strong": MarkType.BOLD,
    "b": MarkType.BOLD,
    "em": MarkType.ITALIC,
    "i": MarkType.ITALIC,
    "code": MarkType.CODE,
    "a": MarkType.LINK,
    "s": MarkType.STRIKE,
    "strike": MarkType.STRIKE,
    "u": MarkType.UNDERLINE,
    "span": None,
    "ins": None,
    "del": None,
    "ac:inline-comment-marker": None,
    "br": None,
}

_CODE_MACROS = {"code", "noformat"}

# Tags containing noise (not content)
_NOISE_TAGS = ["script", "style", "noscript"]

_WS_RE    = re.compile(r"\s+")
_CDATA_RE = re.compile(r"<!\[CDATA\[(.*?)\]\]>", re.DOTALL)

_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def storage_to_tree(html: str) -> Node:
    # CDATA bodies (code macros) become escaped text before parsing
    html = _CDATA_RE.sub(lambda m: escape(m.group(1), quote=False), html)
    soup = BeautifulSoup(html, "html.parser")

    for tag in soup.find_all(_NOISE_TAGS):
        tag.decompose()

    body: Tag = soup.find("body") or soup  # type: ignore[assignment]
    nodes = _parse_blocks(body)
    return Node(type=NodeType.DOC, content=nodes or [Node(type=NodeType.PARAGRAPH)])


def fetch_page(url: str, timeout: float = 30) -> str:
    """Downloads a page; HTTP errors propagate as requests exceptions."""
    resp = requests.get(url, timeout=timeout, headers={"User-Agent": _USER_AGENT})
    resp.raise_for_status()
    resp.encoding = resp.apparent_encoding or "utf-8"
    return resp.text


def parse_html_url(url: str) -> Node:
    return storage_to_tree(fetch_page(url))


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------

def _is_inline(child: object) -> bool:
    if isinstance(child, Comment):
        return False
    if isinstance(child, NavigableString):
        return True
    return isinstance(child, Tag) and child.name in _INLINE_MARKS and not _has_block_child(child)


def _has_block_child(tag: Tag) -> bool:
    # Confluence nests whole paragraphs/lists inside <ins>/<del>/comment markers
    return any(
        isinstance(c, Tag) and (c.name not in _INLINE_MARKS or _has_block_child(c))
        for c in tag.children
    )


def _parse_blocks(el: Tag) -> list[Node]:
    """
    Walks the children of `el` and returns block nodes.

    Runs of bare text / inline tags between blocks become a paragraph.
    """
    nodes: list[Node] = []
    pending: list[object] = []

    def _flush_inline() -> None:
        if pending:
            inline = _parse_inline_seq(pending)
            if inline:
                nodes.append(Node(type=NodeType.PARAGRAPH, content=inline))
            pending.clear()

    for child in el.children:
        if _is_inline(child):
            pending.append(child)
            continue
        if not isinstance(child, Tag):
            continue

        _flush_inline()
        name = child.name

        if name in _HEADING_LEVEL:
            nodes.append(Node(
                type=NodeType.HEADING,
                attrs={"level": _HEADING_LEVEL[name]},
                content=_parse_inline(child),
            ))
        elif name == "p":
            inline = _parse_inline(child)
            if inline:
                nodes.append(Node(type=NodeType.PARAGRAPH, content=inline))
        elif name in ("ul", "ol"):
            nodes.append(_parse_list(child))
        elif name == "blockquote":
            nodes.append(Node(type=NodeType.BLOCKQUOTE, content=_parse_blocks(child)))
        elif name == "table":
            nodes.append(_parse_table(child))
        elif name == "hr":
            nodes.append(Node(type=NodeType.HORIZONTAL_RULE))
        elif name == "pre":
            nodes.append(_code_block(child.get_text(), _pre_language(child)))
        elif name == "ac:structured-macro":
            nodes.extend(_parse_macro(child))
        else:
            # unknown wrapper: unwrap
            nodes.extend(_parse_blocks(child))

    _flush_inline()
    return nodes


def _code_block(code: str, language: str) -> Node:
    return Node(
        type=NodeType.CODE_BLOCK,
        attrs={"language": language} if language else {},
        content=[text_node(code)] if code else None,
    )


def _pre_language(pre: Tag) -> str:
    code = pre.find("code")
    classes = (code.get("class") if isinstance(code, Tag) else None) or pre.get("class") or []
    for cls in classes:
        if cls.startswith("language-"):
            return cls[len("language-"):]
    return ""


def _raw_text(tag: Tag) -> str:
    # CDATA sections are NavigableString subclasses; keep them verbatim
    return "".join(str(c) for c in tag.contents if isinstance(c, NavigableString))


def _parse_macro(macro: Tag) -> list[Node]:
    name = str(macro.get("ac:name", "")).lower()

    if name in _CODE_MACROS:
        lang_tag = macro.find("ac:parameter", attrs={"ac:name": "language"})
        body = macro.find("ac:plain-text-body")
        language = lang_tag.get_text(strip=True) if isinstance(lang_tag, Tag) else ""
        code = _raw_text(body) if isinstance(body, Tag) else ""
        return [_code_block(code, language)]

    # note, info, warning, tip, expand, ...
    rich = macro.find("ac:rich-text-body")
    if isinstance(rich, Tag):
        return _parse_blocks(rich)
    plain = macro.find("ac:plain-text-body")
    if isinstance(plain, Tag):
        text = _raw_text(plain).strip()
        if text:
            return [Node(type=NodeType.PARAGRAPH, content=[text_node(text)])]
    return []


def _parse_list(tag: Tag) -> Node:
    items: list[Node] = []
    for li in tag.find_all("li", recursive=False):
        content: list[Node] = []
        pending: list[object] = []

        def _flush() -> None:
            if pending:
                inline = _parse_inline_seq(pending)
                if inline:
                    content.append(Node(type=NodeType.PARAGRAPH, content=inline))
                pending.clear()

        for child in li.children:
            if isinstance(child, Tag) and child.name in ("ul", "ol"):
                _flush()
                content.append(_parse_list(child))
            elif isinstance(child, Tag) and child.name == "p":
                _flush()
                inline = _parse_inline(child)
                if inline:
                    content.append(Node(type=NodeType.PARAGRAPH, content=inline))
            else:
                pending.append(child)
        _flush()

        if not content or content[0].kind is not NodeType.PARAGRAPH:
            content.insert(0, Node(type=NodeType.PARAGRAPH, content=[]))
        items.append(Node(type=NodeType.LIST_ITEM, content=content))

    list_type = NodeType.ORDERED_LIST if tag.name == "ol" else NodeType.BULLET_LIST
    return Node(type=list_type, content=items)


def _parse_table(table: Tag) -> Node:
    rows: list[Node] = []
    for tr in table.find_all("tr"):
        if tr.find_parent("table") is not table:
            continue  # row of a nested table
        cells = [
            Node(
                type=NodeType.TABLE_HEADER if cell.name == "th" else NodeType.TABLE_CELL,
                content=[Node(type=NodeType.PARAGRAPH, content=_parse_inline(cell))],
            )
            for cell in tr.find_all(["th", "td"], recursive=False)
        ]
        if cells:
            rows.append(Node(type=NodeType.TABLE_ROW, content=cells))
    return Node(type=NodeType.TABLE, content=rows)


# ---------------------------------------------------------------------------
# Inline
# ---------------------------------------------------------------------------

def _parse_inline(el: Tag) -> list[Node]:
    return _parse_inline_seq(list(el.children))


def _parse_inline_seq(children: list[object]) -> list[Node]:
    runs: list[Node] = []
    for child in children:
        _collect_inline(child, [], runs)
    return _trim_runs(runs)


def _collect_inline(el: object, marks: list[Mark], out: list[Node]) -> None:
    if isinstance(el, Comment):
        return
    if isinstance(el, NavigableString):
        text = _WS_RE.sub(" ", str(el))
        if text:
            out.append(text_node(text, *marks))
        return
    if not isinstance(el, Tag):
        return

    if el.name == "br":
        out.append(text_node(" ", *marks))
        return

    mark_type = _INLINE_MARKS.get(el.name)
    inner = marks
    if mark_type is MarkType.LINK:
        href = el.get("href")
        if href:
            inner = marks + [Mark(MarkType.LINK, {"href": str(href)})]
    elif mark_type is not None:
        inner = marks + [Mark(mark_type)]

    for child in el.children:
        _collect_inline(child, inner, out)


def _trim_runs(runs: list[Node]) -> list[Node]:
    """Strips the paragraph edges and merges adjacent runs with equal marks."""
    merged: list[Node] = []
    for run in runs:
        prev = merged[-1] if merged else None
        if prev is not None and prev.marks == run.marks:
            prev.text = _WS_RE.sub(" ", (prev.text or "") + (run.text or ""))
        else:
            merged.append(run)

    while merged and not (merged[0].text or "").strip():
        merged.pop(0)
    while merged and not (merged[-1].text or "").strip():
        merged.pop()
    if merged:
        merged[0].text = (merged[0].text or "").lstrip()
        merged[-1].text = (merged[-1].text or "").rstrip()
    return merged
