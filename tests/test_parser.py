"""Tests for Markdown → document tree parsing."""

from __future__ import annotations

import pytest

from data_model.documents import Mark, MarkType, Node, NodeType, doc, text_node
from interchange.parser import markdown_to_tree, parse_inline
from interchange.serializer import tree_to_markdown

CANONICAL = """\
# Title

Intro with **bold**, _italic_, `code` and [a link](https://example.com).

## Steps

1. First
2. Second

- Item
  - Nested
- Other

> Quoted text

| A | B |
| --- | --- |
| 1 | 2 |

---

```python
print("hi")
```
"""


def test_empty_document_has_one_paragraph() -> None:
    assert markdown_to_tree("").to_dict() == {"type": "doc", "content": [{"type": "paragraph"}]}


def test_heading_with_inline_marks() -> None:
    [heading] = markdown_to_tree("## Hello **World**").children
    assert heading.kind is NodeType.HEADING
    assert heading.attrs == {"level": 2}
    assert [(n.text, [m.kind for m in n.marks]) for n in heading.children] == [
        ("Hello ", []),
        ("World", [MarkType.BOLD]),
    ]


def test_paragraph_lines_are_joined() -> None:
    [para] = markdown_to_tree("first line\nsecond line\n\nnext").children[:1]
    assert para.children[0].text == "first line second line"


def test_nested_list_structure() -> None:
    [bullets] = markdown_to_tree("- one\n  - a\n- two").children
    assert bullets.kind is NodeType.BULLET_LIST
    first, second = bullets.children
    assert [c.kind for c in first.children] == [NodeType.PARAGRAPH, NodeType.BULLET_LIST]
    assert second.children[0].children[0].text == "two"


def test_table_first_row_is_header() -> None:
    [table] = markdown_to_tree("| A | B |\n| --- | --- |\n| 1 | x\\|y |").children
    header, body = table.children
    assert {c.kind for c in header.children} == {NodeType.TABLE_HEADER}
    assert {c.kind for c in body.children} == {NodeType.TABLE_CELL}
    assert body.children[1].children[0].children[0].text == "x|y"


def test_code_block_keeps_body_verbatim() -> None:
    [code] = markdown_to_tree("```js\n  let x = 1;\n\n# not a heading\n```").children
    assert code.attrs == {"language": "js"}
    assert code.children[0].text == "  let x = 1;\n\n# not a heading"


def test_blockquote_is_parsed_recursively() -> None:
    [quote] = markdown_to_tree("> # Inside\n> text").children
    assert quote.kind is NodeType.BLOCKQUOTE
    assert [c.kind for c in quote.children] == [NodeType.HEADING, NodeType.PARAGRAPH]


def test_inline_link_and_italic() -> None:
    nodes = parse_inline("see [docs](https://x.test) or _this_ file_name")
    assert [n.text for n in nodes] == ["see ", "docs", " or ", "this", " file_name"]
    assert nodes[1].marks[0].attrs == {"href": "https://x.test"}
    assert nodes[3].marks[0].kind is MarkType.ITALIC


def test_empty_inline_becomes_space() -> None:
    assert [n.text for n in parse_inline("")] == [" "]


def test_canonical_markdown_round_trips() -> None:
    assert tree_to_markdown(markdown_to_tree(CANONICAL)) == CANONICAL


@pytest.mark.parametrize(
    "marks",
    [
        [Mark(MarkType.BOLD), Mark(MarkType.LINK, {"href": "https://e.com"})],
        [Mark(MarkType.BOLD), Mark(MarkType.ITALIC)],
        [Mark(MarkType.CODE), Mark(MarkType.BOLD)],
    ],
    ids=["bold-in-link", "bold-in-italic", "code-in-bold"],
)
def test_composed_marks_round_trip(marks: list[Mark]) -> None:
    tree = doc(Node(type=NodeType.PARAGRAPH, content=[text_node("see "), text_node("x", *marks)]))
    assert markdown_to_tree(tree_to_markdown(tree)).to_dict() == tree.to_dict()


def test_link_text_keeps_bold_mark() -> None:
    [para] = markdown_to_tree("[**x**](https://e.com)").children
    [run] = para.children
    assert run.text == "x"
    assert [m.kind for m in run.marks] == [MarkType.BOLD, MarkType.LINK]


def test_raw_html_stays_text() -> None:
    [para] = markdown_to_tree("a <b>x</b>").children
    assert [n.text for n in para.children] == ["a <b>x</b>"]


def test_ordered_list_and_fence_without_language() -> None:
    ordered, code = markdown_to_tree("1. one\n2. two\n\n```\nplain\n```").children
    assert ordered.kind is NodeType.ORDERED_LIST
    assert len(ordered.children) == 2
    assert code.attrs == {}
    assert code.children[0].text == "plain"
