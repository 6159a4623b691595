"""Tests for the Confluence storage format / HTML converters."""

from __future__ import annotations

import pytest
import requests

from data_model.documents import MarkType, NodeType
from html_parser import parser as html_parser
from html_parser.parser import fetch_page, parse_html_url, storage_to_tree
from html_parser.render import tree_to_storage
from interchange.parser import markdown_to_tree
from interchange.serializer import tree_to_markdown

STORAGE_PAGE = """\
<h1>Discovery</h1>
<p>Ask <strong>open</strong> questions &amp; listen.</p>
<ul><li>First<ul><li>Nested</li></ul></li><li><p>Second</p></li></ul>
<ac:structured-macro ac:name="code"><ac:parameter ac:name="language">python</ac:parameter><ac:plain-text-body><![CDATA[if a < b:
    print("x")]]></ac:plain-text-body></ac:structured-macro>
<ac:structured-macro ac:name="info"><ac:rich-text-body><p>Tip text</p></ac:rich-text-body></ac:structured-macro>
<table><tbody><tr><th>Stage</th><th>Goal</th></tr><tr><td>Intro</td><td>Rapport</td></tr></tbody></table>
<script>track()</script>
"""


class FakeResponse:
    def __init__(self, text: str, status: int = 200) -> None:
        self.text = text
        self.status_code = status
        self.encoding = "ISO-8859-1"
        self.apparent_encoding = "utf-8"

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


def test_storage_page_to_markdown() -> None:
    assert tree_to_markdown(storage_to_tree(STORAGE_PAGE)) == (
        "# Discovery\n"
        "\n"
        "Ask **open** questions & listen.\n"
        "\n"
        "- First\n"
        "  - Nested\n"
        "- Second\n"
        "\n"
        "```python\n"
        "if a < b:\n"
        '    print("x")\n'
        "```\n"
        "\n"
        "Tip text\n"
        "\n"
        "| Stage | Goal |\n"
        "| --- | --- |\n"
        "| Intro | Rapport |\n"
    )


def test_inline_marks_and_whitespace() -> None:
    tree = storage_to_tree('<p>  <em>Read</em>\n the <a href="https://wiki.test/x">guide</a><br/>now  </p>')
    runs = tree.children[0].children
    assert [r.text for r in runs] == ["Read", " the ", "guide", " now"]
    assert runs[0].marks[0].kind is MarkType.ITALIC
    assert runs[2].marks[0].attrs == {"href": "https://wiki.test/x"}


def test_transparent_wrappers_are_unwrapped() -> None:
    html = (
        '<div class="page"><ac:inline-comment-marker ac:ref="1">'
        "<p>Kept <ins>new</ins> text</p></ac:inline-comment-marker>"
        "<noscript>no</noscript><style>p{}</style></div>"
    )
    [para] = storage_to_tree(html).children
    assert para.kind is NodeType.PARAGRAPH
    assert [r.text for r in para.children] == ["Kept new text"]


def test_pre_block_language_from_class() -> None:
    [code] = storage_to_tree('<pre><code class="language-sql">SELECT 1;</code></pre>').children
    assert code.kind is NodeType.CODE_BLOCK
    assert code.attrs == {"language": "sql"}
    assert code.children[0].text == "SELECT 1;"


def test_empty_page_gives_one_empty_paragraph() -> None:
    assert storage_to_tree("<script>x()</script>").to_dict() == {
        "type": "doc",
        "content": [{"type": "paragraph"}],
    }


def test_render_storage() -> None:
    tree = markdown_to_tree("## Hi & bye\n\n- a\n- **b**\n\n| K |\n| --- |\n| v |")
    assert tree_to_storage(tree) == (
        "<h2>Hi &amp; bye</h2>\n"
        "<ul>\n<li>a</li>\n<li><strong>b</strong></li>\n</ul>\n"
        "<table><tbody>\n<tr><th>K</th></tr>\n<tr><td>v</td></tr>\n</tbody></table>\n"
    )


def test_code_macro_survives_cdata_terminator() -> None:
    tree = markdown_to_tree("```sh\necho ]]>\n```")
    storage = tree_to_storage(tree)
    assert "<![CDATA[echo ]]]]><![CDATA[>]]>" in storage

    [code] = storage_to_tree(storage).children
    assert code.attrs == {"language": "sh"}
    assert code.children[0].text == "echo ]]>"


def test_storage_round_trip_keeps_markdown() -> None:
    markdown = "# Title\n\nSome **bold** and `code`.\n\n1. one\n2. two\n\n> quote\n"
    assert tree_to_markdown(storage_to_tree(tree_to_storage(markdown_to_tree(markdown)))) == markdown


def test_fetch_page(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict] = []

    def fake_get(url: str, **kwargs) -> FakeResponse:
        calls.append({"url": url, **kwargs})
        return FakeResponse("<p>Zażółć</p>")

    monkeypatch.setattr(html_parser.requests, "get", fake_get)

    assert fetch_page("https://wiki.test/page") == "<p>Zażółć</p>"
    assert calls[0]["timeout"] == 30
    assert "Mozilla" in calls[0]["headers"]["User-Agent"]

    tree = parse_html_url("https://wiki.test/page")
    assert tree.children[0].children[0].text == "Zażółć"


def test_fetch_page_http_error_propagates(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(html_parser.requests, "get", lambda url, **kw: FakeResponse("", status=404))
    with pytest.raises(requests.HTTPError):
        fetch_page("https://wiki.test/missing")


def test_non_string_code_language_is_rendered() -> None:
    tree = {"type": "doc", "content": [
        {"type": "codeBlock", "attrs": {"language": 3}, "content": [{"type": "text", "text": "x"}]},
    ]}
    assert '<ac:parameter ac:name="language">3</ac:parameter>' in tree_to_storage(tree)
