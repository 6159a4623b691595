"""Command: pbk to-markdown — document tree (JSON), storage XHTML or Notion blocks → Markdown."""

from __future__ import annotations

import argparse
import sys

from interchange.serializer import tree_to_markdown
from pbk.commands._io import add_out_argument, read_json, read_text, write_output

_STORAGE_SUFFIXES = (".html", ".htm", ".xhtml", ".xml")


def _detect_format(path: str) -> str:
    return "storage" if path.lower().endswith(_STORAGE_SUFFIXES) else "tree"


def _notion_blocks(data: object) -> list | None:
    """A block list, or a "list block children" response with "results"."""
    if isinstance(data, dict):
        data = data.get("results")
    return data if isinstance(data, list) else None


def run(args: argparse.Namespace) -> None:
    fmt = args.input_format or _detect_format(args.file)

    if fmt == "storage":
        from html_parser.parser import storage_to_tree
        tree = storage_to_tree(read_text(args.file))
    elif fmt == "notion":
        from html_parser.notion import notion_to_tree
        blocks = _notion_blocks(read_json(args.file))
        if blocks is None:
            print("Expected a JSON list of Notion blocks or an object with \"results\".", file=sys.stderr)
            raise SystemExit(1)
        tree = notion_to_tree(blocks)
    else:
        data = read_json(args.file)
        if not isinstance(data, dict):
            print("Expected a JSON object with a document tree.", file=sys.stderr)
            raise SystemExit(1)
        tree = data

    write_output(tree_to_markdown(tree), args.out)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "to-markdown",
        help="Serializes a document tree (JSON), Confluence storage XHTML or Notion blocks to Markdown.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Input format is detected from the suffix: .html/.htm/.xhtml/.xml are read as
Confluence storage format, everything else as a JSON document tree
({"type": "doc", "content": [...]}). Notion block JSON needs --from notion.

Examples:
  pbk to-markdown tree.json
  pbk to-markdown page.xhtml -o page.md
  pbk to-markdown blocks.json --from notion
  cat tree.json | pbk to-markdown - --from tree
        """,
    )
    p.add_argument("file", metavar="FILE", help="Input file or - for stdin.")
    p.add_argument(
        "--from",
        dest="input_format",
        choices=["tree", "storage", "notion"],
        default=None,
        help="Input format (default: detected from the suffix).",
    )
    add_out_argument(p)
    p.set_defaults(func=run)
