"""Command: pbk to-tree — Markdown → document tree (JSON), storage XHTML or Notion blocks."""

from __future__ import annotations

import argparse
import json

from interchange.headings import assign_heading_ids
from interchange.parser import markdown_to_tree
from pbk.commands._io import add_out_argument, read_text, write_output


def run(args: argparse.Namespace) -> None:
    tree = markdown_to_tree(read_text(args.file))
    if args.heading_ids:
        tree = assign_heading_ids(tree)

    if args.format == "storage":
        from html_parser.render import tree_to_storage
        write_output(tree_to_storage(tree), args.out)
    elif args.format == "notion":
        from html_parser.notion import tree_to_notion
        write_output(json.dumps(tree_to_notion(tree), ensure_ascii=False, indent=2), args.out)
    else:
        write_output(json.dumps(tree.to_dict(), ensure_ascii=False, indent=2), args.out)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "to-tree",
        help="Parses Markdown into a document tree (JSON), Confluence storage XHTML or Notion blocks.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Parses headings, paragraphs, lists (nested), fenced code, block quotes, pipe
tables, rules and inline bold/italic/code/links.

Examples:
  pbk to-tree section.md
  pbk to-tree section.md --heading-ids -o tree.json
  pbk to-tree section.md --format storage
  pbk to-tree section.md --format notion -o blocks.json
        """,
    )
    p.add_argument("file", metavar="FILE.md", help="Markdown file or - for stdin.")
    p.add_argument(
        "--format",
        choices=["json", "storage", "notion"],
        default="json",
        help="Output format (default: json).",
    )
    p.add_argument(
        "--heading-ids",
        action="store_true",
        help="Store each heading's anchor slug in attrs.id.",
    )
    add_out_argument(p)
    p.set_defaults(func=run)
