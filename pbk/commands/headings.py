"""Command: pbk headings — anchor menu (h2–h4 with slugs) of a Markdown file."""

from __future__ import annotations

import argparse
import json
from dataclasses import asdict

from rich.console import Console
from rich.table import Table
from rich import box

from data_model.documents import Heading
from interchange.headings import extract_headings, heading_anchors
from pbk.commands._io import read_json, read_text

console = Console()

LEVEL_STYLE: dict[int, str] = {
    1: "bold white",
    2: "bold cyan",
    3: "cyan",
    4: "dim cyan",
}


def _load_headings(path: str) -> list[Heading]:
    # a document tree (.json) gives headings of every level
    if path.lower().endswith(".json"):
        return heading_anchors(read_json(path))
    return extract_headings(read_text(path))


def _show_table(headings: list[Heading]) -> None:
    if not headings:
        console.print("[yellow]No headings.[/yellow]")
        return

    table = Table(box=box.SIMPLE_HEAD, show_header=True, header_style="bold white")
    table.add_column("LVL",  justify="right", no_wrap=True, style="dim")
    table.add_column("SLUG", no_wrap=True, style="green")
    table.add_column("TEXT", no_wrap=False, max_width=70)

    for h in headings:
        style = LEVEL_STYLE.get(h.level, "")
        table.add_row(str(h.level), "#" + h.slug, "  " * max(h.level - 2, 0) + h.text, style=style)

    console.print(table)


def run(args: argparse.Namespace) -> None:
    headings = _load_headings(args.file)
    if args.json:
        print(json.dumps([asdict(h) for h in headings], ensure_ascii=False, indent=2))
    else:
        _show_table(headings)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "headings",
        help="Lists the navigable headings of a Markdown file with their anchor slugs.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Lists "##", "###" and "####" headings (bold and code markers removed) with
unique anchor slugs; repeated titles get -2, -3, ... suffixes.

A .json document tree lists headings of every level instead.

Examples:
  pbk headings section.md
  pbk headings section.md --json
  pbk headings tree.json
        """,
    )
    p.add_argument("file", metavar="FILE", help="Markdown file, document tree (.json) or - for stdin.")
    p.add_argument("--json", action="store_true", help="Print JSON instead of a table.")
    p.set_defaults(func=run)
