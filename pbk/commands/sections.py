"""Command: pbk sections — preview how a Markdown file is split into sections."""

from __future__ import annotations

import argparse
import json

from interchange.sections import DEFAULT_FALLBACK_TITLE, split_into_sections
from pbk.commands._io import read_text
from pbk.commands.ingest import _show_table, sections_to_records


def run(args: argparse.Namespace) -> None:
    sections = split_into_sections(read_text(args.file), args.fallback_title)
    if args.json:
        print(json.dumps(sections_to_records(sections), ensure_ascii=False, indent=2))
    else:
        _show_table(sections)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "sections",
        help="Shows the sections a Markdown file splits into (nothing is stored).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Splits on "# " headings, or on "## " when there is no "# " heading.
Text before the first heading is dropped; a text without headings becomes
one section titled --fallback-title.

Examples:
  pbk sections playbook.md
  pbk sections notes.md --fallback-title "Team notes" --json
        """,
    )
    p.add_argument("file", metavar="FILE.md", help="Markdown file or - for stdin.")
    p.add_argument(
        "--fallback-title",
        metavar="TITLE",
        default=DEFAULT_FALLBACK_TITLE,
        help=f"Title used when no heading is found (default: {DEFAULT_FALLBACK_TITLE}).",
    )
    p.add_argument("--json", action="store_true", help="Print JSON instead of a table.")
    p.set_defaults(func=run)
