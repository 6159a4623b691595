"""
pbk — playbook interchange CLI.

Usage:
  pbk <command> [options]

Commands:
  ingest        Splits a PDF / Markdown / text playbook into sections (JSON / DB).
  ingest-url    Fetches a wiki page and splits it into sections (JSON / DB).
  apply-schema  Applies db/schema.sql to the database (idempotent).
  headings      Anchor menu (h2–h4 + slugs) of a Markdown file.
  sections      Preview of the section split of a Markdown file.
  to-markdown   Document tree (JSON) or storage XHTML → Markdown.
  to-tree       Markdown → document tree (JSON) or storage XHTML.
  diff          Word-level diff of two Markdown files.
  lines         Text lines rebuilt from a PDF.
"""

from __future__ import annotations

import argparse
import pathlib
import sys

from dotenv import load_dotenv

# Windows consoles may default to cp1252; headings and slugs are Unicode.
if hasattr(sys.stdout, "reconfigure"):
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")
if hasattr(sys.stderr, "reconfigure"):
    sys.stderr.reconfigure(encoding="utf-8", errors="replace")

from pbk.commands import ingest as cmd_ingest
from pbk.commands import ingest_url as cmd_ingest_url
from pbk.commands import apply_schema as cmd_apply_schema
from pbk.commands import headings as cmd_headings
from pbk.commands import sections as cmd_sections
from pbk.commands import to_markdown as cmd_to_markdown
from pbk.commands import to_tree as cmd_to_tree
from pbk.commands import diff as cmd_diff
from pbk.commands import lines as cmd_lines

__version__ = "0.1.0"

ROOT = pathlib.Path(__file__).resolve().parent.parent


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pbk",
        description="Playbook interchange — PDF / wiki / Markdown / document tree tools.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version=f"pbk {__version__}"
    )

    subparsers = parser.add_subparsers(
        title="commands",
        metavar="<command>",
        dest="command",
    )
    subparsers.required = True

    cmd_ingest.add_parser(subparsers)
    cmd_ingest_url.add_parser(subparsers)
    cmd_apply_schema.add_parser(subparsers)
    cmd_headings.add_parser(subparsers)
    cmd_sections.add_parser(subparsers)
    cmd_to_markdown.add_parser(subparsers)
    cmd_to_tree.add_parser(subparsers)
    cmd_diff.add_parser(subparsers)
    cmd_lines.add_parser(subparsers)

    return parser


def main(argv: list[str] | None = None) -> None:
    load_dotenv(ROOT / ".env")
    parser = build_parser()
    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
