"""Command: pbk diff — word-level diff of two Markdown versions of a section."""

from __future__ import annotations

import argparse
import sys

from rich.console import Console
from rich.text import Text

from interchange.diff import contains_table, diff_words, highlighted_after, highlighted_before, inline_diff
from pbk.commands._io import add_out_argument, read_text, write_output

console = Console(highlight=False)

_RENDERERS = {
    "inline": inline_diff,
    "before": highlighted_before,
    "after":  highlighted_after,
}


def _print_colored(before: str, after: str) -> None:
    text = Text()
    for change in diff_words(before, after):
        if change.removed:
            text.append(change.value, style="red strike")
        elif change.added:
            text.append(change.value, style="bold green")
        else:
            text.append(change.value)
    console.print(text)


def run(args: argparse.Namespace) -> None:
    before = read_text(args.before)
    after  = read_text(args.after)

    if before == after:
        print("No changes.", file=sys.stderr)

    if args.color:
        _print_colored(before, after)
        return

    # inline markers inside a pipe row break the table; the two panels don't
    if args.mode == "inline" and (contains_table(before) or contains_table(after)):
        print(
            "[warn] a table is present; consider --mode before / --mode after.",
            file=sys.stderr,
        )

    write_output(_RENDERERS[args.mode](before, after), args.out)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "diff",
        help="Word-level diff of two Markdown files (<del>/<ins> markup).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Modes:
  inline   one text, removals in <del>, additions in <ins>
  before   the old version with removals marked
  after    the new version with additions marked

Examples:
  pbk diff old.md new.md
  pbk diff old.md new.md --mode after -o review.md
  pbk diff old.md new.md --color
        """,
    )
    p.add_argument("before", metavar="BEFORE", help="Old version (file or -).")
    p.add_argument("after",  metavar="AFTER",  help="New version (file or -).")
    p.add_argument(
        "--mode",
        choices=list(_RENDERERS),
        default="inline",
        help="Output variant (default: inline).",
    )
    p.add_argument(
        "--color",
        action="store_true",
        help="Print a colored diff in the terminal instead of markup.",
    )
    add_out_argument(p)
    p.set_defaults(func=run)
