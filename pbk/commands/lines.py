"""Command: pbk lines — text lines rebuilt from a PDF's positioned fragments."""

from __future__ import annotations

import argparse
import pathlib
import sys

from pdf.lines import LINE_THRESHOLD_RATIO
from pbk.commands._io import add_out_argument, write_output


def run(args: argparse.Namespace) -> None:
    path = pathlib.Path(args.file)
    if not path.exists():
        print(f"File does not exist: {path}", file=sys.stderr)
        raise SystemExit(1)

    try:
        from pdf.parser import pdf_to_lines
        lines = pdf_to_lines(path, threshold_ratio=args.ratio)
    except ImportError as e:
        print(f"Import error (PyMuPDF missing?): {e}", file=sys.stderr)
        raise SystemExit(1)
    except Exception as e:
        print(f"PDF error: {e}", file=sys.stderr)
        raise SystemExit(1)

    print(f"{len(lines)} lines", file=sys.stderr)
    write_output("\n".join(lines), args.out)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "lines",
        help="Rebuilds text lines from a PDF.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Fragments stay on one line while they are on the same page and their
vertical positions differ by at most RATIO × font size.

Examples:
  pbk lines playbook.pdf
  pbk lines playbook.pdf --ratio 0.3 -o playbook.txt
        """,
    )
    p.add_argument("file", metavar="FILE.pdf", help="Path to the PDF.")
    p.add_argument(
        "--ratio",
        type=float,
        default=LINE_THRESHOLD_RATIO,
        help=f"Line threshold as a fraction of the font size (default: {LINE_THRESHOLD_RATIO}).",
    )
    add_out_argument(p)
    p.set_defaults(func=run)
