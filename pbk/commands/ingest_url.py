"""Command: pbk ingest-url — fetch a wiki page and split it into sections."""

from __future__ import annotations

import argparse
import re
import unicodedata
from pathlib import Path
from urllib.parse import urlparse

from rich.console import Console

from interchange.sections import split_into_sections
from interchange.serializer import tree_to_markdown
from pbk.commands.ingest import add_common_arguments, emit

console = Console()


def _doc_id_from_url(url: str) -> str:
    """Default doc_id from a URL (host + path as an ASCII slug)."""
    parsed = urlparse(url)
    host = parsed.netloc.replace(".", "-").replace(":", "-")
    path = parsed.path.strip("/").replace("/", "-")
    raw = f"{host}-{path}" if path else host
    raw = unicodedata.normalize("NFKD", raw).encode("ascii", "ignore").decode("ascii")
    raw = re.sub(r"[^\w-]", "-", raw).strip("-")
    raw = re.sub(r"-{2,}", "-", raw)
    return raw[:80] or "url-doc"


def run(args: argparse.Namespace) -> None:
    url: str = args.url
    doc_id: str = args.doc_id or _doc_id_from_url(url)

    console.print(f"Fetching [bold]{url}[/bold] (doc_id=[cyan]{doc_id}[/cyan]) …")

    try:
        from html_parser.parser import parse_html_url
        tree = parse_html_url(url)
    except ImportError as e:
        console.print(f"[red]Import error (requests or beautifulsoup4 missing?):[/red] {e}")
        raise SystemExit(1)
    except Exception as e:
        console.print(f"[red]Fetch/parse error:[/red] {e}")
        raise SystemExit(1)

    markdown = tree_to_markdown(tree)
    sections = split_into_sections(markdown, args.fallback_title)
    console.print(f"Found [bold]{len(sections)}[/bold] sections.")

    if args.save_markdown:
        md_path = Path(args.save_markdown)
        md_path.write_text(markdown, encoding="utf-8")
        console.print(f"[green]Markdown:[/green] {md_path}")

    safe_name = re.sub(r"[^\w-]", "-", doc_id)
    emit(sections, doc_id, args.out, Path(f"{safe_name}.sections.json"), args.show)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "ingest-url",
        help="Fetches a wiki (Confluence) page and splits it into sections.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Downloads the page at URL, converts its storage-format / HTML body to a
document tree, serializes the tree to Markdown and splits it into sections.

Examples:
  pbk ingest-url https://wiki.example.com/display/SALES/Playbook --show
  pbk ingest-url https://example.com/page --doc-id sales --out db
  pbk ingest-url https://example.com/page --out json --save-markdown page.md
        """,
    )
    p.add_argument(
        "url",
        metavar="URL",
        help="Address of the page to fetch.",
    )
    add_common_arguments(p)
    p.add_argument(
        "--save-markdown",
        metavar="FILE",
        default=None,
        help="Also write the converted Markdown to FILE.",
    )
    p.set_defaults(func=run)
