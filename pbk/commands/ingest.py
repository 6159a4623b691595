"""Command: pbk ingest — split a playbook file (PDF / Markdown / text) into sections."""

from __future__ import annotations

import argparse
import datetime
import json
from dataclasses import asdict
from pathlib import Path

from rich.console import Console
from rich.table import Table
from rich import box

from data_model.documents import Section
from interchange.sections import DEFAULT_FALLBACK_TITLE, has_top_level_heading, split_into_sections
from pdf.lines import LINE_THRESHOLD_RATIO

console = Console()

SUPPORTED_SUFFIXES = (".pdf", ".md", ".markdown", ".txt")


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def _read_source(path: Path, ratio: float) -> str:
    if path.suffix.lower() == ".pdf":
        from pdf.parser import pdf_to_text
        return pdf_to_text(path, threshold_ratio=ratio)
    return path.read_text(encoding="utf-8")


def _structure(text: str, model: str | None) -> str:
    """Asks Gemini to add headings to unstructured text."""
    from llm_query.gemini import DEFAULT_MODEL, call_gemini
    from llm_query.prompt import structure_markdown

    model = model or DEFAULT_MODEL
    console.print(f"Structuring with Gemini ([cyan]{model}[/cyan]) …")
    return structure_markdown(text, lambda prompt: call_gemini(prompt, model=model))


def prepare_markdown(text: str, structure: bool, model: str | None = None) -> str:
    if has_top_level_heading(text):
        return text
    if not structure:
        console.print(
            "[yellow]No '# ' headings found; the whole text becomes one section "
            "(use --structure to let Gemini add headings).[/yellow]"
        )
        return text

    try:
        return _structure(text, model)
    except ValueError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise SystemExit(1)
    except Exception as e:
        console.print(f"[red]Gemini API error:[/red] {e}")
        raise SystemExit(1)


# ---------------------------------------------------------------------------
# JSON output
# ---------------------------------------------------------------------------

def sections_to_records(sections: list[Section]) -> list[dict]:
    return [
        {"sort_order": i, **asdict(s)}
        for i, s in enumerate(sections, start=1)
    ]


def _write_json(sections: list[Section], json_path: Path) -> None:
    data = sections_to_records(sections)
    json_path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
    console.print(f"[green]JSON:[/green] {json_path}  ({len(sections)} sections)")


# ---------------------------------------------------------------------------
# Database output
# ---------------------------------------------------------------------------

_DELETE_SQL = "DELETE FROM playbook_section WHERE doc_id = %s"

_INSERT_SQL = """
    INSERT INTO playbook_section
        (doc_id, title, content, sort_order, last_updated)
    VALUES %s
"""


def _write_db(sections: list[Section], doc_id: str) -> None:
    from pbk._db import get_connection
    import psycopg2.extras

    if not sections:
        console.print("[yellow]No sections to store in the database.[/yellow]")
        return

    today = datetime.date.today()
    rows = [
        (doc_id, s.title, s.content, i, today)
        for i, s in enumerate(sections, start=1)
    ]

    try:
        conn = get_connection()
    except Exception as e:
        console.print(f"[red]Database connection error:[/red] {e}")
        raise SystemExit(1)

    # a re-import replaces the document's sections as a whole
    try:
        with conn, conn.cursor() as cur:
            cur.execute(_DELETE_SQL, (doc_id,))
            psycopg2.extras.execute_values(cur, _INSERT_SQL, rows)
    finally:
        conn.close()

    console.print(f"[green]DB:[/green] stored {len(sections)} sections for doc_id='{doc_id}'")


# ---------------------------------------------------------------------------
# Terminal view
# ---------------------------------------------------------------------------

def _show_table(sections: list[Section]) -> None:
    if not sections:
        console.print("[yellow]No sections.[/yellow]")
        return

    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"],
        expand=False,
    )
    table.add_column("#",     justify="right", no_wrap=True, style="dim")
    table.add_column("TITLE", no_wrap=False, max_width=50, style="bold cyan")
    table.add_column("LEN",   justify="right", no_wrap=True)
    table.add_column("START", no_wrap=False, max_width=60, style="dim")

    for i, section in enumerate(sections, start=1):
        first_line = section.content.split("\n", 1)[0]
        table.add_row(str(i), section.title[:80], str(len(section.content)), first_line[:60])

    console.print()
    console.print(table)
    console.print(f"  [dim]{len(sections)} sections[/dim]\n")


def emit(sections: list[Section], doc_id: str, out: str, json_path: Path, show: bool) -> None:
    """Shared output stage of ingest and ingest-url."""
    if out in ("json", "both"):
        _write_json(sections, json_path)

    if out in ("db", "both"):
        _write_db(sections, doc_id)

    if show:
        _show_table(sections)


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------

def run(args: argparse.Namespace) -> None:
    path = Path(args.file)
    if not path.exists():
        console.print(f"[red]File does not exist:[/red] {path}")
        raise SystemExit(1)
    if path.suffix.lower() not in SUPPORTED_SUFFIXES:
        console.print(
            f"[red]Expected one of {', '.join(SUPPORTED_SUFFIXES)}, got:[/red] {path.suffix or '(none)'}"
        )
        raise SystemExit(1)

    doc_id: str = args.doc_id or path.stem
    console.print(f"Reading [bold]{path}[/bold] (doc_id=[cyan]{doc_id}[/cyan]) …")

    try:
        text = _read_source(path, args.ratio)
    except ImportError as e:
        console.print(f"[red]Import error (PyMuPDF missing?):[/red] {e}")
        raise SystemExit(1)
    except Exception as e:
        console.print(f"[red]Read error:[/red] {e}")
        raise SystemExit(1)

    markdown = prepare_markdown(text, args.structure, args.model)
    sections = split_into_sections(markdown, args.fallback_title)
    console.print(f"Found [bold]{len(sections)}[/bold] sections.")

    emit(
        sections,
        doc_id,
        args.out,
        path.with_suffix(".sections.json"),
        args.show,
    )


def add_common_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--doc-id",
        metavar="ID",
        default=None,
        help="Document id (default: derived from the input).",
    )
    p.add_argument(
        "--out",
        choices=["json", "db", "both"],
        default="both",
        help="Where to write: json, db or both (default: both).",
    )
    p.add_argument(
        "--fallback-title",
        metavar="TITLE",
        default=DEFAULT_FALLBACK_TITLE,
        help=f"Title of the single section of a heading-less text (default: {DEFAULT_FALLBACK_TITLE}).",
    )
    p.add_argument(
        "--show",
        action="store_true",
        help="Print a table of the sections after writing.",
    )


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "ingest",
        help="Splits a playbook file into sections and writes them to JSON / the database.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Reads a playbook (.pdf, .md, .txt), splits it on "# " headings (falling back
to "## ") and writes the sections.

PDF text is rebuilt line by line from the positioned text fragments.
Text without any "# " heading can be structured by Gemini (--structure).

Examples:
  pbk ingest playbook.md --show
  pbk ingest playbook.pdf --structure --out json
  pbk ingest notes.txt --doc-id sales_2026 --out db --show
        """,
    )
    p.add_argument(
        "file",
        metavar="FILE",
        help="Path to a .pdf, .md or .txt file.",
    )
    add_common_arguments(p)
    p.add_argument(
        "--structure",
        action="store_true",
        help="Let Gemini add headings when the text has no '# ' heading.",
    )
    p.add_argument(
        "--model",
        default=None,
        help="Gemini model id (default: PBK_GEMINI_MODEL or gemini-2.5-flash).",
    )
    p.add_argument(
        "--ratio",
        type=float,
        default=LINE_THRESHOLD_RATIO,
        help=f"PDF line threshold as a fraction of the font size (default: {LINE_THRESHOLD_RATIO}).",
    )
    p.set_defaults(func=run)
