"""Command: pbk apply-schema — runs db/schema.sql against the database."""

from __future__ import annotations

import argparse
import pathlib
import re

from rich.console import Console

from pbk._db import get_connection

console = Console()

ROOT        = pathlib.Path(__file__).resolve().parent.parent.parent
SCHEMA_PATH = ROOT / "db" / "schema.sql"

_COMMENT_RE = re.compile(r"--[^\n]*")


def split_statements(sql: str) -> list[str]:
    """Statements of a plain DDL script: "--" comments dropped, split on ";"."""
    body = _COMMENT_RE.sub("", sql)
    return [stmt.strip() for stmt in body.split(";") if stmt.strip()]


def run(args: argparse.Namespace) -> None:
    schema_path = pathlib.Path(args.schema) if args.schema else SCHEMA_PATH
    if not schema_path.exists():
        console.print(f"[red]Schema file not found:[/red] {schema_path}")
        raise SystemExit(1)

    sql = schema_path.read_text(encoding="utf-8")

    try:
        conn = get_connection()
    except Exception as e:
        console.print(f"[red]Database connection error:[/red] {e}")
        raise SystemExit(1)

    # one statement at a time, each committed on its own
    conn.autocommit = True
    stmts = split_statements(sql)
    try:
        with conn.cursor() as cur:
            for stmt in stmts:
                cur.execute(stmt)
    except Exception as e:
        console.print(f"[red]Schema error:[/red] {e}")
        raise SystemExit(1)
    finally:
        conn.close()

    console.print(f"[green]Schema applied:[/green] {schema_path} ({len(stmts)} statements)")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "apply-schema",
        help="Applies db/schema.sql to the database (idempotent).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Executes db/schema.sql against the PostgreSQL database configured through
PGHOST, PGPORT, PGDATABASE, PGUSER and PGPASSWORD.

Every statement uses IF NOT EXISTS, so the command can be run repeatedly.

Example:
  pbk apply-schema
        """,
    )
    p.add_argument(
        "--schema",
        metavar="FILE",
        default=None,
        help="Alternative schema file (default: db/schema.sql).",
    )
    p.set_defaults(func=run)
