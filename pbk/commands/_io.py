"""Shared file helpers of the converter commands."""

from __future__ import annotations

import json
import pathlib
import sys
from typing import Any


def read_text(path_str: str) -> str:
    """Reads a UTF-8 file ("-" = stdin); a missing file ends the command."""
    if path_str == "-":
        return sys.stdin.read()
    path = pathlib.Path(path_str)
    if not path.exists():
        print(f"File does not exist: {path}", file=sys.stderr)
        raise SystemExit(1)
    return path.read_text(encoding="utf-8")


def read_json(path_str: str) -> Any:
    try:
        return json.loads(read_text(path_str))
    except json.JSONDecodeError as e:
        print(f"Invalid JSON in {path_str}: {e}", file=sys.stderr)
        raise SystemExit(1)


def write_output(text: str, out: str | None) -> None:
    """Writes to the --out file, or to stdout."""
    if out:
        out_path = pathlib.Path(out)
        out_path.write_text(text, encoding="utf-8")
        print(f"Written to: {out_path}", file=sys.stderr)
    else:
        sys.stdout.write(text if text.endswith("\n") else text + "\n")


def add_out_argument(p: Any) -> None:
    p.add_argument(
        "--out", "-o",
        metavar="FILE",
        help="Write the result to a file (default: stdout).",
    )
