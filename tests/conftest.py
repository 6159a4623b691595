"""Shared fixtures: sample playbook files and a fake PostgreSQL connection."""

from __future__ import annotations

from pathlib import Path

import pytest

PLAYBOOK_MD = """\
Internal draft, do not share.

# Discovery Process

## FAQ
Ask about budget.

## FAQ
Ask about timeline.

# Objection Handling

| Objection | Answer |
| --- | --- |
| Too expensive | Show ROI |
"""


class FakeCursor:
    def __init__(self, conn: "FakeConnection") -> None:
        self.conn = conn

    def execute(self, sql: str, params: tuple | None = None) -> None:
        self.conn.executed.append((sql.strip(), params))

    def __enter__(self) -> "FakeCursor":
        return self

    def __exit__(self, *exc) -> None:
        return None


class FakeConnection:
    def __init__(self) -> None:
        self.executed: list[tuple[str, tuple | None]] = []
        self.autocommit = False
        self.committed = False
        self.closed = False

    def cursor(self) -> FakeCursor:
        return FakeCursor(self)

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeConnection":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.committed = exc_type is None


@pytest.fixture
def fake_conn() -> FakeConnection:
    return FakeConnection()


@pytest.fixture
def playbook_md(tmp_path: Path) -> Path:
    path = tmp_path / "playbook.md"
    path.write_text(PLAYBOOK_MD, encoding="utf-8")
    return path
