"""
pdf/lines.py — rebuilding text lines from positioned fragments.

Fragments arrive in extraction (reading) order. Consecutive fragments stay on
one line while they are on the same page and their vertical positions differ
by at most `threshold_ratio × font_size` of the incoming fragment; within a
line texts are concatenated without a separator (PDF spans carry their own
spaces).

Public API:
  reconstruct_lines(fragments, threshold_ratio) -> list[str]
  join_lines(lines) -> str
"""

from __future__ import annotations

from typing import Iterable

from data_model.documents import TextFragment

# Tuned on exported playbooks: tolerates baseline jitter inside a line,
# splits on real line and paragraph breaks.
LINE_THRESHOLD_RATIO = 0.5


def reconstruct_lines(
    fragments: Iterable[TextFragment],
    threshold_ratio: float = LINE_THRESHOLD_RATIO,
) -> list[str]:
    lines: list[str] = []
    buffer: list[str] = []
    last_y: float | None = None
    last_page: int | None = None

    def _flush() -> None:
        line = "".join(buffer).strip()
        if line:
            lines.append(line)
        buffer.clear()

    for frag in fragments:
        if last_y is not None:
            delta = abs(frag.y - last_y)
            if frag.page != last_page or delta > threshold_ratio * frag.font_size:
                _flush()
        buffer.append(frag.text)
        last_y = frag.y
        last_page = frag.page

    _flush()
    return lines


def join_lines(lines: list[str]) -> str:
    return "\n".join(lines)
