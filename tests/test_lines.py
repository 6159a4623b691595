"""Tests for rebuilding text lines from PDF fragments."""

from __future__ import annotations

from data_model.documents import TextFragment
from pdf.lines import join_lines, reconstruct_lines


def _frag(text: str, y: float, size: float = 10, page: int = 1) -> TextFragment:
    return TextFragment(text=text, font_size=size, y=y, page=page)


def test_small_vertical_jitter_stays_on_one_line() -> None:
    assert reconstruct_lines([_frag("Hello", 100), _frag(" world", 100.4)]) == ["Hello world"]


def test_larger_gap_starts_new_line() -> None:
    assert reconstruct_lines([_frag("Hello", 100), _frag("world", 106)]) == ["Hello", "world"]


def test_page_change_starts_new_line() -> None:
    fragments = [_frag("end of page", 700, page=1), _frag("start of page", 700, page=2)]
    assert reconstruct_lines(fragments) == ["end of page", "start of page"]


def test_threshold_uses_incoming_font_size() -> None:
    # 8pt apart: beyond half of 10pt, within half of 20pt
    fragments = [_frag("small", 100, size=10), _frag(" BIG", 108, size=20)]
    assert reconstruct_lines(fragments) == ["small BIG"]


def test_ratio_is_configurable() -> None:
    fragments = [_frag("a", 100), _frag("b", 106)]
    assert reconstruct_lines(fragments, threshold_ratio=0.7) == ["ab"]
    assert reconstruct_lines(fragments, threshold_ratio=0.1) == ["a", "b"]


def test_blank_lines_are_dropped_and_lines_trimmed() -> None:
    fragments = [_frag("  Title ", 50), _frag("   ", 80), _frag("Body", 110)]
    assert reconstruct_lines(fragments) == ["Title", "Body"]


def test_empty_input() -> None:
    assert reconstruct_lines([]) == []
    assert join_lines([]) == ""


def test_join_lines() -> None:
    assert join_lines(["a", "b"]) == "a\nb"
