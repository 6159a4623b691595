"""Tests for PDF fragment extraction (PyMuPDF)."""

from __future__ import annotations

from pathlib import Path

import fitz
import pytest

from data_model.documents import TextFragment
from pdf.parser import extract_fragments, fragments_from_page_dict, pdf_to_lines, pdf_to_text


@pytest.fixture
def sample_pdf(tmp_path: Path) -> Path:
    path = tmp_path / "playbook.pdf"
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), "Discovery Process", fontsize=14)
    page.insert_text((72, 120), "Ask open questions.", fontsize=11)
    second = doc.new_page()
    second.insert_text((72, 72), "Objection Handling", fontsize=14)
    doc.save(str(path))
    doc.close()
    return path


def test_page_dict_flattening() -> None:
    page_dict = {
        "blocks": [
            {"type": 1, "bbox": [0, 0, 10, 10]},
            {"type": 0, "lines": [
                {"bbox": [0, 40, 100, 52], "spans": [
                    {"text": "Hello", "size": 12.0, "bbox": [0, 40, 30, 52]},
                    {"text": "", "size": 12.0, "bbox": [30, 40, 30, 52]},
                    {"text": " world", "size": 12.0, "bbox": [30, 40.3, 70, 52]},
                ]},
            ]},
        ],
    }
    assert fragments_from_page_dict(page_dict, 3) == [
        TextFragment(text="Hello", font_size=12.0, y=40.0, page=3),
        TextFragment(text=" world", font_size=12.0, y=40.3, page=3),
    ]


def test_extract_fragments_numbers_pages_from_one(sample_pdf: Path) -> None:
    fragments = extract_fragments(sample_pdf)
    assert {f.page for f in fragments} == {1, 2}
    assert all(f.font_size > 0 for f in fragments)


def test_pdf_to_lines(sample_pdf: Path) -> None:
    assert pdf_to_lines(sample_pdf) == [
        "Discovery Process",
        "Ask open questions.",
        "Objection Handling",
    ]


def test_pdf_to_text(sample_pdf: Path) -> None:
    assert pdf_to_text(sample_pdf) == "Discovery Process\nAsk open questions.\nObjection Handling"


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(Exception):
        extract_fragments(tmp_path / "missing.pdf")
