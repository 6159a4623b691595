"""
pdf/parser.py — text extraction from PDF exports.

Architecture:
  pdf_path → fitz.open() → pages → text spans with fonts (PyMuPDF dict)
  → TextFragment(text, size, bbox top, page)
  → pdf.lines.reconstruct_lines() → plain-text lines

Public API:
  extract_fragments(path) -> list[TextFragment]
  fragments_from_page_dict(page_dict, page_number) -> list[TextFragment]
  pdf_to_lines(path, threshold_ratio) -> list[str]
  pdf_to_text(path, threshold_ratio) -> str
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import fitz  # PyMuPDF

from data_model.documents import TextFragment
from pdf.lines import LINE_THRESHOLD_RATIO, join_lines, reconstruct_lines


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_fragments(path: str | Path) -> list[TextFragment]:
    """Opens the PDF and returns its text spans in extraction order."""
    doc = fitz.open(str(path))
    try:
        return _extract_document(doc)
    finally:
        doc.close()


def pdf_to_lines(
    path: str | Path,
    threshold_ratio: float = LINE_THRESHOLD_RATIO,
) -> list[str]:
    return reconstruct_lines(extract_fragments(path), threshold_ratio)


def pdf_to_text(
    path: str | Path,
    threshold_ratio: float = LINE_THRESHOLD_RATIO,
) -> str:
    return join_lines(pdf_to_lines(path, threshold_ratio))


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------

def _extract_document(doc: fitz.Document) -> list[TextFragment]:
    fragments: list[TextFragment] = []
    for page in doc:
        page_dict = page.get_text("dict", flags=fitz.TEXT_PRESERVE_WHITESPACE)
        fragments.extend(fragments_from_page_dict(page_dict, page.number + 1))
    return fragments


def fragments_from_page_dict(page_dict: dict[str, Any], page_number: int) -> list[TextFragment]:
    """
    Flattens one page of PyMuPDF "dict" output into fragments.

    Image blocks (type != 0) and spans without text are skipped.
    """
    fragments: list[TextFragment] = []
    for block in page_dict.get("blocks", []):
        if block.get("type") != 0:
            continue
        for line in block.get("lines", []):
            for span in line.get("spans", []):
                text = span.get("text", "")
                if not text:
                    continue
                bbox = span.get("bbox") or line.get("bbox") or (0.0, 0.0, 0.0, 0.0)
                fragments.append(TextFragment(
                    text=text,
                    font_size=float(span.get("size", 0.0)),
                    y=float(bbox[1]),
                    page=page_number,
                ))
    return fragments
