"""
llm_query/prompt.py — turning unstructured text into sectioned Markdown.

Raw text (a PDF dump, pasted notes) usually has no "# " headings, so the
section splitter would return a single fallback section. The model is asked
to add headings and formatting without changing the content.

Public API:
  build_structure_prompt(raw_text) -> str
  strip_code_fence(answer) -> str
  structure_markdown(raw_text, call) -> str
"""

from __future__ import annotations

import re
from typing import Callable

STRUCTURE_RULES = """\
You are a document formatter. Convert the raw text of a playbook into clean, well-structured markdown.

RULES:
- Use # for major section headings (e.g. "# Discovery Process", "# Objection Handling")
- Use ## and ### for subsections within those sections
- Use bullet points, numbered lists, bold, tables, and other markdown formatting where appropriate
- Preserve ALL original content: do not summarize, omit, or rephrase anything
- Do not add commentary or explanations; output ONLY the formatted markdown
- If the document has an obvious title page or cover, use that as the first # heading
- Look for natural topic boundaries to determine where sections start and end"""

# Models like to wrap the whole answer in ```markdown … ```
_FENCE_RE = re.compile(r"^\s*```(?:markdown|md)?[ \t]*\n(.*?)\n```\s*$", re.DOTALL | re.IGNORECASE)


def build_structure_prompt(raw_text: str) -> str:
    return (
        f"{STRUCTURE_RULES}\n\n"
        f"Convert this raw text to structured markdown:\n\n"
        f"{raw_text.strip()}\n"
    )


def strip_code_fence(answer: str) -> str:
    m = _FENCE_RE.match(answer)
    return (m.group(1) if m else answer).strip()


def structure_markdown(raw_text: str, call: Callable[[str], str]) -> str:
    """Runs the prompt through `call` (e.g. call_gemini) and cleans the answer."""
    return strip_code_fence(call(build_structure_prompt(raw_text)))
