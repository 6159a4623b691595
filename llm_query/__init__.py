"""
llm_query — language-model step of the import pipeline.

Public API:
  build_structure_prompt(raw_text)     -> str
  strip_code_fence(answer)             -> str
  structure_markdown(raw_text, call)   -> str

call_gemini lives in llm_query.gemini and is imported lazily by the CLI,
so the pure helpers work without google-genai configured.
"""

from .prompt import (
    STRUCTURE_RULES,
    build_structure_prompt,
    strip_code_fence,
    structure_markdown,
)

__all__ = [
    "STRUCTURE_RULES",
    "build_structure_prompt",
    "strip_code_fence",
    "structure_markdown",
]
