"""
llm_query/gemini.py — Gemini API call used by the structuring step.

Environment variables:
  GEMINI_API_KEY     API key (required)
  PBK_GEMINI_MODEL   model id (default: gemini-2.5-flash)

Optionally a .env file in the project root:
  GEMINI_API_KEY=AIza...

Architecture:
  call_gemini() → cached client → models.generate_content()
    429 → _rate_limit_delay() → sleep → retry (max_retries)
    daily quota / retries exhausted → RuntimeError

Public API:
  call_gemini(prompt, model, api_key, max_retries, temperature) -> str
"""

from __future__ import annotations

import functools
import os
import pathlib
import re
import sys
import time
from typing import Any, Protocol, cast

from dotenv import load_dotenv

try:
    from google import genai as _genai
    from google.genai import errors as _genai_errors
    from google.genai import types as _genai_types
except ImportError as _exc:
    raise ImportError(
        "Missing package google-genai. Install it with: pip install google-genai"
    ) from _exc

load_dotenv(pathlib.Path(__file__).resolve().parent.parent / ".env")

DEFAULT_MODEL       = os.getenv("PBK_GEMINI_MODEL", "gemini-2.5-flash")
DEFAULT_RETRIES     = 3
# structuring reformats, it must not paraphrase
DEFAULT_TEMPERATURE = 0.0
_ENV_KEY            = "GEMINI_API_KEY"

# "Please retry in 18.8s" / "retryDelay: '18s'"
_RETRY_DELAY_RE = re.compile(r"retry[^\d]*(\d+(?:\.\d+)?)\s*s", re.IGNORECASE)


class _ModelsAPI(Protocol):
    def generate_content(self, *, model: str, contents: str, config: Any = None) -> Any:
        ...


@functools.lru_cache(maxsize=4)
def _get_client(api_key: str) -> "_genai.Client":
    """One client (and HTTP pool) per API key."""
    return _genai.Client(api_key=api_key)


def _rate_limit_delay(error: Exception, attempt: int) -> float:
    """Wait time before retry `attempt`: the API's hint, else exponential backoff."""
    m = _RETRY_DELAY_RE.search(str(error))
    if m:
        return float(m.group(1))
    hinted = getattr(error, "retry_delay", None)
    if hinted is not None:
        return float(hinted)
    return float(2 ** attempt * 5)


def _is_daily_quota(error: Exception) -> bool:
    return "PerDay" in str(error)


def call_gemini(
    prompt: str,
    model: str = DEFAULT_MODEL,
    api_key: str | None = None,
    max_retries: int = DEFAULT_RETRIES,
    temperature: float = DEFAULT_TEMPERATURE,
) -> str:
    """
    Sends the prompt to Gemini and returns the answer text.

    Raises:
        ValueError:                   no API key.
        RuntimeError:                 empty answer, daily quota or retries exhausted.
        google.genai.errors.APIError: any other API error.
    """
    key = api_key or os.getenv(_ENV_KEY)
    if not key:
        raise ValueError(
            f"Missing Gemini API key. "
            f"Set the {_ENV_KEY} environment variable or pass api_key."
        )

    models_api = cast(_ModelsAPI, _get_client(key).models)
    config = _genai_types.GenerateContentConfig(temperature=temperature)

    attempt = 0
    while True:
        attempt += 1
        try:
            response = models_api.generate_content(model=model, contents=prompt, config=config)
        except _genai_errors.ClientError as exc:
            if exc.code != 429:
                raise
            if _is_daily_quota(exc):
                raise RuntimeError(
                    f"Daily request quota for model {model} exhausted.\n"
                    f"API details: {exc}"
                ) from exc
            if attempt > max_retries:
                raise RuntimeError(
                    f"Rate limited after {max_retries} retries. Try again later."
                ) from exc

            delay = _rate_limit_delay(exc, attempt)
            print(
                f"[warn] 429 rate limit, waiting {delay:.0f}s "
                f"(attempt {attempt}/{max_retries})...",
                file=sys.stderr,
            )
            time.sleep(delay)
            continue

        if not response.text:
            raise RuntimeError("Gemini returned an empty answer.")
        return response.text
