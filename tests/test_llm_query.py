"""Tests for the Gemini structuring step (no network)."""

from __future__ import annotations

import pytest

from llm_query import build_structure_prompt, strip_code_fence, structure_markdown


class FakeResponse:
    def __init__(self, text: str | None) -> None:
        self.text = text


class FakeModels:
    def __init__(self, outcomes: list) -> None:
        self.outcomes = outcomes
        self.calls: list[dict] = []

    def generate_content(self, *, model: str, contents: str, config=None) -> FakeResponse:
        self.calls.append({"model": model, "contents": contents, "temperature": config.temperature})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return FakeResponse(outcome)


class FakeClient:
    def __init__(self, outcomes: list) -> None:
        self.models = FakeModels(outcomes)


@pytest.fixture
def gemini(monkeypatch: pytest.MonkeyPatch):
    from llm_query import gemini as module

    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    return module


@pytest.fixture
def sleeps(gemini, monkeypatch: pytest.MonkeyPatch) -> list[float]:
    recorded: list[float] = []
    monkeypatch.setattr(gemini.time, "sleep", recorded.append)
    return recorded


def _rate_limit(message: str):
    from google.genai import errors

    return errors.ClientError(429, {"error": {"code": 429, "message": message, "status": "RESOURCE_EXHAUSTED"}})


def test_prompt_contains_rules_and_text() -> None:
    prompt = build_structure_prompt("  raw playbook text \n")
    assert "Use # for major section headings" in prompt
    assert "Preserve ALL original content" in prompt
    assert prompt.endswith("raw playbook text\n")


@pytest.mark.parametrize(
    ("answer", "expected"),
    [
        ("```markdown\n# A\ntext\n```", "# A\ntext"),
        ("```\n# A\n```\n", "# A"),
        ("# Plain\n", "# Plain"),
    ],
)
def test_strip_code_fence(answer: str, expected: str) -> None:
    assert strip_code_fence(answer) == expected


def test_structure_markdown_uses_given_call() -> None:
    prompts: list[str] = []

    def fake_call(prompt: str) -> str:
        prompts.append(prompt)
        return "```md\n# Discovery\nAsk questions.\n```"

    assert structure_markdown("Ask questions.", fake_call) == "# Discovery\nAsk questions."
    assert prompts[0].endswith("Ask questions.\n")


def test_call_gemini_returns_text(gemini, monkeypatch: pytest.MonkeyPatch) -> None:
    client = FakeClient(["# Result"])
    monkeypatch.setattr(gemini, "_get_client", lambda key: client)

    assert gemini.call_gemini("prompt", model="gemini-test") == "# Result"
    assert client.models.calls == [{"model": "gemini-test", "contents": "prompt", "temperature": 0.0}]


def test_call_gemini_requires_key(gemini, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GEMINI_API_KEY")
    with pytest.raises(ValueError):
        gemini.call_gemini("prompt")


def test_call_gemini_empty_answer(gemini, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(gemini, "_get_client", lambda key: FakeClient([None]))
    with pytest.raises(RuntimeError):
        gemini.call_gemini("prompt")


def test_rate_limit_is_retried_with_suggested_delay(gemini, sleeps, monkeypatch: pytest.MonkeyPatch) -> None:
    client = FakeClient([_rate_limit("Please retry in 1.5s."), "ok"])
    monkeypatch.setattr(gemini, "_get_client", lambda key: client)

    assert gemini.call_gemini("prompt") == "ok"
    assert sleeps == [1.5]


def test_rate_limit_gives_up_after_max_retries(gemini, sleeps, monkeypatch: pytest.MonkeyPatch) -> None:
    failures = [_rate_limit("Please retry in 2s.") for _ in range(3)]
    monkeypatch.setattr(gemini, "_get_client", lambda key: FakeClient(failures))

    with pytest.raises(RuntimeError, match="after 2 retries"):
        gemini.call_gemini("prompt", max_retries=2)
    assert sleeps == [2.0, 2.0]


def test_daily_quota_is_not_retried(gemini, sleeps, monkeypatch: pytest.MonkeyPatch) -> None:
    error = _rate_limit("Quota exceeded for GenerateRequestsPerDayPerProjectPerModel.")
    monkeypatch.setattr(gemini, "_get_client", lambda key: FakeClient([error]))

    with pytest.raises(RuntimeError, match="Daily request quota"):
        gemini.call_gemini("prompt")
    assert sleeps == []
