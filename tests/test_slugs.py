"""Tests for heading slugs and per-document dedup."""

from __future__ import annotations

import pytest

from interchange.slugs import SlugCounter, slugify, unique_slug


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Hello World & Friends!", "hello-world-friends"),
        ("  --Leading and trailing--  ", "leading-and-trailing"),
        ("Step 1: Discovery", "step-1-discovery"),
        ("snake_case stays", "snake_case-stays"),
        ("Über Café", "über-café"),
        ("!!!", ""),
        ("", ""),
    ],
)
def test_slugify(text: str, expected: str) -> None:
    assert slugify(text) == expected


@pytest.mark.parametrize("text", ["Hello World", "a -- b", "Q&A: pricing?", "x"])
def test_slugify_is_idempotent(text: str) -> None:
    once = slugify(text)
    assert slugify(once) == once


def test_unique_slug_suffixes_repeats() -> None:
    counts: dict[str, int] = {}
    assert [unique_slug("x", counts) for _ in range(4)] == ["x", "x-2", "x-3", "x-4"]
    assert unique_slug("y", counts) == "y"


def test_counters_are_independent() -> None:
    first, second = SlugCounter(), SlugCounter()
    assert first("FAQ") == "faq"
    assert first("FAQ") == "faq-2"
    assert second("FAQ") == "faq"
