"""
Tests for the LLM source lookup, with the OpenAI client mocked out.

No network calls: ``openai.OpenAI`` is patched and fed canned JSON.
"""

from __future__ import annotations

import json
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from palindrome_finder.models import Discovery, SourceReference
from palindrome_finder.source_lookup import (
    DEFAULT_MODEL,
    discover_palindromes,
    identify_source,
    lookup_available,
)


def _response(content: str | None) -> SimpleNamespace:
    """Shape of an OpenAI chat completion, as far as we read it."""
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))]
    )


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")


@pytest.fixture
def openai_client(api_key):
    """Patched OpenAI client; set ``.create.return_value`` per test."""
    with patch("openai.OpenAI") as client_cls:
        yield client_cls.return_value.chat.completions


# ═══════════════════════════════════════════════════════════════════════
# AVAILABILITY
# ═══════════════════════════════════════════════════════════════════════


class TestAvailability:
    def test_no_key_means_unavailable(self):
        assert lookup_available() is False

    def test_key_means_available(self, api_key):
        assert lookup_available() is True

    def test_identify_without_key_returns_none(self):
        assert identify_source("אבא") is None

    def test_discover_without_key_returns_empty(self):
        assert discover_palindromes() == []


# ═══════════════════════════════════════════════════════════════════════
# IDENTIFY SOURCE
# ═══════════════════════════════════════════════════════════════════════


class TestIdentifySource:
    def test_found(self, openai_client):
        openai_client.create.return_value = _response(
            json.dumps({"found": True, "book": "בראשית", "chapter": 1, "verse": "1"})
        )
        result = identify_source("בראשית ברא")
        assert result == SourceReference(found=True, book="בראשית", chapter="1", verse="1")

    def test_not_found(self, openai_client):
        openai_client.create.return_value = _response(json.dumps({"found": False}))
        assert identify_source("אבא") == SourceReference(found=False)

    def test_prompt_contains_text(self, openai_client):
        openai_client.create.return_value = _response(json.dumps({"found": False}))
        identify_source("מים")
        kwargs = openai_client.create.call_args.kwargs
        assert '"מים"' in kwargs["messages"][1]["content"]
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["model"] == DEFAULT_MODEL

    def test_model_override(self, openai_client, monkeypatch):
        monkeypatch.setenv("PALINDROME_LLM_MODEL", "gpt-4o-mini")
        openai_client.create.return_value = _response(json.dumps({"found": False}))
        identify_source("מים")
        assert openai_client.create.call_args.kwargs["model"] == "gpt-4o-mini"

    def test_invalid_json_returns_none(self, openai_client):
        openai_client.create.return_value = _response("not json at all")
        assert identify_source("אבא") is None

    def test_non_object_json_returns_none(self, openai_client):
        openai_client.create.return_value = _response("[1, 2, 3]")
        assert identify_source("אבא") is None

    def test_empty_content_returns_none(self, openai_client):
        openai_client.create.return_value = _response(None)
        assert identify_source("אבא") is None

    def test_api_failure_returns_none(self, openai_client):
        openai_client.create.side_effect = RuntimeError("connection reset")
        assert identify_source("אבא") is None


# ═══════════════════════════════════════════════════════════════════════
# DISCOVERY
# ═══════════════════════════════════════════════════════════════════════


class TestDiscoverPalindromes:
    def test_parses_discoveries(self, openai_client):
        openai_client.create.return_value = _response(
            json.dumps(
                {
                    "palindromes": [
                        {
                            "text": "אבא",
                            "book": "בראשית",
                            "chapter": "כב",
                            "verse": 7,
                            "meaning": "Isaac addresses Abraham",
                        }
                    ]
                }
            )
        )
        assert discover_palindromes() == [
            Discovery(
                text="אבא",
                book="בראשית",
                chapter="כב",
                verse="7",
                meaning="Isaac addresses Abraham",
            )
        ]

    def test_malformed_items_skipped(self, openai_client):
        openai_client.create.return_value = _response(
            json.dumps(
                {
                    "palindromes": [
                        "just a string",
                        {"text": "מים", "book": "בראשית"},
                        {"text": "אבא", "book": "בראשית", "chapter": "א", "verse": "א"},
                    ]
                }
            )
        )
        result = discover_palindromes()
        assert [d.text for d in result] == ["אבא"]
        assert result[0].meaning is None

    def test_missing_list_returns_empty(self, openai_client):
        openai_client.create.return_value = _response(json.dumps({"palindromes": None}))
        assert discover_palindromes() == []

    def test_context_goes_into_prompt(self, openai_client):
        openai_client.create.return_value = _response(json.dumps({"palindromes": []}))
        discover_palindromes("אבא ואמא")
        prompt = openai_client.create.call_args.kwargs["messages"][1]["content"]
        assert '"אבא ואמא"' in prompt

    def test_no_context_searches_tanakh(self, openai_client):
        openai_client.create.return_value = _response(json.dumps({"palindromes": []}))
        discover_palindromes()
        prompt = openai_client.create.call_args.kwargs["messages"][1]["content"]
        assert "Tanakh" in prompt
