"""Pytest configuration — ensures the project root is importable."""

import sys
from pathlib import Path
from unittest.mock import patch

import pytest

sys.path.insert(0, str(Path(__file__).parent))


@pytest.fixture(autouse=True)
def _no_llm_calls(monkeypatch):
    """Prevent real LLM API calls during tests; keeps the suite fast and free."""
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with patch("palindrome_finder.pipeline.identify_source", return_value=None), patch(
        "palindrome_finder.pipeline.discover_palindromes", return_value=[]
    ):
        yield
