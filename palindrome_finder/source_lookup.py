"""
LLM-based provenance lookup and palindrome discovery (OpenAI structured output).

None of this is part of the palindrome scan. The scan finds sequences by
pure letter arithmetic; this module only asks a language model where a
found sequence comes from, or proposes well-known palindromes to try.

Design:
  - JSON mode enforced (structured output, not free text)
  - Graceful fallback: no API key, no package, or a failed call → None / []
  - Nothing returned here is ever fed back into the scan
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Optional

from pydantic import ValidationError

from .models import Discovery, SourceReference

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-5"


# ─── Prompts ─────────────────────────────────────────────────────────

SOURCE_SYSTEM_PROMPT = """\
You are an expert in the Hebrew Bible (Tanakh).
Given a Hebrew text sequence, identify the exact Biblical source it is quoted from.

Return a JSON object with these exact keys:
{
    "found": true or false,
    "book": "book name in Hebrew, or null",
    "chapter": "chapter number/ID, or null",
    "verse": "verse number/ID, or null"
}

If you are not certain the text appears in the Tanakh, set "found" to false.
Do not guess a location.
"""

DISCOVERY_SYSTEM_PROMPT = """\
You are an expert in the Hebrew Bible (Tanakh) and in Hebrew letter palindromes.
A palindrome reads the same letter by letter in both directions, ignoring
vowel points and treating final letters (ך ם ן ף ץ) as their regular forms.

Return a JSON object with this exact shape:
{
    "palindromes": [
        {
            "text": "the palindromic Hebrew text",
            "book": "book name in Hebrew",
            "chapter": "chapter number/ID",
            "verse": "verse number/ID",
            "meaning": "context or meaning, optional"
        }
    ]
}
"""


# ─── Public API ──────────────────────────────────────────────────────


def identify_source(text: str) -> SourceReference | None:
    """Ask the LLM for the Biblical book, chapter and verse of a text.

    Returns:
        SourceReference (``found`` may be False), or None when the lookup
        service is unavailable or the call fails.
    """
    data = _complete_json(
        SOURCE_SYSTEM_PROMPT,
        "Identify the exact Biblical source (Book, Chapter, and Verse in Hebrew) "
        f'for this Hebrew text sequence: "{text}"',
    )
    if data is None:
        return None

    try:
        return SourceReference(
            found=bool(data.get("found", False)),
            book=_safe_str(data.get("book")),
            chapter=_safe_str(data.get("chapter")),
            verse=_safe_str(data.get("verse")),
        )
    except ValidationError as e:
        logger.error("Source lookup returned an unusable object: %s", e)
        return SourceReference(found=False)


def discover_palindromes(context: str | None = None) -> list[Discovery]:
    """Ask the LLM for notable palindromes, in the given text or in the Tanakh.

    Returns:
        Discoveries with their locations. Empty when the service is
        unavailable; malformed items are skipped.
    """
    if context:
        prompt = (
            f'Identify interesting palindromes in the following Hebrew text: "{context}". '
            "For each palindrome found that exists in the Tanakh, provide the Book, "
            "Chapter, and Verse."
        )
    else:
        prompt = (
            "Search the Hebrew Tanakh and find 5 sophisticated palindromes "
            "(over 5 letters). For each, provide the text, book name, chapter "
            "number, verse number, and a brief explanation of the context."
        )

    data = _complete_json(DISCOVERY_SYSTEM_PROMPT, prompt)
    if data is None:
        return []

    items = data.get("palindromes")
    if not isinstance(items, list):
        logger.error("Discovery response has no 'palindromes' list")
        return []

    discoveries: list[Discovery] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        try:
            discoveries.append(
                Discovery(
                    text=item["text"],
                    book=str(item["book"]),
                    chapter=str(item["chapter"]),
                    verse=str(item["verse"]),
                    meaning=_safe_str(item.get("meaning")),
                )
            )
        except (KeyError, ValidationError) as e:
            logger.warning("Skipping malformed discovery %r: %s", item, e)

    logger.info("Discovery returned %d palindrome(s)", len(discoveries))
    return discoveries


def lookup_available() -> bool:
    """True when an API key is configured for the lookup service."""
    return bool(os.environ.get("OPENAI_API_KEY"))


# ─── Internal Helpers ────────────────────────────────────────────────


def _complete_json(system_prompt: str, user_prompt: str) -> dict[str, Any] | None:
    """Run one JSON-mode chat completion. None on any failure."""
    api_key = os.environ.get("OPENAI_API_KEY")
    if not api_key:
        logger.info("No OPENAI_API_KEY set — skipping source lookup")
        return None

    try:
        from openai import OpenAI

        client = OpenAI(api_key=api_key)

        response = client.chat.completions.create(
            model=os.environ.get("PALINDROME_LLM_MODEL", DEFAULT_MODEL),
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            response_format={"type": "json_object"},
        )

        content = response.choices[0].message.content
        if content is None:
            logger.error("LLM returned empty content")
            return None

        data = json.loads(content)
        if not isinstance(data, dict):
            logger.error("LLM returned JSON that is not an object")
            return None
        return data

    except ImportError:
        logger.warning("openai package not installed — pip install openai")
        return None
    except Exception as e:
        logger.error("LLM request failed: %s", e)
        return None


def _safe_str(value: object) -> Optional[str]:
    """Convert an LLM field to str, keeping None as None."""
    if value is None:
        return None
    return str(value)
