"""
Canonical letter stream for Hebrew text.

Raw text is reduced to the bare 22-letter alphabet in four passes, always in
this order:

  1. strip_references: chapter:verse citations become a single space
  2. strip_marks     : vowel points and cantillation marks are deleted
  3. fold_finals     : ך ם ן ף ץ become כ מ נ פ צ
  4. keep_letters    : anything that is not a base letter is dropped

Citation stripping must see the punctuation and spacing that the last pass
throws away, so it always runs first.
"""

from __future__ import annotations

import re

# ─── Character Classes ───────────────────────────────────────────────

LETTER_RANGE = "\u05D0-\u05EA"  # alef..tav, final forms included
MARK_RANGE = "\u0591-\u05C7"  # points, cantillation, and in-range punctuation

FINAL_FORMS: dict[str, str] = {
    "ך": "כ",  # kaf
    "ם": "מ",  # mem
    "ן": "נ",  # nun
    "ף": "פ",  # pe
    "ץ": "צ",  # tsadi
}

BASE_LETTERS: frozenset[str] = frozenset(
    chr(cp) for cp in range(0x05D0, 0x05EB) if chr(cp) not in FINAL_FORMS
)

_QUOTES = "\"'\u05F3\u05F4"  # ASCII quotes, geresh, gershayim

# Characters that may open a citation such as ("א,ב") or (א ב)
CITATION_OPENERS: frozenset[str] = frozenset("([" + _QUOTES)

# ─── Citation Patterns ───────────────────────────────────────────────
# Shape A: א,ב  /  "יב:ג"  /  (א:ב)
# The letter groups may not touch further letters or points, otherwise the
# tail of a longer word would be eaten.
_CITATION_SEPARATED = re.compile(
    f"[{_QUOTES}(\\[]?"
    f"(?<![{LETTER_RANGE}{MARK_RANGE}])"
    f"[{LETTER_RANGE}]{{1,3}}[,:][{LETTER_RANGE}]{{1,3}}"
    f"(?![{LETTER_RANGE}{MARK_RANGE}])"
    f"[{_QUOTES})\\]]?"
)

# Shape B: (א ב)  /  [יב ג]
_CITATION_BRACKETED = re.compile(
    f"[(\\[][{LETTER_RANGE}]{{1,3}}\\s+[{LETTER_RANGE}]{{1,3}}[)\\]]"
)

_MARKS = re.compile(f"[{MARK_RANGE}]")
_NON_LETTERS = re.compile(f"[^{LETTER_RANGE}]")
_FOLD_TABLE = str.maketrans(FINAL_FORMS)


# ─── Public API ──────────────────────────────────────────────────────


def normalize(text: str) -> str:
    """Reduce text to its canonical sequence of base Hebrew letters.

    Never fails: empty or non-Hebrew input yields an empty string.

    Example:
        "מַיִם (א,ב)" → "מימ"
    """
    text = strip_references(text)
    text = strip_marks(text)
    text = fold_finals(text)
    return keep_letters(text)


def strip_references(text: str) -> str:
    """Replace embedded chapter:verse citations with a single space."""
    text = _CITATION_SEPARATED.sub(" ", text)
    return _CITATION_BRACKETED.sub(" ", text)


def strip_marks(text: str) -> str:
    """Delete vowel points and cantillation marks (U+0591..U+05C7)."""
    return _MARKS.sub("", text)


def fold_finals(text: str) -> str:
    """Rewrite the five word-final letter forms to their regular forms."""
    return text.translate(_FOLD_TABLE)


def keep_letters(text: str) -> str:
    """Drop every codepoint outside the Hebrew letter block."""
    return _NON_LETTERS.sub("", text)


def is_hebrew_letter(ch: str) -> bool:
    """True for alef..tav, final forms included."""
    return "\u05D0" <= ch <= "\u05EA"
