"""
Span enumeration: every substring of the original text is a candidate.

For each start offset the span is grown one codepoint at a time, normalized
in full, and tested. Offsets are Python string indices, i.e. codepoints, so a
letter and its points count as separate positions.

Complexity is O(n²) span pairs, each normalized from scratch. That is fine
for a verse or a paragraph; it is not meant for a whole book. Incremental
normalization is not used: citation stripping looks at context, and a
pattern may only complete once the span has grown past it.
"""

from __future__ import annotations

import logging
import unicodedata

from .exceptions import InvalidRangeError
from .models import PalindromeMatch
from .normalizer import CITATION_OPENERS, is_hebrew_letter, normalize
from .ranking import resolve

logger = logging.getLogger(__name__)

# Shorter sequences are never reported, whatever the caller asks for
MIN_PALINDROME_LENGTH = 3

DEFAULT_MIN_LENGTH = 3
DEFAULT_MAX_LENGTH = 50

# A span may carry this many raw codepoints per canonical letter before the
# scan gives up on its start offset. Pointed and cantillated text runs at
# roughly 3-4 codepoints per letter, so 10 leaves ample room.
RAW_SPAN_FACTOR = 10

# Most letters one pending citation can still remove once it completes
# (two groups of three). The canonical length may drop by this much as a
# span grows, so extension continues until it is out of reach.
CITATION_SLACK = 6


# ─── Public API ──────────────────────────────────────────────────────


def is_palindrome(sequence: str) -> bool:
    """True if the sequence reads the same both ways and has 3+ elements."""
    if len(sequence) < MIN_PALINDROME_LENGTH:
        return False
    return sequence == sequence[::-1]


def check_range(min_length: int, max_length: int) -> None:
    """Raise InvalidRangeError unless 1 <= min_length <= max_length."""
    if min_length < 1 or max_length < 1:
        raise InvalidRangeError(
            f"Length bounds must be positive (got min={min_length}, max={max_length}).",
            details={"min_length": min_length, "max_length": max_length},
        )
    if min_length > max_length:
        raise InvalidRangeError(
            f"min_length ({min_length}) is greater than max_length ({max_length}).",
            details={"min_length": min_length, "max_length": max_length},
        )


def find_palindromes(
    text: str,
    min_length: int = DEFAULT_MIN_LENGTH,
    max_length: int = DEFAULT_MAX_LENGTH,
) -> list[PalindromeMatch]:
    """Find every palindromic letter sequence in the text.

    Args:
        text: Raw Hebrew text (points, punctuation and citations allowed).
        min_length: Minimum canonical length. Values below 3 behave as 3.
        max_length: Maximum canonical length.

    Returns:
        One match per distinct palindrome, longest first. Empty for empty
        text, text without Hebrew letters, or a malformed range.
    """
    try:
        check_range(min_length, max_length)
    except InvalidRangeError as e:
        logger.warning("Ignoring scan with invalid range: %s", e)
        return []

    return resolve(scan(text, min_length, max_length))


def scan(text: str, min_length: int, max_length: int) -> list[PalindromeMatch]:
    """Enumerate raw matches in discovery order, duplicates included.

    This is the first of two stages; ``resolve`` collapses the output.
    """
    raw_matches: list[PalindromeMatch] = []
    if min_length > max_length or max_length < 1:
        return raw_matches

    raw_limit = RAW_SPAN_FACTOR * max_length
    canonical_limit = max_length + CITATION_SLACK
    n = len(text)

    for i in range(n):
        if not _can_start_span(text[i]):
            continue

        for j in range(i + 1, n + 1):
            if j - i > raw_limit:
                break

            canonical = normalize(text[i:j])
            if len(canonical) > canonical_limit:
                break

            # Never split a letter from its own points
            if j < n and unicodedata.combining(text[j]):
                continue

            if min_length <= len(canonical) <= max_length and is_palindrome(canonical):
                raw_matches.append(
                    PalindromeMatch(
                        canonical=canonical,
                        original=text[i:j].strip(),
                        length=len(canonical),
                    )
                )

    logger.debug(
        "Scanned %d codepoints: %d raw match(es) in range [%d, %d]",
        n,
        len(raw_matches),
        min_length,
        max_length,
    )
    return raw_matches


# ─── Internal Helpers ────────────────────────────────────────────────


def _can_start_span(ch: str) -> bool:
    """A span opens on a letter, or on a character that may open a citation."""
    return is_hebrew_letter(ch) or ch in CITATION_OPENERS
