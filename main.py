#!/usr/bin/env python3
"""
Hebrew Palindrome Finder — Entry Point
=======================================

Searches Hebrew text for letter palindromes and prints a report.

Usage:
    python main.py                             # Built-in sample verse
    python main.py "אבא ואמא"                  # Your own text
    OPENAI_API_KEY=sk-... python main.py       # ...with Biblical source lookup
"""

from __future__ import annotations

import logging
import os
import sys

from palindrome_finder.exceptions import InvalidRangeError
from palindrome_finder.models import Severity
from palindrome_finder.pipeline import DEFAULT_MAX_LENGTH, PalindromeSearchPipeline
from palindrome_finder.scanner import DEFAULT_MIN_LENGTH
from palindrome_finder.source_lookup import lookup_available

# ─── Load .env if available (optional dependency) ────────────────────
try:
    from dotenv import load_dotenv

    load_dotenv()
except ImportError:
    pass


# ─── Sample Text: Pointed, With a Citation ────────────────────────────
# Genesis 1:1 with its citation, then a short made-up sentence. The
# citation in parentheses must not leak into the letter stream.

SAMPLE_TEXT = (
    "בְּרֵאשִׁית בָּרָא אֱלֹהִים אֵת הַשָּׁמַיִם וְאֵת הָאָרֶץ (א,א) "
    "וַיֹּאמֶר אַבָּא לְאִמָּא: הַמַּיִם שֶׁבַּנָּהָר"
)


# ─── ANSI Color Constants ───────────────────────────────────────────

_YELLOW = "\033[93m"
_GREEN = "\033[92m"
_RED = "\033[91m"
_CYAN = "\033[96m"
_DIM = "\033[2m"
_BOLD = "\033[1m"
_RESET = "\033[0m"
_WIDTH = 72


# ─── Pretty Printer Helpers ─────────────────────────────────────────


def _print_match(index: int, match) -> None:
    """Print one palindrome with its source, if known."""
    print(f"  {_BOLD}{index:>3}. {match.canonical}{_RESET}  {_DIM}({match.length} letters){_RESET}")
    print(f"       Original: {match.original}")
    if match.source is not None and match.source.found:
        print(
            f"       {_CYAN}Source:   {match.source.book} "
            f"{match.source.chapter}:{match.source.verse}{_RESET}"
        )


def _print_findings(findings) -> None:
    """Print warnings and info notes (compact format)."""
    if not findings:
        return
    print(f"{'─' * _WIDTH}")
    for f in findings:
        color = _YELLOW if f.severity == Severity.WARNING else _CYAN
        print(f"  {color}[{f.code}]{_RESET} {f.message}")


# ─── Pretty Printer ─────────────────────────────────────────────────


def print_report(report) -> int:
    """Pretty-print the search report with ANSI color codes.

    Returns:
        0 if at least one palindrome was found, 1 otherwise.
    """
    print(f"\n{'=' * _WIDTH}")
    print(f"{_BOLD}{_CYAN}  HEBREW PALINDROME REPORT{_RESET}")
    print(f"{'=' * _WIDTH}")
    print(f"  Text Hash:   {_DIM}{report.text_hash[:16]}...{_RESET}")
    print(f"  Range:       {report.min_length}-{report.max_length} letters")
    print(f"  Lookup:      {report.lookup_method}")
    print(f"{'─' * _WIDTH}")

    for index, match in enumerate(report.matches, start=1):
        _print_match(index, match)

    _print_findings(report.findings)

    print(f"{'=' * _WIDTH}")
    if report.match_count:
        print(f"  {_GREEN}{_BOLD}{report.match_count} PALINDROME(S) FOUND{_RESET}")
    else:
        print(f"  {_RED}{_BOLD}NO PALINDROMES FOUND{_RESET}")
    print(f"{'=' * _WIDTH}\n")

    return 0 if report.match_count else 1


# ─── Main ────────────────────────────────────────────────────────────


def main(argv: list[str] | None = None) -> int:
    """Search the given text (or the sample) and print the report."""
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    args = sys.argv[1:] if argv is None else argv
    text = " ".join(args) if args else SAMPLE_TEXT

    try:
        min_length = int(os.environ.get("PALINDROME_MIN_LENGTH", DEFAULT_MIN_LENGTH))
        max_length = int(os.environ.get("PALINDROME_MAX_LENGTH", DEFAULT_MAX_LENGTH))
    except ValueError as e:
        print(f"  {_RED}[INVALID_LENGTH_SETTING]{_RESET} {e}", file=sys.stderr)
        return 2

    try:
        pipeline = PalindromeSearchPipeline(min_length=min_length, max_length=max_length)
        report = pipeline.run(text, lookup_sources=lookup_available())
    except InvalidRangeError as e:
        print(f"  {_RED}[{e.code}]{_RESET} {e}", file=sys.stderr)
        return 2

    return print_report(report)


if __name__ == "__main__":
    sys.exit(main())
