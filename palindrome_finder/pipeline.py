"""
Search pipeline — orchestrates a full palindrome search.

Flow:
  ┌──────────┐
  │ Raw text │
  └────┬─────┘
       │
  ┌────▼─────┐
  │  Range   │   ← Reject malformed bounds loudly
  │  check   │
  └────┬─────┘
       │
  ┌────▼─────┐
  │   Scan   │   ← Every span, normalized and tested (pure)
  └────┬─────┘
       │
  ┌────▼─────┐
  │ Resolve  │   ← One match per palindrome, longest first
  └────┬─────┘
       │
  ┌────▼─────┐
  │  Source  │   ← Optional LLM provenance lookup per match
  │  lookup  │
  └────┬─────┘
       │
  ┌────▼─────┐
  │  Report  │   ← Typed matches + findings
  └──────────┘

Design principles:
  - The scan ALWAYS runs and never depends on the lookup.
  - The lookup is optional (graceful degradation).
  - The input text is SHA-256 hashed so reports can be correlated and cached.
"""

from __future__ import annotations

import hashlib
import logging

from .models import (
    AnnotatedMatch,
    Discovery,
    Finding,
    PalindromeMatch,
    SearchReport,
    Severity,
)
from .ranking import resolve
from .scanner import MIN_PALINDROME_LENGTH, check_range, scan
from .source_lookup import discover_palindromes, identify_source

logger = logging.getLogger(__name__)

# The interactive surfaces allow slightly longer sequences than the core default
DEFAULT_MAX_LENGTH = 60


class PalindromeSearchPipeline:
    """Orchestrates a palindrome search and its optional source annotation.

    Usage:
        pipeline = PalindromeSearchPipeline()
        report = pipeline.run(hebrew_text, lookup_sources=True)
        for match in report.matches:
            print(match.canonical, match.source)
    """

    def __init__(
        self,
        min_length: int = MIN_PALINDROME_LENGTH,
        max_length: int = DEFAULT_MAX_LENGTH,
        keep_all_occurrences: bool = False,
    ):
        check_range(min_length, max_length)
        self.min_length = min_length
        self.max_length = max_length
        self.keep_all_occurrences = keep_all_occurrences

    def run(
        self,
        text: str,
        min_length: int | None = None,
        max_length: int | None = None,
        lookup_sources: bool = False,
    ) -> SearchReport:
        """Search the text and build a report.

        Args:
            text: Raw Hebrew text.
            min_length: Overrides the pipeline's minimum for this run.
            max_length: Overrides the pipeline's maximum for this run.
            lookup_sources: Ask the lookup service for each match's source.

        Raises:
            InvalidRangeError: If the effective bounds are malformed.
        """
        min_length = self.min_length if min_length is None else min_length
        max_length = self.max_length if max_length is None else max_length

        # ── Step 0: Validate bounds, hash input ─────────────────────
        check_range(min_length, max_length)
        text_hash = hashlib.sha256(text.encode("utf-8")).hexdigest()

        findings: list[Finding] = []
        if min_length < MIN_PALINDROME_LENGTH:
            findings.append(
                Finding(
                    severity=Severity.INFO,
                    code="MIN_LENGTH_BELOW_FLOOR",
                    message=(
                        f"min_length {min_length} is below the palindrome floor; "
                        f"sequences shorter than {MIN_PALINDROME_LENGTH} letters "
                        f"are never reported."
                    ),
                    details={"requested": min_length, "effective": MIN_PALINDROME_LENGTH},
                )
            )

        # ── Step 1: Scan, then resolve ──────────────────────────────
        logger.info("Scanning %d codepoints for palindromes...", len(text))
        raw_matches = scan(text, min_length, max_length)
        matches = resolve(raw_matches, keep_all_occurrences=self.keep_all_occurrences)
        logger.info(
            "Found %d palindrome(s) from %d raw match(es)",
            len(matches),
            len(raw_matches),
        )

        # ── Step 2: Optional source lookup ──────────────────────────
        lookup_method = "none"
        if lookup_sources and matches:
            annotated, lookup_findings = self._annotate(matches)
            findings.extend(lookup_findings)
            lookup_method = "LLM source lookup"
        else:
            annotated = [AnnotatedMatch(**m.model_dump()) for m in matches]

        # ── Step 3: Compile report ──────────────────────────────────
        return SearchReport(
            text_hash=text_hash,
            min_length=min_length,
            max_length=max_length,
            match_count=len(annotated),
            matches=annotated,
            findings=findings,
            lookup_method=lookup_method,
        )

    def discover(self, context: str | None = None) -> list[Discovery]:
        """Ask the discovery service for palindromes (in context, or in the Tanakh)."""
        logger.info("Starting palindrome discovery...")
        return discover_palindromes(context)

    # ─── Source Annotation ───────────────────────────────────────────

    def _annotate(
        self, matches: list[PalindromeMatch]
    ) -> tuple[list[AnnotatedMatch], list[Finding]]:
        """Look up each match's source.

        An unavailable service is reported once and ends the lookups; a
        "not found" answer is reported per match.
        """
        annotated: list[AnnotatedMatch] = []
        findings: list[Finding] = []
        available = True

        for match in matches:
            source = identify_source(match.original) if available else None

            if available and source is None:
                available = False
                findings.append(
                    Finding(
                        severity=Severity.WARNING,
                        code="SOURCE_LOOKUP_UNAVAILABLE",
                        message=(
                            "Source lookup service is unavailable; "
                            "matches are reported without provenance."
                        ),
                    )
                )
            elif source is not None and not source.found:
                findings.append(
                    Finding(
                        severity=Severity.INFO,
                        code="SOURCE_NOT_FOUND",
                        message=f"No Biblical source identified for '{match.original}'.",
                        details={"canonical": match.canonical, "original": match.original},
                    )
                )

            annotated.append(AnnotatedMatch(**match.model_dump(), source=source))

        return annotated, findings
