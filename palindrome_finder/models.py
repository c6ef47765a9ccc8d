"""
Pydantic models for palindrome search results.

The core produces PalindromeMatch values only. Everything else here belongs
to the layers around it: provenance lookups, findings and the final report.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


# ─── Severity Levels ────────────────────────────────────────────────


class Severity(str, Enum):
    """Severity of a pipeline finding."""

    ERROR = "ERROR"
    WARNING = "WARNING"  # Degraded result, e.g. lookup unavailable
    INFO = "INFO"


class Finding(BaseModel):
    """A single observation made while building a search report."""

    severity: Severity
    code: str  # Machine-readable, e.g. "SOURCE_NOT_FOUND"
    message: str
    details: dict = Field(default_factory=dict)


# ─── Core Result ────────────────────────────────────────────────────


class PalindromeMatch(BaseModel):
    """One palindromic span of the input.

    ``canonical`` is the normalized letter sequence (the palindrome itself),
    ``original`` is the trimmed source text it was read from, and ``length``
    is the number of canonical letters.
    """

    canonical: str
    original: str
    length: int


# ─── Provenance ─────────────────────────────────────────────────────


class SourceReference(BaseModel):
    """Where a piece of text comes from, as reported by the lookup service."""

    found: bool
    book: Optional[str] = None
    chapter: Optional[str] = None
    verse: Optional[str] = None


class Discovery(BaseModel):
    """A palindrome proposed by the discovery service, with its location."""

    text: str
    book: str
    chapter: str
    verse: str
    meaning: Optional[str] = None


# ─── Search Report ──────────────────────────────────────────────────


class AnnotatedMatch(PalindromeMatch):
    """A match plus its provenance, when a lookup was requested and succeeded."""

    source: Optional[SourceReference] = None


class SearchReport(BaseModel):
    """The final output of the search pipeline."""

    text_hash: str  # SHA-256 of the input text
    min_length: int
    max_length: int
    match_count: int = 0
    matches: list[AnnotatedMatch] = Field(default_factory=list)
    findings: list[Finding] = Field(default_factory=list)
    lookup_method: str = "none"
