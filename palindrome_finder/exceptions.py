"""
Exception hierarchy for the palindrome finder.

The core scan never raises for degenerate input; these exceptions exist for
callers that want bad arguments rejected loudly (pipeline, API, CLI).
"""

from __future__ import annotations


class PalindromeFinderError(Exception):
    """Base exception for all palindrome finder failures."""

    def __init__(self, code: str, message: str, details: dict | None = None):
        self.code = code
        self.details = details or {}
        super().__init__(message)


class InvalidRangeError(PalindromeFinderError):
    """The requested length range is empty or non-positive."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("INVALID_LENGTH_RANGE", message, details)
