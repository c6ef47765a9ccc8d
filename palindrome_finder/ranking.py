"""
Deduplication and ordering of raw scan matches.

The same palindrome is usually found several times: with and without a
trailing comma, from an opening parenthesis or from the letter after it, and
so on. Matches are grouped by canonical form and one representative per
group is kept, the one with the shortest original text. Exact ties keep the
first match seen.

The result is ordered longest first. Matches of equal length stay in the
order their groups were first seen; this is not a total order.
"""

from __future__ import annotations

from .models import PalindromeMatch


def resolve(
    raw_matches: list[PalindromeMatch],
    keep_all_occurrences: bool = False,
) -> list[PalindromeMatch]:
    """Collapse raw matches into the final, ranked set.

    Args:
        raw_matches: Scanner output in discovery order.
        keep_all_occurrences: Group by (canonical, original) instead of
            canonical alone, so every distinct source text is kept.

    Returns:
        Deduplicated matches sorted by descending length.
    """
    best: dict[tuple[str, ...], PalindromeMatch] = {}

    for match in raw_matches:
        key = _group_key(match, keep_all_occurrences)
        current = best.get(key)
        if current is None or len(match.original) < len(current.original):
            best[key] = match

    # sorted() is stable: equal lengths keep first-seen group order
    return sorted(best.values(), key=lambda m: m.length, reverse=True)


def _group_key(match: PalindromeMatch, keep_all_occurrences: bool) -> tuple[str, ...]:
    if keep_all_occurrences:
        return (match.canonical, match.original)
    return (match.canonical,)
