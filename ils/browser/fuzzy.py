"""Incremental name matching for find-as-you-type navigation.

Matching is a prefix test on base names. Ranking is plain list order, so the
first match is the lowest index in the already-sorted listing.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class FuzzyMatch:
    first_index: int | None
    count: int


NO_MATCH = FuzzyMatch(first_index=None, count=0)


def _fold(text: str, case_sensitive: bool) -> str:
    return text if case_sensitive else text.lower()


def name_matches(name: str, query: str, case_sensitive: bool = False) -> bool:
    if not query:
        return False
    return _fold(name, case_sensitive).startswith(_fold(query, case_sensitive))


def fuzzy_match(query: str, names: Sequence[str], case_sensitive: bool = False) -> FuzzyMatch:
    """Return the first matching index and the number of matches for ``query``."""
    if not query:
        return NO_MATCH
    folded_query = _fold(query, case_sensitive)
    first: int | None = None
    count = 0
    for idx, name in enumerate(names):
        if _fold(name, case_sensitive).startswith(folded_query):
            if first is None:
                first = idx
            count += 1
    return FuzzyMatch(first_index=first, count=count)


def matched_prefix_length(name: str, query: str, case_sensitive: bool = False) -> int:
    """Number of leading characters of ``name`` to highlight for ``query``."""
    if not name_matches(name, query, case_sensitive):
        return 0
    return min(len(query), len(name))
