"""
String similarity helpers for "did you mean?" suggestions.
"""

from collections.abc import Iterable
from typing import Optional


def levenshtein_distance(s1: str, s2: str) -> int:
    """
    Calculate the Levenshtein (edit) distance between two strings.

    The Levenshtein distance is the minimum number of single-character
    edits (insertions, deletions, or substitutions) required to change
    one string into the other. Comparison is case-sensitive; callers
    lower-case both inputs when they want a case-insensitive distance.

    Args:
        s1: First string
        s2: Second string

    Returns:
        The edit distance as an integer
    """
    if len(s1) < len(s2):
        return levenshtein_distance(s2, s1)

    if len(s2) == 0:
        return len(s1)

    # Use two rows for space efficiency
    previous_row = list(range(len(s2) + 1))

    for i, c1 in enumerate(s1):
        current_row = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row

    return previous_row[-1]


def first_within(
    name: str,
    candidates: Iterable[str],
    max_distance: int = 2,
) -> Optional[str]:
    """
    Find the first candidate that is close to, but not the same as, a name.

    Candidates are scanned in the order given and the first one whose
    case-insensitive edit distance is at most ``max_distance`` wins, even
    when a later candidate would be closer. Candidates equal to the name
    ignoring case are never suggested.

    Args:
        name: The name to find a suggestion for
        candidates: Valid names, in priority order
        max_distance: Maximum edit distance to accept (default 2)

    Returns:
        The suggested candidate, or None if nothing is close enough
    """
    lowered = name.lower()
    for candidate in candidates:
        other = candidate.lower()
        if other == lowered:
            continue
        if levenshtein_distance(lowered, other) <= max_distance:
            return candidate
    return None

