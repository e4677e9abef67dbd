#!/usr/bin/env python3
"""
String Similarity

Normalized edit-distance similarity used for the description factor.
"""


def levenshtein_distance(s1: str, s2: str) -> int:
    """
    Compute Levenshtein edit distance between two strings.

    Unit-cost insertions, deletions and substitutions, using a single
    rolling row over the shorter string for O(min(m, n)) memory.

    Args:
        s1: First string
        s2: Second string

    Returns:
        Minimum number of single-character edits turning s1 into s2
    """
    if s1 == s2:
        return 0

    # Keep the row as short as possible
    if len(s1) < len(s2):
        s1, s2 = s2, s1

    if not s2:
        return len(s1)

    previous_row = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1, start=1):
        current_row = [i]
        for j, c2 in enumerate(s2, start=1):
            insertions = previous_row[j] + 1
            deletions = current_row[j - 1] + 1
            substitutions = previous_row[j - 1] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row

    return previous_row[-1]


def similarity(s1: str, s2: str) -> float:
    """
    Similarity between two strings in [0, 1].

    Both strings are lowercased and trimmed first. Identical strings score 1,
    an empty string against a non-empty one scores 0, otherwise the score is
    (longer length - edit distance) / longer length.

    Examples:
        similarity("Transfer", " transfer ") -> 1.0
        similarity("", "payment") -> 0.0
        similarity("abc", "abd") -> 0.666...
    """
    s1_clean = (s1 or "").lower().strip()
    s2_clean = (s2 or "").lower().strip()

    if s1_clean == s2_clean:
        return 1.0
    if not s1_clean or not s2_clean:
        return 0.0

    max_len = max(len(s1_clean), len(s2_clean))
    distance = levenshtein_distance(s1_clean, s2_clean)
    return (max_len - distance) / max_len
