"""
Trigram utilities for fuzzy name matching.

Mirrors PostgreSQL pg_trgm semantics so the usual pg_trgm thresholds
(0.3 by default) carry over unchanged:
- text is lower-cased and split on non-alphanumeric characters
- every word is padded with two leading spaces and one trailing space
- similarity is |A & B| / |A | B| over the two trigram sets
"""

import re
from typing import List, Set

_WORD_SPLIT = re.compile(r"[^\w]+|_+")


def extract_trigrams(text: str) -> Set[str]:
    """
    Extract the pg_trgm-style trigram set of a string.

    Args:
        text: Raw text (name, birth place, ...)

    Returns:
        Set of three-character trigrams, empty for blank input
    """
    if not text:
        return set()

    trigrams: Set[str] = set()
    for word in _WORD_SPLIT.split(text.lower()):
        if not word:
            continue
        padded = f"  {word} "
        for i in range(len(padded) - 2):
            trigrams.add(padded[i:i + 3])
    return trigrams


def trigram_similarity(left: str, right: str) -> float:
    """
    Calculate trigram similarity between two strings.

    Args:
        left: First string
        right: Second string

    Returns:
        Similarity score between 0.0 and 1.0
    """
    left_set = extract_trigrams(left)
    right_set = extract_trigrams(right)
    if not left_set or not right_set:
        return 0.0

    shared = len(left_set & right_set)
    return shared / len(left_set | right_set)


def trigram_index_terms(text: str) -> List[str]:
    """Sorted trigram list stored alongside a record for index lookups."""
    return sorted(extract_trigrams(text))
