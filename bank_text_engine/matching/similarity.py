"""
Description similarity for duplicate matching.

Character-bigram Dice coefficient over normalized descriptions, with a
fixed score when one description contains the other.
"""

import re
from typing import Set

# Similarity when one normalized description contains the other
CONTAINMENT_SCORE = 0.85

# Letters kept besides a-z: accented letters used in IT/ES bank texts
_ACCENTED_LETTERS = "àèéìòùáíóúñüç"
_DISALLOWED_CHARS = re.compile(rf"[^a-z0-9{_ACCENTED_LETTERS}\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize_description(text: str) -> str:
    """
    Normalize a description for comparison.

    Example:
        >>> normalize_description("  NETFLIX.COM  Monthly!! ")
        'netflixcom monthly'
    """
    if not text:
        return ""
    lowered = str(text).lower()
    stripped = _DISALLOWED_CHARS.sub("", lowered)
    return _WHITESPACE.sub(" ", stripped).strip()


def bigrams(text: str) -> Set[str]:
    """Overlapping two-character substrings of text."""
    return {text[i:i + 2] for i in range(len(text) - 1)}


def similarity(a: str, b: str, containment_score: float = CONTAINMENT_SCORE) -> float:
    """
    Similarity between two descriptions, in [0, 1].

    Symmetric; identical normalized strings score 1.0, containment scores
    containment_score, otherwise the bigram Dice coefficient.
    """
    a = normalize_description(a)
    b = normalize_description(b)

    if a == b:
        return 1.0
    if not a or not b:
        return 0.0

    if a in b or b in a:
        return containment_score

    bigrams_a = bigrams(a)
    bigrams_b = bigrams(b)
    if not bigrams_a or not bigrams_b:
        return 0.0

    intersection = len(bigrams_a & bigrams_b)
    return (2.0 * intersection) / (len(bigrams_a) + len(bigrams_b))
