"""
Keyword Matching for extracted transaction text.

Provides keyword matching used to detect financial senders, money signals,
and bank account names inside merchant descriptions.
"""

import re
from typing import Iterable, List, Optional, Tuple

from rapidfuzz import fuzz

_WORD = re.compile(r"[a-z0-9\u00e0-\u00ff]+")


def contains_any(text: str, keywords: Iterable[str]) -> bool:
    """
    Case-insensitive substring test against a keyword list.

    Example:
        >>> contains_any("INFO-BANCA", ["BANCA", "CARD"])
        True
    """
    if not text:
        return False
    upper_text = text.upper()
    return any(keyword.upper() in upper_text for keyword in keywords)


def _word_pattern(keyword: str) -> str:
    return r"(?<![a-z0-9])" + re.escape(keyword.lower()) + r"(?![a-z0-9])"


def _word_windows(words: List[str], size: int) -> List[str]:
    """Runs of size consecutive words, joined by single spaces."""
    return [" ".join(words[i:i + size]) for i in range(len(words) - size + 1)]


def match_keywords(
    text: str,
    keywords: List[str],
    fuzzy_threshold: int = 90,
    min_fuzzy_length: int = 6
) -> Optional[Tuple[str, float, str]]:
    """
    Match text against a list of keywords.

    Uses whole-word exact matching first, then fuzzy matching for keywords
    of at least min_fuzzy_length characters. Fuzzy matching also compares
    whole words only, so "banca" never matches inside "bancarella".

    Args:
        text: Text to match (any case)
        keywords: List of keyword strings
        fuzzy_threshold: Minimum ratio for fuzzy matching (0-100)
        min_fuzzy_length: Shorter keywords are only matched exactly

    Returns:
        Tuple of (matched_keyword, confidence, match_method) or None

    Example:
        >>> match_keywords("Ricarica Revolut", ["revolut", "paypal"])
        ('revolut', 1.0, 'keyword')
    """
    if not text:
        return None

    lower_text = text.lower()
    words = _WORD.findall(lower_text)

    # Exact match
    for keyword in keywords:
        if re.search(_word_pattern(keyword), lower_text):
            return (keyword, 1.0, "keyword")

    # Fuzzy match
    best_score = 0.0
    best_match = None
    for keyword in keywords:
        if len(keyword) < min_fuzzy_length:
            continue
        target = keyword.lower()
        for window in _word_windows(words, len(target.split())):
            score = fuzz.ratio(target, window)
            if score > best_score and score >= fuzzy_threshold:
                best_score = score
                best_match = keyword

    if best_match:
        return (best_match, best_score / 100.0, "fuzzy")

    return None
