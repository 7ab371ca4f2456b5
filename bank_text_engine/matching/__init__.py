"""
Matching Module for the bank-text engine.

Links bank-detected candidates to recurrence-generated ledger expenses:
- Description similarity (bigram Dice coefficient)
- Duplicate matcher (amount/date gates, weighted confidence score)
"""

from .similarity import (
    similarity,
    normalize_description,
    bigrams,
    CONTAINMENT_SCORE,
)
from .duplicate_matcher import (
    DuplicateMatcher,
    LedgerExpense,
    MatchResult,
    MatchScoreBreakdown,
)

__all__ = [
    # Similarity
    "similarity",
    "normalize_description",
    "bigrams",
    "CONTAINMENT_SCORE",
    # Matcher
    "DuplicateMatcher",
    "LedgerExpense",
    "MatchResult",
    "MatchScoreBreakdown",
]
