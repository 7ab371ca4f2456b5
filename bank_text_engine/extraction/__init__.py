"""
Extraction Module for the bank-text engine.

Turns raw SMS / notification text into transaction candidates through:
- Pattern registry (institution resolution, first match wins)
- Field normalization (amounts, dates, merchant names)
- Keyword matching (financial senders, bank account names)
- Text transaction extractor (kind rules tried expense → income → transfer)
"""

from .registry import (
    PatternEntry,
    PatternRegistry,
    InvalidPatternEntryError,
    RULE_KINDS,
    default_notification_registry,
    default_sms_registry,
)
from .normalizer import (
    parse_amount,
    try_parse_amount,
    normalize_date,
    parse_iso_date,
    clean_merchant_name,
)
from .keyword_matching import contains_any, match_keywords
from .extractor import (
    TransactionExtractor,
    Candidate,
    TransactionKind,
    SourceKind,
)

__all__ = [
    # Registry
    "PatternEntry",
    "PatternRegistry",
    "InvalidPatternEntryError",
    "RULE_KINDS",
    "default_notification_registry",
    "default_sms_registry",
    # Normalization utilities
    "parse_amount",
    "try_parse_amount",
    "normalize_date",
    "parse_iso_date",
    "clean_merchant_name",
    # Keyword matching utilities
    "contains_any",
    "match_keywords",
    # Extractor
    "TransactionExtractor",
    "Candidate",
    "TransactionKind",
    "SourceKind",
]
