"""
Bank Text Engine - Transaction Extraction & Deduplication Pipeline.

Turns free-form text delivered by banking apps (SMS or system notifications)
into structured transaction candidates, and decides whether a candidate
duplicates an expense the recurrence engine already generated.

Main Components:
    - patterns: Institution seed tables and keyword lists
    - config: Extraction and matching configuration
    - extraction: Pattern registry, field normalizer, text extractor
    - matching: Description similarity and duplicate matcher
    - pipeline: Batch processing of inbound messages
"""

from typing import Callable, Dict, List, Optional

# Extraction components
from .extraction.registry import (
    PatternEntry,
    PatternRegistry,
    InvalidPatternEntryError,
    default_notification_registry,
    default_sms_registry,
)
from .extraction.normalizer import parse_amount, try_parse_amount, normalize_date
from .extraction.extractor import (
    TransactionExtractor,
    Candidate,
    TransactionKind,
    SourceKind,
)

# Matching components
from .matching.similarity import similarity
from .matching.duplicate_matcher import (
    DuplicateMatcher,
    LedgerExpense,
    MatchResult,
    MatchScoreBreakdown,
)

# Pipeline
from .pipeline.batch_processor import (
    BankTextBatchProcessor,
    InboundMessage,
    OutcomeStatus,
    BatchResult,
)

# Configuration
from .config.pipeline_config import EXTRACTION_CONFIG, MATCHING_CONFIG
from .config.institution_loader import load_institutions_csv


__version__ = "1.0.0"
__all__ = [
    # Extraction
    "PatternEntry",
    "PatternRegistry",
    "InvalidPatternEntryError",
    "default_notification_registry",
    "default_sms_registry",
    "parse_amount",
    "try_parse_amount",
    "normalize_date",
    "TransactionExtractor",
    "Candidate",
    "TransactionKind",
    "SourceKind",
    # Matching
    "similarity",
    "DuplicateMatcher",
    "LedgerExpense",
    "MatchResult",
    "MatchScoreBreakdown",
    # Pipeline
    "BankTextBatchProcessor",
    "InboundMessage",
    "OutcomeStatus",
    "BatchResult",
    # Configuration
    "EXTRACTION_CONFIG",
    "MATCHING_CONFIG",
    "load_institutions_csv",
    # Main function
    "run_bank_text_pipeline",
]


def run_bank_text_pipeline(
    messages: List[Dict],
    recurring_expenses: List[Dict],
    is_exact_duplicate: Optional[Callable[[Candidate], bool]] = None,
) -> Dict:
    """
    Main entry point for bank-text processing.

    This function orchestrates the complete pipeline:
    1. Extract a candidate from each message
    2. Drop zero-amount candidates and exact duplicates
    3. Link candidates to recurrence-generated expenses
    4. Return the candidates left for user confirmation

    Args:
        messages: List of listener payloads with keys:
            - source_id: App identifier or SMS sender
            - title: Notification title (empty for SMS)
            - body: Notification text or SMS body
            - timestamp_millis: Epoch milliseconds
            - source_kind: "notification" or "sms"
        recurring_expenses: Ledger expense dicts (amount, date, description,
            recurring_expense_id, frequency, id); only recurrence-generated
            entries are matched
        is_exact_duplicate: Optional predicate backed by the hash store

    Returns:
        Dictionary containing:
            - pending: Candidate dicts awaiting user confirmation
            - matched: List of {candidate, expense_id, recurring_expense_id, score}
            - stats: Outcome counts
            - errors: List of {message_index, error_type, error_message}

    Example:
        >>> result = run_bank_text_pipeline(
        ...     messages=[{
        ...         "source_id": "revolut",
        ...         "title": "Revolut",
        ...         "body": "You spent €9,99 at Netflix",
        ...         "timestamp_millis": 1709640000000,
        ...         "source_kind": "notification",
        ...     }],
        ...     recurring_expenses=[{
        ...         "id": "e1",
        ...         "amount": 9.99,
        ...         "date": "2024-03-05",
        ...         "description": "Netflix",
        ...         "recurring_expense_id": "r1",
        ...     }],
        ... )
        >>> result["stats"]["recurring_matches"]
        1
    """
    pool = [LedgerExpense.from_dict(e) for e in recurring_expenses]
    processor = BankTextBatchProcessor(is_exact_duplicate=is_exact_duplicate)
    batch = processor.process_batch(messages, pool)

    matched = [
        {
            "candidate": outcome.candidate.to_dict(),
            "expense_id": outcome.match.target.id,
            "recurring_expense_id": outcome.match.target.recurring_expense_id,
            "score": outcome.match.score,
        }
        for outcome in batch.matched
    ]

    return {
        "pending": [c.to_dict() for c in batch.pending_candidates],
        "matched": matched,
        "stats": {
            "total_messages": batch.stats.total_messages,
            "no_candidate": batch.stats.no_candidate,
            "unparseable_amount": batch.stats.unparseable_amount,
            "exact_duplicates": batch.stats.exact_duplicates,
            "recurring_matches": batch.stats.recurring_matches,
            "pending": batch.stats.pending,
            "failed": batch.stats.failed,
        },
        "errors": [
            {
                "message_index": e.message_index,
                "error_type": e.error_type,
                "error_message": e.error_message,
            }
            for e in batch.errors
        ],
    }
