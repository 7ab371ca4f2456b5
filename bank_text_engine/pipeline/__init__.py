"""
Pipeline Module for the bank-text engine.

Wires extraction, exact-duplicate suppression and recurring-expense matching
together for batches of inbound messages.
"""

from .batch_processor import (
    BankTextBatchProcessor,
    InboundMessage,
    InvalidMessageError,
    MessageOutcome,
    OutcomeStatus,
    ProcessingError,
    BatchStats,
    BatchResult,
)

__all__ = [
    "BankTextBatchProcessor",
    "InboundMessage",
    "InvalidMessageError",
    "MessageOutcome",
    "OutcomeStatus",
    "ProcessingError",
    "BatchStats",
    "BatchResult",
]
