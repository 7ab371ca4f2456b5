"""
Bank-Text Batch Processor for inbound SMS and notification messages.
Runs extraction, exact-duplicate suppression and recurring-expense matching
over a batch, with per-message error handling.
"""

import logging
import traceback
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional
from dataclasses import dataclass, field
from datetime import datetime

import pandas as pd

from ..extraction.extractor import TransactionExtractor, Candidate, SourceKind
from ..matching.duplicate_matcher import DuplicateMatcher, LedgerExpense, MatchResult

logger = logging.getLogger(__name__)

FRAME_COLUMNS = ("source_id", "title", "body", "timestamp_millis", "source_kind")


class InvalidMessageError(Exception):
    """Raised when an inbound message cannot be interpreted."""
    pass


class OutcomeStatus(str, Enum):
    """Where a message ended up in the pipeline."""
    NO_CANDIDATE = "no_candidate"
    UNPARSEABLE_AMOUNT = "unparseable_amount"
    EXACT_DUPLICATE = "exact_duplicate"
    RECURRING_MATCH = "recurring_match"
    PENDING = "pending"


@dataclass(frozen=True)
class InboundMessage:
    """One raw message as delivered by the SMS reader or notification observer."""
    source_id: str
    title: str
    body: str
    timestamp_millis: int
    source_kind: SourceKind = SourceKind.NOTIFICATION

    @classmethod
    def from_dict(cls, data: Dict) -> "InboundMessage":
        """Build from a listener payload; raises KeyError, ValueError or InvalidMessageError."""
        source_kind = data.get("source_kind") or data.get("sourceKind") or SourceKind.NOTIFICATION.value
        if isinstance(source_kind, SourceKind):
            kind = source_kind
        else:
            try:
                kind = SourceKind(str(source_kind).strip().lower())
            except ValueError:
                raise InvalidMessageError(f"Unknown source kind: {source_kind!r}") from None

        source_id = data["source_id"] if "source_id" in data else data["sourceId"]
        timestamp = data["timestamp_millis"] if "timestamp_millis" in data else data["timestamp"]

        return cls(
            source_id=str(source_id),
            title=str(data.get("title") or ""),
            body=str(data.get("body") or data.get("text") or ""),
            timestamp_millis=int(timestamp),
            source_kind=kind,
        )


@dataclass
class MessageOutcome:
    """Pipeline result for a single message."""
    message_index: int
    status: OutcomeStatus
    candidate: Optional[Candidate] = None
    match: Optional[MatchResult] = None


@dataclass
class ProcessingError:
    """Details of a processing error."""
    message_index: int
    error_type: str
    error_message: str
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())


@dataclass
class BatchStats:
    """Statistics for batch processing."""
    total_messages: int = 0
    processed: int = 0
    failed: int = 0

    # Outcome counts
    no_candidate: int = 0
    unparseable_amount: int = 0
    exact_duplicates: int = 0
    recurring_matches: int = 0
    pending: int = 0

    # Timing
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @property
    def processing_time(self) -> float:
        """Calculate total processing time in seconds."""
        if self.start_time and self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return 0.0

    @property
    def detection_rate(self) -> float:
        """Percentage of messages that produced a candidate."""
        if self.total_messages == 0:
            return 0.0
        detected = self.processed - self.failed - self.no_candidate
        return (detected / self.total_messages) * 100

    def record(self, status: OutcomeStatus) -> None:
        if status == OutcomeStatus.NO_CANDIDATE:
            self.no_candidate += 1
        elif status == OutcomeStatus.UNPARSEABLE_AMOUNT:
            self.unparseable_amount += 1
        elif status == OutcomeStatus.EXACT_DUPLICATE:
            self.exact_duplicates += 1
        elif status == OutcomeStatus.RECURRING_MATCH:
            self.recurring_matches += 1
        elif status == OutcomeStatus.PENDING:
            self.pending += 1


@dataclass
class BatchResult:
    """Complete result of batch processing."""
    stats: BatchStats
    outcomes: List[MessageOutcome]
    errors: List[ProcessingError]
    error_summary: Dict[str, int] = field(default_factory=dict)

    @property
    def pending_candidates(self) -> List[Candidate]:
        """Candidates to hand to the pending-transaction store."""
        return [o.candidate for o in self.outcomes if o.status == OutcomeStatus.PENDING]

    @property
    def matched(self) -> List[MessageOutcome]:
        return [o for o in self.outcomes if o.status == OutcomeStatus.RECURRING_MATCH]

    def to_dataframe(self) -> pd.DataFrame:
        """
        Convert message outcomes to a pandas DataFrame.

        Returns:
            pandas DataFrame, one row per outcome
        """
        rows = []
        for outcome in self.outcomes:
            row = {
                "message_index": outcome.message_index,
                "status": outcome.status.value,
            }
            if outcome.candidate:
                row.update(outcome.candidate.to_dict())
            if outcome.match:
                row["matched_expense_id"] = outcome.match.target.id
                row["matched_recurring_id"] = outcome.match.target.recurring_expense_id
                row["match_score"] = round(outcome.match.score, 4)
            rows.append(row)

        return pd.DataFrame(rows)

    def errors_to_dataframe(self) -> pd.DataFrame:
        rows = []
        for error in self.errors:
            rows.append({
                "message_index": error.message_index,
                "error_type": error.error_type,
                "error_message": error.error_message,
                "timestamp": error.timestamp,
            })
        return pd.DataFrame(rows)


class BankTextBatchProcessor:
    """Batch processor for inbound bank messages."""

    def __init__(
        self,
        notification_extractor: Optional[TransactionExtractor] = None,
        sms_extractor: Optional[TransactionExtractor] = None,
        matcher: Optional[DuplicateMatcher] = None,
        is_exact_duplicate: Optional[Callable[[Candidate], bool]] = None
    ):
        """
        Initialize the batch processor.

        Args:
            notification_extractor: Extractor for notification sources
            sms_extractor: Extractor for SMS sources
            matcher: Duplicate matcher for recurrence-generated expenses
            is_exact_duplicate: Predicate backed by the external hash store;
                when omitted no exact-duplicate suppression happens
        """
        self.notification_extractor = notification_extractor or TransactionExtractor.for_notifications()
        self.sms_extractor = sms_extractor or TransactionExtractor.for_sms()
        self.matcher = matcher or DuplicateMatcher()
        self.is_exact_duplicate = is_exact_duplicate

        logger.info(
            f"Initialized batch processor: {len(self.notification_extractor.registry)} notification "
            f"sources, {len(self.sms_extractor.registry)} SMS sources"
        )

    def _extractor_for(self, source_kind: SourceKind) -> TransactionExtractor:
        if source_kind == SourceKind.SMS:
            return self.sms_extractor
        return self.notification_extractor

    def process_message(
        self,
        message: InboundMessage,
        recurring_pool: Iterable[LedgerExpense] = (),
        index: int = 0
    ) -> MessageOutcome:
        """Run one message through extraction, duplicate checks and matching."""
        extractor = self._extractor_for(message.source_kind)
        candidate = extractor.extract(
            message.source_id, message.title, message.body, message.timestamp_millis
        )
        if candidate is None:
            return MessageOutcome(index, OutcomeStatus.NO_CANDIDATE)

        if not candidate.has_usable_amount:
            logger.info(f"Dropping zero-amount candidate from {candidate.source_label}: {candidate.raw_text!r}")
            return MessageOutcome(index, OutcomeStatus.UNPARSEABLE_AMOUNT, candidate)

        if self.is_exact_duplicate and self.is_exact_duplicate(candidate):
            logger.debug(f"Skipped exact duplicate: {candidate.description}")
            return MessageOutcome(index, OutcomeStatus.EXACT_DUPLICATE, candidate)

        eligible = self.matcher.eligible_targets(recurring_pool)
        match = self.matcher.find_match(candidate, eligible)
        if match:
            logger.info(
                f"Linked {candidate.description} (€{candidate.amount:.2f}) to recurring expense "
                f"{match.target.recurring_expense_id} (score {match.score:.2f})"
            )
            return MessageOutcome(index, OutcomeStatus.RECURRING_MATCH, candidate, match)

        return MessageOutcome(index, OutcomeStatus.PENDING, candidate)

    def process_batch(
        self,
        messages: List,
        recurring_pool: Iterable[LedgerExpense] = (),
        progress_callback: Optional[Callable[[int, int, str], None]] = None
    ) -> BatchResult:
        """
        Process a batch of inbound messages.

        Args:
            messages: InboundMessage objects or listener payload dicts
            recurring_pool: Ledger expenses to match against
            progress_callback: Optional callback(current, total, message)

        Returns:
            BatchResult with all outcomes and errors
        """
        pool = list(recurring_pool)
        stats = BatchStats(
            total_messages=len(messages),
            start_time=datetime.now()
        )

        outcomes = []
        errors = []
        error_types = {}

        logger.info(f"Starting batch processing of {len(messages)} messages")

        for idx, raw in enumerate(messages):
            try:
                if progress_callback:
                    progress_callback(idx + 1, len(messages), f"Processing message {idx + 1}")

                message = raw if isinstance(raw, InboundMessage) else InboundMessage.from_dict(raw)
                outcome = self.process_message(message, pool, index=idx)

                outcomes.append(outcome)
                stats.processed += 1
                stats.record(outcome.status)

            except KeyError as e:
                error_type = "MISSING_DATA"
                error_message = f"Missing required field: {str(e)}"
            except InvalidMessageError as e:
                error_type = "INVALID_MESSAGE"
                error_message = str(e)
            except (ValueError, TypeError) as e:
                error_type = "DATA_VALIDATION_ERROR"
                error_message = str(e)
            except Exception as e:
                error_type = "PROCESSING_ERROR"
                error_message = f"{type(e).__name__}: {str(e)}"
                logger.error(f"Processing error in message {idx}: {traceback.format_exc()}")
            else:
                continue

            errors.append(ProcessingError(
                message_index=idx,
                error_type=error_type,
                error_message=error_message
            ))
            stats.failed += 1
            stats.processed += 1
            error_types[error_type] = error_types.get(error_type, 0) + 1
            logger.error(f"{error_type} in message {idx}: {error_message}")

        stats.end_time = datetime.now()

        logger.info(
            f"Batch processing complete: {stats.pending} pending, {stats.recurring_matches} matched, "
            f"{stats.exact_duplicates} duplicates, {stats.failed} failed, "
            f"time: {stats.processing_time:.2f}s"
        )

        return BatchResult(
            stats=stats,
            outcomes=outcomes,
            errors=errors,
            error_summary=error_types
        )

    def process_frame(
        self,
        df: pd.DataFrame,
        recurring_pool: Iterable[LedgerExpense] = ()
    ) -> pd.DataFrame:
        """
        Process a DataFrame of messages.

        Args:
            df: Frame with columns source_id, title, body, timestamp_millis, source_kind
            recurring_pool: Ledger expenses to match against

        Returns:
            Outcome DataFrame (see BatchResult.to_dataframe)
        """
        missing = [c for c in FRAME_COLUMNS if c not in df.columns]
        if missing:
            raise ValueError(f"Message frame missing columns: {', '.join(missing)}")

        records = df[list(FRAME_COLUMNS)].fillna({"title": "", "body": ""}).to_dict(orient="records")
        return self.process_batch(records, recurring_pool).to_dataframe()
