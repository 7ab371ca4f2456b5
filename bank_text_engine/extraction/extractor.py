"""
Text Transaction Extractor.
Turns raw banking SMS / notification text into structured transaction candidates.
"""

import logging
from enum import Enum
from typing import Dict, List, Optional
from dataclasses import dataclass, asdict, replace

from ..config.pipeline_config import EXTRACTION_CONFIG
from ..patterns.institution_patterns import (
    GENERIC_SMS_INSTITUTION,
    FINANCIAL_SENDER_KEYWORDS,
    MONEY_SIGNAL_KEYWORDS,
    BANK_ACCOUNT_KEYWORDS,
)
from .registry import (
    PatternEntry,
    PatternRegistry,
    default_notification_registry,
    default_sms_registry,
)
from .normalizer import try_parse_amount, normalize_date, clean_merchant_name
from .keyword_matching import contains_any, match_keywords

logger = logging.getLogger(__name__)


class TransactionKind(str, Enum):
    """Kind of money movement described by a message."""
    EXPENSE = "expense"
    INCOME = "income"
    TRANSFER = "transfer"


class SourceKind(str, Enum):
    """Delivery channel of the raw text."""
    SMS = "sms"
    NOTIFICATION = "notification"


@dataclass(frozen=True)
class Candidate:
    """Structured transaction extracted from raw text, not yet persisted."""
    kind: TransactionKind
    amount: float
    description: str
    date: str  # YYYY-MM-DD
    source_kind: SourceKind
    source_label: str  # lower-cased institution name
    raw_text: str
    account_label: str
    counterparty_account: Optional[str] = None  # transfers only
    requires_confirmation: bool = False  # expense that looks like an own-account transfer

    @property
    def has_usable_amount(self) -> bool:
        """False when extraction produced no usable numeric value."""
        return self.amount > 0

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["kind"] = self.kind.value
        data["source_kind"] = self.source_kind.value
        return data


class TransactionExtractor:
    """Extracts transaction candidates from one delivery channel."""

    def __init__(
        self,
        registry: PatternRegistry,
        source_kind: SourceKind = SourceKind.NOTIFICATION,
        config: Optional[Dict] = None,
        fallback_entry: Optional[PatternEntry] = None
    ):
        """
        Args:
            registry: Institution table to resolve sources against
            source_kind: Channel this extractor serves; decides the
                resolution rule and how the search text is built
            config: Overrides merged over EXTRACTION_CONFIG
            fallback_entry: Catch-all rules for unknown SMS senders that
                look financial (SMS only)
        """
        self.registry = registry
        self.source_kind = SourceKind(source_kind)
        overrides = config or {}
        self.config = {**EXTRACTION_CONFIG, **overrides}
        self.config["default_descriptions"] = {
            **EXTRACTION_CONFIG["default_descriptions"],
            **(overrides.get("default_descriptions") or {}),
        }
        self.fallback_entry = fallback_entry

    @classmethod
    def for_notifications(cls, config: Optional[Dict] = None) -> "TransactionExtractor":
        return cls(default_notification_registry(), SourceKind.NOTIFICATION, config)

    @classmethod
    def for_sms(cls, config: Optional[Dict] = None, generic_fallback: bool = False) -> "TransactionExtractor":
        fallback = PatternEntry.from_dict(GENERIC_SMS_INSTITUTION) if generic_fallback else None
        return cls(default_sms_registry(), SourceKind.SMS, config, fallback_entry=fallback)

    def supported_institutions(self) -> List[str]:
        return self.registry.names()

    def register(self, entry: PatternEntry) -> None:
        self.registry.append(entry)

    def extract(
        self,
        source_id: str,
        title: Optional[str],
        text: Optional[str],
        timestamp_millis: int
    ) -> Optional[Candidate]:
        """
        Extract at most one transaction candidate from a raw message.

        Args:
            source_id: App identifier (notifications) or sender (SMS)
            title: Notification title; ignored for SMS
            text: Notification text or SMS body
            timestamp_millis: Message timestamp, epoch milliseconds

        Returns:
            Candidate, or None when the source is unknown or no rule matches
        """
        is_sms = self.source_kind == SourceKind.SMS
        search_text = self._build_search_text(title, text)

        entry = self.registry.resolve(source_id, via_substring=is_sms)
        if entry is None and is_sms:
            entry = self._fallback_for(source_id, search_text)
        if entry is None:
            logger.debug("No institution for %s source %r", self.source_kind.value, source_id)
            return None

        for kind, pattern in entry.rules():
            match = pattern.search(search_text)
            if match:
                return self._build_candidate(TransactionKind(kind), match, entry, search_text, timestamp_millis)

        logger.debug("No %s rule matched for %s", self.source_kind.value, entry.name)
        return None

    def _build_search_text(self, title: Optional[str], text: Optional[str]) -> str:
        if self.source_kind == SourceKind.SMS:
            return text or ""
        return f"{title or ''} {text or ''}".strip()

    def _fallback_for(self, sender: Optional[str], body: str) -> Optional[PatternEntry]:
        if self.fallback_entry is None or not sender:
            return None

        is_financial_sender = contains_any(sender, FINANCIAL_SENDER_KEYWORDS)
        has_money_signal = contains_any(body, MONEY_SIGNAL_KEYWORDS)
        if not (is_financial_sender or has_money_signal):
            return None

        logger.debug("Using generic rules for potential financial sender %r", sender)
        return replace(self.fallback_entry, name=sender, account_label=f"Account {sender}")

    def _build_candidate(
        self,
        kind: TransactionKind,
        match,
        entry: PatternEntry,
        search_text: str,
        timestamp_millis: int
    ) -> Candidate:
        groups = match.groups()
        amount_text = groups[0]
        detail = (groups[1] or "").strip() if len(groups) > 1 else ""

        amount = try_parse_amount(amount_text)
        if amount is None:
            logger.warning(
                "Unparseable amount %r from %s %s rule", amount_text, entry.name, kind.value
            )
            amount = 0.0

        default_description = self.config["default_descriptions"][kind.value]
        counterparty = None
        if kind == TransactionKind.TRANSFER:
            description = default_description
            counterparty = detail or None
        else:
            description = detail or default_description
            if kind == TransactionKind.EXPENSE and self.source_kind == SourceKind.NOTIFICATION:
                description = clean_merchant_name(description)

        return Candidate(
            kind=kind,
            amount=amount,
            description=description,
            date=normalize_date(timestamp_millis, self.config["reference_timezone"]),
            source_kind=self.source_kind,
            source_label=entry.name.lower(),
            raw_text=search_text,
            account_label=entry.account_label,
            counterparty_account=counterparty,
            requires_confirmation=self._is_likely_transfer(kind, description),
        )

    def _is_likely_transfer(self, kind: TransactionKind, description: str) -> bool:
        if kind != TransactionKind.EXPENSE:
            return False
        keyword_match = match_keywords(
            description,
            BANK_ACCOUNT_KEYWORDS,
            fuzzy_threshold=self.config["bank_keyword_fuzzy_threshold"],
            min_fuzzy_length=self.config["bank_keyword_min_fuzzy_length"],
        )
        if keyword_match:
            logger.debug("Bank keyword %r in merchant %r", keyword_match[0], description)
            return True
        return False
