"""
Pattern Registry for bank-text transaction extraction.

Holds the ordered, appendable table of per-institution extraction rules.
Resolution is first-match-wins in declared order.
"""

import re
import threading
import logging
from typing import Dict, Iterable, Iterator, List, Optional, Pattern, Tuple
from dataclasses import dataclass

from ..patterns.institution_patterns import NOTIFICATION_INSTITUTIONS, SMS_INSTITUTIONS

logger = logging.getLogger(__name__)

# Evaluation order of rule kinds
RULE_KINDS = ("expense", "income", "transfer")


class InvalidPatternEntryError(ValueError):
    """Raised when an institution entry cannot be used for extraction."""
    pass


def _compile_rule(rule) -> Optional[Pattern]:
    if rule is None:
        return None
    if isinstance(rule, re.Pattern):
        return rule
    if not str(rule).strip():
        return None
    return re.compile(rule, re.IGNORECASE)


@dataclass(frozen=True)
class PatternEntry:
    """One bank or payment app and its text-matching rules."""
    name: str
    identifier: str
    account_label: str
    expense: Optional[Pattern] = None
    income: Optional[Pattern] = None
    transfer: Optional[Pattern] = None

    def __post_init__(self):
        if not self.name or not str(self.name).strip():
            raise InvalidPatternEntryError("Institution entry requires a name")
        if not self.identifier or not str(self.identifier).strip():
            raise InvalidPatternEntryError(f"Institution '{self.name}' requires an identifier")

        rules = self.rules()
        if not rules:
            raise InvalidPatternEntryError(
                f"Institution '{self.name}' defines no expense, income or transfer rule"
            )
        for kind, pattern in rules:
            if pattern.groups < 1:
                raise InvalidPatternEntryError(
                    f"Institution '{self.name}' {kind} rule has no amount capture group"
                )

    def rules(self) -> List[Tuple[str, Pattern]]:
        """Return (kind, pattern) pairs for present rules, in evaluation order."""
        return [
            (kind, getattr(self, kind))
            for kind in RULE_KINDS
            if getattr(self, kind) is not None
        ]

    @classmethod
    def from_dict(cls, data: Dict) -> "PatternEntry":
        """
        Build an entry from a seed dict.

        Rules may be regex source strings (compiled case-insensitively)
        or already-compiled patterns.
        """
        name = data.get("name", "")
        return cls(
            name=name,
            identifier=data.get("identifier", ""),
            account_label=data.get("account_label") or data.get("accountLabel") or name,
            expense=_compile_rule(data.get("expense")),
            income=_compile_rule(data.get("income")),
            transfer=_compile_rule(data.get("transfer")),
        )


class PatternRegistry:
    """
    Ordered table of institution entries.

    Readers work on an immutable tuple snapshot; append() swaps in a new
    snapshot under a single writer lock.
    """

    def __init__(self, entries: Iterable[PatternEntry] = ()):
        self._entries: Tuple[PatternEntry, ...] = tuple(entries)
        self._write_lock = threading.Lock()

    @classmethod
    def from_dicts(cls, dicts: Iterable[Dict]) -> "PatternRegistry":
        return cls(PatternEntry.from_dict(d) for d in dicts)

    @property
    def entries(self) -> Tuple[PatternEntry, ...]:
        return self._entries

    def append(self, entry: PatternEntry) -> None:
        """Register a new institution after the existing ones."""
        if not isinstance(entry, PatternEntry):
            raise TypeError(f"Expected PatternEntry, got {type(entry).__name__}")
        with self._write_lock:
            self._entries = self._entries + (entry,)
        logger.debug("Registered institution '%s' (identifier=%s)", entry.name, entry.identifier)

    def resolve(self, source_id: Optional[str], via_substring: bool) -> Optional[PatternEntry]:
        """
        Find the first entry matching a source id.

        Args:
            source_id: Notification app identifier or SMS sender
            via_substring: True for SMS (sender contains identifier),
                False for notifications (identifier equality)

        Returns:
            The first matching PatternEntry in declared order, or None
        """
        if not source_id:
            return None

        source = source_id.lower()
        for entry in self._entries:
            identifier = entry.identifier.lower()
            if via_substring:
                if identifier in source:
                    return entry
            elif identifier == source:
                return entry
        return None

    def names(self) -> List[str]:
        return [entry.name for entry in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[PatternEntry]:
        return iter(self._entries)


def default_notification_registry() -> PatternRegistry:
    """Build a fresh registry seeded with the built-in notification sources."""
    return PatternRegistry.from_dicts(NOTIFICATION_INSTITUTIONS)


def default_sms_registry() -> PatternRegistry:
    """Build a fresh registry seeded with the built-in SMS senders."""
    return PatternRegistry.from_dicts(SMS_INSTITUTIONS)
