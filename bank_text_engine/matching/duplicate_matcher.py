"""
Duplicate Matcher for bank-detected transactions.

Decides whether a candidate extracted from bank text is the same real-world
payment as an expense the recurrence engine already generated.

Scoring:
    Hard gates (any failure excludes the target):
        - Amount within ±5% of the target amount
        - Date within ±7 days
    Soft score (0-1):
        - Amount closeness: 40%
        - Date closeness: 30%
        - Description similarity: 30%
    Description gate:
        - Similarity below 0.4 excludes the target, unless amount and
          date are near-exact (amount score > 0.9 and date score > 0.7)
"""

import logging
from typing import Dict, Iterable, List, Optional
from dataclasses import dataclass

from ..config.pipeline_config import MATCHING_CONFIG
from ..extraction.normalizer import parse_iso_date
from .similarity import similarity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerExpense:
    """Read-only view of a ledger expense, as needed for matching."""
    amount: float
    date: str  # YYYY-MM-DD
    description: str
    recurring_expense_id: Optional[str] = None
    frequency: str = "single"
    id: Optional[str] = None

    @property
    def is_recurrence_generated(self) -> bool:
        """True for occurrences materialized from a recurring template."""
        return bool(self.recurring_expense_id) and self.frequency == MATCHING_CONFIG["eligible_frequency"]

    @classmethod
    def from_dict(cls, data: Dict) -> "LedgerExpense":
        """Build from a ledger record with snake_case or camelCase keys."""
        recurring_id = data.get("recurring_expense_id", data.get("recurringExpenseId"))
        return cls(
            amount=float(data.get("amount", 0) or 0),
            date=str(data.get("date", "")),
            description=str(data.get("description", "") or ""),
            recurring_expense_id=recurring_id,
            frequency=data.get("frequency") or "single",
            id=data.get("id"),
        )


@dataclass
class MatchScoreBreakdown:
    """Component scores for one candidate/target pair."""
    amount_score: float
    date_score: float
    description_score: float
    total_score: float
    description_gate_waived: bool = False


@dataclass
class MatchResult:
    """Best surviving target for a candidate."""
    target: LedgerExpense
    score: float
    breakdown: Optional[MatchScoreBreakdown] = None


class DuplicateMatcher:
    """Scores bank-detected candidates against recurrence-generated expenses."""

    def __init__(self, config: Optional[Dict] = None):
        overrides = config or {}
        self.config = {**MATCHING_CONFIG, **overrides}
        self.weights = {**MATCHING_CONFIG["weights"], **(overrides.get("weights") or {})}
        self.config["weights"] = self.weights

    def eligible_targets(self, expenses: Iterable[LedgerExpense]) -> List[LedgerExpense]:
        """Keep only expenses generated from a recurring template."""
        frequency = self.config["eligible_frequency"]
        return [
            e for e in expenses
            if e.recurring_expense_id and e.frequency == frequency
        ]

    def score_breakdown(self, candidate, target: LedgerExpense) -> Optional[MatchScoreBreakdown]:
        """
        Score a candidate against one target.

        Args:
            candidate: Any record with amount, date (YYYY-MM-DD) and description
            target: Recurrence-generated ledger expense

        Returns:
            MatchScoreBreakdown, or None if the target is excluded
        """
        # --- Hard gates ---
        amount_diff = abs(candidate.amount - target.amount)
        amount_threshold = target.amount * self.config["amount_tolerance"]
        if amount_diff > amount_threshold:
            return None

        candidate_date = parse_iso_date(candidate.date)
        target_date = parse_iso_date(target.date)
        if candidate_date is None or target_date is None:
            return None

        tolerance_days = self.config["date_tolerance_days"]
        days_diff = abs((candidate_date - target_date).days)
        if days_diff > tolerance_days:
            return None

        # --- Soft scoring ---
        amount_score = 1 - (amount_diff / max(amount_threshold, self.config["min_amount_threshold"]))
        # A zero-day window only admits same-day targets
        date_score = 1 - (days_diff / max(tolerance_days, 1))
        description_score = similarity(
            candidate.description,
            target.description,
            containment_score=self.config["containment_score"],
        )

        strong_amount_date = (
            amount_score > self.config["strong_amount_score"]
            and date_score > self.config["strong_date_score"]
        )
        if description_score < self.config["min_description_similarity"] and not strong_amount_date:
            return None

        total = (
            amount_score * self.weights["amount"]
            + date_score * self.weights["date"]
            + description_score * self.weights["description"]
        )
        return MatchScoreBreakdown(
            amount_score=amount_score,
            date_score=date_score,
            description_score=description_score,
            total_score=total,
            description_gate_waived=strong_amount_date and description_score < self.config["min_description_similarity"],
        )

    def score(self, candidate, target: LedgerExpense) -> float:
        breakdown = self.score_breakdown(candidate, target)
        return breakdown.total_score if breakdown else 0.0

    def find_match(self, candidate, pool: Iterable[LedgerExpense]) -> Optional[MatchResult]:
        """
        Find the best recurrence-generated expense for a candidate.

        Targets without a recurring template linkage are never matched.

        Returns:
            Highest-scoring MatchResult, or None if nothing survives
        """
        matches = []
        for target in pool:
            if not target.recurring_expense_id:
                continue
            breakdown = self.score_breakdown(candidate, target)
            if breakdown and breakdown.total_score > 0:
                matches.append(MatchResult(target=target, score=breakdown.total_score, breakdown=breakdown))

        if not matches:
            logger.debug("No recurring match for %r (%.2f on %s)", candidate.description, candidate.amount, candidate.date)
            return None

        matches.sort(key=lambda m: m.score, reverse=True)
        best = matches[0]
        logger.debug(
            "Recurring match for %r: %r score=%.3f", candidate.description, best.target.description, best.score
        )
        return best
