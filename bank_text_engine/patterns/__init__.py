"""
Institution Pattern Definitions for bank-text transaction extraction.

Contains the seed tables used to build pattern registries:
- Notification sources (banking apps, matched by app identifier)
- SMS sources (matched by sender fragment)
- Generic SMS fallback rules for unknown financial senders
- Keyword lists (financial senders, money signals, bank account names)
"""

from .institution_patterns import (
    NOTIFICATION_INSTITUTIONS,
    SMS_INSTITUTIONS,
    GENERIC_SMS_INSTITUTION,
    FINANCIAL_SENDER_KEYWORDS,
    MONEY_SIGNAL_KEYWORDS,
    BANK_ACCOUNT_KEYWORDS,
)

__all__ = [
    "NOTIFICATION_INSTITUTIONS",
    "SMS_INSTITUTIONS",
    "GENERIC_SMS_INSTITUTION",
    "FINANCIAL_SENDER_KEYWORDS",
    "MONEY_SIGNAL_KEYWORDS",
    "BANK_ACCOUNT_KEYWORDS",
]
