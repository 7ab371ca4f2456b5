"""
Field normalization for extracted transaction text.
Parses locale-formatted amounts and epoch timestamps into canonical values.
"""

import re
import logging
from typing import Optional
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

# Plain digits with an optional fractional part, after separator cleanup
_CANONICAL_AMOUNT = re.compile(r"^\d+(?:\.\d*)?$|^\.\d+$")

EPOCH_DATE = "1970-01-01"


def try_parse_amount(text: Optional[str]) -> Optional[float]:
    """
    Parse a locale-formatted amount, returning None when unparseable.

    Trailing '.' and ',' are dropped first. Separator rules:
        - both '.' and ',' present: the right-most one is the decimal separator
        - only ',': a single comma is decimal, several are thousands separators
        - only '.': a single dot is decimal, several are thousands separators

    Example:
        >>> try_parse_amount("1.250,50")
        1250.5
        >>> try_parse_amount("12,50")
        12.5
        >>> try_parse_amount("abc") is None
        True
    """
    if not text:
        return None

    # Sentence punctuation after the amount is captured too: "25,00."
    clean = re.sub(r"\s", "", str(text)).rstrip(".,")
    if not clean:
        return None

    if "." in clean and "," in clean:
        if clean.rfind(",") > clean.rfind("."):
            # Euro style (1.000,00)
            clean = clean.replace(".", "").replace(",", ".")
        else:
            # US style (1,000.00)
            clean = clean.replace(",", "")
    elif "," in clean:
        if clean.count(",") == 1:
            clean = clean.replace(",", ".")
        else:
            clean = clean.replace(",", "")
    elif clean.count(".") > 1:
        clean = clean.replace(".", "")

    if not _CANONICAL_AMOUNT.match(clean):
        return None

    return float(clean)


def parse_amount(text: Optional[str]) -> float:
    """
    Parse a locale-formatted amount.

    Returns 0.0 when the text is not a usable number; callers must treat a
    zero amount as "no usable value" rather than a zero-amount transaction.
    """
    amount = try_parse_amount(text)
    return amount if amount is not None else 0.0


def _resolve_zone(tz_name: Optional[str]):
    if not tz_name or tz_name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown reference timezone %r, falling back to UTC", tz_name)
        return timezone.utc


def normalize_date(timestamp_millis, tz: Optional[str] = "UTC") -> str:
    """
    Convert an epoch timestamp in milliseconds to a YYYY-MM-DD calendar date.

    Time-of-day is discarded; downstream matching works at day granularity.
    Out-of-range or non-numeric timestamps fall back to the epoch date.
    """
    try:
        moment = datetime.fromtimestamp(float(timestamp_millis) / 1000.0, tz=_resolve_zone(tz))
    except (TypeError, ValueError, OverflowError, OSError):
        logger.debug("Unusable timestamp %r, using epoch date", timestamp_millis)
        return EPOCH_DATE
    return moment.strftime("%Y-%m-%d")


def parse_iso_date(text: Optional[str]) -> Optional[date]:
    """Parse a YYYY-MM-DD string, or return None."""
    if not text:
        return None
    try:
        return datetime.strptime(str(text).strip(), "%Y-%m-%d").date()
    except ValueError:
        return None


def clean_merchant_name(merchant: str) -> str:
    """
    Strip trailing noise from a merchant name captured from a notification.

    Removes trailing dates, times, "Per info ..." footers and masked card
    numbers like **7215*. Falls back to the input if nothing would remain.
    """
    if not merchant:
        return merchant

    cleaned = re.sub(r"\s+\d{2}/\d{2}/\d{2,4}.*$", "", merchant, flags=re.IGNORECASE)
    cleaned = re.sub(r"\s+\d{2}:\d{2}.*$", "", cleaned, flags=re.IGNORECASE)
    cleaned = re.sub(r"Per info.*$", "", cleaned, flags=re.IGNORECASE)
    cleaned = re.sub(r"\*+\d+\*+", "", cleaned)
    cleaned = cleaned.strip()

    return cleaned or merchant
