"""
Temporal Matching

A payment satisfies a due only when it was made in exactly the due's
month: same year, same month. There is no tolerance window and nothing
carries over between periods.

Payment dates must be strict ISO calendar dates (YYYY-MM-DD). Anything
else is treated as "no date" and the payment is skipped for temporal
matching.
"""

import re
from datetime import date
from typing import Optional

from aidat.models.ledger import CanonicalPeriod


_ISO_DATE = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})")


def parse_payment_date(value: Optional[str]) -> Optional[date]:
    """
    Parse a strict ISO calendar date.

    Returns None for missing values, other formats ("10.07.2024",
    "2024-07-10T12:00:00") and impossible dates ("2024-02-30").
    """
    if not isinstance(value, str):
        return None
    match = _ISO_DATE.fullmatch(value)
    if not match:
        return None
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def matches_period(payment_date: Optional[date], period: Optional[CanonicalPeriod]) -> bool:
    """True iff the payment date falls in the period's year and month."""
    if payment_date is None or period is None:
        return False
    return payment_date.year == period.year and payment_date.month == period.month
