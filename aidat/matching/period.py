"""
Period Extraction

Turns a due's freeform period label ("2024 Temmuz", "Temmuz 2024",
"AĞUSTOS-2024 aidatı") into a canonical (year, month) pair.

Rules:
- Year: a standalone 4-digit token 20xx
- Month: one of the twelve Turkish month names found anywhere in the
  normalized label, first hit in calendar order
- Both are required; otherwise the label is unparsable and the result is
  None, never a half-filled period
"""

import re
from typing import Optional

from aidat.matching.text import normalize_text
from aidat.models.ledger import CanonicalPeriod


_YEAR_PATTERN = re.compile(r"\b(20[0-9]{2})\b")

# Normalized spellings. Dotless "ı" survives normalization, so the ASCII
# spellings people type for mayıs/kasım/aralık are listed as well.
TURKISH_MONTHS: tuple[tuple[int, tuple[str, ...]], ...] = (
    (1, ("ocak",)),
    (2, ("subat",)),
    (3, ("mart",)),
    (4, ("nisan",)),
    (5, ("mayıs", "mayis")),
    (6, ("haziran",)),
    (7, ("temmuz",)),
    (8, ("agustos",)),
    (9, ("eylul",)),
    (10, ("ekim",)),
    (11, ("kasım", "kasim")),
    (12, ("aralık", "aralik")),
)


def find_year(normalized_label: str) -> Optional[int]:
    match = _YEAR_PATTERN.search(normalized_label)
    return int(match.group(1)) if match else None


def find_month(normalized_label: str) -> Optional[int]:
    for month, spellings in TURKISH_MONTHS:
        if any(spelling in normalized_label for spelling in spellings):
            return month
    return None


def extract_period(label: Optional[str]) -> Optional[CanonicalPeriod]:
    """
    Extract the canonical period of a due.

    Examples:
        >>> extract_period("2024 Temmuz")
        CanonicalPeriod(year=2024, month=7)
        >>> extract_period("Şubat 2025")
        CanonicalPeriod(year=2025, month=2)
        >>> extract_period("garbage") is None
        True
    """
    normalized = normalize_text(label).strip()
    if not normalized:
        return None

    year = find_year(normalized)
    if year is None:
        return None

    month = find_month(normalized)
    if month is None:
        return None

    return CanonicalPeriod(year=year, month=month)
