"""Matching package: text normalization, identity, period and date matching."""

from aidat.matching.identity import (
    IdentityMatcher,
    ResidentIdentity,
    SubstringIdentityMatcher,
    TokenIdentityMatcher,
    contains_whole_word,
    get_identity_matcher,
    matches_identity,
)
from aidat.matching.period import TURKISH_MONTHS, extract_period
from aidat.matching.temporal import matches_period, parse_payment_date
from aidat.matching.text import apartment_digits, normalize_text, turkish_lower

__all__ = [
    # Identity
    "IdentityMatcher",
    "ResidentIdentity",
    "SubstringIdentityMatcher",
    "TokenIdentityMatcher",
    "contains_whole_word",
    "get_identity_matcher",
    "matches_identity",
    # Period
    "TURKISH_MONTHS",
    "extract_period",
    # Temporal
    "matches_period",
    "parse_payment_date",
    # Text
    "apartment_digits",
    "normalize_text",
    "turkish_lower",
]
