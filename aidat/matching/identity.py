"""
Identity Matching

Decides whether a payment description refers to a given resident.

DESIGN DECISION: Matching is a swappable strategy. The aggregator only
knows the IdentityMatcher interface, so a token-based matcher can replace
the default substring matcher without touching aggregation.

Strategies:
- SubstringIdentityMatcher: name as a substring OR apartment digits as a
  whole word (the default)
- TokenIdentityMatcher: every name token as a whole token OR apartment
  digits / full apartment code as a whole token

Both are PERMISSIVE: one payment may match several residents if their
identifiers all appear in the description. That is reported as ambiguity,
never resolved by picking one owner.
"""

import re
from abc import ABC, abstractmethod
from typing import NamedTuple

from aidat.matching.text import apartment_digits, normalize_text
from aidat.models.ledger import Resident


_TOKEN_SPLIT = re.compile(r"\W+")


class ResidentIdentity(NamedTuple):
    """Normalized identifiers of one resident."""

    name: str
    apartment_code: str
    apartment_digits: str

    @classmethod
    def from_resident(cls, resident: Resident) -> "ResidentIdentity":
        return cls(
            name=normalize_text(resident.name.strip()),
            apartment_code=normalize_text(resident.apartment.strip()),
            apartment_digits=apartment_digits(resident.apartment),
        )

    @property
    def is_empty(self) -> bool:
        return not self.name and not self.apartment_digits


def contains_whole_word(text: str, word: str) -> bool:
    """True if `word` appears in `text` delimited by word boundaries."""
    if not word:
        return False
    return re.search(rf"\b{re.escape(word)}\b", text) is not None


def matches_identity(name: str, digits: str, description: str) -> bool:
    """
    The default identity rule on already-normalized inputs.

    Args:
        name: Normalized resident name
        digits: Digits of the apartment code
        description: Normalized payment description

    Empty name and empty digits never match; "" is a substring of
    everything.
    """
    name_match = bool(name) and name in description
    apartment_match = bool(digits) and contains_whole_word(description, digits)
    return name_match or apartment_match


class IdentityMatcher(ABC):
    """
    Abstract interface for identity matching strategies.

    Implementations receive normalized identifiers and a normalized
    description and must be pure.
    """

    name: str = "abstract"

    @abstractmethod
    def matches(self, identity: ResidentIdentity, description: str) -> bool:
        """
        Does the description refer to this resident?

        Args:
            identity: Normalized resident identifiers
            description: Normalized payment description
        """
        pass


class SubstringIdentityMatcher(IdentityMatcher):
    """Name as substring, apartment digits as a whole word."""

    name = "substring"

    def matches(self, identity: ResidentIdentity, description: str) -> bool:
        return matches_identity(
            identity.name, identity.apartment_digits, description
        )


class TokenIdentityMatcher(IdentityMatcher):
    """
    Whole-token matching.

    Stricter on names ("ali" no longer matches "alican") and more lenient
    on apartments: "a5" in the description matches apartment "A5" even
    though the digit run is glued to a letter.
    """

    name = "token"

    def matches(self, identity: ResidentIdentity, description: str) -> bool:
        tokens = set(_TOKEN_SPLIT.split(description))
        tokens.discard("")

        name_tokens = [t for t in _TOKEN_SPLIT.split(identity.name) if t]
        if name_tokens and all(token in tokens for token in name_tokens):
            return True

        if identity.apartment_digits and contains_whole_word(
            description, identity.apartment_digits
        ):
            return True

        code_tokens = [t for t in _TOKEN_SPLIT.split(identity.apartment_code) if t]
        if identity.apartment_digits and code_tokens:
            # Multi-part codes ("b-12") must appear as one contiguous run
            joined = r"\W+".join(re.escape(t) for t in code_tokens)
            return re.search(rf"\b{joined}\b", description) is not None

        return False


_STRATEGIES: dict[str, type[IdentityMatcher]] = {
    SubstringIdentityMatcher.name: SubstringIdentityMatcher,
    TokenIdentityMatcher.name: TokenIdentityMatcher,
}


def get_identity_matcher(strategy: str) -> IdentityMatcher:
    """
    Build a matcher by strategy name.

    Raises:
        ValueError: If the strategy is unknown
    """
    try:
        return _STRATEGIES[strategy]()
    except KeyError:
        raise ValueError(
            f"Unknown identity strategy: {strategy!r}. "
            f"Allowed: {sorted(_STRATEGIES)}"
        ) from None
