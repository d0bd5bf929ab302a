"""
Ledger Models for Aidat

These models describe the snapshot the reconciliation engine works on:
- Residents (who owes)
- Obligations / dues (what is owed, for which period)
- Payments / income (what came in, described by free text)

DESIGN DECISION: Input records are frozen. The engine never mutates them;
every derived figure is recomputed from the snapshot on each call.

Amounts are accepted RAW (number or string). A malformed amount is a data
quality problem reported by the validator, not a construction failure.
"""

from decimal import Decimal
from enum import Enum
from typing import NamedTuple, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


RawAmount = Union[Decimal, int, float, str, None]


# =============================================================================
# ENUMS
# =============================================================================

class ObligationStatus(str, Enum):
    """Status stored alongside a due by the surrounding system."""
    PAID = "Ödendi"
    UNPAID = "Ödenmedi"


# =============================================================================
# CANONICAL PERIOD
# =============================================================================

class CanonicalPeriod(NamedTuple):
    """A normalized (year, month) pair extracted from a freeform label."""

    year: int
    month: int

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


# =============================================================================
# INPUT RECORDS
# =============================================================================

class Resident(BaseModel):
    """
    A resident of the building.

    The apartment code is alphanumeric and may embed digits ("A5", "12",
    "B-10"). Only its digits take part in identity matching.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: int = Field(
        ...,
        description="Resident identifier"
    )
    name: str = Field(
        default="",
        description="Full name as it appears in payment descriptions"
    )
    apartment: str = Field(
        default="",
        description="Apartment code (e.g., 'A5')"
    )
    email: Optional[str] = None


class Obligation(BaseModel):
    """
    A scheduled due for one resident and one period.

    The period is free text ("2024 Temmuz", "Temmuz 2024", "Ocak-24").
    Whether it can be reconciled is decided by the period extractor.
    """
    model_config = ConfigDict(frozen=True)

    id: int
    resident_id: int
    period: Optional[str] = Field(
        default="",
        description="Freeform period label"
    )
    amount: RawAmount = Field(
        default=None,
        description="Amount owed, expected non-negative"
    )
    status: ObligationStatus = Field(
        default=ObligationStatus.UNPAID,
        description="Status recorded by the surrounding system"
    )


class Payment(BaseModel):
    """
    An incoming payment ledger entry.

    Nothing links a payment to a resident or a period except the
    human-written description and the date.
    """
    model_config = ConfigDict(frozen=True)

    id: int
    date: Optional[str] = Field(
        default=None,
        description="ISO calendar date (YYYY-MM-DD)"
    )
    description: Optional[str] = Field(
        default="",
        description="Freeform description written by whoever booked it"
    )
    amount: RawAmount = Field(
        default=None,
        description="Credited amount, expected non-negative"
    )
    receipt_no: Optional[str] = None
