"""Validation package."""

from aidat.validation.validator import LedgerValidator, ObligationCheck, coerce_amount

__all__ = ["LedgerValidator", "ObligationCheck", "coerce_amount"]
