"""
Turkish Text Normalization

Payment descriptions are typed by hand, sometimes with proper Turkish
characters ("Ahmet Yılmaz Ağustos") and sometimes ASCII-folded
("AHMET YILMAZ AGUSTOS"). Both must compare equal to the resident's name.

Steps:
1. Turkish case folding: "I" -> "ı", "İ" -> "i", then lowercase
2. Unicode NFD decomposition
3. Strip combining diacritical marks (U+0300 - U+036F)

Note that the dotless "ı" is a letter of its own, not a marked "i", so it
survives step 3.
"""

import re
import unicodedata
from typing import Optional


_TURKISH_UPPER = str.maketrans({"I": "ı", "İ": "i"})
_COMBINING_MARKS = re.compile("[\u0300-\u036f]")
_NON_DIGITS = re.compile(r"[^0-9]")


def turkish_lower(value: str) -> str:
    """Lowercase with the Turkish dotted/dotless I distinction."""
    return value.translate(_TURKISH_UPPER).lower()


def normalize_text(value: Optional[str]) -> str:
    """
    Normalize text for comparison.

    Examples:
        >>> normalize_text("İSTANBUL")
        'istanbul'
        >>> normalize_text("Öğrenci")
        'ogrenci'
        >>> normalize_text(None)
        ''
    """
    if not value:
        return ""
    decomposed = unicodedata.normalize("NFD", turkish_lower(value))
    return _COMBINING_MARKS.sub("", decomposed)


def apartment_digits(apartment: Optional[str]) -> str:
    """Keep only the digits of an apartment code ("A-12" -> "12")."""
    if not apartment:
        return ""
    return _NON_DIGITS.sub("", apartment)
