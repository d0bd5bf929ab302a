"""
Tests for the matching building blocks.

Test strategy:
1. Text normalization (Turkish casing, diacritics)
2. Identity matching (name substring, apartment whole word, strategies)
3. Period extraction from freeform labels
4. Temporal matching on strict ISO dates
"""

from datetime import date

import pytest

from aidat.matching import (
    ResidentIdentity,
    SubstringIdentityMatcher,
    TokenIdentityMatcher,
    apartment_digits,
    extract_period,
    get_identity_matcher,
    matches_identity,
    matches_period,
    normalize_text,
    parse_payment_date,
)
from aidat.models import CanonicalPeriod, Resident


class TestNormalizeText:
    """Tests for Turkish-aware normalization."""

    def test_dotted_capital_i(self):
        """İSTANBUL and istanbul normalize identically."""
        assert normalize_text("İSTANBUL") == normalize_text("istanbul")
        assert normalize_text("İSTANBUL") == "istanbul"

    def test_diacritics_are_stripped(self):
        """Öğrenci and ogrenci normalize identically."""
        assert normalize_text("Öğrenci") == normalize_text("ogrenci")

    def test_dotless_capital_i_becomes_dotless(self):
        """Plain capital I lowercases to dotless ı in Turkish."""
        assert normalize_text("ISPARTA") == "ısparta"

    def test_cedilla_and_breve(self):
        assert normalize_text("Çağrı Şahin") == "cagrı sahin"

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty_input(self, value):
        assert normalize_text(value) == ""

    def test_apartment_digits(self):
        assert apartment_digits("A-12") == "12"
        assert apartment_digits("B") == ""
        assert apartment_digits(None) == ""


class TestIdentityMatching:
    """Tests for the default identity rule."""

    def test_name_substring(self):
        description = normalize_text("Ahmet Yılmaz Temmuz Aidatı")
        assert matches_identity(normalize_text("Ahmet Yılmaz"), "", description)

    def test_ascii_folded_description_matches_accented_name(self):
        description = normalize_text("AYSE DEMIR ocak")
        name = normalize_text("Ayşe Demir")
        # Capital I folds to dotless ı, so "DEMIR" != "demir"
        assert not matches_identity(name, "", description)
        assert matches_identity(name, "", normalize_text("ayse demir ocak"))

    def test_apartment_whole_word_only(self):
        """Apartment 1 must not match Daire 10."""
        description = normalize_text("Daire 10 ödemesi")
        assert not matches_identity("", "1", description)
        assert matches_identity("", "10", description)

    def test_empty_identity_never_matches(self):
        """Empty name and apartment never match, even an empty description."""
        assert not matches_identity("", "", "")
        assert not matches_identity("", "", "daire 10 odemesi")

    def test_either_identifier_is_enough(self):
        description = normalize_text("Daire 7 Mart aidat")
        assert matches_identity(normalize_text("Mehmet Kaya"), "7", description)

    def test_identity_from_resident(self):
        identity = ResidentIdentity.from_resident(
            Resident(id=1, name="  Ahmet Yılmaz ", apartment="A5")
        )
        assert identity.name == "ahmet yılmaz"
        assert identity.apartment_code == "a5"
        assert identity.apartment_digits == "5"
        assert not identity.is_empty

    def test_resident_without_identifiers_is_empty(self):
        identity = ResidentIdentity.from_resident(Resident(id=1, name="", apartment="B"))
        assert identity.is_empty
        assert not SubstringIdentityMatcher().matches(identity, "b temmuz")
        assert not TokenIdentityMatcher().matches(identity, "b temmuz")


class TestMatchingStrategies:
    """Tests for the swappable matcher strategies."""

    def test_substring_matches_inside_longer_name(self):
        identity = ResidentIdentity.from_resident(Resident(id=1, name="Ali"))
        description = normalize_text("Alican Temmuz")
        assert SubstringIdentityMatcher().matches(identity, description)
        assert not TokenIdentityMatcher().matches(identity, description)

    def test_token_matches_name_tokens_in_any_order(self):
        identity = ResidentIdentity.from_resident(Resident(id=1, name="Ahmet Yılmaz"))
        description = normalize_text("YıLMAZ, Ahmet - Temmuz")
        assert TokenIdentityMatcher().matches(identity, description)
        assert not SubstringIdentityMatcher().matches(identity, description)

    def test_token_matches_full_apartment_code(self):
        identity = ResidentIdentity.from_resident(Resident(id=1, apartment="A5"))
        description = normalize_text("Daire A5 Temmuz")
        assert TokenIdentityMatcher().matches(identity, description)
        assert not SubstringIdentityMatcher().matches(identity, description)

    def test_token_apartment_digits_still_whole_word(self):
        identity = ResidentIdentity.from_resident(Resident(id=1, apartment="1"))
        assert not TokenIdentityMatcher().matches(identity, "daire 10 odemesi")
        assert TokenIdentityMatcher().matches(identity, "daire 1 odemesi")

    def test_get_identity_matcher(self):
        assert isinstance(get_identity_matcher("substring"), SubstringIdentityMatcher)
        assert isinstance(get_identity_matcher("token"), TokenIdentityMatcher)

    def test_get_identity_matcher_unknown(self):
        with pytest.raises(ValueError, match="Unknown identity strategy"):
            get_identity_matcher("fuzzy")


class TestPeriodExtraction:
    """Tests for freeform period labels."""

    @pytest.mark.parametrize("label, expected", [
        ("2024 Temmuz", (2024, 7)),
        ("Temmuz 2024", (2024, 7)),
        ("ocak 2025", (2025, 1)),
        ("ŞUBAT 2025", (2025, 2)),
        ("Subat 2025", (2025, 2)),
        ("MAYIS 2024", (2024, 5)),
        ("Mayis 2024", (2024, 5)),
        ("AĞUSTOS 2023", (2023, 8)),
        ("Eylül-2024 aidatı", (2024, 9)),
        ("Kasim 2024", (2024, 11)),
        ("Aralık 2024", (2024, 12)),
        ("ARALIK 2024", (2024, 12)),
    ])
    def test_parsable_labels(self, label, expected):
        assert extract_period(label) == CanonicalPeriod(*expected)

    @pytest.mark.parametrize("label", [
        "garbage",
        "Temmuz",
        "2024",
        "Temmuz 1999",
        "Temmuz 20245",
        "",
        None,
    ])
    def test_unparsable_labels(self, label):
        assert extract_period(label) is None

    def test_result_is_never_partial(self):
        period = extract_period("2024 Temmuz")
        assert period.year == 2024
        assert period.month == 7
        assert str(period) == "2024-07"


class TestTemporalMatching:
    """Tests for date parsing and exact month matching."""

    def test_parse_valid_date(self):
        assert parse_payment_date("2024-07-10") == date(2024, 7, 10)

    @pytest.mark.parametrize("value", [
        "2024-7-10",
        "10.07.2024",
        "2024-02-30",
        "2024-07-10T00:00:00",
        "2024-07-10\n",
        "",
        None,
    ])
    def test_parse_invalid_date(self, value):
        assert parse_payment_date(value) is None

    def test_same_month_matches(self):
        assert matches_period(date(2024, 7, 31), CanonicalPeriod(2024, 7))

    def test_next_month_does_not_match(self):
        """A payment dated 2024-08-05 does not satisfy July 2024."""
        assert not matches_period(date(2024, 8, 5), CanonicalPeriod(2024, 7))

    def test_same_month_other_year_does_not_match(self):
        assert not matches_period(date(2023, 7, 5), CanonicalPeriod(2024, 7))

    def test_missing_values_never_match(self):
        assert not matches_period(None, CanonicalPeriod(2024, 7))
        assert not matches_period(date(2024, 7, 5), None)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
