"""Tests for the rental-income tax calculator."""

from decimal import Decimal

import pytest

from propledger_backend.core.exceptions import UnsupportedCountryError
from propledger_backend.modules.tax import (
    TaxCalculationInput,
    TaxCountry,
    calculate_quarterly_estimate,
    calculate_tax,
    get_tax_rules,
    progressive_tax,
)


def _tax(country, income, **kwargs):
    return calculate_tax(
        TaxCalculationInput(
            country=country, annual_rental_income=Decimal(income), **kwargs
        )
    )


class TestTaxCountry:
    @pytest.mark.parametrize("value", ["PT", "prt", "Portugal", " portugal "])
    def test_parse_portugal_aliases(self, value):
        assert TaxCountry.parse(value) is TaxCountry.PORTUGAL

    @pytest.mark.parametrize("value", ["ES", "esp", "Spain", "España", "espana"])
    def test_parse_spain_aliases(self, value):
        assert TaxCountry.parse(value) is TaxCountry.SPAIN

    def test_unknown_country_raises(self):
        with pytest.raises(UnsupportedCountryError):
            TaxCountry.parse("France")

    def test_iso_code(self):
        assert TaxCountry.PORTUGAL.iso_code == "PT"
        assert TaxCountry.SPAIN.iso_code == "ES"


class TestProgressiveTax:
    def test_zero_income_uses_first_bracket_rate(self):
        rules = get_tax_rules("ES")
        tax, rate = progressive_tax(Decimal("0"), rules.brackets)
        assert tax == 0
        assert rate == Decimal("19")

    def test_negative_income_is_treated_as_zero(self):
        rules = get_tax_rules("PT")
        tax, _ = progressive_tax(Decimal("-500"), rules.brackets)
        assert tax == 0

    def test_income_spanning_two_brackets(self):
        rules = get_tax_rules("ES")
        tax, rate = progressive_tax(Decimal("40000"), rules.brackets)
        assert tax == Decimal("7850")
        assert rate == Decimal("24")

    @pytest.mark.parametrize(
        "country, income, expected_tax, expected_rate",
        [
            ("PT", "7520", "902.40", "12"),
            ("PT", "7520.01", "902.4015", "15"),
            ("ES", "35000", "6650", "19"),
            ("ES", "35000.01", "6650.0024", "24"),
        ],
    )
    def test_upper_bound_is_inclusive(self, country, income, expected_tax, expected_rate):
        rules = get_tax_rules(country)
        tax, rate = progressive_tax(Decimal(income), rules.brackets)
        assert tax == Decimal(expected_tax)
        assert rate == Decimal(expected_rate)


class TestPortugal:
    def test_single_year_bonus(self):
        result = _tax("PT", "10000")

        # 7520 * 12% + 2480 * 15% = 1274.40, less the 5% first-year bonus
        assert result.country is TaxCountry.PORTUGAL
        assert result.tax_amount == Decimal("1210.68")
        assert result.taxable_income == Decimal("9500.00")
        assert result.tax_rate == Decimal("15")
        assert result.effective_rate == Decimal("12.11")

    def test_expenses_capped_at_fifteen_percent_of_gross(self):
        result = _tax(
            "Portugal",
            "10000",
            deductible_expenses=Decimal("2000"),
            years_of_ownership=3,
        )

        assert result.deductions.breakdown["max_deductible"] == Decimal("1500.00")
        # (8500 taxable) tax 1049.40 less 15% bonus
        assert result.tax_amount == Decimal("891.99")
        assert result.taxable_income == Decimal("7225.00")
        assert result.deductions.total == Decimal("2775.00")
        assert result.net_income == Decimal("8000.00")
        assert result.quarterly_payment == Decimal("223.00")
        assert result.annual_settlement == result.tax_amount

    def test_ownership_bonus_is_capped(self):
        three = _tax("PT", "30000", years_of_ownership=3)
        ten = _tax("PT", "30000", years_of_ownership=10)
        assert three.tax_amount == ten.tax_amount

    def test_zero_income(self):
        result = _tax("PT", "0")
        assert result.tax_amount == Decimal("0.00")
        assert result.effective_rate == 0


class TestSpain:
    def test_two_brackets(self):
        result = _tax("ES", "40000")
        assert result.tax_amount == Decimal("7850.00")
        assert result.tax_rate == Decimal("24")
        assert result.quarterly_payment == Decimal("1962.50")

    def test_all_deductions_apply_under_cap(self):
        result = _tax(
            "Spain",
            "40000",
            deductible_expenses=Decimal("5000"),
            mortgage_interest=Decimal("3000"),
            community_fees=Decimal("1000"),
        )
        assert result.deductions.total == Decimal("9000.00")
        assert result.taxable_income == Decimal("31000.00")
        assert result.tax_amount == Decimal("5890.00")
        assert result.net_income == Decimal("31000.00")

    def test_deductions_capped_at_half_of_gross(self):
        result = _tax("ES", "100000", deductible_expenses=Decimal("60000"))
        assert result.deductions.total == Decimal("50000.00")
        assert result.taxable_income == Decimal("50000.00")
        assert result.tax_amount == Decimal("10250.00")


@pytest.mark.parametrize("country", ["PT", "ES"])
def test_tax_never_decreases_with_income(country):
    amounts = [Decimal(n) for n in range(0, 120001, 7500)]
    taxes = [_tax(country, amount).tax_amount for amount in amounts]
    assert taxes == sorted(taxes)


def test_quarterly_estimate_annualises_the_quarter():
    assert calculate_quarterly_estimate("ES", Decimal("10000")) == Decimal("1962.50")


def test_unsupported_country_in_calculation():
    with pytest.raises(UnsupportedCountryError):
        _tax("FR", "1000")
