"""Tests for the multi-owner income distribution calculator."""

from datetime import date
from decimal import Decimal

import pytest

from propledger_backend.core.exceptions import (
    OwnershipPercentageError,
    UnsupportedCountryError,
    ValidationError,
)
from propledger_backend.modules.distributions import (
    DistributionInput,
    OwnerShareInput,
    calculate_distribution,
    validate_owner_percentages,
)
from propledger_backend.modules.tax import TaxCountry, TaxMode


def _input(owners, income="12000", expenses="2000", **kwargs):
    return DistributionInput(
        property_id=1,
        period_start=date(2025, 1, 1),
        period_end=date(2025, 12, 31),
        total_income=Decimal(income),
        total_expenses=Decimal(expenses),
        owners=owners,
        **kwargs,
    )


@pytest.fixture
def two_owners():
    return [
        OwnerShareInput(1, "Maria Costa", Decimal("60"), "PT"),
        OwnerShareInput(2, "Javier Ruiz", Decimal("40"), "ES"),
    ]


class TestValidateOwnerPercentages:
    def test_exact_hundred(self):
        assert validate_owner_percentages(["50", "25", "25"]) == Decimal("100")

    def test_within_tolerance(self):
        validate_owner_percentages([Decimal("33.33"), Decimal("33.33"), Decimal("33.33")])

    def test_outside_tolerance(self):
        with pytest.raises(OwnershipPercentageError):
            validate_owner_percentages([Decimal("50"), Decimal("49.98")])

    def test_empty_list(self):
        with pytest.raises(OwnershipPercentageError):
            validate_owner_percentages([])


class TestCalculateDistribution:
    def test_mixed_jurisdictions(self, two_owners):
        result = calculate_distribution(_input(two_owners))

        assert result.net_income == Decimal("10000.00")
        maria, javier = result.shares

        # 6000 in Portugal: 720.00 less the 5% first-year bonus
        assert maria.gross_share == Decimal("6000.00")
        assert maria.tax_country is TaxCountry.PORTUGAL
        assert maria.tax_amount == Decimal("684.00")
        assert maria.net_share == Decimal("5316.00")

        assert javier.gross_share == Decimal("4000.00")
        assert javier.tax_country is TaxCountry.SPAIN
        assert javier.tax_amount == Decimal("760.00")
        assert javier.net_share == Decimal("3240.00")

        assert result.total_tax == Decimal("1444.00")
        assert result.total_net_distributed == Decimal("8556.00")
        assert result.version == 1

    def test_net_share_is_gross_minus_tax(self, two_owners):
        result = calculate_distribution(_input(two_owners, income="87310.55"))
        for share in result.shares:
            assert share.net_share == share.gross_share - share.tax_amount

    def test_total_tax_is_sum_of_owner_taxes(self, two_owners):
        result = calculate_distribution(_input(two_owners, income="54321.99"))
        assert result.total_tax == sum(s.tax_amount for s in result.shares)
        assert result.total_net_distributed == sum(s.net_share for s in result.shares)

    def test_percentages_off_by_more_than_tolerance(self):
        owners = [
            OwnerShareInput(1, "A", Decimal("70")),
            OwnerShareInput(2, "B", Decimal("20")),
        ]
        with pytest.raises(OwnershipPercentageError) as exc:
            calculate_distribution(_input(owners))
        assert exc.value.total == Decimal("90")

    def test_no_owners(self):
        with pytest.raises(OwnershipPercentageError):
            calculate_distribution(_input([]))

    def test_inverted_period(self, two_owners):
        data = _input(two_owners)
        data.period_end = date(2024, 12, 31)
        with pytest.raises(ValidationError):
            calculate_distribution(data)

    def test_unsupported_owner_country(self):
        owners = [OwnerShareInput(1, "A", Decimal("100"), "FR")]
        with pytest.raises(UnsupportedCountryError):
            calculate_distribution(_input(owners))

    def test_expenses_exceeding_income_yield_no_tax(self):
        owners = [OwnerShareInput(1, "A", Decimal("100"), "ES")]
        result = calculate_distribution(_input(owners, income="1000", expenses="1500"))

        assert result.net_income == Decimal("-500.00")
        assert result.total_tax == Decimal("0.00")

    def test_tax_mode_is_recorded(self, two_owners):
        result = calculate_distribution(
            _input(two_owners, tax_mode=TaxMode.POST_TAX, calculated_by=7)
        )
        assert result.tax_mode is TaxMode.POST_TAX
        assert result.calculated_by == 7
