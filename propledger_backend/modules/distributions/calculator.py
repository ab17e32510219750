"""Multi-owner income distribution.

Splits a property's net income across owners by percentage and applies
each owner's own rental-income tax. Pure; persistence lives in services.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from ...core.exceptions import OwnershipPercentageError, ValidationError
from ...core.utils import round_money, to_decimal
from ..tax.brackets import TaxCountry, TaxMode
from ..tax.calculator import TaxCalculationInput, calculate_tax

ZERO = Decimal("0")
HUNDRED = Decimal("100")
PERCENTAGE_TOLERANCE = Decimal("0.01")


@dataclass
class OwnerShareInput:
    owner_id: int
    owner_name: str
    percentage: Decimal
    tax_country: TaxCountry | str = TaxCountry.PORTUGAL


@dataclass
class DistributionInput:
    property_id: int
    period_start: date
    period_end: date
    total_income: Decimal
    total_expenses: Decimal
    owners: list[OwnerShareInput]
    tax_mode: TaxMode = TaxMode.PRE_TAX
    calculated_by: int | None = None
    currency: str = "EUR"
    notes: str | None = None


@dataclass
class OwnerShareResult:
    owner_id: int
    owner_name: str
    percentage: Decimal
    gross_share: Decimal
    taxable_income: Decimal
    tax_amount: Decimal
    net_share: Decimal
    tax_country: TaxCountry
    tax_rate: Decimal
    effective_rate: Decimal


@dataclass
class DistributionResult:
    property_id: int
    period_start: date
    period_end: date
    tax_mode: TaxMode
    total_income: Decimal
    total_expenses: Decimal
    net_income: Decimal
    total_tax: Decimal
    total_net_distributed: Decimal
    currency: str = "EUR"
    calculated_by: int | None = None
    notes: str | None = None
    shares: list[OwnerShareResult] = field(default_factory=list)
    version: int = 1


def validate_owner_percentages(percentages: Iterable[Decimal | int | str]) -> Decimal:
    """Check that ownership percentages add up to 100.

    Returns:
        The total

    Raises:
        OwnershipPercentageError: If the list is empty or the total is off
            by more than ``PERCENTAGE_TOLERANCE``
    """
    values = [to_decimal(p) for p in percentages]
    total = sum(values, ZERO)
    if not values or abs(total - HUNDRED) > PERCENTAGE_TOLERANCE:
        raise OwnershipPercentageError(total)
    return total


def calculate_owner_share(
    owner: OwnerShareInput, net_income: Decimal
) -> OwnerShareResult:
    """One owner's gross share and the tax due on it in their country."""
    percentage = to_decimal(owner.percentage)
    if percentage <= ZERO or percentage > HUNDRED:
        raise ValidationError(
            "Ownership percentage must be greater than 0 and at most 100",
            field="percentage",
            value=owner.percentage,
        )

    gross_share = round_money(net_income * percentage / HUNDRED)
    tax = calculate_tax(
        TaxCalculationInput(
            country=owner.tax_country,
            annual_rental_income=gross_share,
            deductible_expenses=ZERO,
        )
    )

    return OwnerShareResult(
        owner_id=owner.owner_id,
        owner_name=owner.owner_name,
        percentage=percentage,
        gross_share=gross_share,
        taxable_income=tax.taxable_income,
        tax_amount=tax.tax_amount,
        net_share=gross_share - tax.tax_amount,
        tax_country=tax.country,
        tax_rate=tax.tax_rate,
        effective_rate=tax.effective_rate,
    )


def calculate_distribution(data: DistributionInput) -> DistributionResult:
    """Split net income across owners and apply per-owner tax.

    ``tax_mode`` is recorded on the result; tax is computed for every
    owner either way.

    Raises:
        OwnershipPercentageError: If the owner shares do not sum to 100
        ValidationError: If the period is inverted
        UnsupportedCountryError: If an owner's tax country has no rules
    """
    if data.period_end < data.period_start:
        raise ValidationError(
            "Period end must not precede period start", field="period_end"
        )
    validate_owner_percentages(owner.percentage for owner in data.owners)

    total_income = round_money(data.total_income)
    total_expenses = round_money(data.total_expenses)
    net_income = total_income - total_expenses

    shares = [calculate_owner_share(owner, net_income) for owner in data.owners]

    return DistributionResult(
        property_id=data.property_id,
        period_start=data.period_start,
        period_end=data.period_end,
        tax_mode=TaxMode(data.tax_mode),
        total_income=total_income,
        total_expenses=total_expenses,
        net_income=net_income,
        total_tax=sum((share.tax_amount for share in shares), ZERO),
        total_net_distributed=sum((share.net_share for share in shares), ZERO),
        currency=data.currency,
        calculated_by=data.calculated_by,
        notes=data.notes,
        shares=shares,
    )
