"""Rental-income tax calculator for Portugal and Spain.

Pure functions over ``Decimal``; nothing here touches the database.
Intermediate values keep full precision and results are rounded half-up
to cents when the result object is built.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from decimal import Decimal

from ...core.utils import round_money, to_decimal
from .brackets import CountryTaxRules, TaxBracket, TaxCountry, get_tax_rules

ZERO = Decimal("0")
HUNDRED = Decimal("100")


@dataclass
class TaxCalculationInput:
    country: TaxCountry | str
    annual_rental_income: Decimal
    deductible_expenses: Decimal = ZERO
    # Spain only
    mortgage_interest: Decimal = ZERO
    community_fees: Decimal = ZERO
    # Portugal only
    years_of_ownership: int = 1


@dataclass
class TaxDeductions:
    total: Decimal
    breakdown: dict[str, Decimal] = field(default_factory=dict)


@dataclass
class TaxCalculationResult:
    country: TaxCountry
    gross_income: Decimal
    net_income: Decimal
    taxable_income: Decimal
    tax_rate: Decimal  # marginal, percent
    tax_amount: Decimal
    quarterly_payment: Decimal
    annual_settlement: Decimal
    effective_rate: Decimal  # percent of gross
    deductions: TaxDeductions


def progressive_tax(
    taxable_income: Decimal, brackets: tuple[TaxBracket, ...]
) -> tuple[Decimal, Decimal]:
    """Tax owed on ``taxable_income`` and the marginal rate that applied.

    Each slice is taxed at its own bracket's rate. The marginal rate is the
    rate of the bracket containing the income (the first bracket for 0).
    """
    taxable_income = max(ZERO, taxable_income)
    tax = ZERO
    marginal_rate = brackets[0].rate

    for bracket in brackets:
        if taxable_income <= bracket.lower:
            break
        top = (
            taxable_income
            if bracket.upper is None
            else min(taxable_income, bracket.upper)
        )
        tax += (top - bracket.lower) * bracket.rate / HUNDRED
        marginal_rate = bracket.rate

    return tax, marginal_rate


def _build_result(
    rules: CountryTaxRules,
    gross: Decimal,
    net: Decimal,
    taxable: Decimal,
    marginal_rate: Decimal,
    tax: Decimal,
    deductions_total: Decimal,
    breakdown: dict[str, Decimal],
) -> TaxCalculationResult:
    tax_amount = round_money(tax)
    effective_rate = round_money(tax / gross * HUNDRED) if gross > 0 else ZERO
    return TaxCalculationResult(
        country=rules.country,
        gross_income=round_money(gross),
        net_income=round_money(net),
        taxable_income=round_money(taxable),
        tax_rate=marginal_rate,
        tax_amount=tax_amount,
        quarterly_payment=round_money(tax / 4),
        annual_settlement=tax_amount,
        effective_rate=effective_rate,
        deductions=TaxDeductions(
            total=round_money(deductions_total),
            breakdown={key: round_money(value) for key, value in breakdown.items()},
        ),
    )


def _calculate_portugal(
    data: TaxCalculationInput, rules: CountryTaxRules
) -> TaxCalculationResult:
    gross = to_decimal(data.annual_rental_income)
    expenses = to_decimal(data.deductible_expenses)

    max_deductible = max(ZERO, min(gross * rules.max_deductible_ratio, expenses))
    taxable = max(ZERO, gross - max_deductible)
    tax, marginal_rate = progressive_tax(taxable, rules.brackets)

    bonus = min(
        Decimal(max(data.years_of_ownership, 0)) * rules.ownership_bonus_per_year,
        rules.ownership_bonus_cap,
    )
    bonus_amount = taxable * bonus

    return _build_result(
        rules,
        gross=gross,
        net=gross - expenses,
        taxable=taxable - bonus_amount,
        marginal_rate=marginal_rate,
        tax=tax * (1 - bonus),
        deductions_total=max_deductible + bonus_amount,
        breakdown={
            "expenses": expenses,
            "ownership_bonus": bonus_amount,
            "max_deductible": max_deductible,
        },
    )


def _calculate_spain(
    data: TaxCalculationInput, rules: CountryTaxRules
) -> TaxCalculationResult:
    gross = to_decimal(data.annual_rental_income)
    expenses = to_decimal(data.deductible_expenses)
    mortgage_interest = to_decimal(data.mortgage_interest)
    community_fees = to_decimal(data.community_fees)

    total_deductions = expenses + mortgage_interest + community_fees
    max_deductible = max(ZERO, gross * rules.max_deductible_ratio)
    applied = min(total_deductions, max_deductible)
    taxable = max(ZERO, gross - applied)
    tax, marginal_rate = progressive_tax(taxable, rules.brackets)

    return _build_result(
        rules,
        gross=gross,
        net=gross - total_deductions,
        taxable=taxable,
        marginal_rate=marginal_rate,
        tax=tax,
        deductions_total=applied,
        breakdown={
            "expenses": expenses,
            "mortgage_interest": mortgage_interest,
            "community_fees": community_fees,
            "max_deductible": max_deductible,
        },
    )


_CALCULATORS: dict[
    TaxCountry,
    Callable[[TaxCalculationInput, CountryTaxRules], TaxCalculationResult],
] = {
    TaxCountry.PORTUGAL: _calculate_portugal,
    TaxCountry.SPAIN: _calculate_spain,
}


def calculate_tax(data: TaxCalculationInput) -> TaxCalculationResult:
    """Calculate annual rental-income tax.

    Raises:
        UnsupportedCountryError: If the country has no tax rules
    """
    rules = get_tax_rules(data.country)
    return _CALCULATORS[rules.country](data, rules)


def calculate_quarterly_estimate(
    country: TaxCountry | str,
    quarterly_income: Decimal,
    quarterly_expenses: Decimal = ZERO,
) -> Decimal:
    """Quarterly instalment from one quarter's figures annualised (x4)."""
    annual = calculate_tax(
        TaxCalculationInput(
            country=country,
            annual_rental_income=to_decimal(quarterly_income) * 4,
            deductible_expenses=to_decimal(quarterly_expenses) * 4,
        )
    )
    return annual.quarterly_payment
