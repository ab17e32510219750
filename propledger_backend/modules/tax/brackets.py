"""Rental-income tax rules per jurisdiction.

Values follow the 2024 regulations and should be reviewed annually.
The structure keeps yearly updates localized to ``TAX_RULES``.
"""

import enum
from dataclasses import dataclass
from decimal import Decimal

from ...core.exceptions import UnsupportedCountryError


class TaxCountry(str, enum.Enum):
    """Jurisdictions with rental-income tax rules."""

    PORTUGAL = "Portugal"
    SPAIN = "Spain"

    @property
    def iso_code(self) -> str:
        return _ISO_CODES[self]

    @classmethod
    def parse(cls, value: "TaxCountry | str") -> "TaxCountry":
        """Accept the enum, its name or an ISO code, case-insensitively."""
        if isinstance(value, TaxCountry):
            return value
        country = _ALIASES.get(str(value).strip().lower())
        if country is None:
            raise UnsupportedCountryError(value)
        return country


class TaxMode(str, enum.Enum):
    """Whether owner payouts are quoted before or after their own tax."""

    PRE_TAX = "pre_tax"
    POST_TAX = "post_tax"


_ISO_CODES = {TaxCountry.PORTUGAL: "PT", TaxCountry.SPAIN: "ES"}

_ALIASES = {
    "pt": TaxCountry.PORTUGAL,
    "prt": TaxCountry.PORTUGAL,
    "portugal": TaxCountry.PORTUGAL,
    "es": TaxCountry.SPAIN,
    "esp": TaxCountry.SPAIN,
    "spain": TaxCountry.SPAIN,
    "españa": TaxCountry.SPAIN,
    "espana": TaxCountry.SPAIN,
}


@dataclass(frozen=True)
class TaxBracket:
    """One slice of a progressive schedule; ``upper`` is inclusive, None is open."""

    lower: Decimal
    upper: Decimal | None
    rate: Decimal  # percent


@dataclass(frozen=True)
class CountryTaxRules:
    country: TaxCountry
    tax_year: int
    brackets: tuple[TaxBracket, ...]
    # Share of gross income that deductions may offset
    max_deductible_ratio: Decimal
    # Portugal reduces taxable income and tax by 5% per year owned, up to 15%
    ownership_bonus_per_year: Decimal = Decimal("0")
    ownership_bonus_cap: Decimal = Decimal("0")


def _schedule(*rows: tuple[int, int | None, int]) -> tuple[TaxBracket, ...]:
    return tuple(
        TaxBracket(
            lower=Decimal(lower),
            upper=Decimal(upper) if upper is not None else None,
            rate=Decimal(rate),
        )
        for lower, upper, rate in rows
    )


TAX_RULES: dict[TaxCountry, CountryTaxRules] = {
    TaxCountry.PORTUGAL: CountryTaxRules(
        country=TaxCountry.PORTUGAL,
        tax_year=2024,
        brackets=_schedule(
            (0, 7520, 12),
            (7520, 11284, 15),
            (11284, 15992, 21),
            (15992, 20700, 26),
            (20700, 26355, 29),
            (26355, 50752, 31),
            (50752, None, 35),
        ),
        max_deductible_ratio=Decimal("0.15"),
        ownership_bonus_per_year=Decimal("0.05"),
        ownership_bonus_cap=Decimal("0.15"),
    ),
    TaxCountry.SPAIN: CountryTaxRules(
        country=TaxCountry.SPAIN,
        tax_year=2024,
        brackets=_schedule(
            (0, 35000, 19),
            (35000, None, 24),
        ),
        max_deductible_ratio=Decimal("0.50"),
    ),
}


def get_tax_rules(country: TaxCountry | str) -> CountryTaxRules:
    return TAX_RULES[TaxCountry.parse(country)]


def get_tax_brackets(country: TaxCountry | str) -> tuple[TaxBracket, ...]:
    """Bracket table for a country (display and calculation)."""
    return get_tax_rules(country).brackets
