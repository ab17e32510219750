"""Tax calculator request/response schemas."""

from decimal import Decimal

from pydantic import BaseModel, Field

from .brackets import TaxCountry


class TaxCalculationRequest(BaseModel):
    country: str = Field(..., description="Portugal/PT or Spain/ES")
    annual_rental_income: Decimal = Field(..., ge=0)
    deductible_expenses: Decimal = Field(default=Decimal("0"), ge=0)
    mortgage_interest: Decimal = Field(default=Decimal("0"), ge=0)
    community_fees: Decimal = Field(default=Decimal("0"), ge=0)
    years_of_ownership: int = Field(default=1, ge=0, le=100)


class QuarterlyEstimateRequest(BaseModel):
    country: str
    quarterly_income: Decimal = Field(..., ge=0)
    quarterly_expenses: Decimal = Field(default=Decimal("0"), ge=0)


class QuarterlyEstimateResponse(BaseModel):
    country: TaxCountry
    quarterly_payment: Decimal


class TaxDeductionsResponse(BaseModel):
    total: Decimal
    breakdown: dict[str, Decimal]

    class Config:
        from_attributes = True


class TaxCalculationResponse(BaseModel):
    country: TaxCountry
    gross_income: Decimal
    net_income: Decimal
    taxable_income: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    quarterly_payment: Decimal
    annual_settlement: Decimal
    effective_rate: Decimal
    deductions: TaxDeductionsResponse

    class Config:
        from_attributes = True


class TaxBracketResponse(BaseModel):
    min: Decimal
    max: Decimal | None = Field(None, description="Inclusive; null means no cap")
    rate: Decimal


class TaxBracketsResponse(BaseModel):
    country: TaxCountry
    tax_year: int
    brackets: list[TaxBracketResponse]
