"""Tax calculator API routes."""

from fastapi import APIRouter

from ..auth.dependencies import CurrentUser
from ..commons import BaseResponse
from .brackets import TaxCountry, get_tax_rules
from .calculator import TaxCalculationInput, calculate_quarterly_estimate, calculate_tax
from .schemas import (
    QuarterlyEstimateRequest,
    QuarterlyEstimateResponse,
    TaxBracketResponse,
    TaxBracketsResponse,
    TaxCalculationRequest,
    TaxCalculationResponse,
)

router = APIRouter(prefix="/tax", tags=["Tax"])


@router.post("/calculate", response_model=BaseResponse[TaxCalculationResponse])
async def calculate(data: TaxCalculationRequest, current_user: CurrentUser):
    """Calculate annual rental-income tax for one taxpayer."""
    result = calculate_tax(TaxCalculationInput(**data.model_dump()))
    return BaseResponse(
        success=True,
        data=TaxCalculationResponse.model_validate(result),
    )


@router.get("/brackets/{country}", response_model=BaseResponse[TaxBracketsResponse])
async def get_brackets(country: str, current_user: CurrentUser):
    """Get the progressive bracket table for a country."""
    rules = get_tax_rules(country)
    return BaseResponse(
        success=True,
        data=TaxBracketsResponse(
            country=rules.country,
            tax_year=rules.tax_year,
            brackets=[
                TaxBracketResponse(min=b.lower, max=b.upper, rate=b.rate)
                for b in rules.brackets
            ],
        ),
    )


@router.post(
    "/quarterly-estimate", response_model=BaseResponse[QuarterlyEstimateResponse]
)
async def quarterly_estimate(data: QuarterlyEstimateRequest, current_user: CurrentUser):
    """Estimate the quarterly instalment from one quarter's income and expenses."""
    country = TaxCountry.parse(data.country)
    payment = calculate_quarterly_estimate(
        country, data.quarterly_income, data.quarterly_expenses
    )
    return BaseResponse(
        success=True,
        data=QuarterlyEstimateResponse(country=country, quarterly_payment=payment),
    )
