"""Income distribution business logic.

Calculation itself is pure (see ``calculator``); this module feeds it from
request data or from the ledger, stores versioned results and builds the
annual owner tax summaries.
"""

from dataclasses import asdict
from datetime import date
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import NotFoundError
from ...core.logging import get_logger
from ...core.utils import round_money, today, utc_now
from ..billing import crud as billing_crud
from ..expenses.crud import expense_crud
from ..owners import crud as owners_crud
from ..owners.crud import owner_crud
from ..property_management import crud as property_crud
from ..tax.brackets import TaxMode
from . import crud
from .calculator import (
    ZERO,
    DistributionInput,
    DistributionResult,
    OwnerShareInput,
    OwnerShareResult,
    calculate_distribution,
)
from .models import IncomeDistribution
from .schemas import (
    AnnualTaxSummary,
    DistributionRequest,
    DistributionResponse,
    TaxForm,
    TaxSummaryRow,
)

logger = get_logger("distributions")

NIF_PLACEHOLDER = "TO BE FILLED BY OWNER"


def _share_fields(share: OwnerShareResult) -> dict:
    fields = asdict(share)
    fields["tax_country"] = share.tax_country.value
    return fields


def preview_response(result: DistributionResult) -> DistributionResponse:
    """Response for a calculation that was not stored."""
    data = asdict(result)
    data["shares"] = [_share_fields(share) for share in result.shares]
    return DistributionResponse(**data)


async def _require_property(
    db: AsyncSession, property_id: int, account_id: int, company_id: int
) -> None:
    if not await property_crud.get_property_by_id(
        db, property_id, account_id, company_id
    ):
        raise NotFoundError(f"Property with ID {property_id} not found")


def calculate_from_request(
    data: DistributionRequest, calculated_by: int | None
) -> DistributionResult:
    return calculate_distribution(
        DistributionInput(
            property_id=data.property_id,
            period_start=data.period_start,
            period_end=data.period_end,
            total_income=data.total_income,
            total_expenses=data.total_expenses,
            owners=[
                OwnerShareInput(
                    owner_id=owner.owner_id,
                    owner_name=owner.owner_name,
                    percentage=owner.percentage,
                    tax_country=owner.tax_country,
                )
                for owner in data.owners
            ],
            tax_mode=data.tax_mode,
            calculated_by=calculated_by,
            currency=data.currency,
            notes=data.notes,
        )
    )


async def calculate_from_ledger(
    db: AsyncSession,
    property_id: int,
    period_start: date,
    period_end: date,
    account_id: int,
    company_id: int,
    tax_mode: TaxMode = TaxMode.PRE_TAX,
    calculated_by: int | None = None,
    currency: str = "EUR",
    notes: str | None = None,
) -> DistributionResult:
    """Calculate a distribution from recorded data.

    Income is the invoices paid within the period, expenses are those
    dated within it, and owners come from the property's ownership table.
    """
    await _require_property(db, property_id, account_id, company_id)

    total_income = await billing_crud.get_paid_income(
        db, property_id, period_start, period_end, account_id, company_id
    )
    by_category = await expense_crud.get_totals_by_category(
        db, property_id, period_start, period_end, account_id, company_id
    )
    total_expenses = sum(by_category.values(), ZERO)

    links = await owners_crud.list_property_owners(
        db, property_id, account_id, company_id
    )
    owners = await owner_crud.get_many(
        db, [link.owner_id for link in links], account_id, company_id
    )
    shares = []
    for link in links:
        owner = owners.get(link.owner_id)
        shares.append(
            OwnerShareInput(
                owner_id=link.owner_id,
                owner_name=owner.name if owner else "Unknown",
                percentage=link.ownership_percentage,
                tax_country=owner.tax_residence_country if owner else "Portugal",
            )
        )

    result = calculate_distribution(
        DistributionInput(
            property_id=property_id,
            period_start=period_start,
            period_end=period_end,
            total_income=total_income,
            total_expenses=total_expenses,
            owners=shares,
            tax_mode=tax_mode,
            calculated_by=calculated_by,
            currency=currency,
            notes=notes,
        )
    )
    logger.info(
        "Distribution calculated from ledger",
        extra={
            "property_id": property_id,
            "total_income": str(result.total_income),
            "total_expenses": str(result.total_expenses),
            "owners": len(result.shares),
        },
    )
    return result


async def save_distribution(
    db: AsyncSession, result: DistributionResult, account_id: int, company_id: int
) -> IncomeDistribution:
    """Store a calculation as the next version for its property and period."""
    await _require_property(db, result.property_id, account_id, company_id)

    latest = await crud.get_latest_version(
        db,
        result.property_id,
        result.period_start,
        result.period_end,
        account_id,
        company_id,
    )
    version = latest + 1
    recalculated = version > 1

    distribution = await crud.create_distribution(
        db,
        account_id,
        company_id,
        shares=[_share_fields(share) for share in result.shares],
        property_id=result.property_id,
        period_start=result.period_start,
        period_end=result.period_end,
        total_income=result.total_income,
        total_expenses=result.total_expenses,
        net_income=result.net_income,
        total_tax=result.total_tax,
        total_net_distributed=result.total_net_distributed,
        tax_mode=result.tax_mode,
        currency=result.currency,
        version=version,
        calculated_by=result.calculated_by,
        recalculated_by=result.calculated_by if recalculated else None,
        recalculated_at=utc_now() if recalculated else None,
        notes=result.notes,
    )
    await db.commit()
    result.version = version
    logger.info(
        "Distribution saved",
        extra={
            "distribution_id": distribution.id,
            "property_id": distribution.property_id,
            "version": version,
            "total_tax": str(distribution.total_tax),
        },
    )
    return distribution


async def get_distribution(
    db: AsyncSession, distribution_id: int, account_id: int, company_id: int
) -> IncomeDistribution:
    distribution = await crud.get_distribution_by_id(
        db, distribution_id, account_id, company_id
    )
    if not distribution:
        raise NotFoundError(f"Distribution with ID {distribution_id} not found")
    return distribution


async def get_distribution_history(
    db: AsyncSession,
    property_id: int,
    account_id: int,
    company_id: int,
    year: int | None = None,
) -> list[IncomeDistribution]:
    return await crud.get_distributions(
        db, property_id, account_id, company_id, year=year
    )


async def mark_shares_notified(
    db: AsyncSession, distribution_id: int, account_id: int, company_id: int
) -> int:
    distribution = await get_distribution(db, distribution_id, account_id, company_id)
    notified = await crud.mark_shares_notified(db, distribution)
    await db.commit()
    logger.info(
        "Distribution owners notified",
        extra={"distribution_id": distribution_id, "notified": notified},
    )
    return notified


# ----- Annual tax reporting -----


def default_tax_year() -> int:
    """Reports default to the last complete calendar year."""
    return today().year - 1


def _format_period(start: date, end: date) -> str:
    return f"{start:%Y-%m} - {end:%Y-%m}"


async def get_annual_tax_summary(
    db: AsyncSession,
    owner_id: int,
    year: int,
    account_id: int,
    company_id: int,
) -> AnnualTaxSummary:
    rows = await crud.get_owner_shares_for_year(
        db, owner_id, year, account_id, company_id
    )
    gross = tax = net = Decimal("0")
    distributions = []
    for share, distribution in rows:
        gross += share.gross_share
        tax += share.tax_amount
        net += share.net_share
        distributions.append(
            TaxSummaryRow(
                distribution_id=distribution.id,
                property_id=distribution.property_id,
                period=_format_period(distribution.period_start, distribution.period_end),
                gross_share=share.gross_share,
                tax_amount=share.tax_amount,
                net_share=share.net_share,
            )
        )
    return AnnualTaxSummary(
        owner_id=owner_id,
        year=year,
        total_gross_income=round_money(gross),
        total_tax_paid=round_money(tax),
        total_net_income=round_money(net),
        distributions=distributions,
    )


def generate_portugal_tax_form(
    summary: AnnualTaxSummary, nif: str | None = None
) -> TaxForm:
    """Modelo 3, Anexo F field values."""
    return TaxForm(
        form="Modelo 3 - Anexo F",
        year=summary.year,
        fields={
            "Campo 401": summary.total_gross_income,
            "Campo 402": ZERO,
            "Campo 403": summary.total_gross_income,
            "Campo 404": summary.total_tax_paid,
            "NIF": nif or NIF_PLACEHOLDER,
        },
    )


def generate_spain_tax_form(
    summary: AnnualTaxSummary, nif: str | None = None
) -> TaxForm:
    """Modelo 100 (IRPF) field values."""
    return TaxForm(
        form="Modelo 100 - IRPF",
        year=summary.year,
        fields={
            "Casilla 063": summary.total_gross_income,
            "Casilla 064": ZERO,
            "Casilla 065": summary.total_gross_income,
            "Casilla 595": summary.total_tax_paid,
            "NIF": nif or NIF_PLACEHOLDER,
        },
    )


_TAX_FORMS = {
    "pt": generate_portugal_tax_form,
    "portugal": generate_portugal_tax_form,
    "es": generate_spain_tax_form,
    "spain": generate_spain_tax_form,
}


def generate_tax_form(
    summary: AnnualTaxSummary, country: str | None, nif: str | None = None
) -> TaxForm | None:
    """The form for ``country``, or None when there is no form for it."""
    if not country:
        return None
    generator = _TAX_FORMS.get(country.strip().lower())
    return generator(summary, nif) if generator else None


async def get_owner_tax_report(
    db: AsyncSession,
    owner_id: int,
    account_id: int,
    company_id: int,
    year: int | None = None,
    country: str | None = None,
) -> tuple[AnnualTaxSummary, TaxForm | None]:
    owner = await owner_crud.get(db, owner_id, account_id, company_id)
    if not owner:
        raise NotFoundError(f"Owner with ID {owner_id} not found")

    summary = await get_annual_tax_summary(
        db, owner_id, year or default_tax_year(), account_id, company_id
    )
    return summary, generate_tax_form(
        summary, country, owner.tax_identification_number
    )
