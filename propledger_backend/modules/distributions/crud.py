"""Data access for income distributions and their owner shares."""

from datetime import date

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.utils import utc_now, year_bounds
from ...database import get_next_id_for_tenant
from .models import IncomeDistribution, IncomeDistributionShare


async def get_distribution_by_id(
    db: AsyncSession, distribution_id: int, account_id: int, company_id: int
) -> IncomeDistribution | None:
    result = await db.execute(
        select(IncomeDistribution).where(
            and_(
                IncomeDistribution.id == distribution_id,
                IncomeDistribution.account_id == account_id,
                IncomeDistribution.company_id == company_id,
            )
        )
    )
    return result.scalar_one_or_none()


async def get_latest_version(
    db: AsyncSession,
    property_id: int,
    period_start: date,
    period_end: date,
    account_id: int,
    company_id: int,
) -> int:
    """Highest stored version for a property and period, 0 when none."""
    result = await db.execute(
        select(func.coalesce(func.max(IncomeDistribution.version), 0)).where(
            and_(
                IncomeDistribution.account_id == account_id,
                IncomeDistribution.company_id == company_id,
                IncomeDistribution.property_id == property_id,
                IncomeDistribution.period_start == period_start,
                IncomeDistribution.period_end == period_end,
            )
        )
    )
    return int(result.scalar_one())


async def get_distributions(
    db: AsyncSession,
    property_id: int,
    account_id: int,
    company_id: int,
    year: int | None = None,
) -> list[IncomeDistribution]:
    """Distributions of a property, newest period and version first."""
    filters = [
        IncomeDistribution.account_id == account_id,
        IncomeDistribution.company_id == company_id,
        IncomeDistribution.property_id == property_id,
    ]
    if year is not None:
        first, next_year = year_bounds(year)
        filters.append(IncomeDistribution.period_start >= first)
        filters.append(IncomeDistribution.period_start < next_year)

    result = await db.execute(
        select(IncomeDistribution)
        .where(and_(*filters))
        .order_by(
            IncomeDistribution.period_start.desc(),
            IncomeDistribution.version.desc(),
        )
    )
    return list(result.scalars().all())


async def create_distribution(
    db: AsyncSession,
    account_id: int,
    company_id: int,
    shares: list[dict],
    **fields,
) -> IncomeDistribution:
    """Insert a distribution with its shares in one flush."""
    distribution_id = await get_next_id_for_tenant(
        db, IncomeDistribution, account_id, company_id
    )
    first_share_id = await get_next_id_for_tenant(
        db, IncomeDistributionShare, account_id, company_id
    )
    distribution = IncomeDistribution(
        account_id=account_id,
        company_id=company_id,
        id=distribution_id,
        **fields,
    )
    distribution.shares = [
        IncomeDistributionShare(
            account_id=account_id,
            company_id=company_id,
            id=first_share_id + offset,
            distribution_id=distribution_id,
            **share,
        )
        for offset, share in enumerate(shares)
    ]
    db.add(distribution)
    await db.flush()
    await db.refresh(distribution)
    return distribution


async def get_owner_shares_for_year(
    db: AsyncSession, owner_id: int, year: int, account_id: int, company_id: int
) -> list[tuple[IncomeDistributionShare, IncomeDistribution]]:
    """An owner's shares whose distribution starts within ``year``.

    Only the latest version of each (property, period) counts; earlier
    versions were superseded by a recalculation.
    """
    first, next_year = year_bounds(year)
    latest = (
        select(
            IncomeDistribution.property_id,
            IncomeDistribution.period_start,
            IncomeDistribution.period_end,
            func.max(IncomeDistribution.version).label("version"),
        )
        .where(
            and_(
                IncomeDistribution.account_id == account_id,
                IncomeDistribution.company_id == company_id,
            )
        )
        .group_by(
            IncomeDistribution.property_id,
            IncomeDistribution.period_start,
            IncomeDistribution.period_end,
        )
        .subquery()
    )
    result = await db.execute(
        select(IncomeDistributionShare, IncomeDistribution)
        .join(
            IncomeDistribution,
            and_(
                IncomeDistribution.account_id == IncomeDistributionShare.account_id,
                IncomeDistribution.company_id == IncomeDistributionShare.company_id,
                IncomeDistribution.id == IncomeDistributionShare.distribution_id,
            ),
        )
        .join(
            latest,
            and_(
                latest.c.property_id == IncomeDistribution.property_id,
                latest.c.period_start == IncomeDistribution.period_start,
                latest.c.period_end == IncomeDistribution.period_end,
                latest.c.version == IncomeDistribution.version,
            ),
        )
        .where(
            and_(
                IncomeDistributionShare.account_id == account_id,
                IncomeDistributionShare.company_id == company_id,
                IncomeDistributionShare.owner_id == owner_id,
                IncomeDistribution.period_start >= first,
                IncomeDistribution.period_start < next_year,
            )
        )
        .order_by(IncomeDistribution.period_start, IncomeDistribution.id)
    )
    return [(share, distribution) for share, distribution in result.all()]


async def mark_shares_notified(
    db: AsyncSession, distribution: IncomeDistribution
) -> int:
    """Stamp ``notified_at`` on shares not yet notified; returns the count."""
    now = utc_now()
    pending = [share for share in distribution.shares if share.notified_at is None]
    for share in pending:
        share.notified_at = now
    await db.flush()
    for share in pending:
        await db.refresh(share)
    return len(pending)
