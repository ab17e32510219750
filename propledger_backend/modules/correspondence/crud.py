"""Data access for correspondence templates and generated correspondence."""

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.base_crud import BaseCRUD
from ...core.utils import utc_now
from ...database import get_next_id_for_tenant
from .models import Correspondence, CorrespondenceStatus, CorrespondenceTemplate
from .schemas import TemplateCreate, TemplateUpdate


class TemplateCRUD(
    BaseCRUD[CorrespondenceTemplate, TemplateCreate, TemplateUpdate]
):
    search_fields = ["name", "subject"]
    default_order_by = "name"
    default_order_desc = False


template_crud = TemplateCRUD(CorrespondenceTemplate)


async def get_correspondence_by_id(
    db: AsyncSession, correspondence_id: int, account_id: int, company_id: int
) -> Correspondence | None:
    result = await db.execute(
        select(Correspondence).where(
            and_(
                Correspondence.id == correspondence_id,
                Correspondence.account_id == account_id,
                Correspondence.company_id == company_id,
            )
        )
    )
    return result.scalar_one_or_none()


async def get_correspondence(
    db: AsyncSession,
    account_id: int,
    company_id: int,
    skip: int = 0,
    limit: int = 100,
    tenant_id: int | None = None,
    status: CorrespondenceStatus | None = None,
) -> tuple[list[Correspondence], int]:
    filters = [
        Correspondence.account_id == account_id,
        Correspondence.company_id == company_id,
    ]
    if tenant_id:
        filters.append(Correspondence.tenant_id == tenant_id)
    if status:
        filters.append(Correspondence.status == status)

    total_result = await db.execute(
        select(func.count(Correspondence.id)).where(and_(*filters))
    )
    total = total_result.scalar_one()

    result = await db.execute(
        select(Correspondence)
        .where(and_(*filters))
        .order_by(Correspondence.created_at.desc(), Correspondence.id.desc())
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def create_correspondence(
    db: AsyncSession, account_id: int, company_id: int, **fields
) -> Correspondence:
    correspondence = Correspondence(
        account_id=account_id,
        company_id=company_id,
        id=await get_next_id_for_tenant(db, Correspondence, account_id, company_id),
        status=CorrespondenceStatus.DRAFT,
        **fields,
    )
    db.add(correspondence)
    await db.flush()
    await db.refresh(correspondence)
    return correspondence


async def mark_sent(
    db: AsyncSession, correspondence: Correspondence, sent_by: int | None
) -> Correspondence:
    correspondence.status = CorrespondenceStatus.SENT
    correspondence.sent_at = utc_now()
    correspondence.sent_by = sent_by
    await db.flush()
    await db.refresh(correspondence)
    return correspondence


async def mark_failed(
    db: AsyncSession, correspondence: Correspondence, reason: str
) -> Correspondence:
    correspondence.status = CorrespondenceStatus.FAILED
    correspondence.failure_reason = reason
    await db.flush()
    await db.refresh(correspondence)
    return correspondence


async def delete_correspondence(db: AsyncSession, correspondence: Correspondence) -> None:
    await db.delete(correspondence)
    await db.flush()
