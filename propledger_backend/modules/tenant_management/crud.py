"""CRUD operations for tenant management module."""

import hashlib
from datetime import datetime

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.utils import utc_now
from ...database import get_next_id_for_tenant
from .models import Tenant, TenantPortalToken, TenantStatus, TenantType

# ----- Tenant CRUD -----


async def get_tenant_by_id(
    db: AsyncSession, tenant_id: int, account_id: int, company_id: int
) -> Tenant | None:
    result = await db.execute(
        select(Tenant).where(
            and_(
                Tenant.id == tenant_id,
                Tenant.account_id == account_id,
                Tenant.company_id == company_id,
            )
        )
    )
    return result.scalar_one_or_none()


async def get_tenant_by_code(
    db: AsyncSession, tenant_code: str, account_id: int, company_id: int
) -> Tenant | None:
    result = await db.execute(
        select(Tenant).where(
            and_(
                Tenant.tenant_code == tenant_code,
                Tenant.account_id == account_id,
                Tenant.company_id == company_id,
            )
        )
    )
    return result.scalar_one_or_none()


async def get_tenants(
    db: AsyncSession,
    account_id: int,
    company_id: int,
    skip: int = 0,
    limit: int = 100,
    tenant_type: TenantType | None = None,
    status: TenantStatus | None = None,
    search: str | None = None,
) -> tuple[list[Tenant], int]:
    """Get tenants with filtering and pagination."""
    filters = [
        Tenant.account_id == account_id,
        Tenant.company_id == company_id,
    ]
    if tenant_type:
        filters.append(Tenant.tenant_type == tenant_type)
    if status:
        filters.append(Tenant.status == status)
    if search:
        search_filter = f"%{search}%"
        filters.append(
            (Tenant.tenant_code.ilike(search_filter))
            | (Tenant.first_name.ilike(search_filter))
            | (Tenant.last_name.ilike(search_filter))
            | (Tenant.company_name.ilike(search_filter))
            | (Tenant.email.ilike(search_filter))
            | (Tenant.tax_id.ilike(search_filter))
        )

    total_result = await db.execute(select(func.count(Tenant.id)).where(and_(*filters)))
    total = total_result.scalar_one()

    result = await db.execute(
        select(Tenant)
        .where(and_(*filters))
        .order_by(Tenant.created_at.desc(), Tenant.id.desc())
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def create_tenant(
    db: AsyncSession, account_id: int, company_id: int, **fields
) -> Tenant:
    tenant = Tenant(
        account_id=account_id,
        company_id=company_id,
        id=await get_next_id_for_tenant(db, Tenant, account_id, company_id),
        **fields,
    )
    db.add(tenant)
    await db.flush()
    await db.refresh(tenant)
    return tenant


async def update_tenant(db: AsyncSession, tenant: Tenant, **kwargs) -> Tenant:
    for key, value in kwargs.items():
        if hasattr(tenant, key):
            setattr(tenant, key, value)
    await db.flush()
    await db.refresh(tenant)
    return tenant


async def adjust_active_leases(db: AsyncSession, tenant: Tenant, delta: int) -> Tenant:
    """Move the denormalised active lease counter, never below zero."""
    tenant.active_leases_count = max(0, tenant.active_leases_count + delta)
    await db.flush()
    return tenant


async def delete_tenant(db: AsyncSession, tenant: Tenant) -> None:
    await db.delete(tenant)
    await db.flush()


# ----- Portal tokens -----


def hash_portal_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


async def create_portal_token(
    db: AsyncSession, tenant: Tenant, token: str, expires_at: datetime
) -> TenantPortalToken:
    portal_token = TenantPortalToken(
        tenant_account_id=tenant.account_id,
        tenant_company_id=tenant.company_id,
        tenant_id=tenant.id,
        token_hash=hash_portal_token(token),
        expires_at=expires_at,
    )
    db.add(portal_token)
    await db.flush()
    return portal_token


async def get_portal_token(db: AsyncSession, token: str) -> TenantPortalToken | None:
    result = await db.execute(
        select(TenantPortalToken).where(
            TenantPortalToken.token_hash == hash_portal_token(token)
        )
    )
    return result.scalar_one_or_none()


async def touch_portal_token(db: AsyncSession, portal_token: TenantPortalToken) -> None:
    portal_token.last_used_at = utc_now()
    await db.flush()


async def revoke_portal_tokens(db: AsyncSession, tenant: Tenant) -> int:
    """Revoke every live portal token of a tenant. Returns the count."""
    result = await db.execute(
        select(TenantPortalToken).where(
            and_(
                TenantPortalToken.tenant_account_id == tenant.account_id,
                TenantPortalToken.tenant_company_id == tenant.company_id,
                TenantPortalToken.tenant_id == tenant.id,
                TenantPortalToken.revoked_at.is_(None),
            )
        )
    )
    tokens = result.scalars().all()
    now = utc_now()
    for portal_token in tokens:
        portal_token.revoked_at = now
    await db.flush()
    return len(tokens)
