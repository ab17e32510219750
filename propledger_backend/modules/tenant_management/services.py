"""Tenant management business logic services."""

import secrets
from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from ...config import settings
from ...core.exceptions import (
    AuthenticationError,
    BusinessLogicError,
    NotFoundError,
    ValidationError,
)
from ...core.logging import get_logger
from ...core.utils import utc_now
from ..billing import crud as billing_crud
from ..lease_management import crud as lease_crud
from . import crud
from .models import Tenant
from .schemas import (
    PortalInvoiceSummary,
    PortalLeaseSummary,
    PortalView,
    TenantCreate,
    TenantResponse,
    TenantUpdate,
)

logger = get_logger("tenant_management")

PORTAL_INVOICE_LIMIT = 24


async def get_tenant(
    db: AsyncSession, tenant_id: int, account_id: int, company_id: int
) -> Tenant:
    tenant = await crud.get_tenant_by_id(db, tenant_id, account_id, company_id)
    if not tenant:
        raise NotFoundError(f"Tenant with ID {tenant_id} not found")
    return tenant


async def create_tenant(
    db: AsyncSession,
    account_id: int,
    company_id: int,
    data: TenantCreate,
) -> Tenant:
    """Create a tenant.

    Raises:
        ValidationError: If the tenant code already exists
    """
    if await crud.get_tenant_by_code(db, data.tenant_code, account_id, company_id):
        raise ValidationError(
            f"Tenant with code '{data.tenant_code}' already exists",
            field="tenant_code",
        )

    tenant = await crud.create_tenant(
        db, account_id=account_id, company_id=company_id, **data.model_dump()
    )
    await db.commit()
    logger.info("Tenant created", extra={"tenant_id": tenant.id})
    return tenant


async def update_tenant(
    db: AsyncSession,
    tenant_id: int,
    account_id: int,
    company_id: int,
    data: TenantUpdate,
) -> Tenant:
    tenant = await get_tenant(db, tenant_id, account_id, company_id)

    if data.tenant_code and data.tenant_code != tenant.tenant_code:
        if await crud.get_tenant_by_code(db, data.tenant_code, account_id, company_id):
            raise ValidationError(
                f"Tenant with code '{data.tenant_code}' already exists",
                field="tenant_code",
            )

    updated = await crud.update_tenant(db, tenant, **data.model_dump(exclude_unset=True))
    await db.commit()
    return updated


async def delete_tenant(
    db: AsyncSession, tenant_id: int, account_id: int, company_id: int
) -> None:
    """Delete a tenant with no active leases.

    Raises:
        NotFoundError: If tenant not found
        BusinessLogicError: If the tenant still has active leases
    """
    tenant = await get_tenant(db, tenant_id, account_id, company_id)
    if tenant.active_leases_count > 0:
        raise BusinessLogicError(
            f"Cannot delete tenant with {tenant.active_leases_count} active lease(s)"
        )
    await crud.revoke_portal_tokens(db, tenant)
    await crud.delete_tenant(db, tenant)
    await db.commit()


# ----- Portal -----


async def create_portal_token(
    db: AsyncSession, tenant_id: int, account_id: int, company_id: int
) -> tuple[str, datetime]:
    """Issue a portal link token; only its hash is stored.

    Returns:
        Tuple of (token, expires_at)
    """
    tenant = await get_tenant(db, tenant_id, account_id, company_id)
    token = secrets.token_urlsafe(32)
    expires_at = utc_now() + timedelta(days=settings.tenant_portal_token_days)
    await crud.create_portal_token(db, tenant, token, expires_at)
    await db.commit()

    logger.info("Portal token issued", extra={"tenant_id": tenant.id})
    return token, expires_at


async def revoke_portal_access(
    db: AsyncSession, tenant_id: int, account_id: int, company_id: int
) -> int:
    tenant = await get_tenant(db, tenant_id, account_id, company_id)
    count = await crud.revoke_portal_tokens(db, tenant)
    await db.commit()
    return count


async def get_portal_view(db: AsyncSession, token: str) -> PortalView:
    """Resolve a portal token to the tenant's profile, leases and invoices.

    Raises:
        AuthenticationError: If the token is unknown, revoked or expired
    """
    portal_token = await crud.get_portal_token(db, token)
    if not portal_token:
        raise AuthenticationError("Invalid portal link")
    if portal_token.is_revoked:
        raise AuthenticationError("Portal link has been revoked")
    if portal_token.is_expired:
        raise AuthenticationError("Portal link has expired")

    account_id = portal_token.tenant_account_id
    company_id = portal_token.tenant_company_id
    tenant = await crud.get_tenant_by_id(
        db, portal_token.tenant_id, account_id, company_id
    )
    if not tenant:
        raise AuthenticationError("Invalid portal link")

    leases = await lease_crud.get_leases_by_tenant(
        db, tenant.id, account_id, company_id
    )
    invoices = await billing_crud.get_invoices_by_tenant(
        db, tenant.id, account_id, company_id, limit=PORTAL_INVOICE_LIMIT
    )

    view = PortalView(
        tenant=TenantResponse.model_validate(tenant),
        leases=[PortalLeaseSummary.model_validate(lease) for lease in leases],
        invoices=[PortalInvoiceSummary.model_validate(inv) for inv in invoices],
    )
    await crud.touch_portal_token(db, portal_token)
    await db.commit()
    return view
