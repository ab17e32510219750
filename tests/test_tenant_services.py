"""Tests for tenant records and portal links."""

from datetime import timedelta

import pytest

from propledger_backend.core.exceptions import (
    AuthenticationError,
    BusinessLogicError,
    NotFoundError,
    ValidationError,
)
from propledger_backend.core.utils import utc_now
from propledger_backend.modules.tenant_management import crud, services
from propledger_backend.modules.tenant_management.schemas import (
    TenantCreate,
    TenantUpdate,
)


async def test_duplicate_code(db, scope, tenant):
    with pytest.raises(ValidationError):
        await services.create_tenant(
            db, *scope, TenantCreate(tenant_code="TEN-000001", first_name="Rui")
        )


async def test_update_to_taken_code(db, scope, tenant):
    other = await services.create_tenant(
        db, *scope, TenantCreate(tenant_code="TEN-000002", first_name="Rui")
    )
    with pytest.raises(ValidationError):
        await services.update_tenant(
            db, other.id, *scope, TenantUpdate(tenant_code="TEN-000001")
        )


async def test_delete_blocked_by_active_lease(db, scope, tenant):
    await crud.adjust_active_leases(db, tenant, 1)
    await db.commit()

    with pytest.raises(BusinessLogicError):
        await services.delete_tenant(db, tenant.id, *scope)


async def test_delete(db, scope, tenant):
    await services.delete_tenant(db, tenant.id, *scope)
    with pytest.raises(NotFoundError):
        await services.get_tenant(db, tenant.id, *scope)


class TestPortal:
    async def test_token_opens_portal(self, db, scope, tenant):
        token, expires_at = await services.create_portal_token(db, tenant.id, *scope)

        view = await services.get_portal_view(db, token)

        assert view.tenant.tenant_code == "TEN-000001"
        assert view.tenant.display_name == "Ana Silva"
        assert view.leases == []
        assert view.invoices == []
        stored = await crud.get_portal_token(db, token)
        assert stored.last_used_at is not None
        assert stored.token_hash != token

    async def test_unknown_token(self, db):
        with pytest.raises(AuthenticationError, match="Invalid"):
            await services.get_portal_view(db, "no-such-token")

    async def test_revoked_token(self, db, scope, tenant):
        token, _ = await services.create_portal_token(db, tenant.id, *scope)

        assert await services.revoke_portal_access(db, tenant.id, *scope) == 1
        with pytest.raises(AuthenticationError, match="revoked"):
            await services.get_portal_view(db, token)
        assert await services.revoke_portal_access(db, tenant.id, *scope) == 0

    async def test_expired_token(self, db, scope, tenant):
        token, _ = await services.create_portal_token(db, tenant.id, *scope)
        stored = await crud.get_portal_token(db, token)
        stored.expires_at = utc_now() - timedelta(minutes=1)
        await db.commit()

        with pytest.raises(AuthenticationError, match="expired"):
            await services.get_portal_view(db, token)
        assert stored.last_used_at is None
