"""Tests for the lease lifecycle."""

from datetime import date
from decimal import Decimal

import pytest

from propledger_backend.core.exceptions import (
    BusinessLogicError,
    NotFoundError,
    ValidationError,
)
from propledger_backend.modules.lease_management import services
from propledger_backend.modules.lease_management.models import LeaseStatus
from propledger_backend.modules.lease_management.schemas import (
    LeaseCreate,
    LeaseUpdate,
)
from propledger_backend.modules.property_management import crud as property_crud
from propledger_backend.modules.property_management.models import UnitStatus
from propledger_backend.modules.tenant_management import crud as tenant_crud
from propledger_backend.modules.tenant_management.models import TenantStatus


@pytest.fixture
def lease_data(property_obj, unit, tenant):
    def build(**overrides):
        fields = dict(
            property_id=property_obj.id,
            unit_id=unit.id,
            tenant_id=tenant.id,
            start_date=date(2025, 1, 1),
            end_date=date(2025, 12, 31),
            monthly_rent=Decimal("950.00"),
            deposit=Decimal("1900.00"),
        )
        fields.update(overrides)
        return LeaseCreate(**fields)

    return build


async def _active_lease(db, scope, lease_data, **overrides):
    account_id, company_id = scope
    lease = await services.create_lease(db, account_id, company_id, lease_data(**overrides))
    return await services.activate_lease(db, lease.id, account_id, company_id)


async def _unit_status(db, scope, unit_id):
    unit = await property_crud.get_unit_by_id(db, unit_id, *scope)
    return unit.status


class TestCreateLease:
    async def test_creates_draft_with_generated_code(self, db, scope, lease_data):
        lease = await services.create_lease(db, *scope, lease_data())

        assert lease.status == LeaseStatus.DRAFT
        assert lease.lease_code == "LSE-000001"
        assert lease.term_days == 364

    async def test_unit_must_belong_to_property(self, db, scope, lease_data):
        other = await property_crud.create_property(
            db, *scope, property_code="PRP-002", property_name="Calle Mayor 3"
        )
        await db.commit()

        with pytest.raises(ValidationError):
            await services.create_lease(db, *scope, lease_data(property_id=other.id))

    async def test_missing_tenant(self, db, scope, lease_data):
        with pytest.raises(NotFoundError):
            await services.create_lease(db, *scope, lease_data(tenant_id=999))

    async def test_blacklisted_tenant(self, db, scope, lease_data, tenant):
        await tenant_crud.update_tenant(db, tenant, status=TenantStatus.BLACKLISTED)
        await db.commit()

        with pytest.raises(BusinessLogicError):
            await services.create_lease(db, *scope, lease_data())

    async def test_duplicate_code(self, db, scope, lease_data):
        await services.create_lease(db, *scope, lease_data(lease_code="L-1"))
        with pytest.raises(ValidationError):
            await services.create_lease(db, *scope, lease_data(lease_code="L-1"))

    def test_end_must_follow_start(self, lease_data):
        with pytest.raises(ValueError):
            lease_data(end_date=date(2024, 12, 31))


class TestLifecycle:
    async def test_activate_occupies_unit(self, db, scope, lease_data, unit, tenant):
        lease = await _active_lease(db, scope, lease_data)

        assert lease.status == LeaseStatus.ACTIVE
        assert lease.activated_at is not None
        assert await _unit_status(db, scope, unit.id) == UnitStatus.OCCUPIED
        assert tenant.active_leases_count == 1

    async def test_overlapping_active_lease_is_rejected(self, db, scope, lease_data):
        await _active_lease(db, scope, lease_data)
        second = await services.create_lease(
            db, *scope, lease_data(start_date=date(2025, 6, 1), end_date=date(2026, 5, 31))
        )

        with pytest.raises(BusinessLogicError):
            await services.activate_lease(db, second.id, *scope)

    async def test_only_drafts_can_be_updated(self, db, scope, lease_data):
        lease = await _active_lease(db, scope, lease_data)
        with pytest.raises(ValidationError):
            await services.update_lease(
                db, lease.id, *scope, LeaseUpdate(monthly_rent=Decimal("1000"))
            )

    async def test_update_draft_recomputes_term(self, db, scope, lease_data):
        lease = await services.create_lease(db, *scope, lease_data())
        updated = await services.update_lease(
            db, lease.id, *scope, LeaseUpdate(end_date=date(2025, 6, 30))
        )
        assert updated.term_days == 180

    async def test_terminate_releases_unit(self, db, scope, lease_data, unit, tenant):
        lease = await _active_lease(db, scope, lease_data)

        terminated = await services.terminate_lease(
            db, lease.id, *scope, reason="Tenant relocating", termination_date=date(2025, 7, 31)
        )

        assert terminated.status == LeaseStatus.TERMINATED
        assert terminated.termination_reason == "Tenant relocating"
        assert await _unit_status(db, scope, unit.id) == UnitStatus.AVAILABLE
        assert tenant.active_leases_count == 0

    async def test_terminate_before_start_is_rejected(self, db, scope, lease_data):
        lease = await _active_lease(db, scope, lease_data)
        with pytest.raises(ValidationError):
            await services.terminate_lease(
                db, lease.id, *scope, reason="x", termination_date=date(2024, 12, 1)
            )

    async def test_renew_extends_and_reprices(self, db, scope, lease_data):
        lease = await _active_lease(db, scope, lease_data)

        renewed = await services.renew_lease(
            db, lease.id, *scope, date(2026, 12, 31), Decimal("990.00")
        )

        assert renewed.end_date == date(2026, 12, 31)
        assert renewed.monthly_rent == Decimal("990.00")
        assert renewed.renewed_at is not None

    async def test_renew_must_move_end_date_forward(self, db, scope, lease_data):
        lease = await _active_lease(db, scope, lease_data)
        with pytest.raises(ValidationError):
            await services.renew_lease(db, lease.id, *scope, date(2025, 12, 31))

    async def test_active_lease_cannot_be_deleted(self, db, scope, lease_data):
        lease = await _active_lease(db, scope, lease_data)
        with pytest.raises(ValidationError):
            await services.delete_lease(db, lease.id, *scope)

    async def test_draft_can_be_deleted(self, db, scope, lease_data):
        lease = await services.create_lease(db, *scope, lease_data())
        await services.delete_lease(db, lease.id, *scope)
        with pytest.raises(NotFoundError):
            await services.get_lease(db, lease.id, *scope)


class TestExpiry:
    async def test_ended_lease_expires(self, db, scope, lease_data, unit):
        lease = await _active_lease(db, scope, lease_data)

        result = await services.expire_leases(db, *scope, as_of=date(2026, 1, 15))

        assert result.expired == 1
        assert result.renewed == 0
        assert lease.status == LeaseStatus.EXPIRED
        assert await _unit_status(db, scope, unit.id) == UnitStatus.AVAILABLE

    async def test_auto_renew_rolls_forward_by_term(self, db, scope, lease_data):
        lease = await _active_lease(db, scope, lease_data, auto_renew=True)

        result = await services.expire_leases(db, *scope, as_of=date(2026, 1, 15))

        assert result.renewed == 1
        assert lease.status == LeaseStatus.ACTIVE
        assert lease.end_date == date(2026, 12, 30)

    async def test_auto_renew_yields_to_following_lease(
        self, db, scope, lease_data, unit
    ):
        first = await _active_lease(db, scope, lease_data, auto_renew=True)
        following = await _active_lease(
            db,
            scope,
            lease_data,
            start_date=date(2026, 1, 1),
            end_date=date(2026, 12, 31),
        )

        result = await services.expire_leases(db, *scope, as_of=date(2026, 1, 15))

        assert (result.expired, result.renewed) == (1, 0)
        assert first.status == LeaseStatus.EXPIRED
        assert first.end_date == date(2025, 12, 31)
        assert following.status == LeaseStatus.ACTIVE
        assert await _unit_status(db, scope, unit.id) == UnitStatus.OCCUPIED

    async def test_running_lease_is_untouched(self, db, scope, lease_data):
        await _active_lease(db, scope, lease_data)
        result = await services.expire_leases(db, *scope, as_of=date(2025, 6, 1))
        assert (result.expired, result.renewed) == (0, 0)

    async def test_expiring_window(self, db, scope, lease_data):
        lease = await _active_lease(db, scope, lease_data)

        soon = await services.get_expiring_leases(db, *scope, 60, as_of=date(2025, 11, 15))
        later = await services.get_expiring_leases(db, *scope, 30, as_of=date(2025, 10, 1))

        assert [item.id for item in soon] == [lease.id]
        assert later == []
