"""Tests for property and unit management services."""

from decimal import Decimal

import pytest

from propledger_backend.core.exceptions import (
    BusinessLogicError,
    NotFoundError,
    ValidationError,
)
from propledger_backend.modules.property_management import services
from propledger_backend.modules.property_management.models import UnitStatus
from propledger_backend.modules.property_management.schemas import (
    PropertyCreate,
    PropertyUpdate,
    UnitCreate,
    UnitUpdate,
)


@pytest.fixture
async def building(db, scope):
    return await services.create_property(
        db,
        *scope,
        PropertyCreate(property_code="PRP-100", property_name="Calle Mayor 5", country="ES"),
    )


@pytest.fixture
def new_unit(db, scope, building):
    async def create(code="1A", **overrides):
        return await services.create_unit(
            db,
            *scope,
            UnitCreate(
                property_id=building.id,
                unit_code=code,
                monthly_rent=Decimal("700.00"),
                **overrides,
            ),
        )

    return create


class TestProperties:
    async def test_duplicate_code_rejected(self, db, scope, building):
        with pytest.raises(ValidationError, match="PRP-100"):
            await services.create_property(
                db,
                *scope,
                PropertyCreate(property_code="PRP-100", property_name="Other"),
            )

    async def test_rename_to_taken_code_rejected(self, db, scope, building):
        other = await services.create_property(
            db, *scope, PropertyCreate(property_code="PRP-200", property_name="Other")
        )
        with pytest.raises(ValidationError):
            await services.update_property(
                db, other.id, *scope, PropertyUpdate(property_code="PRP-100")
            )

    async def test_delete_blocked_by_active_units(self, db, scope, building, new_unit):
        await new_unit()

        with pytest.raises(BusinessLogicError, match="1 active unit"):
            await services.delete_property(db, building.id, *scope)

    async def test_delete_after_units_deactivated(self, db, scope, building, new_unit):
        unit = await new_unit()
        await services.update_unit(
            db, unit.id, *scope, UnitUpdate(status=UnitStatus.INACTIVE)
        )

        await services.delete_property(db, building.id, *scope)

        with pytest.raises(NotFoundError):
            await services.get_property(db, building.id, *scope)


class TestUnits:
    async def test_counters_follow_unit_changes(self, db, scope, building, new_unit):
        first = await new_unit("1A")
        await new_unit("1B")
        await new_unit("1C", status=UnitStatus.INACTIVE)

        prop = await services.get_property(db, building.id, *scope)
        assert (prop.total_units_count, prop.active_units_count) == (3, 2)

        await services.update_unit(
            db, first.id, *scope, UnitUpdate(status=UnitStatus.INACTIVE)
        )
        prop = await services.get_property(db, building.id, *scope)
        assert (prop.total_units_count, prop.active_units_count) == (3, 1)

        await services.delete_unit(db, first.id, *scope)
        prop = await services.get_property(db, building.id, *scope)
        assert (prop.total_units_count, prop.active_units_count) == (2, 1)

    async def test_duplicate_code_within_property(self, new_unit):
        await new_unit("1A")

        with pytest.raises(ValidationError, match="already exists in this property"):
            await new_unit("1A")

    async def test_same_code_in_another_property(self, db, scope, new_unit, property_obj):
        await new_unit("1A")

        unit = await services.create_unit(
            db, *scope, UnitCreate(property_id=property_obj.id, unit_code="1A")
        )
        assert unit.property_id == property_obj.id

    async def test_occupied_unit_cannot_be_deleted(self, db, scope, new_unit):
        unit = await new_unit(status=UnitStatus.OCCUPIED)

        with pytest.raises(BusinessLogicError, match="occupied"):
            await services.delete_unit(db, unit.id, *scope)
        assert (await services.get_unit(db, unit.id, *scope)).status == UnitStatus.OCCUPIED

    async def test_unit_for_missing_property(self, db, scope):
        with pytest.raises(NotFoundError):
            await services.create_unit(
                db, *scope, UnitCreate(property_id=999, unit_code="X")
            )
