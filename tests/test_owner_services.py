"""Tests for owners and property ownership tables."""

from decimal import Decimal

import pytest

from propledger_backend.core.exceptions import (
    BusinessLogicError,
    NotFoundError,
    OwnershipPercentageError,
    ValidationError,
)
from propledger_backend.modules.owners import services
from propledger_backend.modules.owners.schemas import OwnerCreate, PropertyOwnerCreate


@pytest.fixture
async def maria(db, scope):
    return await services.create_owner(db, OwnerCreate(name="Maria Costa"), *scope)


@pytest.fixture
async def javier(db, scope):
    return await services.create_owner(
        db, OwnerCreate(name="Javier Ruiz", tax_residence_country="ES"), *scope
    )


def _share(owner, percentage):
    return PropertyOwnerCreate(owner_id=owner.id, ownership_percentage=Decimal(percentage))


async def test_add_shares_up_to_hundred(db, scope, property_obj, maria, javier):
    await services.add_property_owner(db, property_obj.id, _share(maria, "70"), *scope)

    with pytest.raises(ValidationError, match="exceeds 100%"):
        await services.add_property_owner(
            db, property_obj.id, _share(javier, "40"), *scope
        )
    await services.add_property_owner(db, property_obj.id, _share(javier, "30"), *scope)

    links = await services.list_property_owners(db, property_obj.id, *scope)
    assert sorted(link.ownership_percentage for link in links) == [
        Decimal("30"),
        Decimal("70"),
    ]


async def test_owner_added_twice(db, scope, property_obj, maria):
    await services.add_property_owner(db, property_obj.id, _share(maria, "50"), *scope)
    with pytest.raises(BusinessLogicError):
        await services.add_property_owner(
            db, property_obj.id, _share(maria, "10"), *scope
        )


async def test_update_share_checks_other_owners(db, scope, property_obj, maria, javier):
    await services.add_property_owner(db, property_obj.id, _share(maria, "60"), *scope)
    await services.add_property_owner(db, property_obj.id, _share(javier, "40"), *scope)

    with pytest.raises(ValidationError):
        await services.update_property_owner(
            db, property_obj.id, maria.id, Decimal("61"), *scope
        )
    link = await services.update_property_owner(
        db, property_obj.id, maria.id, Decimal("55"), *scope
    )
    assert link.ownership_percentage == Decimal("55")


async def test_remove_missing_share(db, scope, property_obj, maria):
    with pytest.raises(NotFoundError):
        await services.remove_property_owner(db, property_obj.id, maria.id, *scope)


class TestReplaceOwnership:
    async def test_must_total_hundred(self, db, scope, property_obj, maria, javier):
        with pytest.raises(OwnershipPercentageError):
            await services.set_property_owners(
                db, property_obj.id, [_share(maria, "50"), _share(javier, "49")], *scope
            )

    async def test_owner_listed_twice(self, db, scope, property_obj, maria):
        with pytest.raises(ValidationError, match="only once"):
            await services.set_property_owners(
                db, property_obj.id, [_share(maria, "50"), _share(maria, "50")], *scope
            )

    async def test_replaces_existing_table(self, db, scope, property_obj, maria, javier):
        await services.set_property_owners(
            db, property_obj.id, [_share(maria, "100")], *scope
        )
        links = await services.set_property_owners(
            db, property_obj.id, [_share(maria, "25"), _share(javier, "75")], *scope
        )

        assert len(links) == 2
        stored = await services.list_property_owners(db, property_obj.id, *scope)
        assert {link.owner_id: link.ownership_percentage for link in stored} == {
            maria.id: Decimal("25"),
            javier.id: Decimal("75"),
        }
