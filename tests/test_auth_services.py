"""Tests for seeding, login and lockout."""

from uuid import UUID

import pytest
from sqlalchemy import select

from propledger_backend.core.exceptions import AuthenticationError, ValidationError
from propledger_backend.modules.auth import services
from propledger_backend.modules.auth.jwt_service import decode_access_token
from propledger_backend.modules.auth.models import Account, Company

EMAIL = "admin@example.com"
PASSWORD = "s3cret-Passw0rd"


@pytest.fixture
async def admin(session_factory):
    async with session_factory() as session:
        return await services.create_initial_admin(
            session,
            account_name="Lisbon Rentals",
            company_name="Lisbon Rentals Lda",
            admin_email=EMAIL,
            admin_password=PASSWORD,
            admin_first_name="Rita",
        )


async def test_login_issues_scoped_token(session_factory, admin):
    async with session_factory() as session:
        user, tokens = await services.authenticate_user(session, EMAIL.upper(), PASSWORD)

    payload = decode_access_token(tokens.access_token)
    assert user.id == admin.id
    assert payload["account_id"] == admin.account_id
    assert payload["company_id"] == admin.company_id
    assert payload["role"] == "admin"
    assert tokens.refresh_token


async def test_wrong_password_then_lockout(session_factory, admin):
    async with session_factory() as session:
        for _ in range(2):
            with pytest.raises(AuthenticationError, match="attempts remaining"):
                await services.authenticate_user(session, EMAIL, "wrong")
        with pytest.raises(AuthenticationError, match="locked"):
            await services.authenticate_user(session, EMAIL, "wrong")
        # the right password no longer helps while locked
        with pytest.raises(AuthenticationError, match="locked"):
            await services.authenticate_user(session, EMAIL, PASSWORD)


async def test_unknown_email(db):
    with pytest.raises(AuthenticationError):
        await services.authenticate_user(db, "nobody@example.com", PASSWORD)


async def test_seeding_twice_is_rejected(session_factory, admin):
    async with session_factory() as session:
        with pytest.raises(ValidationError):
            await services.create_initial_admin(
                session, "Other", "Other Co", "other@example.com", PASSWORD, "Otto"
            )


async def test_records_receive_uuids(db, scope, property_obj):
    account_id, company_id = scope
    account = (await db.execute(select(Account).where(Account.id == account_id))).scalar_one()
    company = (await db.execute(select(Company).where(Company.id == company_id))).scalar_one()

    assert isinstance(account.uuid, UUID)
    assert isinstance(company.uuid, UUID)
    assert isinstance(property_obj.uuid, UUID)
    assert len({account.uuid, company.uuid, property_obj.uuid}) == 3
