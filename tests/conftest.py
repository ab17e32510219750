"""Pytest configuration and fixtures for the PropLedger test suite."""

import os
from decimal import Decimal
from pathlib import Path

# Settings load at import time, so CONFIG must be set BEFORE any package import
os.environ["CONFIG"] = str(Path(__file__).parent / "resources" / "config" / "test.yaml")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from propledger_backend.database import Base, get_db, import_all_models  # noqa: E402
from propledger_backend.main import app  # noqa: E402
from propledger_backend.modules.auth.jwt_service import (  # noqa: E402
    create_access_token,
)
from propledger_backend.modules.auth.models import Account, Company  # noqa: E402
from propledger_backend.modules.property_management import (  # noqa: E402
    crud as property_crud,
)
from propledger_backend.modules.tenant_management import (  # noqa: E402
    crud as tenant_crud,
)

import_all_models()


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture
async def engine():
    """In-memory SQLite engine with the full schema, fresh per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def scope(db):
    """An account and company; returns ``(account_id, company_id)``."""
    account = Account(name="Test Account")
    db.add(account)
    await db.flush()
    company = Company(account_id=account.id, name="Test Company")
    db.add(company)
    await db.commit()
    return account.id, company.id


# =============================================================================
# DOMAIN FIXTURES
# =============================================================================


@pytest.fixture
async def property_obj(db, scope):
    account_id, company_id = scope
    prop = await property_crud.create_property(
        db,
        account_id,
        company_id,
        property_code="PRP-001",
        property_name="Rua Augusta 10",
        country="PT",
    )
    await db.commit()
    return prop


@pytest.fixture
async def unit(db, scope, property_obj):
    account_id, company_id = scope
    unit = await property_crud.create_unit(
        db,
        account_id,
        company_id,
        property_obj.id,
        unit_code="1A",
        monthly_rent=Decimal("950.00"),
    )
    await db.commit()
    return unit


@pytest.fixture
async def client(session_factory):
    """HTTP client against the app, sharing the test database."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://testserver"
    ) as http_client:
        yield http_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(scope):
    """Bearer headers for a user of the test company with the given role."""

    def build(role: str = "admin") -> dict[str, str]:
        account_id, company_id = scope
        token = create_access_token(
            user_id=1,
            account_id=account_id,
            company_id=company_id,
            email="staff@example.com",
            role_slug=role,
            first_name="Staff",
        )
        return {"Authorization": f"Bearer {token}"}

    return build


@pytest.fixture
async def tenant(db, scope):
    account_id, company_id = scope
    tenant = await tenant_crud.create_tenant(
        db,
        account_id,
        company_id,
        tenant_code="TEN-000001",
        first_name="Ana",
        last_name="Silva",
        email="ana.silva@example.com",
    )
    await db.commit()
    return tenant
