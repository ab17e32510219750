"""CRUD operations for authentication module."""

import uuid
from datetime import datetime

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ...core.utils import utc_now
from ...database import get_next_id_for_tenant
from .jwt_service import hash_refresh_token
from .models import Account, Company, RefreshToken, Role, User
from .password_service import hash_password

# ----- Account / Company -----


async def get_account_by_id(db: AsyncSession, account_id: int) -> Account | None:
    result = await db.execute(select(Account).where(Account.id == account_id))
    return result.scalar_one_or_none()


async def get_company_by_id(db: AsyncSession, company_id: int) -> Company | None:
    result = await db.execute(select(Company).where(Company.id == company_id))
    return result.scalar_one_or_none()


async def has_any_account(db: AsyncSession) -> bool:
    result = await db.execute(select(Account.id).limit(1))
    return result.scalar_one_or_none() is not None


async def create_account(db: AsyncSession, name: str) -> Account:
    account = Account(uuid=uuid.uuid4(), name=name, is_active=True)
    db.add(account)
    await db.flush()
    return account


async def create_company(db: AsyncSession, name: str, account_id: int) -> Company:
    company = Company(
        uuid=uuid.uuid4(), account_id=account_id, name=name, is_active=True
    )
    db.add(company)
    await db.flush()
    return company


# ----- Roles -----


async def get_role_by_slug(db: AsyncSession, slug: str) -> Role | None:
    result = await db.execute(select(Role).where(Role.slug == slug))
    return result.scalar_one_or_none()


async def get_all_roles(db: AsyncSession) -> list[Role]:
    result = await db.execute(select(Role).order_by(Role.id))
    return list(result.scalars().all())


async def create_role(
    db: AsyncSession, slug: str, name: str, description: str | None = None
) -> Role:
    role = Role(slug=slug, name=name, description=description)
    db.add(role)
    await db.flush()
    return role


# ----- Users -----


async def get_user_by_id(
    db: AsyncSession, user_id: int, account_id: int, company_id: int
) -> User | None:
    """Get a user by ID within tenant scope."""
    result = await db.execute(
        select(User)
        .options(selectinload(User.role))
        .where(
            and_(
                User.id == user_id,
                User.account_id == account_id,
                User.company_id == company_id,
            )
        )
    )
    return result.scalar_one_or_none()


async def get_user_by_email_global(db: AsyncSession, email: str) -> User | None:
    """Get a user by email across all tenants (login has no scope yet)."""
    result = await db.execute(
        select(User)
        .options(selectinload(User.role))
        .where(User.email == email.lower())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def create_user(
    db: AsyncSession,
    account_id: int,
    company_id: int,
    email: str,
    password: str,
    first_name: str,
    last_name: str | None,
    role_id: int,
) -> User:
    user = User(
        account_id=account_id,
        company_id=company_id,
        id=await get_next_id_for_tenant(db, User, account_id, company_id),
        uuid=uuid.uuid4(),
        email=email.lower(),
        password_hash=hash_password(password),
        first_name=first_name,
        last_name=last_name,
        role_id=role_id,
        is_active=True,
    )
    db.add(user)
    await db.flush()
    return user


async def record_successful_login(db: AsyncSession, user: User) -> None:
    user.last_login = utc_now()
    user.failed_login_attempts = 0
    user.locked_until = None
    await db.flush()


async def record_failed_login(
    db: AsyncSession, user: User, lock_until: datetime | None = None
) -> None:
    user.failed_login_attempts += 1
    if lock_until is not None:
        user.locked_until = lock_until
    await db.flush()


async def update_user_password(db: AsyncSession, user: User, new_password: str) -> None:
    user.password_hash = hash_password(new_password)
    await db.flush()


# ----- Refresh tokens -----


async def create_refresh_token(
    db: AsyncSession,
    user: User,
    token: str,
    expires_at: datetime,
    user_agent: str | None = None,
    ip_address: str | None = None,
) -> RefreshToken:
    refresh_token = RefreshToken(
        user_account_id=user.account_id,
        user_company_id=user.company_id,
        user_id=user.id,
        token_hash=hash_refresh_token(token),
        expires_at=expires_at,
        user_agent=user_agent,
        ip_address=ip_address,
    )
    db.add(refresh_token)
    await db.flush()
    return refresh_token


async def get_refresh_token_by_hash(
    db: AsyncSession, token_hash: str
) -> RefreshToken | None:
    result = await db.execute(
        select(RefreshToken).where(RefreshToken.token_hash == token_hash)
    )
    return result.scalar_one_or_none()


async def revoke_refresh_token(db: AsyncSession, token: RefreshToken) -> None:
    token.revoked_at = utc_now()
    await db.flush()


async def revoke_all_user_tokens(
    db: AsyncSession, account_id: int, company_id: int, user_id: int
) -> int:
    """Revoke all live refresh tokens for a user. Returns the count."""
    result = await db.execute(
        select(RefreshToken).where(
            and_(
                RefreshToken.user_account_id == account_id,
                RefreshToken.user_company_id == company_id,
                RefreshToken.user_id == user_id,
                RefreshToken.revoked_at.is_(None),
            )
        )
    )
    tokens = result.scalars().all()
    now = utc_now()
    for token in tokens:
        token.revoked_at = now
    await db.flush()
    return len(tokens)
