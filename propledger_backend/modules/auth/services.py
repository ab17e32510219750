"""Authentication business logic services."""

from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from ...config import settings
from ...core.exceptions import (
    AuthenticationError,
    NotFoundError,
    ValidationError,
)
from ...core.logging import get_logger
from ...core.utils import as_utc, utc_now
from . import crud
from .jwt_service import (
    create_access_token,
    create_refresh_token,
    get_token_expiry_seconds,
    hash_refresh_token,
)
from .models import ROLE_DESCRIPTIONS, RoleSlug, User
from .password_service import verify_password
from .schemas import TokenResponse

logger = get_logger("auth")


async def _issue_tokens(
    db: AsyncSession,
    user: User,
    remember_me: bool = False,
    user_agent: str | None = None,
    ip_address: str | None = None,
) -> TokenResponse:
    access_token = create_access_token(
        user_id=user.id,
        account_id=user.account_id,
        company_id=user.company_id,
        email=user.email,
        role_slug=user.role.slug,
        first_name=user.first_name,
        last_name=user.last_name,
    )
    refresh_token, refresh_expires = create_refresh_token(remember_me)
    await crud.create_refresh_token(
        db=db,
        user=user,
        token=refresh_token,
        expires_at=refresh_expires,
        user_agent=user_agent,
        ip_address=ip_address,
    )
    return TokenResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        token_type="bearer",
        expires_in=get_token_expiry_seconds(),
    )


async def authenticate_user(
    db: AsyncSession,
    email: str,
    password: str,
    remember_me: bool = False,
    user_agent: str | None = None,
    ip_address: str | None = None,
) -> tuple[User, TokenResponse]:
    """Authenticate user and return tokens.

    After ``max_login_attempts`` consecutive failures the user is locked
    for ``lockout_duration_minutes``.

    Raises:
        AuthenticationError: If authentication fails
    """
    user = await crud.get_user_by_email_global(db, email)
    if not user:
        raise AuthenticationError("Invalid email or password")

    now = utc_now()
    if user.locked_until and as_utc(user.locked_until) > now:
        remaining = int((as_utc(user.locked_until) - now).total_seconds()) // 60
        raise AuthenticationError(
            f"Account is locked. Try again in {remaining + 1} minutes."
        )

    if not user.is_active:
        raise AuthenticationError("Account is disabled")

    if not verify_password(password, user.password_hash):
        attempts = user.failed_login_attempts + 1
        if attempts >= settings.max_login_attempts:
            await crud.record_failed_login(
                db,
                user,
                lock_until=now
                + timedelta(minutes=settings.lockout_duration_minutes),
            )
            await db.commit()
            logger.warning(
                "User locked after failed logins",
                extra={"user_id": user.id, "account_id": user.account_id},
            )
            raise AuthenticationError(
                "Account locked due to too many failed attempts. "
                f"Try again in {settings.lockout_duration_minutes} minutes."
            )

        await crud.record_failed_login(db, user)
        await db.commit()
        raise AuthenticationError(
            "Invalid email or password. "
            f"{settings.max_login_attempts - attempts} attempts remaining."
        )

    await crud.record_successful_login(db, user)
    tokens = await _issue_tokens(db, user, remember_me, user_agent, ip_address)
    await db.commit()

    logger.info("User logged in", extra={"user_id": user.id})
    return user, tokens


async def refresh_access_token(
    db: AsyncSession,
    refresh_token: str,
    user_agent: str | None = None,
    ip_address: str | None = None,
) -> TokenResponse:
    """Rotate a refresh token and issue a new access token.

    Raises:
        AuthenticationError: If refresh token is invalid, revoked or expired
    """
    stored_token = await crud.get_refresh_token_by_hash(
        db, hash_refresh_token(refresh_token)
    )

    if not stored_token:
        raise AuthenticationError("Invalid refresh token")
    if stored_token.is_revoked:
        raise AuthenticationError("Refresh token has been revoked")
    if stored_token.is_expired:
        raise AuthenticationError("Refresh token has expired")

    user = await crud.get_user_by_id(
        db,
        user_id=stored_token.user_id,
        account_id=stored_token.user_account_id,
        company_id=stored_token.user_company_id,
    )
    if not user or not user.is_active:
        raise AuthenticationError("User not found or inactive")

    await crud.revoke_refresh_token(db, stored_token)
    tokens = await _issue_tokens(
        db, user, user_agent=user_agent, ip_address=ip_address
    )
    await db.commit()
    return tokens


async def logout_user(
    db: AsyncSession, account_id: int, company_id: int, user_id: int
) -> int:
    """Revoke all of a user's refresh tokens. Returns the count."""
    count = await crud.revoke_all_user_tokens(db, account_id, company_id, user_id)
    await db.commit()
    return count


async def change_password(
    db: AsyncSession,
    user_id: int,
    account_id: int,
    company_id: int,
    current_password: str,
    new_password: str,
) -> None:
    """Change a user's password and revoke every open session.

    Raises:
        NotFoundError: If user not found
        ValidationError: If current password is incorrect
    """
    user = await crud.get_user_by_id(db, user_id, account_id, company_id)
    if not user:
        raise NotFoundError("User not found")

    if not verify_password(current_password, user.password_hash):
        raise ValidationError("Current password is incorrect")

    await crud.update_user_password(db, user, new_password)
    await crud.revoke_all_user_tokens(db, account_id, company_id, user_id)
    await db.commit()


async def ensure_default_roles(db: AsyncSession) -> None:
    """Insert any missing built-in roles."""
    for slug, (name, description) in ROLE_DESCRIPTIONS.items():
        if await crud.get_role_by_slug(db, slug.value) is None:
            await crud.create_role(db, slug.value, name, description)
    await db.commit()


async def create_initial_admin(
    db: AsyncSession,
    account_name: str,
    company_name: str,
    admin_email: str,
    admin_password: str,
    admin_first_name: str,
    admin_last_name: str | None = None,
) -> User:
    """Create the first account, company and admin user of a fresh database.

    Raises:
        ValidationError: If any account already exists
    """
    if await crud.has_any_account(db):
        raise ValidationError("Database already has accounts. Cannot seed.")

    await ensure_default_roles(db)
    admin_role = await crud.get_role_by_slug(db, RoleSlug.ADMIN.value)

    account = await crud.create_account(db, account_name)
    company = await crud.create_company(db, company_name, account.id)
    user = await crud.create_user(
        db,
        account_id=account.id,
        company_id=company.id,
        email=admin_email,
        password=admin_password,
        first_name=admin_first_name,
        last_name=admin_last_name,
        role_id=admin_role.id,
    )
    await db.commit()

    logger.info(
        "Initial admin created",
        extra={"account_id": account.id, "company_id": company.id},
    )
    return user


async def seed_from_settings(db: AsyncSession) -> User | None:
    """Seed roles and, when configured and the database is empty, the admin."""
    await ensure_default_roles(db)
    if not settings.seeding_enabled or await crud.has_any_account(db):
        return None
    return await create_initial_admin(
        db,
        account_name=settings.init_account_name,
        company_name=settings.init_company_name,
        admin_email=settings.init_admin_email,
        admin_password=settings.init_admin_password,
        admin_first_name=settings.init_admin_first_name or "Admin",
        admin_last_name=settings.init_admin_last_name,
    )
