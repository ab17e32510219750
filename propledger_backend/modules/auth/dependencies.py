"""Authentication dependencies for FastAPI."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .jwt_service import decode_access_token
from .models import RoleSlug
from .schemas import AuthenticatedUser

security = HTTPBearer()


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
) -> AuthenticatedUser:
    """Build the request's user context from the bearer token.

    No database round trip: the token carries tenant scope and role.
    """
    payload = decode_access_token(credentials.credentials)

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return AuthenticatedUser(
            id=int(payload["sub"]),
            account_id=payload["account_id"],
            company_id=payload["company_id"],
            email=payload["email"],
            first_name=payload.get("first_name") or "",
            last_name=payload.get("last_name"),
            role_slug=payload["role"],
        )
    except (KeyError, ValueError) as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token payload: {e}",
            headers={"WWW-Authenticate": "Bearer"},
        )


def require_role(*allowed_roles: str | RoleSlug):
    """Dependency factory for role-based access control.

    Usage:
        @router.post("/distributions")
        async def save(current_user: FinanceUser): ...
    """
    role_slugs = {r.value if isinstance(r, RoleSlug) else r for r in allowed_roles}

    async def role_checker(
        current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    ) -> AuthenticatedUser:
        if current_user.role_slug not in role_slugs:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required roles: {', '.join(sorted(role_slugs))}",
            )
        return current_user

    return role_checker


CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]
AdminUser = Annotated[AuthenticatedUser, Depends(require_role(RoleSlug.ADMIN))]
ManagerUser = Annotated[
    AuthenticatedUser, Depends(require_role(RoleSlug.ADMIN, RoleSlug.MANAGER))
]
FinanceUser = Annotated[
    AuthenticatedUser,
    Depends(require_role(RoleSlug.ADMIN, RoleSlug.MANAGER, RoleSlug.FINANCE)),
]
LeasingUser = Annotated[
    AuthenticatedUser,
    Depends(require_role(RoleSlug.ADMIN, RoleSlug.MANAGER, RoleSlug.LEASING)),
]
MaintenanceUser = Annotated[
    AuthenticatedUser,
    Depends(require_role(RoleSlug.ADMIN, RoleSlug.MANAGER, RoleSlug.MAINTENANCE)),
]
