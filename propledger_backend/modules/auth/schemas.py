"""Authentication schemas for PropLedger."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class RoleResponse(BaseModel):
    id: int
    slug: str
    name: str
    description: str | None = None

    class Config:
        from_attributes = True


class UserResponse(BaseModel):
    """Schema for user response."""

    id: int
    uuid: UUID
    account_id: int
    company_id: int
    email: EmailStr
    first_name: str
    last_name: str | None = None
    role_id: int
    role: RoleResponse | None = None
    is_active: bool
    last_login: datetime | None = None
    created_at: datetime

    class Config:
        from_attributes = True


class UserWithContext(UserResponse):
    """User response with account and company names."""

    account_name: str
    company_name: str


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=120)
    last_name: str | None = Field(None, max_length=120)
    role_slug: str = "viewer"


class LoginRequest(BaseModel):
    email: EmailStr
    password: str
    remember_me: bool = False


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds


class RefreshTokenRequest(BaseModel):
    refresh_token: str


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=8, max_length=128)


class AuthenticatedUser(BaseModel):
    """Authenticated user context for request handling."""

    id: int
    account_id: int
    company_id: int
    email: str
    first_name: str = ""
    last_name: str | None = None
    role_slug: str
    is_active: bool = True

    @property
    def full_name(self) -> str:
        if self.last_name:
            return f"{self.first_name} {self.last_name}"
        return self.first_name
