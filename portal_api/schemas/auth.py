"""Request/response schemas for auth endpoints and the authenticated request context."""

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from portal_api.core.roles import AccountStatus, Role

if TYPE_CHECKING:
    from portal_api.models.user import User


class UserProfile(BaseModel):
    """Optional descriptive fields of an identity; no invariants beyond presence."""

    model_config = ConfigDict(extra="ignore")

    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    ci: str | None = Field(default=None, max_length=32, description="National ID")
    phone: str | None = Field(default=None, max_length=32)
    position: str | None = Field(default=None, max_length=255)
    department: str | None = Field(default=None, max_length=255)
    avatar: str | None = Field(default=None, max_length=1024, description="Avatar URL")

    @field_validator("*", mode="before")
    @classmethod
    def strip_strings(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip() or None
        return v


class UserPublic(BaseModel):
    """Identity fields safe to return to clients (no password or token material)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    role: Role
    status: AccountStatus
    profile: UserProfile = Field(default_factory=UserProfile)
    last_login: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("profile", mode="before")
    @classmethod
    def default_profile(cls, v: Any) -> Any:
        return v if v is not None else {}


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: EmailStr = Field(..., description="Account email (case-insensitive)")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class RegisterRequest(BaseModel):
    """Self-service registration; profile fields are optional."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)
    first_name: str | None = Field(default=None, min_length=2, max_length=100)
    last_name: str | None = Field(default=None, min_length=2, max_length=100)
    ci: str | None = Field(default=None, min_length=5, max_length=32)
    phone: str | None = Field(default=None, max_length=32)

    def profile(self) -> UserProfile:
        return UserProfile(
            first_name=self.first_name,
            last_name=self.last_name,
            ci=self.ci,
            phone=self.phone,
        )


class TokenPair(BaseModel):
    """Access + refresh tokens; expires_in is the access-token lifetime in seconds."""

    access_token: str
    refresh_token: str
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Access token lifetime in seconds")


class LoginResult(BaseModel):
    """Identity summary plus session tokens (tokens is None for PENDING registrations)."""

    user: UserPublic
    tokens: TokenPair | None = None
    requires_password_change: bool = False


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


class LogoutRequest(BaseModel):
    refresh_token: str | None = None


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1, max_length=128)
    new_password: str = Field(..., min_length=1, max_length=128)


class ValidateTokenRequest(BaseModel):
    token: str | None = None


class ValidateTokenResponse(BaseModel):
    """Result of POST /auth/validate; never an error status."""

    valid: bool
    decoded: dict[str, Any] | None = None
    message: str | None = None


@dataclass(frozen=True)
class AuthContext:
    """Resolved identity and raw bearer token, produced by the authorization gate."""

    user: "User"
    token: str

    @property
    def user_id(self) -> int:
        return self.user.id

    @property
    def role(self) -> str:
        return self.user.role
