"""Request/response schemas for administrative user management."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from portal_api.core.roles import AccountStatus, Role
from portal_api.schemas.auth import UserProfile, UserPublic


class UserCreateRequest(BaseModel):
    """Administrator-created identity with an explicit role and status."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)
    role: Role = "CITIZEN"
    status: AccountStatus = "ACTIVE"
    profile: UserProfile = Field(default_factory=UserProfile)


class UserUpdateRequest(BaseModel):
    """Mutable identity fields; anything else in the body is ignored."""

    model_config = ConfigDict(extra="ignore")

    profile: UserProfile | None = None
    status: AccountStatus | None = None
    role: Role | None = None


class UserListData(BaseModel):
    users: list[UserPublic]
    total: int
    pages: int
    page: int
    limit: int
