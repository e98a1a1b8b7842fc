"""Pydantic request/response schemas."""

from portal_api.schemas.auth import (
    AuthContext,
    LoginRequest,
    LoginResult,
    RegisterRequest,
    TokenPair,
    UserProfile,
    UserPublic,
)
from portal_api.schemas.common import ApiResponse, MessageResponse, Pagination
from portal_api.schemas.health import HealthResponse

__all__ = [
    "ApiResponse",
    "AuthContext",
    "HealthResponse",
    "LoginRequest",
    "LoginResult",
    "MessageResponse",
    "Pagination",
    "RegisterRequest",
    "TokenPair",
    "UserProfile",
    "UserPublic",
]
