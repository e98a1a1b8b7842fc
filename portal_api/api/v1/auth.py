"""Authorization gate (bearer token to AuthContext, role checks) and the /auth routes."""

import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from portal_api.core.config import Settings, get_settings
from portal_api.core.database import get_db
from portal_api.core.errors import (
    AccountNotActive,
    Forbidden,
    MissingToken,
    PortalError,
    Unauthenticated,
    UnknownSubject,
)
from portal_api.core.limiter import limit_auth
from portal_api.core.roles import ADMIN_ROLES, STAFF_ROLES, SUPER_ADMIN_ONLY
from portal_api.core.security import decode_token, subject_id
from portal_api.models.user import User
from portal_api.schemas.auth import (
    AuthContext,
    ChangePasswordRequest,
    LoginRequest,
    LoginResult,
    LogoutRequest,
    RefreshRequest,
    RegisterRequest,
    TokenPair,
    UserPublic,
    ValidateTokenRequest,
    ValidateTokenResponse,
)
from portal_api.schemas.common import ApiResponse, MessageResponse
from portal_api.services import identity

logger = logging.getLogger(__name__)

router = APIRouter()
security = HTTPBearer(auto_error=False)

DbSession = Annotated[Session, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_settings)]
BearerCredentials = Annotated[HTTPAuthorizationCredentials | None, Depends(security)]


def resolve_auth_context(db: Session, token: str, settings: Settings) -> AuthContext:
    """Decode an access token and load its ACTIVE subject. Read-only."""
    payload = decode_token(token, "access", settings)
    user = db.get(User, subject_id(payload))
    if user is None:
        raise UnknownSubject()
    if user.status != "ACTIVE":
        logger.info("Token rejected: user_id=%s status=%s", user.id, user.status)
        raise AccountNotActive()
    return AuthContext(user=user, token=token)


def get_auth_context(
    credentials: BearerCredentials,
    db: DbSession,
    settings: AppSettings,
) -> AuthContext:
    """Dependency: require a valid Bearer access token. Raises 401 if missing or invalid."""
    if credentials is None:
        raise MissingToken()
    return resolve_auth_context(db, credentials.credentials, settings)


def get_optional_auth_context(
    credentials: BearerCredentials,
    db: DbSession,
    settings: AppSettings,
) -> AuthContext | None:
    """Dependency for public routes: a token that fails the gate is treated as anonymous."""
    if credentials is None:
        return None
    try:
        return resolve_auth_context(db, credentials.credentials, settings)
    except PortalError as exc:
        logger.info("Ignoring unusable token on public route: %s", exc.code)
        return None


def check_roles(context: AuthContext | None, roles: frozenset[str]) -> AuthContext:
    """Fail closed: no context is Unauthenticated, a role outside the allow-list is Forbidden."""
    if context is None:
        raise Unauthenticated()
    if context.role not in roles:
        logger.info(
            "Forbidden: user_id=%s role=%s not in %s", context.user_id, context.role, sorted(roles)
        )
        raise Forbidden()
    return context


def require_roles(*roles: str) -> Callable[[AuthContext], AuthContext]:
    """Dependency factory: authenticated identity whose role is one of roles."""
    allowed = frozenset(roles)

    def dependency(context: Annotated[AuthContext, Depends(get_auth_context)]) -> AuthContext:
        return check_roles(context, allowed)

    return dependency


CurrentContext = Annotated[AuthContext, Depends(get_auth_context)]
OptionalContext = Annotated[AuthContext | None, Depends(get_optional_auth_context)]
StaffContext = Annotated[AuthContext, Depends(require_roles(*STAFF_ROLES))]
AdminContext = Annotated[AuthContext, Depends(require_roles(*ADMIN_ROLES))]
SuperAdminContext = Annotated[AuthContext, Depends(require_roles(*SUPER_ADMIN_ONLY))]


def is_staff(context: AuthContext | None) -> bool:
    return context is not None and context.role in STAFF_ROLES


@router.post("/login", response_model=ApiResponse[LoginResult])
@limit_auth
def login(
    request: Request,
    body: LoginRequest,
    db: DbSession,
    settings: AppSettings,
) -> ApiResponse[LoginResult]:
    """
    Authenticate with email and password; returns the identity and a token pair.
    Include the access token in the Authorization header as: Bearer <access_token>
    """
    result = identity.login(db, settings, body.email, body.password)
    return ApiResponse(data=result, message="Login successful")


@router.post(
    "/register",
    response_model=ApiResponse[LoginResult],
    status_code=status.HTTP_201_CREATED,
)
@limit_auth
def register(
    request: Request,
    body: RegisterRequest,
    db: DbSession,
    settings: AppSettings,
) -> ApiResponse[LoginResult]:
    """Self-service registration as CITIZEN."""
    result = identity.register(db, settings, body)
    message = "Registration successful" if result.tokens else "Registration pending activation"
    return ApiResponse(data=result, message=message)


@router.post("/refresh", response_model=ApiResponse[TokenPair])
@limit_auth
def refresh(
    request: Request,
    body: RefreshRequest,
    db: DbSession,
    settings: AppSettings,
) -> ApiResponse[TokenPair]:
    """Exchange the current refresh token for a new token pair."""
    tokens = identity.refresh_session(db, settings, body.refresh_token)
    return ApiResponse(data=tokens, message="Token refreshed")


@router.post("/logout", response_model=MessageResponse)
def logout(
    context: CurrentContext,
    db: DbSession,
    body: LogoutRequest | None = None,
) -> MessageResponse:
    identity.logout(db, context.user, body.refresh_token if body else None)
    return MessageResponse(message="Logout successful")


@router.get("/me", response_model=ApiResponse[UserPublic])
def me(context: CurrentContext) -> ApiResponse[UserPublic]:
    return ApiResponse(data=UserPublic.model_validate(context.user))


@router.post("/change-password", response_model=MessageResponse)
def change_password(
    body: ChangePasswordRequest,
    context: CurrentContext,
    db: DbSession,
    settings: AppSettings,
) -> MessageResponse:
    """Change the caller's password; the current session's refresh token is revoked."""
    identity.change_password(db, settings, context.user, body.current_password, body.new_password)
    return MessageResponse(message="Password changed successfully")


@router.post("/validate", response_model=ApiResponse[ValidateTokenResponse])
def validate(
    credentials: BearerCredentials,
    settings: AppSettings,
    body: ValidateTokenRequest | None = None,
) -> ApiResponse[ValidateTokenResponse]:
    """Report whether an access token (body or Authorization header) is valid. Never 401."""
    token = body.token if body and body.token else None
    if token is None and credentials is not None:
        token = credentials.credentials
    result = identity.validate_token(settings, token)
    return ApiResponse(data=result, message=result.message)
