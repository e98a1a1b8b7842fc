"""Administrative user management routes. Every route requires a bearer token."""

from fastapi import APIRouter, Query, status

from portal_api.api.v1.auth import (
    AdminContext,
    AppSettings,
    CurrentContext,
    DbSession,
    StaffContext,
    SuperAdminContext,
)
from portal_api.core.roles import AccountStatus, Role
from portal_api.schemas.auth import UserPublic
from portal_api.schemas.common import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, ApiResponse, MessageResponse
from portal_api.schemas.users import UserCreateRequest, UserListData, UserUpdateRequest
from portal_api.services import users as users_service

router = APIRouter()


@router.post("", response_model=ApiResponse[UserPublic], status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreateRequest,
    context: AdminContext,
    db: DbSession,
    settings: AppSettings,
) -> ApiResponse[UserPublic]:
    """Create an identity with an explicit role and status (admins only)."""
    user = users_service.create_user(db, settings, context.user, body)
    return ApiResponse(data=UserPublic.model_validate(user), message="User created")


@router.get("", response_model=ApiResponse[UserListData])
def list_users(
    _staff: StaffContext,
    db: DbSession,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    role: Role | None = None,
    status: AccountStatus | None = None,
    search: str | None = Query(None, max_length=100),
) -> ApiResponse[UserListData]:
    result = users_service.list_users(db, page, limit, role=role, status=status, search=search)
    return ApiResponse(
        data=UserListData(
            users=[UserPublic.model_validate(u) for u in result.items],
            total=result.total,
            pages=result.pages,
            page=result.page,
            limit=result.limit,
        )
    )


@router.get("/{user_id}", response_model=ApiResponse[UserPublic])
def get_user(user_id: int, context: CurrentContext, db: DbSession) -> ApiResponse[UserPublic]:
    """Read one identity: the caller's own record, or any record for staff roles."""
    user = users_service.get_user_for(db, context.user, user_id)
    return ApiResponse(data=UserPublic.model_validate(user))


@router.put("/{user_id}", response_model=ApiResponse[UserPublic])
def update_user(
    user_id: int,
    body: UserUpdateRequest,
    context: CurrentContext,
    db: DbSession,
) -> ApiResponse[UserPublic]:
    user = users_service.update_user(db, context.user, user_id, body)
    return ApiResponse(data=UserPublic.model_validate(user), message="User updated")


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(user_id: int, context: SuperAdminContext, db: DbSession) -> MessageResponse:
    users_service.delete_user(db, context.user, user_id)
    return MessageResponse(message="User deleted")
