"""Administrative identity management: create, list, read, update and delete users."""

import logging
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from portal_api.core.errors import DuplicateEmail, Forbidden, NotFound
from portal_api.core.roles import ADMIN_ROLES, STAFF_ROLES
from portal_api.models.user import User
from portal_api.schemas.users import UserCreateRequest, UserUpdateRequest
from portal_api.services.identity import build_user, email_exists
from portal_api.services.listing import (
    Page,
    apply_exact_filters,
    apply_search,
    commit_or_conflict,
    paginate,
)

if TYPE_CHECKING:
    from portal_api.core.config import Settings

logger = logging.getLogger(__name__)

SEARCH_COLUMNS = (
    User.email,
    User.profile["first_name"].as_string(),
    User.profile["last_name"].as_string(),
)


def create_user(db: Session, settings: "Settings", actor: User, body: UserCreateRequest) -> User:
    """Create an identity with an explicit role and status (SUPER_ADMIN may create SUPER_ADMIN)."""
    if body.role == "SUPER_ADMIN" and actor.role != "SUPER_ADMIN":
        raise Forbidden("Only a super administrator can create super administrators.")
    if email_exists(db, body.email):
        raise DuplicateEmail()
    user = build_user(settings, body.email, body.password, body.role, body.status, body.profile)
    db.add(user)
    commit_or_conflict(db, DuplicateEmail.default_message, error_cls=DuplicateEmail)
    db.refresh(user)
    logger.info("user_id=%s created user_id=%s role=%s", actor.id, user.id, user.role)
    return user


def list_users(
    db: Session,
    page: int = 1,
    limit: int = 10,
    role: str | None = None,
    status: str | None = None,
    search: str | None = None,
) -> Page[User]:
    query = apply_exact_filters(db.query(User), User, {"role": role, "status": status})
    query = apply_search(query, SEARCH_COLUMNS, search)
    query = query.order_by(User.created_at.desc(), User.id.desc())
    return paginate(query, page, limit)


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found.")
    return user


def get_user_for(db: Session, actor: User, user_id: int) -> User:
    """Read one identity: allowed for the identity itself and for staff roles."""
    if actor.id != user_id and actor.role not in STAFF_ROLES:
        raise Forbidden()
    return get_user(db, user_id)


def update_user(db: Session, actor: User, user_id: int, body: UserUpdateRequest) -> User:
    """
    Apply an allow-listed update.

    VIEWER may not update anyone. Roles outside ADMIN_ROLES may only update
    their own profile. ADMIN_ROLES may also change status and role, but only a
    SUPER_ADMIN may touch a SUPER_ADMIN or grant that role.
    """
    if actor.role == "VIEWER":
        raise Forbidden("You do not have permission to update users.")
    is_admin = actor.role in ADMIN_ROLES
    if not is_admin:
        if actor.id != user_id:
            raise Forbidden("You can only update your own profile.")
        if body.status is not None or body.role is not None:
            raise Forbidden("You can only update your own profile.")

    user = get_user(db, user_id)
    if actor.role != "SUPER_ADMIN" and (
        user.role == "SUPER_ADMIN" or body.role == "SUPER_ADMIN"
    ):
        raise Forbidden("Only a super administrator can manage super administrators.")

    if body.profile is not None:
        # Merge so omitted profile keys are kept; assign a new dict so the JSON column is flushed.
        user.profile = {**(user.profile or {}), **body.profile.model_dump(exclude_unset=True)}
    if body.status is not None:
        user.status = body.status
        if body.status != "ACTIVE":
            user.refresh_token_hash = None
    if body.role is not None:
        user.role = body.role
    db.commit()
    db.refresh(user)
    logger.info("user_id=%s updated user_id=%s", actor.id, user.id)
    return user


def delete_user(db: Session, actor: User, user_id: int) -> None:
    """Hard delete (SUPER_ADMIN only at the route); an identity cannot delete itself."""
    if actor.id == user_id:
        raise Forbidden("You cannot delete your own account.")
    user = get_user(db, user_id)
    db.delete(user)
    db.commit()
    logger.info("user_id=%s deleted user_id=%s", actor.id, user_id)
