"""Startup provisioning of the initial SUPER_ADMIN identity."""

import logging
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from portal_api.core.errors import ValidationFailed
from portal_api.models.user import User
from portal_api.schemas.auth import UserProfile
from portal_api.services.identity import build_user, normalize_email

if TYPE_CHECKING:
    from portal_api.core.config import Settings

logger = logging.getLogger(__name__)


def ensure_super_admin(db: Session, settings: "Settings") -> User | None:
    """
    Create the SUPER_ADMIN from SUPER_ADMIN_EMAIL/SUPER_ADMIN_PASSWORD if no
    identity with that email exists. Idempotent; an existing record is left
    untouched (its password is never reset). Returns the created user, or None.
    """
    if not settings.SUPER_ADMIN_PASSWORD:
        logger.info("SUPER_ADMIN_PASSWORD not set; skipping super admin bootstrap")
        return None

    email = normalize_email(settings.SUPER_ADMIN_EMAIL)
    existing = db.query(User).filter(User.email == email).first()
    if existing is not None:
        if existing.role != "SUPER_ADMIN":
            logger.warning(
                "Bootstrap email %s belongs to user_id=%s with role %s; not promoting",
                email,
                existing.id,
                existing.role,
            )
        return None

    try:
        user = build_user(
            settings,
            email,
            settings.SUPER_ADMIN_PASSWORD.get_secret_value(),
            role="SUPER_ADMIN",
            status="ACTIVE",
            profile=UserProfile(first_name="Super", last_name="Admin"),
        )
    except ValidationFailed:
        logger.error("SUPER_ADMIN_PASSWORD does not meet the password policy; bootstrap skipped")
        return None
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Created super admin %s (user_id=%s)", email, user.id)
    return user
