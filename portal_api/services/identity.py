"""
Identity service: login with lockout, registration, refresh-token rotation,
logout and password changes.

Every function takes the DB session and settings explicitly; nothing here
reads request state.
"""

import hmac
import logging
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from portal_api.core.errors import (
    AccountLocked,
    AccountNotActive,
    DuplicateEmail,
    InvalidCredentials,
    PortalError,
    RevokedToken,
    UnknownSubject,
)
from portal_api.core.security import (
    access_token_ttl_seconds,
    create_access_token,
    create_refresh_token,
    decode_token,
    ensure_password_not_reused,
    hash_password,
    hash_refresh_token,
    subject_id,
    validate_password_policy,
    verify_password,
)
from portal_api.models.user import User
from portal_api.schemas.auth import (
    LoginResult,
    RegisterRequest,
    TokenPair,
    UserProfile,
    UserPublic,
    ValidateTokenResponse,
)
from portal_api.services.listing import commit_or_conflict

if TYPE_CHECKING:
    from portal_api.core.config import Settings

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


@lru_cache(maxsize=4)
def _dummy_hash(rounds: int) -> str:
    return hash_password("dummy-password-for-timing", rounds=rounds)


def _bounded_history(history: list[str] | None, new_hash: str, size: int) -> list[str]:
    entries = [*(history or []), new_hash]
    return entries[-size:] if size > 0 else []


def build_user(
    settings: "Settings",
    email: str,
    password: str,
    role: str,
    status: str,
    profile: UserProfile | None = None,
) -> User:
    """Validate the password policy and return an unsaved User with a hashed password."""
    validate_password_policy(password)
    password_hash = hash_password(password, rounds=settings.BCRYPT_ROUNDS)
    return User(
        email=normalize_email(email),
        password_hash=password_hash,
        role=role,
        status=status,
        profile=(profile or UserProfile()).model_dump(exclude_none=True),
        login_attempts=0,
        last_password_change=datetime.now(UTC),
        password_history=_bounded_history(None, password_hash, settings.PASSWORD_HISTORY_SIZE),
    )


def email_exists(db: Session, email: str) -> bool:
    return db.query(User.id).filter(User.email == normalize_email(email)).first() is not None


def _issue_tokens(user: User, settings: "Settings") -> TokenPair:
    """Issue an access/refresh pair and store the refresh digest (overwrites any previous one)."""
    access_token = create_access_token(user.id, settings)
    refresh_token = create_refresh_token(user.id, settings)
    user.refresh_token_hash = hash_refresh_token(refresh_token)
    return TokenPair(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=access_token_ttl_seconds(settings),
    )


def _record_failed_attempt(db: Session, settings: "Settings", user: User, now: datetime) -> None:
    # Increment in SQL so concurrent failures are not lost to a stale read.
    db.query(User).filter(User.id == user.id).update(
        {User.login_attempts: User.login_attempts + 1},
        synchronize_session=False,
    )
    db.flush()
    db.refresh(user, ["login_attempts"])
    if user.login_attempts >= settings.LOGIN_MAX_ATTEMPTS:
        user.lock_until = now + timedelta(minutes=settings.LOCKOUT_MINUTES)
        logger.warning(
            "Account locked after %s failed logins: user_id=%s until=%s",
            user.login_attempts,
            user.id,
            user.lock_until.isoformat(),
        )
    db.commit()


def login(db: Session, settings: "Settings", email: str, password: str) -> LoginResult:
    """
    Authenticate by email and password.

    Order of checks: unknown email, non-ACTIVE status, active lock, password.
    A wrong password increments login_attempts and locks the account for
    LOCKOUT_MINUTES once LOGIN_MAX_ATTEMPTS is reached. Success resets the
    counter, clears the lock, stamps last_login and issues a token pair.
    """
    user = db.query(User).filter(User.email == normalize_email(email)).first()
    if user is None:
        # Unknown emails still pay for one bcrypt check.
        verify_password(password, _dummy_hash(settings.BCRYPT_ROUNDS))
        logger.info("Login failed: unknown email")
        raise InvalidCredentials()

    now = datetime.now(UTC)
    if user.status != "ACTIVE":
        logger.info("Login refused: user_id=%s status=%s", user.id, user.status)
        raise AccountNotActive()
    if user.is_locked(now):
        logger.info("Login refused: user_id=%s is locked", user.id)
        raise AccountLocked()

    if not verify_password(password, user.password_hash):
        _record_failed_attempt(db, settings, user, now)
        logger.info("Login failed: wrong password for user_id=%s", user.id)
        raise InvalidCredentials()

    user.login_attempts = 0
    user.lock_until = None
    user.last_login = now
    tokens = _issue_tokens(user, settings)
    db.commit()
    db.refresh(user)
    logger.info("Login succeeded: user_id=%s", user.id)
    return LoginResult(
        user=UserPublic.model_validate(user),
        tokens=tokens,
        requires_password_change=user.is_password_expired(now, settings.PASSWORD_MAX_AGE_DAYS),
    )


def register(db: Session, settings: "Settings", body: RegisterRequest) -> LoginResult:
    """
    Self-service registration as CITIZEN.

    With REGISTRATION_AUTO_ACTIVATE the identity is ACTIVE and receives a token
    pair immediately; otherwise it is PENDING and tokens is None.
    """
    if email_exists(db, body.email):
        raise DuplicateEmail()
    status = "ACTIVE" if settings.REGISTRATION_AUTO_ACTIVATE else "PENDING"
    user = build_user(settings, body.email, body.password, "CITIZEN", status, body.profile())
    db.add(user)
    commit_or_conflict(db, DuplicateEmail.default_message, error_cls=DuplicateEmail)

    tokens = None
    if status == "ACTIVE":
        user.last_login = datetime.now(UTC)
        tokens = _issue_tokens(user, settings)
        db.commit()
    db.refresh(user)
    logger.info("Registered user_id=%s status=%s", user.id, status)
    return LoginResult(user=UserPublic.model_validate(user), tokens=tokens)


def refresh_session(db: Session, settings: "Settings", refresh_token: str) -> TokenPair:
    """
    Exchange a refresh token for a new pair. The presented token must match the
    stored digest (RevokedToken otherwise); the new refresh token replaces it.
    """
    payload = decode_token(refresh_token, "refresh", settings)
    user = db.get(User, subject_id(payload))
    if user is None:
        raise UnknownSubject()
    presented = hash_refresh_token(refresh_token)
    if not user.refresh_token_hash or not hmac.compare_digest(user.refresh_token_hash, presented):
        logger.warning("Revoked refresh token presented for user_id=%s", user.id)
        raise RevokedToken()
    if user.status != "ACTIVE":
        raise AccountNotActive()
    tokens = _issue_tokens(user, settings)
    db.commit()
    return tokens


def logout(db: Session, user: User, refresh_token: str | None = None) -> bool:
    """
    End the identity's session by clearing the stored refresh digest.

    When a refresh token is given it must be the current one; a stale token is
    a no-op. Returns True if a session was cleared.
    """
    if user.refresh_token_hash is None:
        return False
    if refresh_token is not None and not hmac.compare_digest(
        user.refresh_token_hash, hash_refresh_token(refresh_token)
    ):
        return False
    user.refresh_token_hash = None
    db.commit()
    logger.info("Logout: user_id=%s", user.id)
    return True


def change_password(
    db: Session,
    settings: "Settings",
    user: User,
    current_password: str,
    new_password: str,
) -> None:
    """Re-hash after checking the current password, the policy and the reuse history."""
    if not verify_password(current_password, user.password_hash):
        raise InvalidCredentials("Current password is incorrect.")
    validate_password_policy(new_password)
    ensure_password_not_reused(new_password, [*(user.password_history or []), user.password_hash])
    new_hash = hash_password(new_password, rounds=settings.BCRYPT_ROUNDS)
    user.password_hash = new_hash
    user.password_history = _bounded_history(
        user.password_history, new_hash, settings.PASSWORD_HISTORY_SIZE
    )
    user.last_password_change = datetime.now(UTC)
    # Existing refresh tokens must not outlive the old password.
    user.refresh_token_hash = None
    db.commit()
    logger.info("Password changed: user_id=%s", user.id)


def validate_token(settings: "Settings", token: str | None) -> ValidateTokenResponse:
    """Check an access token without raising; used by POST /auth/validate."""
    if not token:
        return ValidateTokenResponse(valid=False, message="Token not provided.")
    try:
        decoded = decode_token(token, "access", settings)
    except PortalError as e:
        return ValidateTokenResponse(valid=False, message=e.message)
    return ValidateTokenResponse(valid=True, decoded=decoded)
