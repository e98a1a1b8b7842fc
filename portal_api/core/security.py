"""Password hashing and JWT creation/verification for authentication."""

import hashlib
import re
import secrets
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any, Literal

import bcrypt
import jwt

from portal_api.core.config import get_settings
from portal_api.core.errors import ExpiredToken, InvalidToken, ValidationFailed

if TYPE_CHECKING:
    from portal_api.core.config import Settings

TokenKind = Literal["access", "refresh"]

# bcrypt only looks at the first 72 bytes of its input.
BCRYPT_MAX_BYTES = 72

PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128
_PASSWORD_CLASSES = (
    (re.compile(r"[a-z]"), "a lowercase letter"),
    (re.compile(r"[A-Z]"), "an uppercase letter"),
    (re.compile(r"\d"), "a digit"),
)


def _pw_bytes(plain_password: str) -> bytes:
    return plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    if rounds is None:
        rounds = get_settings().BCRYPT_ROUNDS
    return bcrypt.hashpw(_pw_bytes(plain_password), bcrypt.gensalt(rounds=rounds)).decode(
        "utf-8"
    )


def verify_password(plain_password: str, hashed: str | None) -> bool:
    """Verify a plain password against a stored hash. Never raises for a mismatch."""
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(_pw_bytes(plain_password), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def validate_password_policy(plain_password: str) -> None:
    """Raise ValidationFailed unless the password meets length and character-class rules."""
    problems: list[str] = []
    if not (PASSWORD_MIN_LEN <= len(plain_password) <= PASSWORD_MAX_LEN):
        problems.append(
            f"must be between {PASSWORD_MIN_LEN} and {PASSWORD_MAX_LEN} characters"
        )
    for pattern, label in _PASSWORD_CLASSES:
        if not pattern.search(plain_password):
            problems.append(f"must contain {label}")
    if problems:
        raise ValidationFailed(
            "Password does not meet the password policy.",
            errors=[{"field": "password", "message": f"Password {p}."} for p in problems],
        )


def ensure_password_not_reused(plain_password: str, history: list[str] | None) -> None:
    """Raise ValidationFailed if the password matches any hash in the history."""
    for old_hash in history or []:
        if verify_password(plain_password, old_hash):
            raise ValidationFailed(
                "You cannot reuse a previous password.",
                errors=[{"field": "password", "message": "Password was used recently."}],
            )


def _signing_secret(kind: TokenKind, settings: "Settings") -> str:
    if kind == "access":
        return settings.JWT_ACCESS_SECRET.get_secret_value()
    return settings.JWT_REFRESH_SECRET.get_secret_value()


def access_token_ttl_seconds(settings: "Settings | None" = None) -> int:
    settings = settings or get_settings()
    return settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60


def create_access_token(
    sub: str | int,
    settings: "Settings | None" = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a short-lived access JWT with sub, jti, iss, aud, iat and exp."""
    settings = settings or get_settings()
    now = datetime.now(UTC)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    payload: dict[str, Any] = {
        "sub": str(sub),
        "jti": secrets.token_hex(16),
        "type": "access",
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "exp": expire,
        "iat": now,
    }
    return jwt.encode(
        payload, _signing_secret("access", settings), algorithm=settings.JWT_ALGORITHM
    )


def create_refresh_token(
    sub: str | int,
    settings: "Settings | None" = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a long-lived refresh JWT signed with the refresh secret."""
    settings = settings or get_settings()
    now = datetime.now(UTC)
    expire = now + (expires_delta or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS))
    payload: dict[str, Any] = {
        "sub": str(sub),
        "jti": secrets.token_hex(16),
        "type": "refresh",
        "exp": expire,
        "iat": now,
    }
    return jwt.encode(
        payload, _signing_secret("refresh", settings), algorithm=settings.JWT_ALGORITHM
    )


def decode_token(
    token: str,
    kind: TokenKind,
    settings: "Settings | None" = None,
) -> dict[str, Any]:
    """
    Decode and validate a JWT of the given kind; return its payload.

    Raises ExpiredToken for a well-formed token past its exp, InvalidToken for
    anything else (bad signature, malformed, wrong kind, missing sub).
    """
    settings = settings or get_settings()
    options: dict[str, Any] = {"require": ["exp", "iat", "sub"]}
    kwargs: dict[str, Any] = {}
    if kind == "access":
        kwargs = {"audience": settings.JWT_AUDIENCE, "issuer": settings.JWT_ISSUER}
    try:
        payload = jwt.decode(
            token,
            _signing_secret(kind, settings),
            algorithms=[settings.JWT_ALGORITHM],
            options=options,
            **kwargs,
        )
    except jwt.ExpiredSignatureError as e:
        raise ExpiredToken() from e
    except jwt.PyJWTError as e:
        raise InvalidToken() from e
    if payload.get("type") != kind or not payload.get("sub"):
        raise InvalidToken()
    return payload


def subject_id(payload: dict[str, Any]) -> int:
    """Return the integer user id from a decoded payload's sub claim."""
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidToken("Invalid token payload.") from e


def hash_refresh_token(token: str) -> str:
    """SHA-256 hex digest of a refresh token; only the digest is stored."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
