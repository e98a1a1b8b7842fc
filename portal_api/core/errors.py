"""Domain errors raised by services and the authorization gate.

Each error carries the HTTP status it maps to; the top-level handlers in
portal_api.core.exception_handlers render them into the response envelope.
"""

from typing import Any


class PortalError(Exception):
    """Base class for every error that maps to a client-facing response."""

    status_code: int = 400
    default_message: str = "Request failed"

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)

    @property
    def code(self) -> str:
        return type(self).__name__


class ValidationFailed(PortalError):
    """Malformed or policy-violating input."""

    status_code = 400
    default_message = "Validation failed"

    @property
    def code(self) -> str:
        return "ValidationError"


class AuthError(PortalError):
    """Base for 401 responses; rendered with a WWW-Authenticate header."""

    status_code = 401
    default_message = "Authentication failed"


class InvalidCredentials(AuthError):
    # Shared by "no such email" and "wrong password" so accounts cannot be enumerated.
    default_message = "Invalid email or password."


class AccountLocked(AuthError):
    default_message = "Account temporarily locked. Try again later."


class AccountNotActive(AuthError):
    default_message = "Account is inactive or suspended."


class MissingToken(AuthError):
    default_message = "Access denied. No token provided."


class InvalidToken(AuthError):
    default_message = "Invalid token."


class ExpiredToken(AuthError):
    default_message = "Token expired."


class RevokedToken(AuthError):
    default_message = "Token has been revoked."


class UnknownSubject(AuthError):
    default_message = "User not found."


class Unauthenticated(AuthError):
    default_message = "Not authenticated."


class Forbidden(PortalError):
    status_code = 403
    default_message = "You do not have permission to perform this action."


class NotFound(PortalError):
    status_code = 404
    default_message = "Resource not found."


class DuplicateKey(PortalError):
    status_code = 409
    default_message = "A resource with that identifier already exists."


class DuplicateEmail(DuplicateKey):
    default_message = "Email is already registered."


class RateLimited(PortalError):
    status_code = 429
    default_message = "Too many requests. Try again later."
