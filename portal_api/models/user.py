"""ORM model for portal identities (credentials, role, status, lockout state)."""

from datetime import datetime, timedelta

from sqlalchemy import Column, DateTime, Index, Integer, String

from portal_api.models.base import Base, JSONType, TimestampMixin, as_utc


class User(TimestampMixin, Base):
    """
    Identity record for authentication and role-based access control.

    email is stored lower-cased and trimmed; password_hash, password_history and
    refresh_token_hash never leave the service layer (UserPublic has no such fields).
    """

    __tablename__ = "users"
    __table_args__ = (
        Index("ix_users_email_status", "email", "status"),
        Index("ix_users_role_status", "role", "status"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default="CITIZEN", index=True)
    status = Column(String(32), nullable=False, default="PENDING")
    profile = Column(JSONType, nullable=False, default=dict)

    login_attempts = Column(Integer, nullable=False, default=0)
    lock_until = Column(DateTime(timezone=True), nullable=True)
    last_login = Column(DateTime(timezone=True), nullable=True)
    last_password_change = Column(DateTime(timezone=True), nullable=True)
    password_history = Column(JSONType, nullable=False, default=list)
    # Single active session: a new login overwrites the previous digest.
    refresh_token_hash = Column(String(64), nullable=True)

    def is_locked(self, now: datetime) -> bool:
        """True while lock_until is strictly in the future."""
        lock_until = as_utc(self.lock_until)
        return lock_until is not None and lock_until > now

    def is_password_expired(self, now: datetime, max_age_days: int) -> bool:
        changed = as_utc(self.last_password_change)
        if changed is None:
            return False
        return now - changed > timedelta(days=max_age_days)
