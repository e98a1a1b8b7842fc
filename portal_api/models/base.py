"""SQLAlchemy declarative Base and shared model configuration."""

import re
import unicodedata
from datetime import UTC, datetime

from sqlalchemy import JSON, Column, DateTime, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests).
JSONType = JSON().with_variant(JSONB(), "postgresql")

_NON_SLUG = re.compile(r"[^a-z0-9]+")


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""

    pass


class TimestampMixin:
    """created_at / updated_at columns maintained by the database."""

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


def as_utc(value: datetime | None) -> datetime | None:
    """Return value as an aware UTC datetime (SQLite hands back naive values)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def slugify(value: str) -> str:
    """Lower-case ASCII slug: accents stripped, runs of other characters collapsed to '-'."""
    normalized = unicodedata.normalize("NFD", value.lower())
    ascii_only = "".join(ch for ch in normalized if unicodedata.category(ch) != "Mn")
    return _NON_SLUG.sub("-", ascii_only).strip("-")
