"""Shared list/filter/paginate helpers used by every resource service."""

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from portal_api.core.errors import DuplicateKey, ValidationFailed

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_PAGE_SIZE = 100


@dataclass
class Page(Generic[T]):
    """One page of results; pages = ceil(total / limit), 0 for an empty collection."""

    items: list[T]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def check_page_args(page: int, limit: int) -> None:
    if page < 1:
        raise ValidationFailed(
            "page must be at least 1", errors=[{"field": "page", "message": "must be >= 1"}]
        )
    if limit < 1 or limit > MAX_PAGE_SIZE:
        raise ValidationFailed(
            f"limit must be between 1 and {MAX_PAGE_SIZE}",
            errors=[{"field": "limit", "message": f"must be between 1 and {MAX_PAGE_SIZE}"}],
        )


def paginate(query: Query, page: int, limit: int) -> Page[Any]:
    """Count the filtered query, then fetch one page of it (query must already be ordered)."""
    check_page_args(page, limit)
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    return Page(items=items, total=total, page=page, limit=limit)


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def apply_search(query: Query, columns: Sequence[Any], term: str | None) -> Query:
    """Case-insensitive substring match of term against any of the searchable columns."""
    if term is None or not term.strip():
        return query
    pattern = f"%{_escape_like(term.strip())}%"
    return query.filter(or_(*(col.ilike(pattern, escape="\\") for col in columns)))


def apply_exact_filters(query: Query, model: type, filters: dict[str, Any]) -> Query:
    """Exact-match filter per field; None values are skipped."""
    for field, value in filters.items():
        if value is None:
            continue
        query = query.filter(getattr(model, field) == value)
    return query


def apply_allowed_updates(obj: object, data: dict[str, Any], allowed: Iterable[str]) -> list[str]:
    """Copy allow-listed keys from data onto obj; return the names that changed."""
    changed: list[str] = []
    for field in allowed:
        if field in data:
            setattr(obj, field, data[field])
            changed.append(field)
    return changed


def commit_or_conflict(
    db: Session, message: str, error_cls: type[DuplicateKey] = DuplicateKey
) -> None:
    """Commit; a unique-constraint violation rolls back and raises error_cls(message)."""
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.info("Unique constraint violation: %s", e.orig)
        raise error_cls(message) from e
