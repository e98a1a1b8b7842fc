"""
CMS content service: create, list, read, update, publish and delete entries,
plus the aggregates used by the admin dashboard.
"""

import logging
from collections import defaultdict
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Query, Session

from portal_api.core.errors import DuplicateKey, NotFound, ValidationFailed
from portal_api.models.base import as_utc, slugify
from portal_api.models.content import Content, ContentTag
from portal_api.models.user import User
from portal_api.schemas.content import (
    CategoryCount,
    ContentCreate,
    ContentTypeStats,
    ContentUpdate,
    OptionItem,
    StatusCount,
)
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

SEARCH_COLUMNS = (Content.title, Content.body, Content.excerpt)
DATETIME_FIELDS = ("published_at", "scheduled_for", "expires_at")
# Fields a PUT may clear by sending null; every other null is ignored.
NULLABLE_FIELDS = frozenset({"excerpt", "featured_image", "seo", *DATETIME_FIELDS})
SLUG_TAKEN = "Slug is already in use."
DEFAULT_REVISION_COMMENT = "Automatic update"

CONTENT_TYPE_OPTIONS = (
    OptionItem(
        value="page", label="Página", description="Static pages such as institutional or history"
    ),
    OptionItem(value="news", label="Noticia", description="Current news and notices"),
    OptionItem(value="article", label="Artículo", description="Opinion or analysis articles"),
    OptionItem(value="announcement", label="Anuncio", description="Official statements"),
)
CONTENT_CATEGORY_OPTIONS = (
    OptionItem(value="institucional", label="Institucional", color="blue"),
    OptionItem(value="historia", label="Historia", color="green"),
    OptionItem(value="directiva", label="Directiva", color="purple"),
    OptionItem(value="noticias", label="Noticias", color="orange"),
    OptionItem(value="eventos", label="Eventos", color="red"),
    OptionItem(value="transparencia", label="Transparencia", color="teal"),
    OptionItem(value="participacion", label="Participación", color="cyan"),
    OptionItem(value="legislacion", label="Legislación", color="indigo"),
)


def _now() -> datetime:
    return datetime.now(UTC)


def public_filter(query: Query, now: datetime) -> Query:
    """Published entries plus scheduled ones that are due, minus expired ones."""
    return query.filter(
        or_(
            Content.status == "published",
            and_(Content.status == "scheduled", Content.scheduled_for <= now),
        ),
        or_(Content.expires_at.is_(None), Content.expires_at > now),
    )


def is_public(content: Content, now: datetime) -> bool:
    expires_at = as_utc(content.expires_at)
    if expires_at is not None and expires_at <= now:
        return False
    if content.status == "published":
        return True
    scheduled_for = as_utc(content.scheduled_for)
    return content.status == "scheduled" and scheduled_for is not None and scheduled_for <= now


def _apply_status_dates(content: Content, now: datetime) -> None:
    if content.status == "published" and content.published_at is None:
        content.published_at = now
    if content.status == "scheduled" and content.scheduled_for is None:
        content.scheduled_for = now


def _set_tags(content: Content, tags: list[str]) -> None:
    # Retained tags keep their rows; inserts flush before orphan deletes.
    existing = {row.tag: row for row in content.tag_rows}
    content.tag_rows = [existing.get(tag) or ContentTag(tag=tag) for tag in tags]


def _slug_exists(db: Session, slug: str) -> bool:
    return db.query(Content.id).filter(Content.slug == slug).first() is not None


def create_content(db: Session, actor: User, body: ContentCreate) -> Content:
    """Create an entry; the slug is derived from the title when not given."""
    slug = body.slug or slugify(body.title)
    if not slug:
        raise ValidationFailed(
            "Could not derive a slug from the title.",
            errors=[{"field": "slug", "message": "Provide a slug."}],
        )
    if _slug_exists(db, slug):
        raise DuplicateKey(SLUG_TAKEN)

    data = body.model_dump(exclude={"slug", "tags"})
    for field in DATETIME_FIELDS:
        data[field] = as_utc(data[field])
    content = Content(**data, slug=slug, author_id=actor.id, last_modified_by_id=actor.id)
    _set_tags(content, body.tags)
    _apply_status_dates(content, _now())
    db.add(content)
    commit_or_conflict(db, SLUG_TAKEN)
    db.refresh(content)
    logger.info("user_id=%s created content_id=%s slug=%s", actor.id, content.id, slug)
    return content


def list_contents(
    db: Session,
    page: int = 1,
    limit: int = 10,
    type: str | None = None,
    category: str | None = None,
    status: str | None = None,
    language: str | None = None,
    tags: list[str] | None = None,
    search: str | None = None,
    from_date: datetime | None = None,
    to_date: datetime | None = None,
    include_drafts: bool = False,
) -> Page[Content]:
    """
    Filtered, paginated listing sorted by published_at, created_at and id (all descending).

    Without include_drafts only publicly visible entries are returned.
    """
    query = apply_exact_filters(
        db.query(Content),
        Content,
        {"type": type, "category": category, "status": status, "language": language},
    )
    if tags:
        wanted = [t.strip().lower() for t in tags if t.strip()]
        if wanted:
            query = query.filter(Content.tag_rows.any(ContentTag.tag.in_(wanted)))
    query = apply_search(query, SEARCH_COLUMNS, search)
    if from_date is not None:
        query = query.filter(Content.published_at >= as_utc(from_date))
    if to_date is not None:
        query = query.filter(Content.published_at <= as_utc(to_date))
    if not include_drafts:
        query = public_filter(query, _now())
    query = query.order_by(
        Content.published_at.desc().nulls_last(),
        Content.created_at.desc(),
        Content.id.desc(),
    )
    return paginate(query, page, limit)


def get_content(db: Session, content_id: int, include_drafts: bool = False) -> Content:
    content = db.get(Content, content_id)
    if content is None or (not include_drafts and not is_public(content, _now())):
        raise NotFound("Content not found.")
    return content


def get_content_by_slug(db: Session, slug: str, include_drafts: bool = False) -> Content:
    """Look up by slug; a published entry has its view counter incremented."""
    content = db.query(Content).filter(Content.slug == slug.strip().lower()).first()
    if content is None or (not include_drafts and not is_public(content, _now())):
        raise NotFound("Content not found.")
    if content.status == "published":
        db.query(Content).filter(Content.id == content.id).update(
            {Content.views: Content.views + 1}, synchronize_session=False
        )
        db.commit()
        db.refresh(content)
    return content


def _history_entry(content: Content, comment: str | None) -> dict[str, Any]:
    modified_at = as_utc(content.updated_at) or _now()
    return {
        "body": content.body,
        "modified_by": content.last_modified_by_id,
        "modified_at": modified_at.isoformat(),
        "revision": content.revision,
        "comment": comment or DEFAULT_REVISION_COMMENT,
    }


def update_content(
    db: Session,
    settings: "Settings",
    actor: User,
    content_id: int,
    body: ContentUpdate,
) -> Content:
    """
    Apply a partial update. The prior body is pushed onto version_history
    (at most CONTENT_HISTORY_LIMIT entries, oldest dropped) and revision is
    incremented. id and slug cannot be changed here.
    """
    content = db.get(Content, content_id)
    if content is None:
        raise NotFound("Content not found.")

    data = body.model_dump(exclude_unset=True)
    comment = data.pop("comment", None)
    tags = data.pop("tags", None)

    history = [*(content.version_history or []), _history_entry(content, comment)]
    content.version_history = history[-settings.CONTENT_HISTORY_LIMIT :]

    for field, value in data.items():
        if value is None and field not in NULLABLE_FIELDS:
            continue
        if field in DATETIME_FIELDS:
            value = as_utc(value)
        setattr(content, field, value)
    if tags is not None:
        _set_tags(content, tags)

    content.last_modified_by_id = actor.id
    content.revision = (content.revision or 1) + 1
    _apply_status_dates(content, _now())
    commit_or_conflict(db, SLUG_TAKEN)
    db.refresh(content)
    logger.info(
        "user_id=%s updated content_id=%s revision=%s", actor.id, content.id, content.revision
    )
    return content


def change_status(db: Session, actor: User, content_id: int, status: str) -> Content:
    content = db.get(Content, content_id)
    if content is None:
        raise NotFound("Content not found.")
    content.status = status
    content.last_modified_by_id = actor.id
    _apply_status_dates(content, _now())
    db.commit()
    db.refresh(content)
    logger.info("user_id=%s set content_id=%s status=%s", actor.id, content.id, status)
    return content


def delete_content(db: Session, actor: User, content_id: int) -> None:
    content = db.get(Content, content_id)
    if content is None:
        raise NotFound("Content not found.")
    db.delete(content)
    db.commit()
    logger.info("user_id=%s deleted content_id=%s", actor.id, content_id)


def content_stats(db: Session) -> list[ContentTypeStats]:
    """Per type: counts by status and by category, total entries and total views."""
    rows = (
        db.query(
            Content.type,
            Content.status,
            Content.category,
            func.count(Content.id),
            func.coalesce(func.sum(Content.views), 0),
        )
        .group_by(Content.type, Content.status, Content.category)
        .all()
    )
    by_status: dict[str, dict[str, int]] = defaultdict(lambda: defaultdict(int))
    by_category: dict[str, dict[str, int]] = defaultdict(lambda: defaultdict(int))
    totals: dict[str, int] = defaultdict(int)
    views: dict[str, int] = defaultdict(int)
    for type_, status, category, count, total_views in rows:
        by_status[type_][status] += count
        by_category[type_][category] += count
        totals[type_] += count
        views[type_] += int(total_views)

    return [
        ContentTypeStats(
            type=type_,
            by_status=[StatusCount(status=s, count=c) for s, c in sorted(by_status[type_].items())],
            by_category=[
                CategoryCount(category=k, count=c) for k, c in sorted(by_category[type_].items())
            ],
            total=totals[type_],
            total_views=views[type_],
        )
        for type_ in sorted(totals)
    ]


def search_contents(db: Session, term: str, limit: int = 20) -> list[Content]:
    """Public text search over title, body and excerpt."""
    if not term or not term.strip():
        raise ValidationFailed(
            "Search term is required.", errors=[{"field": "q", "message": "Required."}]
        )
    query = apply_search(public_filter(db.query(Content), _now()), SEARCH_COLUMNS, term)
    return (
        query.order_by(Content.published_at.desc().nulls_last(), Content.id.desc())
        .limit(limit)
        .all()
    )


def related_contents(db: Session, content_id: int, limit: int = 5) -> list[Content]:
    """Published entries sharing the category, the type or a tag; empty if the entry is unknown."""
    content = db.get(Content, content_id)
    if content is None:
        return []
    matches = [Content.category == content.category, Content.type == content.type]
    if content.tags:
        matches.append(Content.tag_rows.any(ContentTag.tag.in_(content.tags)))
    return (
        db.query(Content)
        .filter(Content.id != content.id, Content.status == "published", or_(*matches))
        .order_by(Content.published_at.desc().nulls_last(), Content.id.desc())
        .limit(limit)
        .all()
    )
