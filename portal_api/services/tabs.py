"""
Navigation tabs service: the public tab overview plus the CMS operations on
tab categories and their links.
"""

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from portal_api.core.errors import DuplicateKey, NotFound, ValidationFailed
from portal_api.models.tabs import DEFAULT_TAB_COLOR, TabCategory, TabLink
from portal_api.models.user import User
from portal_api.schemas.common import Pagination
from portal_api.schemas.tabs import (
    AreaEntry,
    IconCategoryGroup,
    IconEntry,
    IconGallery,
    LinkEntry,
    ReorderRequest,
    TabCategoryBrief,
    TabCategoryCreate,
    TabCategoryOut,
    TabCategoryUpdate,
    TabDetail,
    TabEntry,
    TabLinkCreate,
    TabLinkListData,
    TabLinkOut,
    TabLinkUpdate,
    TabsOverview,
)
from portal_api.services.listing import apply_allowed_updates, commit_or_conflict, paginate

logger = logging.getLogger(__name__)

CATEGORY_UPDATABLE = ("name", "description", "order", "color", "icon", "is_active")
LINK_UPDATABLE = ("title", "description", "icon", "path", "order", "is_active")
ICON_PREVIEW_LENGTH = 100
NO_CATEGORIES_MESSAGE = "No tab categories are configured. Contact the administrator."


def _active_link_counts(db: Session) -> dict[str, int]:
    rows = (
        db.query(TabLink.category_id, func.count(TabLink.id))
        .filter(TabLink.is_active.is_(True))
        .group_by(TabLink.category_id)
        .all()
    )
    return {category_id: count for category_id, count in rows}


def _category_out(category: TabCategory, links_count: int) -> TabCategoryOut:
    return TabCategoryOut.model_validate(category).model_copy(update={"links_count": links_count})


def _link_out(link: TabLink, category: TabCategory | None) -> TabLinkOut:
    out = TabLinkOut.model_validate(link)
    if category is None:
        return out
    return out.model_copy(update={"category_name": category.name, "category_color": category.color})


def _categories_by_id(db: Session) -> dict[str, TabCategory]:
    return {c.category_id: c for c in db.query(TabCategory).all()}


def _ordered_active_links(db: Session, category_id: str | None = None) -> list[TabLink]:
    query = db.query(TabLink).filter(TabLink.is_active.is_(True))
    if category_id is not None:
        query = query.filter(TabLink.category_id == category_id)
    return query.order_by(TabLink.category_id, TabLink.order, TabLink.id).all()


# Public navigation


def tabs_overview(db: Session) -> TabsOverview:
    """Active categories in order, with their areas and active links keyed by category_id."""
    categories = (
        db.query(TabCategory)
        .filter(TabCategory.is_active.is_(True))
        .order_by(TabCategory.order, TabCategory.id)
        .all()
    )
    if not categories:
        logger.warning("No active tab categories found")
        return TabsOverview(tabs=[], areas={}, links={}, message=NO_CATEGORIES_MESSAGE)

    tabs = [
        TabEntry(id=c.category_id, label=c.name, icon=c.icon, color=c.color) for c in categories
    ]
    areas = {
        c.category_id: AreaEntry(title=c.name, description=c.description, color=c.color)
        for c in categories
    }
    links: dict[str, list[LinkEntry]] = {c.category_id: [] for c in categories}
    for link in _ordered_active_links(db):
        if link.category_id in links:
            links[link.category_id].append(
                LinkEntry(
                    id=link.link_id,
                    title=link.title,
                    description=link.description,
                    icon=link.icon,
                    path=link.path,
                )
            )
    return TabsOverview(tabs=tabs, areas=areas, links=links)


def tab_detail(db: Session, tab_id: str) -> TabDetail:
    category = (
        db.query(TabCategory)
        .filter(TabCategory.category_id == tab_id, TabCategory.is_active.is_(True))
        .first()
    )
    if category is None:
        raise NotFound("Tab not found.")
    return TabDetail(
        category=TabCategoryBrief(
            id=category.category_id,
            name=category.name,
            description=category.description,
            color=category.color,
        ),
        links=[_link_out(link, category) for link in _ordered_active_links(db, tab_id)],
    )


# Categories


def _get_category(db: Session, category_id: str) -> TabCategory:
    category = db.query(TabCategory).filter(TabCategory.category_id == category_id).first()
    if category is None:
        raise NotFound("Category not found.")
    return category


def list_categories(db: Session, include_inactive: bool = False) -> list[TabCategoryOut]:
    query = db.query(TabCategory)
    if not include_inactive:
        query = query.filter(TabCategory.is_active.is_(True))
    counts = _active_link_counts(db)
    return [
        _category_out(c, counts.get(c.category_id, 0))
        for c in query.order_by(TabCategory.order, TabCategory.id).all()
    ]


def get_category(db: Session, category_id: str) -> TabCategoryOut:
    category = _get_category(db, category_id)
    return _category_out(category, _active_link_counts(db).get(category_id, 0))


def create_category(db: Session, actor: User, body: TabCategoryCreate) -> TabCategoryOut:
    if db.query(TabCategory.id).filter(TabCategory.category_id == body.category_id).first():
        raise DuplicateKey("A category with that ID already exists.")
    category = TabCategory(
        category_id=body.category_id,
        name=body.name,
        description=body.description,
        order=body.order,
        color=body.color or DEFAULT_TAB_COLOR,
        icon=body.icon,
        is_active=True,
        created_by_id=actor.id,
        last_updated_by_id=actor.id,
    )
    db.add(category)
    commit_or_conflict(db, "A category with that ID already exists.")
    db.refresh(category)
    logger.info("user_id=%s created tab category %s", actor.id, category.category_id)
    return _category_out(category, 0)


def update_category(
    db: Session, actor: User, category_id: str, body: TabCategoryUpdate
) -> TabCategoryOut:
    category = _get_category(db, category_id)
    data = {k: v for k, v in body.model_dump(exclude_unset=True).items() if v is not None}
    apply_allowed_updates(category, data, CATEGORY_UPDATABLE)
    category.last_updated_by_id = actor.id
    db.commit()
    db.refresh(category)
    logger.info("user_id=%s updated tab category %s", actor.id, category_id)
    return _category_out(category, _active_link_counts(db).get(category_id, 0))


def delete_category(db: Session, actor: User, category_id: str) -> bool:
    """
    Deactivate a category that still has links; hard-delete one that has none.
    Returns True when the row was removed.
    """
    category = _get_category(db, category_id)
    link_count = (
        db.query(func.count(TabLink.id)).filter(TabLink.category_id == category_id).scalar()
    )
    if link_count:
        category.is_active = False
        category.last_updated_by_id = actor.id
        db.commit()
        logger.info(
            "user_id=%s deactivated tab category %s (%s links)", actor.id, category_id, link_count
        )
        return False
    db.delete(category)
    db.commit()
    logger.info("user_id=%s deleted tab category %s", actor.id, category_id)
    return True


# Links


def _get_link(db: Session, link_id: str) -> TabLink:
    link = db.query(TabLink).filter(TabLink.link_id == link_id).first()
    if link is None:
        raise NotFound("Link not found.")
    return link


def list_links(
    db: Session,
    page: int = 1,
    limit: int = 20,
    category_id: str | None = None,
    include_inactive: bool = False,
) -> TabLinkListData:
    query = db.query(TabLink)
    if category_id:
        query = query.filter(TabLink.category_id == category_id)
    if not include_inactive:
        query = query.filter(TabLink.is_active.is_(True))
    query = query.order_by(TabLink.category_id, TabLink.order, TabLink.id)
    result = paginate(query, page, limit)
    categories = _categories_by_id(db)
    return TabLinkListData(
        links=[_link_out(link, categories.get(link.category_id)) for link in result.items],
        pagination=Pagination(
            total=result.total, page=result.page, limit=result.limit, pages=result.pages
        ),
    )


def get_link(db: Session, link_id: str) -> TabLinkOut:
    link = _get_link(db, link_id)
    category = db.query(TabCategory).filter(TabCategory.category_id == link.category_id).first()
    return _link_out(link, category)


def create_link(db: Session, actor: User, body: TabLinkCreate) -> TabLinkOut:
    """Create a link under an active category; the area fields are copied from the category."""
    category = (
        db.query(TabCategory)
        .filter(TabCategory.category_id == body.category_id, TabCategory.is_active.is_(True))
        .first()
    )
    if category is None:
        raise ValidationFailed(
            "The category does not exist or is not active.",
            errors=[{"field": "category_id", "message": "Unknown or inactive category."}],
        )
    if db.query(TabLink.id).filter(TabLink.link_id == body.link_id).first():
        raise DuplicateKey("A link with that ID already exists.")
    link = TabLink(
        category_id=category.category_id,
        area_title=category.name,
        area_description=category.description or "",
        link_id=body.link_id,
        title=body.title,
        description=body.description,
        icon=body.icon,
        path=body.path,
        order=body.order,
        is_active=True,
        created_by_id=actor.id,
        last_updated_by_id=actor.id,
    )
    db.add(link)
    commit_or_conflict(db, "A link with that ID already exists.")
    db.refresh(link)
    logger.info("user_id=%s created tab link %s in %s", actor.id, link.link_id, link.category_id)
    return _link_out(link, category)


def update_link(db: Session, actor: User, link_id: str, body: TabLinkUpdate) -> TabLinkOut:
    link = _get_link(db, link_id)
    data = {k: v for k, v in body.model_dump(exclude_unset=True).items() if v is not None}
    apply_allowed_updates(link, data, LINK_UPDATABLE)
    link.last_updated_by_id = actor.id
    db.commit()
    db.refresh(link)
    logger.info("user_id=%s updated tab link %s", actor.id, link_id)
    return get_link(db, link_id)


def delete_link(db: Session, actor: User, link_id: str) -> bool:
    """Deactivate an active link; remove one that is already inactive. True when removed."""
    link = _get_link(db, link_id)
    if link.is_active:
        link.is_active = False
        link.last_updated_by_id = actor.id
        db.commit()
        logger.info("user_id=%s deactivated tab link %s", actor.id, link_id)
        return False
    db.delete(link)
    db.commit()
    logger.info("user_id=%s deleted tab link %s", actor.id, link_id)
    return True


def reorder_links(db: Session, actor: User, body: ReorderRequest) -> list[TabLinkOut]:
    """Set order = position * 10 for the listed links of one category; return its active links."""
    category = _get_category(db, body.category_id)
    positions = {item.link_id: item.position for item in body.order}
    if positions:
        links = (
            db.query(TabLink)
            .filter(TabLink.category_id == category.category_id, TabLink.link_id.in_(positions))
            .all()
        )
        for link in links:
            link.order = positions[link.link_id] * 10
            link.last_updated_by_id = actor.id
        db.commit()
        logger.info(
            "user_id=%s reordered %s links in %s", actor.id, len(links), category.category_id
        )
    return [_link_out(link, category) for link in _ordered_active_links(db, category.category_id)]


def icon_gallery(db: Session) -> IconGallery:
    """Distinct icons of active links, grouped by category in first-seen order."""
    categories = _categories_by_id(db)
    groups: dict[str, IconCategoryGroup] = {}
    all_icons: list[IconEntry] = []
    for link in _ordered_active_links(db):
        category = categories.get(link.category_id)
        name = category.name if category else link.category_id
        color = category.color if category else DEFAULT_TAB_COLOR
        group = groups.setdefault(
            link.category_id,
            IconCategoryGroup(
                category_id=link.category_id, category_name=name, category_color=color, icons=[]
            ),
        )
        if any(icon.icon == link.icon for icon in group.icons):
            continue
        entry = IconEntry(
            id=f"{link.category_id}-{len(group.icons) + 1}",
            icon=link.icon,
            example=link.title,
            preview=link.icon[:ICON_PREVIEW_LENGTH] + "...",
        )
        group.icons.append(entry)
        all_icons.append(
            entry.model_copy(
                update={
                    "category_id": link.category_id,
                    "category_name": name,
                    "category_color": color,
                }
            )
        )
    return IconGallery(by_category=list(groups.values()), all=all_icons, total=len(all_icons))
