"""
Navigation tabs: the public overview consumed by the portal front-end, and the
CMS routes (under /cms) used by staff to manage tab categories and links.
"""

from fastapi import APIRouter, Query, status

from portal_api.api.v1.auth import AdminContext, DbSession, StaffContext
from portal_api.schemas.common import ApiResponse, MessageResponse
from portal_api.schemas.tabs import (
    IconGallery,
    ReorderRequest,
    TabCategoryCreate,
    TabCategoryOut,
    TabCategoryUpdate,
    TabDetail,
    TabLinkCreate,
    TabLinkListData,
    TabLinkOut,
    TabLinkUpdate,
    TabsOverview,
)
from portal_api.services import tabs as tabs_service

router = APIRouter()


@router.get("", response_model=ApiResponse[TabsOverview])
def get_tabs(db: DbSession) -> ApiResponse[TabsOverview]:
    overview = tabs_service.tabs_overview(db)
    return ApiResponse(data=overview, message=overview.message)


# CMS: categories


@router.get("/cms/categories", response_model=ApiResponse[list[TabCategoryOut]])
def list_categories(
    _staff: StaffContext,
    db: DbSession,
    include_inactive: bool = False,
) -> ApiResponse[list[TabCategoryOut]]:
    return ApiResponse(data=tabs_service.list_categories(db, include_inactive))


@router.get("/cms/categories/{category_id}", response_model=ApiResponse[TabCategoryOut])
def get_category(
    category_id: str, _staff: StaffContext, db: DbSession
) -> ApiResponse[TabCategoryOut]:
    return ApiResponse(data=tabs_service.get_category(db, category_id))


@router.post(
    "/cms/categories",
    response_model=ApiResponse[TabCategoryOut],
    status_code=status.HTTP_201_CREATED,
)
def create_category(
    body: TabCategoryCreate, context: StaffContext, db: DbSession
) -> ApiResponse[TabCategoryOut]:
    category = tabs_service.create_category(db, context.user, body)
    return ApiResponse(data=category, message="Category created")


@router.put("/cms/categories/{category_id}", response_model=ApiResponse[TabCategoryOut])
def update_category(
    category_id: str,
    body: TabCategoryUpdate,
    context: StaffContext,
    db: DbSession,
) -> ApiResponse[TabCategoryOut]:
    category = tabs_service.update_category(db, context.user, category_id, body)
    return ApiResponse(data=category, message="Category updated")


@router.delete("/cms/categories/{category_id}", response_model=MessageResponse)
def delete_category(category_id: str, context: AdminContext, db: DbSession) -> MessageResponse:
    """A category that still has links is deactivated instead of removed."""
    removed = tabs_service.delete_category(db, context.user, category_id)
    return MessageResponse(message="Category deleted" if removed else "Category deactivated")


# CMS: links


@router.get("/cms/links", response_model=ApiResponse[TabLinkListData])
def list_links(
    _staff: StaffContext,
    db: DbSession,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    category_id: str | None = None,
    include_inactive: bool = False,
) -> ApiResponse[TabLinkListData]:
    return ApiResponse(
        data=tabs_service.list_links(db, page, limit, category_id, include_inactive)
    )


@router.put("/cms/links/reorder", response_model=ApiResponse[list[TabLinkOut]])
def reorder_links(
    body: ReorderRequest, context: StaffContext, db: DbSession
) -> ApiResponse[list[TabLinkOut]]:
    links = tabs_service.reorder_links(db, context.user, body)
    return ApiResponse(data=links, message="Links reordered")


@router.get("/cms/links/{link_id}", response_model=ApiResponse[TabLinkOut])
def get_link(link_id: str, _staff: StaffContext, db: DbSession) -> ApiResponse[TabLinkOut]:
    return ApiResponse(data=tabs_service.get_link(db, link_id))


@router.post(
    "/cms/links",
    response_model=ApiResponse[TabLinkOut],
    status_code=status.HTTP_201_CREATED,
)
def create_link(
    body: TabLinkCreate, context: StaffContext, db: DbSession
) -> ApiResponse[TabLinkOut]:
    link = tabs_service.create_link(db, context.user, body)
    return ApiResponse(data=link, message="Link created")


@router.put("/cms/links/{link_id}", response_model=ApiResponse[TabLinkOut])
def update_link(
    link_id: str,
    body: TabLinkUpdate,
    context: StaffContext,
    db: DbSession,
) -> ApiResponse[TabLinkOut]:
    link = tabs_service.update_link(db, context.user, link_id, body)
    return ApiResponse(data=link, message="Link updated")


@router.delete("/cms/links/{link_id}", response_model=MessageResponse)
def delete_link(link_id: str, context: StaffContext, db: DbSession) -> MessageResponse:
    """First delete deactivates the link; deleting an inactive link removes it."""
    removed = tabs_service.delete_link(db, context.user, link_id)
    return MessageResponse(message="Link deleted" if removed else "Link deactivated")


@router.get("/cms/icons", response_model=ApiResponse[IconGallery])
def icon_gallery(_staff: StaffContext, db: DbSession) -> ApiResponse[IconGallery]:
    return ApiResponse(data=tabs_service.icon_gallery(db))


# Public tab detail is declared last so /cms/... paths are matched first.
@router.get("/{tab_id}", response_model=ApiResponse[TabDetail])
def get_tab(tab_id: str, db: DbSession) -> ApiResponse[TabDetail]:
    return ApiResponse(data=tabs_service.tab_detail(db, tab_id))
