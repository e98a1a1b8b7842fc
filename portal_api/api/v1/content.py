"""CMS content routes: public reads, staff writes, admin deletes."""

from datetime import datetime

from fastapi import APIRouter, Query, status

from portal_api.api.v1.auth import (
    AdminContext,
    AppSettings,
    DbSession,
    OptionalContext,
    StaffContext,
    is_staff,
)
from portal_api.schemas.common import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, ApiResponse, MessageResponse
from portal_api.schemas.content import (
    ContentCategory,
    ContentCreate,
    ContentLanguage,
    ContentListData,
    ContentOut,
    ContentStatus,
    ContentStatusUpdate,
    ContentSummary,
    ContentType,
    ContentTypeStats,
    ContentUpdate,
    OptionItem,
)
from portal_api.services import content as content_service

router = APIRouter()


def _split_tags(tags: str | None) -> list[str] | None:
    if not tags:
        return None
    return [t for t in (part.strip() for part in tags.split(",")) if t]


@router.get("", response_model=ApiResponse[ContentListData])
def list_contents(
    context: OptionalContext,
    db: DbSession,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    type: ContentType | None = None,
    category: ContentCategory | None = None,
    status: ContentStatus | None = None,
    language: ContentLanguage | None = None,
    tags: str | None = Query(None, description="Comma-separated tags (any match)"),
    search: str | None = Query(None, max_length=100),
    from_date: datetime | None = None,
    to_date: datetime | None = None,
    include_drafts: bool = Query(False, description="Honoured for staff roles only"),
) -> ApiResponse[ContentListData]:
    """List content; anonymous callers only see published, due and unexpired entries."""
    result = content_service.list_contents(
        db,
        page,
        limit,
        type=type,
        category=category,
        status=status,
        language=language,
        tags=_split_tags(tags),
        search=search,
        from_date=from_date,
        to_date=to_date,
        include_drafts=include_drafts and is_staff(context),
    )
    return ApiResponse(
        data=ContentListData(
            contents=[ContentOut.model_validate(c) for c in result.items],
            total=result.total,
            pages=result.pages,
            page=result.page,
            limit=result.limit,
        )
    )


@router.get("/types", response_model=ApiResponse[list[OptionItem]])
def content_types() -> ApiResponse[list[OptionItem]]:
    return ApiResponse(data=list(content_service.CONTENT_TYPE_OPTIONS))


@router.get("/categories", response_model=ApiResponse[list[OptionItem]])
def content_categories() -> ApiResponse[list[OptionItem]]:
    return ApiResponse(data=list(content_service.CONTENT_CATEGORY_OPTIONS))


@router.get("/search", response_model=ApiResponse[list[ContentSummary]])
def search_contents(
    db: DbSession,
    q: str = Query(..., min_length=1, max_length=100),
    limit: int = Query(20, ge=1, le=MAX_PAGE_SIZE),
) -> ApiResponse[list[ContentSummary]]:
    results = content_service.search_contents(db, q, limit)
    return ApiResponse(data=[ContentSummary.model_validate(c) for c in results])


@router.get("/stats", response_model=ApiResponse[list[ContentTypeStats]])
def content_stats(_staff: StaffContext, db: DbSession) -> ApiResponse[list[ContentTypeStats]]:
    return ApiResponse(data=content_service.content_stats(db))


@router.get("/slug/{slug}", response_model=ApiResponse[ContentOut])
def get_content_by_slug(
    slug: str, context: OptionalContext, db: DbSession
) -> ApiResponse[ContentOut]:
    """Read by slug; published entries count a view."""
    content = content_service.get_content_by_slug(db, slug, include_drafts=is_staff(context))
    return ApiResponse(data=ContentOut.model_validate(content))


@router.get("/{content_id}", response_model=ApiResponse[ContentOut])
def get_content(
    content_id: int, context: OptionalContext, db: DbSession
) -> ApiResponse[ContentOut]:
    content = content_service.get_content(db, content_id, include_drafts=is_staff(context))
    return ApiResponse(data=ContentOut.model_validate(content))


@router.get("/{content_id}/related", response_model=ApiResponse[list[ContentSummary]])
def related_contents(
    content_id: int,
    db: DbSession,
    limit: int = Query(5, ge=1, le=20),
) -> ApiResponse[list[ContentSummary]]:
    results = content_service.related_contents(db, content_id, limit)
    return ApiResponse(data=[ContentSummary.model_validate(c) for c in results])


@router.post("", response_model=ApiResponse[ContentOut], status_code=status.HTTP_201_CREATED)
def create_content(
    body: ContentCreate, context: StaffContext, db: DbSession
) -> ApiResponse[ContentOut]:
    content = content_service.create_content(db, context.user, body)
    return ApiResponse(data=ContentOut.model_validate(content), message="Content created")


@router.put("/{content_id}", response_model=ApiResponse[ContentOut])
def update_content(
    content_id: int,
    body: ContentUpdate,
    context: StaffContext,
    db: DbSession,
    settings: AppSettings,
) -> ApiResponse[ContentOut]:
    content = content_service.update_content(db, settings, context.user, content_id, body)
    return ApiResponse(data=ContentOut.model_validate(content), message="Content updated")


@router.patch("/{content_id}/status", response_model=ApiResponse[ContentOut])
def change_content_status(
    content_id: int,
    body: ContentStatusUpdate,
    context: StaffContext,
    db: DbSession,
) -> ApiResponse[ContentOut]:
    content = content_service.change_status(db, context.user, content_id, body.status)
    return ApiResponse(data=ContentOut.model_validate(content), message="Status updated")


@router.delete("/{content_id}", response_model=MessageResponse)
def delete_content(content_id: int, context: AdminContext, db: DbSession) -> MessageResponse:
    content_service.delete_content(db, context.user, content_id)
    return MessageResponse(message="Content deleted")
