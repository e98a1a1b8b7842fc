"""Legislator registry routes: public reads and aggregates, staff writes, admin deletes."""

from fastapi import APIRouter, Query, status

from portal_api.api.v1.auth import AdminContext, DbSession, StaffContext
from portal_api.schemas.common import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, ApiResponse, MessageResponse
from portal_api.schemas.legislators import (
    CommissionSummary,
    DistributionEntry,
    LegislatorCreate,
    LegislatorListData,
    LegislatorOption,
    LegislatorOut,
    LegislatorPosition,
    LegislatorStatus,
    LegislatorSummary,
    LegislatorUpdate,
    PartyStats,
)
from portal_api.services import legislators as legislators_service

router = APIRouter()


@router.get("", response_model=ApiResponse[LegislatorListData])
def list_legislators(
    db: DbSession,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    party: str | None = None,
    caucus: str | None = None,
    position: LegislatorPosition | None = None,
    status: LegislatorStatus | None = None,
    department: str | None = None,
    commission: str | None = None,
    search: str | None = Query(None, max_length=100),
) -> ApiResponse[LegislatorListData]:
    """List legislators sorted by last and first names."""
    result = legislators_service.list_legislators(
        db,
        page,
        limit,
        party=party,
        caucus=caucus,
        position=position,
        status=status,
        department=department,
        commission=commission,
        search=search,
    )
    return ApiResponse(
        data=LegislatorListData(
            legislators=[LegislatorOut.model_validate(x) for x in result.items],
            total=result.total,
            pages=result.pages,
            page=result.page,
            limit=result.limit,
        )
    )


@router.get("/positions", response_model=ApiResponse[list[LegislatorOption]])
def positions() -> ApiResponse[list[LegislatorOption]]:
    return ApiResponse(data=list(legislators_service.POSITION_OPTIONS))


@router.get("/statuses", response_model=ApiResponse[list[LegislatorOption]])
def statuses() -> ApiResponse[list[LegislatorOption]]:
    return ApiResponse(data=list(legislators_service.STATUS_OPTIONS))


@router.get("/distribution/party", response_model=ApiResponse[list[DistributionEntry]])
def distribution_by_party(db: DbSession) -> ApiResponse[list[DistributionEntry]]:
    return ApiResponse(data=legislators_service.distribution_by_party(db))


@router.get("/distribution/department", response_model=ApiResponse[list[DistributionEntry]])
def distribution_by_department(db: DbSession) -> ApiResponse[list[DistributionEntry]]:
    return ApiResponse(data=legislators_service.distribution_by_department(db))


@router.get("/commissions", response_model=ApiResponse[list[CommissionSummary]])
def commissions(db: DbSession) -> ApiResponse[list[CommissionSummary]]:
    return ApiResponse(data=legislators_service.commission_summaries(db))


@router.get("/search", response_model=ApiResponse[list[LegislatorSummary]])
def search_legislators(
    db: DbSession,
    q: str = Query(..., min_length=1, max_length=100),
    limit: int = Query(20, ge=1, le=MAX_PAGE_SIZE),
) -> ApiResponse[list[LegislatorSummary]]:
    results = legislators_service.search_legislators(db, q, limit)
    return ApiResponse(data=[LegislatorSummary.model_validate(x) for x in results])


@router.get("/stats", response_model=ApiResponse[list[PartyStats]])
def legislator_stats(_staff: StaffContext, db: DbSession) -> ApiResponse[list[PartyStats]]:
    return ApiResponse(data=legislators_service.legislator_stats(db))


@router.get("/ci/{ci}", response_model=ApiResponse[LegislatorOut])
def get_legislator_by_ci(ci: str, db: DbSession) -> ApiResponse[LegislatorOut]:
    legislator = legislators_service.get_legislator_by_ci(db, ci)
    return ApiResponse(data=LegislatorOut.model_validate(legislator))


@router.get("/{legislator_id}", response_model=ApiResponse[LegislatorOut])
def get_legislator(legislator_id: int, db: DbSession) -> ApiResponse[LegislatorOut]:
    legislator = legislators_service.get_legislator(db, legislator_id)
    return ApiResponse(data=LegislatorOut.model_validate(legislator))


@router.post("", response_model=ApiResponse[LegislatorOut], status_code=status.HTTP_201_CREATED)
def create_legislator(
    body: LegislatorCreate, context: StaffContext, db: DbSession
) -> ApiResponse[LegislatorOut]:
    legislator = legislators_service.create_legislator(db, context.user, body)
    return ApiResponse(data=LegislatorOut.model_validate(legislator), message="Legislator created")


@router.put("/{legislator_id}", response_model=ApiResponse[LegislatorOut])
def update_legislator(
    legislator_id: int,
    body: LegislatorUpdate,
    context: StaffContext,
    db: DbSession,
) -> ApiResponse[LegislatorOut]:
    legislator = legislators_service.update_legislator(db, context.user, legislator_id, body)
    return ApiResponse(data=LegislatorOut.model_validate(legislator), message="Legislator updated")


@router.delete("/{legislator_id}", response_model=MessageResponse)
def delete_legislator(
    legislator_id: int, context: AdminContext, db: DbSession
) -> MessageResponse:
    legislators_service.delete_legislator(db, context.user, legislator_id)
    return MessageResponse(message="Legislator deleted")
