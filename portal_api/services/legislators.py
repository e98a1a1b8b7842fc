"""Legislator registry service: CRUD, search and the public aggregates."""

import logging
from collections import defaultdict
from datetime import date
from typing import Any, get_args

from sqlalchemy.orm import Session

from portal_api.core.errors import DuplicateKey, NotFound, ValidationFailed
from portal_api.models.legislator import Legislator, LegislatorCommission
from portal_api.models.user import User
from portal_api.schemas.legislators import (
    CommissionSummary,
    DistributionEntry,
    GroupCount,
    LegislatorCreate,
    LegislatorOption,
    LegislatorPosition,
    LegislatorUpdate,
    MemberEntry,
    PartyStats,
)
from portal_api.services.listing import (
    Page,
    apply_exact_filters,
    apply_search,
    commit_or_conflict,
    paginate,
)

logger = logging.getLogger(__name__)

SEARCH_COLUMNS = (Legislator.first_names, Legislator.last_names, Legislator.full_name)
CI_TAKEN = "A legislator with that CI is already registered."
# Columns that may be cleared with an explicit null on update.
NULLABLE_FIELDS = frozenset(
    {
        "birth_date",
        "birthplace",
        "profession",
        "caucus",
        "department",
        "province",
        "municipality",
        "constituency",
        "contact",
        "biography",
        "sworn_statement",
        "profile_photo",
    }
)

POSITION_OPTIONS = tuple(LegislatorOption(value=p, label=p) for p in get_args(LegislatorPosition))
STATUS_OPTIONS = (
    LegislatorOption(value="activo", label="Activo", color="green"),
    LegislatorOption(value="inactivo", label="Inactivo", color="gray"),
    LegislatorOption(value="suspendido", label="Suspendido", color="red"),
    LegislatorOption(value="licencia", label="En licencia", color="yellow"),
)


def age_on(birth_date: date | None, today: date) -> int | None:
    if birth_date is None:
        return None
    before_birthday = (today.month, today.day) < (birth_date.month, birth_date.day)
    return today.year - birth_date.year - int(before_birthday)


def years_of_service_on(term_start: date | None, today: date) -> int:
    if term_start is None:
        return 0
    return max(today.year - term_start.year, 0)


def refresh_derived(legislator: Legislator, today: date | None = None) -> None:
    """Recompute full_name, age and years_of_service; called on every save."""
    today = today or date.today()
    legislator.full_name = f"{legislator.first_names} {legislator.last_names}".strip()
    legislator.age = age_on(legislator.birth_date, today)
    legislator.years_of_service = years_of_service_on(legislator.term_start, today)


def _commission_rows(commissions: list[dict[str, Any]]) -> list[LegislatorCommission]:
    return [LegislatorCommission(**c) for c in commissions]


def _ci_exists(db: Session, ci: str) -> bool:
    return db.query(Legislator.id).filter(Legislator.ci == ci).first() is not None


def create_legislator(db: Session, actor: User, body: LegislatorCreate) -> Legislator:
    if _ci_exists(db, body.ci):
        raise DuplicateKey(CI_TAKEN)
    data = body.model_dump()
    commissions = data.pop("commissions")
    legislator = Legislator(**data, created_by_id=actor.id, last_updated_by_id=actor.id)
    legislator.commissions = _commission_rows(commissions)
    refresh_derived(legislator)
    db.add(legislator)
    commit_or_conflict(db, CI_TAKEN)
    db.refresh(legislator)
    logger.info("user_id=%s created legislator_id=%s", actor.id, legislator.id)
    return legislator


def list_legislators(
    db: Session,
    page: int = 1,
    limit: int = 10,
    party: str | None = None,
    caucus: str | None = None,
    position: str | None = None,
    status: str | None = None,
    department: str | None = None,
    commission: str | None = None,
    search: str | None = None,
) -> Page[Legislator]:
    query = apply_exact_filters(
        db.query(Legislator),
        Legislator,
        {
            "party": party,
            "caucus": caucus,
            "position": position,
            "status": status,
            "department": department,
        },
    )
    if commission:
        query = query.filter(
            Legislator.commissions.any(LegislatorCommission.name == commission)
        )
    query = apply_search(query, SEARCH_COLUMNS, search)
    query = query.order_by(Legislator.last_names, Legislator.first_names, Legislator.id)
    return paginate(query, page, limit)


def get_legislator(db: Session, legislator_id: int) -> Legislator:
    legislator = db.get(Legislator, legislator_id)
    if legislator is None:
        raise NotFound("Legislator not found.")
    return legislator


def get_legislator_by_ci(db: Session, ci: str) -> Legislator:
    legislator = db.query(Legislator).filter(Legislator.ci == ci.strip()).first()
    if legislator is None:
        raise NotFound("Legislator not found.")
    return legislator


def update_legislator(
    db: Session, actor: User, legislator_id: int, body: LegislatorUpdate
) -> Legislator:
    """Partial update; ci never changes and commissions are replaced when sent."""
    legislator = get_legislator(db, legislator_id)
    data = body.model_dump(exclude_unset=True)
    commissions = data.pop("commissions", None)
    for field, value in data.items():
        if value is None and field not in NULLABLE_FIELDS:
            continue
        setattr(legislator, field, value)
    if commissions is not None:
        legislator.commissions = _commission_rows(commissions)
    if legislator.term_end <= legislator.term_start:
        db.rollback()
        raise ValidationFailed(
            "term_end must be after term_start",
            errors=[{"field": "term_end", "message": "Must be after term_start."}],
        )
    legislator.last_updated_by_id = actor.id
    refresh_derived(legislator)
    db.commit()
    db.refresh(legislator)
    logger.info("user_id=%s updated legislator_id=%s", actor.id, legislator.id)
    return legislator


def delete_legislator(db: Session, actor: User, legislator_id: int) -> None:
    legislator = get_legislator(db, legislator_id)
    db.delete(legislator)
    db.commit()
    logger.info("user_id=%s deleted legislator_id=%s", actor.id, legislator_id)


def search_legislators(db: Session, term: str, limit: int = 20) -> list[Legislator]:
    if not term or not term.strip():
        raise ValidationFailed(
            "Search term is required.", errors=[{"field": "q", "message": "Required."}]
        )
    query = apply_search(db.query(Legislator), SEARCH_COLUMNS, term)
    return query.order_by(Legislator.last_names, Legislator.first_names).limit(limit).all()


def legislator_stats(db: Session) -> list[PartyStats]:
    """Per party: counts by position and status, average attendance and bills presented."""
    rows = db.query(
        Legislator.party,
        Legislator.position,
        Legislator.status,
        Legislator.attendance_percentage,
        Legislator.bills_presented,
    ).all()
    parties: dict[str, dict[str, Any]] = {}
    for party, position, status, attendance, bills in rows:
        entry = parties.setdefault(
            party,
            {
                "positions": defaultdict(int),
                "statuses": defaultdict(int),
                "total": 0,
                "attendance": 0.0,
                "bills": 0,
            },
        )
        entry["positions"][position] += 1
        entry["statuses"][status] += 1
        entry["total"] += 1
        entry["attendance"] += attendance or 0.0
        entry["bills"] += bills or 0

    return [
        PartyStats(
            party=party,
            by_position=[GroupCount(value=k, count=v) for k, v in sorted(e["positions"].items())],
            by_status=[GroupCount(value=k, count=v) for k, v in sorted(e["statuses"].items())],
            total=e["total"],
            average_attendance=round(e["attendance"] / e["total"], 2),
            average_bills_presented=round(e["bills"] / e["total"], 2),
        )
        for party, e in sorted(parties.items())
    ]


def _distribution(db: Session, key: str) -> list[DistributionEntry]:
    groups: dict[str | None, list[MemberEntry]] = defaultdict(list)
    legislators = db.query(Legislator).order_by(Legislator.last_names, Legislator.first_names)
    for legislator in legislators:
        groups[getattr(legislator, key)].append(
            MemberEntry(
                name=legislator.full_name,
                party=legislator.party,
                position=legislator.position,
                department=legislator.department,
            )
        )
    entries = [
        DistributionEntry(key=k, count=len(members), legislators=members)
        for k, members in groups.items()
    ]
    entries.sort(key=lambda e: (-e.count, e.key or ""))
    return entries


def distribution_by_party(db: Session) -> list[DistributionEntry]:
    return _distribution(db, "party")


def distribution_by_department(db: Session) -> list[DistributionEntry]:
    return _distribution(db, "department")


def commission_summaries(db: Session) -> list[CommissionSummary]:
    """Every commission with its member count, number of presidents and members."""
    rows = (
        db.query(LegislatorCommission, Legislator)
        .join(Legislator, LegislatorCommission.legislator_id == Legislator.id)
        .order_by(LegislatorCommission.name, Legislator.last_names, Legislator.first_names)
        .all()
    )
    members: dict[str, list[MemberEntry]] = defaultdict(list)
    for commission, legislator in rows:
        members[commission.name].append(
            MemberEntry(
                name=legislator.full_name,
                party=legislator.party,
                position=legislator.position,
                role=commission.role,
            )
        )
    summaries = [
        CommissionSummary(
            name=name,
            members=len(entries),
            presidents=sum(1 for m in entries if m.role == "Presidente"),
            legislators=entries,
        )
        for name, entries in members.items()
    ]
    summaries.sort(key=lambda s: (-s.members, s.name))
    return summaries
