"""Pydantic schemas for the legislator registry."""

from datetime import date, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from portal_api.schemas.content import UserRef

LegislatorPosition = Literal[
    "Presidente",
    "Vicepresidente",
    "Senador",
    "Senadora",
    "Secretario",
    "Pro-Secretario",
]
LegislatorStatus = Literal["activo", "inactivo", "suspendido", "licencia"]
CommissionRole = Literal["Presidente", "Vicepresidente", "Secretario", "Miembro"]


class Commission(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra="ignore")

    name: str = Field(..., min_length=1, max_length=255)
    role: CommissionRole = "Miembro"
    period: str | None = Field(default=None, max_length=64)


class AcademicTitle(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str
    institution: str | None = None
    year: int | None = None


class WorkExperience(BaseModel):
    model_config = ConfigDict(extra="ignore")

    position: str
    institution: str | None = None
    period: str | None = None
    description: str | None = None


class Contact(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: EmailStr | None = None
    office_phone: str | None = None
    mobile_phone: str | None = None
    office_address: dict[str, str | None] | None = None
    social_networks: dict[str, str | None] | None = None

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str | None) -> str | None:
        return v.lower() if v else v


class Photo(BaseModel):
    model_config = ConfigDict(extra="ignore")

    url: str = Field(..., min_length=1, max_length=1024)
    alt: str | None = None


class LegislatorBase(BaseModel):
    """Fields shared by create and full representations."""

    model_config = ConfigDict(extra="ignore")

    first_names: str = Field(..., min_length=1, max_length=255)
    last_names: str = Field(..., min_length=1, max_length=255)
    birth_date: date | None = None
    birthplace: dict[str, str | None] | None = None
    academic_titles: list[AcademicTitle] = Field(default_factory=list)
    profession: str | None = None
    work_experience: list[WorkExperience] = Field(default_factory=list)
    party: str = Field(..., min_length=1, max_length=255)
    caucus: str | None = None
    position: LegislatorPosition = "Senador"
    department: str | None = None
    province: str | None = None
    municipality: str | None = None
    constituency: str | None = None
    term_start: date
    term_end: date
    reelections: int = Field(default=0, ge=0)
    commissions: list[Commission] = Field(default_factory=list)
    committees: list[dict[str, Any]] = Field(default_factory=list)
    brigades: list[str] = Field(default_factory=list)
    contact: Contact | None = None
    biography: str | None = None
    sworn_statement: dict[str, Any] | None = None
    principles: list[str] = Field(default_factory=list)
    profile_photo: Photo | None = None
    gallery: list[dict[str, Any]] = Field(default_factory=list)
    videos: list[dict[str, Any]] = Field(default_factory=list)
    bills_presented: int = Field(default=0, ge=0)
    bills_approved: int = Field(default=0, ge=0)
    sessions_attended: int = Field(default=0, ge=0)
    attendance_percentage: float = Field(default=0.0, ge=0, le=100)
    status: LegislatorStatus = "activo"

    @field_validator("first_names", "last_names", "party")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must be non-empty")
        return v


class LegislatorCreate(LegislatorBase):
    """Body for POST /legislators."""

    ci: str = Field(..., min_length=5, max_length=32, description="National ID")

    @field_validator("ci")
    @classmethod
    def strip_ci(cls, v: str) -> str:
        return v.strip()

    @model_validator(mode="after")
    def check_term(self) -> "LegislatorCreate":
        if self.term_end <= self.term_start:
            raise ValueError("term_end must be after term_start")
        return self


class LegislatorUpdate(BaseModel):
    """Body for PUT /legislators/{id}. ci is immutable and ignored if sent."""

    model_config = ConfigDict(extra="ignore")

    first_names: str | None = Field(default=None, min_length=1, max_length=255)
    last_names: str | None = Field(default=None, min_length=1, max_length=255)
    birth_date: date | None = None
    birthplace: dict[str, str | None] | None = None
    academic_titles: list[AcademicTitle] | None = None
    profession: str | None = None
    work_experience: list[WorkExperience] | None = None
    party: str | None = Field(default=None, min_length=1, max_length=255)
    caucus: str | None = None
    position: LegislatorPosition | None = None
    department: str | None = None
    province: str | None = None
    municipality: str | None = None
    constituency: str | None = None
    term_start: date | None = None
    term_end: date | None = None
    reelections: int | None = Field(default=None, ge=0)
    commissions: list[Commission] | None = None
    committees: list[dict[str, Any]] | None = None
    brigades: list[str] | None = None
    contact: Contact | None = None
    biography: str | None = None
    sworn_statement: dict[str, Any] | None = None
    principles: list[str] | None = None
    profile_photo: Photo | None = None
    gallery: list[dict[str, Any]] | None = None
    videos: list[dict[str, Any]] | None = None
    bills_presented: int | None = Field(default=None, ge=0)
    bills_approved: int | None = Field(default=None, ge=0)
    sessions_attended: int | None = Field(default=None, ge=0)
    attendance_percentage: float | None = Field(default=None, ge=0, le=100)
    status: LegislatorStatus | None = None


class LegislatorOut(LegislatorBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    ci: str
    full_name: str
    formal_name: str
    profile_url: str
    age: int | None = None
    years_of_service: int = 0
    created_by: UserRef | None = None
    last_updated_by: UserRef | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class LegislatorSummary(BaseModel):
    """Search result shape."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    first_names: str
    last_names: str
    full_name: str
    party: str
    position: LegislatorPosition
    department: str | None = None
    province: str | None = None
    profile_photo: Photo | None = None


class LegislatorListData(BaseModel):
    legislators: list[LegislatorOut]
    total: int
    pages: int
    page: int
    limit: int


class GroupCount(BaseModel):
    value: str | None
    count: int


class PartyStats(BaseModel):
    party: str
    by_position: list[GroupCount]
    by_status: list[GroupCount]
    total: int
    average_attendance: float
    average_bills_presented: float


class MemberEntry(BaseModel):
    name: str
    party: str | None = None
    position: str | None = None
    department: str | None = None
    role: str | None = None


class DistributionEntry(BaseModel):
    """Legislators grouped by party or by department."""

    key: str | None
    count: int
    legislators: list[MemberEntry]


class CommissionSummary(BaseModel):
    name: str
    members: int
    presidents: int
    legislators: list[MemberEntry]


class LegislatorOption(BaseModel):
    value: str
    label: str
    color: str | None = None
