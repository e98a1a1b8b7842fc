"""Pydantic schemas for the navigation tabs CMS."""

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from portal_api.schemas.common import Pagination

CATEGORY_ID_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
HEX_COLOR_PATTERN = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")


def _validate_color(v: str | None) -> str | None:
    if v is None:
        return None
    if not HEX_COLOR_PATTERN.match(v):
        raise ValueError("color must be a hex value such as #e03735")
    return v


class TabCategoryCreate(BaseModel):
    category_id: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    order: int = 0
    color: str | None = None
    icon: str | None = None

    @field_validator("category_id")
    @classmethod
    def validate_category_id(cls, v: str) -> str:
        v = v.strip().lower()
        if not CATEGORY_ID_PATTERN.match(v):
            raise ValueError("Invalid ID. Use only lowercase letters, digits and hyphens.")
        return v

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str | None) -> str | None:
        return _validate_color(v)


class TabCategoryUpdate(BaseModel):
    """category_id is the public key and cannot change."""

    model_config = ConfigDict(extra="ignore")

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    order: int | None = None
    color: str | None = None
    icon: str | None = None
    is_active: bool | None = None

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str | None) -> str | None:
        return _validate_color(v)


class TabCategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    category_id: str
    name: str
    description: str | None = None
    order: int
    color: str
    icon: str | None = None
    is_active: bool
    links_count: int = 0
    created_by_id: int | None = None
    last_updated_by_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TabLinkCreate(BaseModel):
    category_id: str = Field(..., min_length=1, max_length=64)
    link_id: str = Field(..., min_length=1, max_length=128)
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    icon: str = Field(..., min_length=1, description="Inline SVG markup")
    path: str = Field(..., min_length=1, max_length=1024)
    order: int = 0

    @field_validator("link_id", "title", "path")
    @classmethod
    def strip_value(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must be non-empty")
        return v


class TabLinkUpdate(BaseModel):
    """link_id and category_id are immutable and ignored if sent."""

    model_config = ConfigDict(extra="ignore")

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, min_length=1)
    icon: str | None = Field(default=None, min_length=1)
    path: str | None = Field(default=None, min_length=1, max_length=1024)
    order: int | None = None
    is_active: bool | None = None


class TabLinkOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    category_id: str
    area_title: str
    area_description: str
    link_id: str
    title: str
    description: str
    icon: str
    path: str
    order: int
    is_active: bool
    category_name: str | None = None
    category_color: str | None = None
    created_by_id: int | None = None
    last_updated_by_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TabLinkListData(BaseModel):
    links: list[TabLinkOut]
    pagination: Pagination


class ReorderItem(BaseModel):
    link_id: str
    position: int = Field(..., ge=0)


class ReorderRequest(BaseModel):
    category_id: str
    order: list[ReorderItem] = Field(default_factory=list, max_length=500)


class TabEntry(BaseModel):
    id: str
    label: str
    icon: str | None = None
    color: str


class AreaEntry(BaseModel):
    title: str
    description: str | None = None
    color: str


class LinkEntry(BaseModel):
    id: str
    title: str
    description: str
    icon: str
    path: str


class TabsOverview(BaseModel):
    """Public navigation: tabs in order, plus areas and links keyed by category_id."""

    tabs: list[TabEntry]
    areas: dict[str, AreaEntry]
    links: dict[str, list[LinkEntry]]
    message: str | None = None


class TabCategoryBrief(BaseModel):
    id: str
    name: str
    description: str | None = None
    color: str


class TabDetail(BaseModel):
    category: TabCategoryBrief
    links: list[TabLinkOut]


class IconEntry(BaseModel):
    id: str
    icon: str
    example: str
    preview: str
    category_id: str | None = None
    category_name: str | None = None
    category_color: str | None = None


class IconCategoryGroup(BaseModel):
    category_id: str
    category_name: str
    category_color: str
    icons: list[IconEntry]


class IconGallery(BaseModel):
    by_category: list[IconCategoryGroup]
    all: list[IconEntry]
    total: int
