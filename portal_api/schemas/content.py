"""Pydantic schemas for CMS content: create/update bodies, list payloads, stats."""

import re
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

ContentType = Literal["page", "news", "article", "announcement"]
ContentCategory = Literal[
    "institucional",
    "historia",
    "directiva",
    "noticias",
    "eventos",
    "transparencia",
    "participacion",
    "legislacion",
]
ContentStatus = Literal["draft", "published", "archived", "scheduled"]
ContentLanguage = Literal["es", "qu", "ay"]

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
TITLE_MAX_LENGTH = 200
EXCERPT_MAX_LENGTH = 300
TAG_MAX_LENGTH = 64


class MediaItem(BaseModel):
    """Image reference (featured image or gallery entry)."""

    model_config = ConfigDict(extra="ignore")

    url: str = Field(..., min_length=1, max_length=1024)
    alt: str | None = None
    caption: str | None = None
    credit: str | None = None
    order: int | None = None


class Attachment(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    url: str = Field(..., min_length=1, max_length=1024)
    size: int | None = Field(default=None, ge=0)
    type: str | None = None


class SeoMetadata(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str | None = Field(default=None, max_length=60)
    description: str | None = Field(default=None, max_length=160)
    keywords: list[str] = Field(default_factory=list)
    canonical_url: str | None = None


def _normalize_tags(v: list[str] | None) -> list[str] | None:
    if v is None:
        return None
    seen: list[str] = []
    for tag in v:
        t = tag.strip().lower()
        if not t:
            continue
        if len(t) > TAG_MAX_LENGTH:
            raise ValueError(f"tags must be at most {TAG_MAX_LENGTH} characters")
        if t not in seen:
            seen.append(t)
    return seen


def _validate_slug(v: str | None) -> str | None:
    if v is None:
        return None
    v = v.strip().lower()
    if not SLUG_PATTERN.match(v):
        raise ValueError("Invalid slug. Use only lowercase letters, digits and hyphens.")
    return v


class ContentCreate(BaseModel):
    """Body for POST /content. slug is derived from the title when omitted."""

    model_config = ConfigDict(extra="ignore")

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    slug: str | None = None
    body: str = Field(..., min_length=1)
    excerpt: str | None = Field(default=None, max_length=EXCERPT_MAX_LENGTH)
    type: ContentType = "page"
    category: ContentCategory = "noticias"
    tags: list[str] = Field(default_factory=list, max_length=50)
    status: ContentStatus = "draft"
    language: ContentLanguage = "es"
    featured_image: MediaItem | None = None
    gallery: list[MediaItem] = Field(default_factory=list)
    attachments: list[Attachment] = Field(default_factory=list)
    seo: SeoMetadata | None = None
    published_at: datetime | None = None
    scheduled_for: datetime | None = None
    expires_at: datetime | None = None
    related_content: list[int] = Field(default_factory=list)

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, v: str | None) -> str | None:
        return _validate_slug(v)

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v: list[str]) -> list[str] | None:
        return _normalize_tags(v)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title must be non-empty")
        return v


class ContentUpdate(BaseModel):
    """Body for PUT /content/{id}. id and slug are immutable and ignored if sent."""

    model_config = ConfigDict(extra="ignore")

    title: str | None = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    body: str | None = Field(default=None, min_length=1)
    excerpt: str | None = Field(default=None, max_length=EXCERPT_MAX_LENGTH)
    type: ContentType | None = None
    category: ContentCategory | None = None
    tags: list[str] | None = Field(default=None, max_length=50)
    status: ContentStatus | None = None
    language: ContentLanguage | None = None
    featured_image: MediaItem | None = None
    gallery: list[MediaItem] | None = None
    attachments: list[Attachment] | None = None
    seo: SeoMetadata | None = None
    published_at: datetime | None = None
    scheduled_for: datetime | None = None
    expires_at: datetime | None = None
    related_content: list[int] | None = None
    comment: str | None = Field(
        default=None, max_length=255, description="Note stored with the revision entry"
    )

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v: list[str] | None) -> list[str] | None:
        return _normalize_tags(v)


class ContentStatusUpdate(BaseModel):
    status: ContentStatus


class UserRef(BaseModel):
    """Audit reference to an identity (email and profile only)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    profile: dict[str, Any] | None = None


class VersionEntry(BaseModel):
    body: str
    modified_by: int | None = None
    modified_at: datetime | None = None
    revision: int
    comment: str | None = None


class ContentOut(BaseModel):
    """Full content representation."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    slug: str
    body: str
    excerpt: str | None = None
    type: ContentType
    category: ContentCategory
    tags: list[str] = Field(default_factory=list)
    status: ContentStatus
    language: ContentLanguage
    featured_image: MediaItem | None = None
    gallery: list[MediaItem] = Field(default_factory=list)
    attachments: list[Attachment] = Field(default_factory=list)
    seo: SeoMetadata | None = None
    published_at: datetime | None = None
    scheduled_for: datetime | None = None
    expires_at: datetime | None = None
    views: int = 0
    related_content: list[int] = Field(default_factory=list)
    revision: int = 1
    version_history: list[VersionEntry] = Field(default_factory=list)
    author: UserRef | None = None
    last_modified_by: UserRef | None = None
    url: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ContentSummary(BaseModel):
    """Lightweight representation used by search and related-content results."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    slug: str
    excerpt: str | None = None
    type: ContentType
    category: ContentCategory
    published_at: datetime | None = None
    featured_image: MediaItem | None = None
    url: str


class ContentListData(BaseModel):
    contents: list[ContentOut]
    total: int
    pages: int
    page: int
    limit: int


class OptionItem(BaseModel):
    """Static choice (content type or category) with a display label."""

    value: str
    label: str
    description: str | None = None
    color: str | None = None


class StatusCount(BaseModel):
    status: str
    count: int


class CategoryCount(BaseModel):
    category: str
    count: int


class ContentTypeStats(BaseModel):
    type: str
    by_status: list[StatusCount]
    by_category: list[CategoryCount]
    total: int
    total_views: int
