"""ORM models for CMS content (pages, news, articles, announcements) and their tags."""

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from portal_api.models.base import Base, JSONType, TimestampMixin

# Public URL prefix per content type.
TYPE_PATHS = {
    "page": "/paginas",
    "news": "/noticias",
    "article": "/articulos",
    "announcement": "/anuncios",
}


class Content(TimestampMixin, Base):
    """
    A CMS entry addressed by a unique slug.

    version_history is a bounded list of prior bodies: each entry holds body,
    modified_by, modified_at (ISO string), revision and comment.
    """

    __tablename__ = "contents"
    __table_args__ = (
        Index("ix_contents_type_status_published", "type", "status", "published_at"),
        Index("ix_contents_category", "category"),
        Index("ix_contents_scheduled_for", "scheduled_for"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    body = Column(Text, nullable=False)
    excerpt = Column(String(300), nullable=True)

    type = Column(String(32), nullable=False, default="page")
    category = Column(String(32), nullable=False, default="noticias")
    status = Column(String(32), nullable=False, default="draft")
    language = Column(String(8), nullable=False, default="es")

    author_id = Column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    last_modified_by_id = Column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    featured_image = Column(JSONType, nullable=True)
    gallery = Column(JSONType, nullable=False, default=list)
    attachments = Column(JSONType, nullable=False, default=list)
    seo = Column(JSONType, nullable=True)
    related_content = Column(JSONType, nullable=False, default=list)

    published_at = Column(DateTime(timezone=True), nullable=True)
    scheduled_for = Column(DateTime(timezone=True), nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)

    views = Column(Integer, nullable=False, default=0)
    revision = Column(Integer, nullable=False, default=1)
    version_history = Column(JSONType, nullable=False, default=list)

    tag_rows = relationship(
        "ContentTag",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="ContentTag.id",
    )
    author = relationship("User", foreign_keys=[author_id], lazy="joined")
    last_modified_by = relationship("User", foreign_keys=[last_modified_by_id], lazy="joined")

    @property
    def tags(self) -> list[str]:
        return [row.tag for row in self.tag_rows]

    @property
    def url(self) -> str:
        return f"/contenido{TYPE_PATHS.get(self.type, '')}/{self.slug}"


class ContentTag(Base):
    """One lower-cased tag attached to a content entry."""

    __tablename__ = "content_tags"
    __table_args__ = (UniqueConstraint("content_id", "tag", name="uq_content_tags_content_tag"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    content_id = Column(
        Integer, ForeignKey("contents.id", ondelete="CASCADE"), nullable=False, index=True
    )
    tag = Column(String(64), nullable=False, index=True)
