"""ORM models for the navigation tabs CMS: categories (tabs) and their links."""

from sqlalchemy import Boolean, Column, ForeignKey, Index, Integer, String, Text

from portal_api.models.base import Base, TimestampMixin

DEFAULT_TAB_COLOR = "#e03735"


class TabCategory(TimestampMixin, Base):
    """A navigation tab addressed by its slug-style category_id."""

    __tablename__ = "tab_categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    category_id = Column(String(64), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    order = Column(Integer, nullable=False, default=0, index=True)
    color = Column(String(7), nullable=False, default=DEFAULT_TAB_COLOR)
    icon = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    last_updated_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)


class TabLink(TimestampMixin, Base):
    """
    A link shown under a tab.

    area_title/area_description are copied from the category when the link is created.
    """

    __tablename__ = "tab_links"
    __table_args__ = (
        Index("ix_tab_links_category_active", "category_id", "is_active"),
        Index("ix_tab_links_category_order", "category_id", "order"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    category_id = Column(
        String(64),
        ForeignKey("tab_categories.category_id"),
        nullable=False,
        index=True,
    )
    area_title = Column(String(255), nullable=False)
    area_description = Column(Text, nullable=False, default="")
    link_id = Column(String(128), nullable=False, unique=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    icon = Column(Text, nullable=False)
    path = Column(String(1024), nullable=False)
    order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    last_updated_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
