"""SQLAlchemy ORM models."""

from portal_api.models.base import Base
from portal_api.models.content import Content, ContentTag
from portal_api.models.legislator import Legislator, LegislatorCommission
from portal_api.models.tabs import TabCategory, TabLink
from portal_api.models.user import User

__all__ = [
    "Base",
    "Content",
    "ContentTag",
    "Legislator",
    "LegislatorCommission",
    "TabCategory",
    "TabLink",
    "User",
]
