"""ORM models for the legislator registry and commission memberships."""

from sqlalchemy import (
    Column,
    Date,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from portal_api.models.base import Base, JSONType, TimestampMixin, slugify


class Legislator(TimestampMixin, Base):
    """A senator's public profile. ci (national ID) is unique and immutable."""

    __tablename__ = "legislators"
    __table_args__ = (
        Index("ix_legislators_party_caucus", "party", "caucus"),
        Index("ix_legislators_department_province", "department", "province"),
        Index("ix_legislators_status_position", "status", "position"),
        Index("ix_legislators_names", "last_names", "first_names"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_names = Column(String(255), nullable=False)
    last_names = Column(String(255), nullable=False)
    full_name = Column(String(512), nullable=False, default="")
    ci = Column(String(32), nullable=False, unique=True, index=True)
    birth_date = Column(Date, nullable=True)
    birthplace = Column(JSONType, nullable=True)

    academic_titles = Column(JSONType, nullable=False, default=list)
    profession = Column(String(255), nullable=True)
    work_experience = Column(JSONType, nullable=False, default=list)

    party = Column(String(255), nullable=False)
    caucus = Column(String(255), nullable=True)
    position = Column(String(32), nullable=False, default="Senador")
    department = Column(String(128), nullable=True)
    province = Column(String(128), nullable=True)
    municipality = Column(String(128), nullable=True)
    constituency = Column(String(128), nullable=True)

    term_start = Column(Date, nullable=False)
    term_end = Column(Date, nullable=False)
    reelections = Column(Integer, nullable=False, default=0)

    committees = Column(JSONType, nullable=False, default=list)
    brigades = Column(JSONType, nullable=False, default=list)
    contact = Column(JSONType, nullable=True)
    biography = Column(Text, nullable=True)
    sworn_statement = Column(JSONType, nullable=True)
    principles = Column(JSONType, nullable=False, default=list)
    profile_photo = Column(JSONType, nullable=True)
    gallery = Column(JSONType, nullable=False, default=list)
    videos = Column(JSONType, nullable=False, default=list)

    bills_presented = Column(Integer, nullable=False, default=0)
    bills_approved = Column(Integer, nullable=False, default=0)
    sessions_attended = Column(Integer, nullable=False, default=0)
    attendance_percentage = Column(Float, nullable=False, default=0.0)

    status = Column(String(32), nullable=False, default="activo")

    created_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    last_updated_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    age = Column(Integer, nullable=True)
    years_of_service = Column(Integer, nullable=False, default=0)

    commissions = relationship(
        "LegislatorCommission",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="LegislatorCommission.id",
    )
    created_by = relationship("User", foreign_keys=[created_by_id], lazy="joined")
    last_updated_by = relationship("User", foreign_keys=[last_updated_by_id], lazy="joined")

    @property
    def formal_name(self) -> str:
        return f"{self.last_names}, {self.first_names}"

    @property
    def profile_url(self) -> str:
        return f"/legisladores/{slugify(self.full_name or '')}"


class LegislatorCommission(Base):
    """Membership of a legislator in a named commission."""

    __tablename__ = "legislator_commissions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    legislator_id = Column(
        Integer, ForeignKey("legislators.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(255), nullable=False, index=True)
    role = Column(String(32), nullable=False, default="Miembro")
    period = Column(String(64), nullable=True)
