"""Create legislators and legislator_commissions tables.

Revision ID: 20260301200000
Revises: 20260301100000
Create Date: 2026-03-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "20260301200000"
down_revision: Union[str, None] = "20260301100000"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSON = sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), "postgresql")


def upgrade() -> None:
    op.create_table(
        "legislators",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("first_names", sa.String(length=255), nullable=False),
        sa.Column("last_names", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=512), nullable=False, server_default=""),
        sa.Column("ci", sa.String(length=32), nullable=False),
        sa.Column("birth_date", sa.Date(), nullable=True),
        sa.Column("birthplace", JSON, nullable=True),
        sa.Column("academic_titles", JSON, nullable=False),
        sa.Column("profession", sa.String(length=255), nullable=True),
        sa.Column("work_experience", JSON, nullable=False),
        sa.Column("party", sa.String(length=255), nullable=False),
        sa.Column("caucus", sa.String(length=255), nullable=True),
        sa.Column("position", sa.String(length=32), nullable=False, server_default="Senador"),
        sa.Column("department", sa.String(length=128), nullable=True),
        sa.Column("province", sa.String(length=128), nullable=True),
        sa.Column("municipality", sa.String(length=128), nullable=True),
        sa.Column("constituency", sa.String(length=128), nullable=True),
        sa.Column("term_start", sa.Date(), nullable=False),
        sa.Column("term_end", sa.Date(), nullable=False),
        sa.Column("reelections", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("committees", JSON, nullable=False),
        sa.Column("brigades", JSON, nullable=False),
        sa.Column("contact", JSON, nullable=True),
        sa.Column("biography", sa.Text(), nullable=True),
        sa.Column("sworn_statement", JSON, nullable=True),
        sa.Column("principles", JSON, nullable=False),
        sa.Column("profile_photo", JSON, nullable=True),
        sa.Column("gallery", JSON, nullable=False),
        sa.Column("videos", JSON, nullable=False),
        sa.Column("bills_presented", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("bills_approved", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("sessions_attended", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("attendance_percentage", sa.Float(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="activo"),
        sa.Column("created_by_id", sa.Integer(), nullable=True),
        sa.Column("last_updated_by_id", sa.Integer(), nullable=True),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("years_of_service", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["created_by_id"], ["users.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["last_updated_by_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_legislators_ci"), "legislators", ["ci"], unique=True)
    op.create_index("ix_legislators_party_caucus", "legislators", ["party", "caucus"])
    op.create_index(
        "ix_legislators_department_province", "legislators", ["department", "province"]
    )
    op.create_index("ix_legislators_status_position", "legislators", ["status", "position"])
    op.create_index("ix_legislators_names", "legislators", ["last_names", "first_names"])

    op.create_table(
        "legislator_commissions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("legislator_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=32), nullable=False, server_default="Miembro"),
        sa.Column("period", sa.String(length=64), nullable=True),
        sa.ForeignKeyConstraint(["legislator_id"], ["legislators.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_legislator_commissions_legislator_id"),
        "legislator_commissions",
        ["legislator_id"],
    )
    op.create_index(
        op.f("ix_legislator_commissions_name"), "legislator_commissions", ["name"]
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_legislator_commissions_name"), table_name="legislator_commissions")
    op.drop_index(
        op.f("ix_legislator_commissions_legislator_id"), table_name="legislator_commissions"
    )
    op.drop_table("legislator_commissions")
    op.drop_index("ix_legislators_names", table_name="legislators")
    op.drop_index("ix_legislators_status_position", table_name="legislators")
    op.drop_index("ix_legislators_department_province", table_name="legislators")
    op.drop_index("ix_legislators_party_caucus", table_name="legislators")
    op.drop_index(op.f("ix_legislators_ci"), table_name="legislators")
    op.drop_table("legislators")
