"""Create tab_categories and tab_links tables for the navigation CMS.

Revision ID: 20260301300000
Revises: 20260301200000
Create Date: 2026-03-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "20260301300000"
down_revision: Union[str, None] = "20260301200000"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
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
    ]


def upgrade() -> None:
    op.create_table(
        "tab_categories",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("category_id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("color", sa.String(length=7), nullable=False, server_default="#e03735"),
        sa.Column("icon", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_by_id", sa.Integer(), nullable=True),
        sa.Column("last_updated_by_id", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["created_by_id"], ["users.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["last_updated_by_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_tab_categories_category_id"), "tab_categories", ["category_id"], unique=True
    )
    op.create_index(op.f("ix_tab_categories_order"), "tab_categories", ["order"])
    op.create_index(op.f("ix_tab_categories_is_active"), "tab_categories", ["is_active"])

    op.create_table(
        "tab_links",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("category_id", sa.String(length=64), nullable=False),
        sa.Column("area_title", sa.String(length=255), nullable=False),
        sa.Column("area_description", sa.Text(), nullable=False, server_default=""),
        sa.Column("link_id", sa.String(length=128), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("icon", sa.Text(), nullable=False),
        sa.Column("path", sa.String(length=1024), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_by_id", sa.Integer(), nullable=True),
        sa.Column("last_updated_by_id", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["category_id"], ["tab_categories.category_id"]),
        sa.ForeignKeyConstraint(["created_by_id"], ["users.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["last_updated_by_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_tab_links_link_id"), "tab_links", ["link_id"], unique=True)
    op.create_index(op.f("ix_tab_links_category_id"), "tab_links", ["category_id"])
    op.create_index(op.f("ix_tab_links_is_active"), "tab_links", ["is_active"])
    op.create_index("ix_tab_links_category_active", "tab_links", ["category_id", "is_active"])
    op.create_index("ix_tab_links_category_order", "tab_links", ["category_id", "order"])


def downgrade() -> None:
    op.drop_index("ix_tab_links_category_order", table_name="tab_links")
    op.drop_index("ix_tab_links_category_active", table_name="tab_links")
    op.drop_index(op.f("ix_tab_links_is_active"), table_name="tab_links")
    op.drop_index(op.f("ix_tab_links_category_id"), table_name="tab_links")
    op.drop_index(op.f("ix_tab_links_link_id"), table_name="tab_links")
    op.drop_table("tab_links")
    op.drop_index(op.f("ix_tab_categories_is_active"), table_name="tab_categories")
    op.drop_index(op.f("ix_tab_categories_order"), table_name="tab_categories")
    op.drop_index(op.f("ix_tab_categories_category_id"), table_name="tab_categories")
    op.drop_table("tab_categories")
