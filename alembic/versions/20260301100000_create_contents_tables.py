"""Create contents and content_tags tables for the CMS.

Revision ID: 20260301100000
Revises: 20260301000000
Create Date: 2026-03-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "20260301100000"
down_revision: Union[str, None] = "20260301000000"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSON = sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), "postgresql")


def upgrade() -> None:
    op.create_table(
        "contents",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("excerpt", sa.String(length=300), nullable=True),
        sa.Column("type", sa.String(length=32), nullable=False, server_default="page"),
        sa.Column("category", sa.String(length=32), nullable=False, server_default="noticias"),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="draft"),
        sa.Column("language", sa.String(length=8), nullable=False, server_default="es"),
        sa.Column("author_id", sa.Integer(), nullable=True),
        sa.Column("last_modified_by_id", sa.Integer(), nullable=True),
        sa.Column("featured_image", JSON, nullable=True),
        sa.Column("gallery", JSON, nullable=False),
        sa.Column("attachments", JSON, nullable=False),
        sa.Column("seo", JSON, nullable=True),
        sa.Column("related_content", JSON, nullable=False),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("scheduled_for", sa.DateTime(timezone=True), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("views", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("revision", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("version_history", JSON, nullable=False),
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
        sa.ForeignKeyConstraint(["author_id"], ["users.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["last_modified_by_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_contents_slug"), "contents", ["slug"], unique=True)
    op.create_index(op.f("ix_contents_author_id"), "contents", ["author_id"], unique=False)
    op.create_index(
        "ix_contents_type_status_published",
        "contents",
        ["type", "status", "published_at"],
        unique=False,
    )
    op.create_index("ix_contents_category", "contents", ["category"], unique=False)
    op.create_index("ix_contents_scheduled_for", "contents", ["scheduled_for"], unique=False)

    op.create_table(
        "content_tags",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("content_id", sa.Integer(), nullable=False),
        sa.Column("tag", sa.String(length=64), nullable=False),
        sa.ForeignKeyConstraint(["content_id"], ["contents.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("content_id", "tag", name="uq_content_tags_content_tag"),
    )
    op.create_index(
        op.f("ix_content_tags_content_id"), "content_tags", ["content_id"], unique=False
    )
    op.create_index(op.f("ix_content_tags_tag"), "content_tags", ["tag"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_content_tags_tag"), table_name="content_tags")
    op.drop_index(op.f("ix_content_tags_content_id"), table_name="content_tags")
    op.drop_table("content_tags")
    op.drop_index("ix_contents_scheduled_for", table_name="contents")
    op.drop_index("ix_contents_category", table_name="contents")
    op.drop_index("ix_contents_type_status_published", table_name="contents")
    op.drop_index(op.f("ix_contents_author_id"), table_name="contents")
    op.drop_index(op.f("ix_contents_slug"), table_name="contents")
    op.drop_table("contents")
