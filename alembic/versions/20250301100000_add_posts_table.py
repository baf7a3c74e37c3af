"""Add posts table with a unique post_title.

Revision ID: 20250301100000
Revises: 20250301000000
Create Date: 2025-03-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "20250301100000"
down_revision: Union[str, None] = "20250301000000"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "posts",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("post_title", sa.String(length=75), nullable=False),
        sa.Column("author", sa.String(length=255), nullable=False),
        sa.Column("sections", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("details", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("image_url", sa.String(length=500), nullable=False, server_default=""),
        sa.Column("is_member", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "created_date",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column("modified_author", sa.String(length=255), nullable=True),
        sa.Column("modified_date", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_posts_post_title"),
        "posts",
        ["post_title"],
        unique=True,
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_posts_post_title"), table_name="posts")
    op.drop_table("posts")
