"""Create the published contents table listed by the menu.

Revision ID: 002_contents
Revises: 001_wizard_tables
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import JSONB

revision: str = "002_contents"
down_revision: str | None = "001_wizard_tables"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # Moderated material: university sections, industry opportunities, roadmaps
    op.create_table(
        "contents",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("created_by_user_id", sa.BigInteger(), nullable=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("kind", sa.String(30), nullable=False),
        sa.Column("major", sa.String(255), nullable=True),
        sa.Column("term", sa.String(10), nullable=True),
        sa.Column("skill_level", sa.String(20), nullable=True),
        sa.Column("tags", JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("estimated_hours", sa.Integer(), nullable=True),
        sa.Column(
            "is_published",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("false"),
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.ForeignKeyConstraint(
            ["created_by_user_id"], ["users.id"], ondelete="SET NULL"
        ),
        sa.CheckConstraint(
            "type IN ('university', 'industry')", name="ck_contents_type"
        ),
    )

    # Menu listings filter published rows by type and kind, newest first
    op.create_index(
        "idx_contents_listing", "contents", ["type", "kind", "is_published"]
    )


def downgrade() -> None:
    op.drop_index("idx_contents_listing")
    op.drop_table("contents")
