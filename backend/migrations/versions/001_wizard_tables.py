"""Create the tables written by the chat wizards.

Revision ID: 001_wizard_tables
Revises:
Create Date: 2026-10-19

users / user_profiles: profile wizard
community_content_submissions / admin_notifications: submission wizard
my_path_*: onboarding, goal, task and artifact wizards
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import JSONB

revision: str = "001_wizard_tables"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
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
    ]


def _json_list(name: str) -> sa.Column:
    return sa.Column(name, JSONB, nullable=False, server_default=sa.text("'[]'::jsonb"))


def _user_fk() -> sa.ForeignKeyConstraint:
    return sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE")


def upgrade() -> None:
    # Created lazily on first wizard start; telegram_id is the chat actor
    op.create_table(
        "users",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("phone_or_email", sa.String(255), nullable=False),
        sa.Column("telegram_id", sa.String(64), nullable=True),
        *_timestamps(),
    )
    op.create_index("idx_user_telegram_id", "users", ["telegram_id"], unique=True)

    op.create_table(
        "user_profiles",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("university", sa.String(255), nullable=True),
        sa.Column("city", sa.String(255), nullable=True),
        sa.Column("major", sa.String(255), nullable=True),
        sa.Column("level", sa.String(50), nullable=True),
        sa.Column("term", sa.String(10), nullable=True),
        sa.Column("skill_level", sa.String(20), nullable=True),
        sa.Column("short_term_goal", sa.Text(), nullable=True),
        sa.Column("weekly_hours", sa.Integer(), nullable=True),
        _json_list("interests"),
        _json_list("skills"),
        _json_list("passed_courses"),
        sa.Column("resume_url", sa.Text(), nullable=True),
        sa.Column("github_url", sa.Text(), nullable=True),
        sa.Column("portfolio_url", sa.Text(), nullable=True),
        *_timestamps(),
        _user_fk(),
        # Upsert conflict target
        sa.UniqueConstraint("user_id", name="uq_user_profiles_user_id"),
    )

    op.create_table(
        "community_content_submissions",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("section", sa.String(30), nullable=False),
        sa.Column("content_kind", sa.String(30), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("major", sa.String(255), nullable=True),
        sa.Column("term", sa.String(10), nullable=True),
        _json_list("tags"),
        sa.Column("external_link", sa.Text(), nullable=True),
        sa.Column(
            "status",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'pending'"),
        ),
        *_timestamps(),
        _user_fk(),
    )
    op.create_index(
        "idx_submission_user", "community_content_submissions", ["user_id"]
    )
    op.create_index(
        "idx_submission_status", "community_content_submissions", ["status"]
    )

    op.create_table(
        "admin_notifications",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column(
            "payload", JSONB, nullable=False, server_default=sa.text("'{}'::jsonb")
        ),
        sa.Column(
            "status", sa.String(20), nullable=False, server_default=sa.text("'open'")
        ),
        *_timestamps(),
    )

    op.create_table(
        "my_path_profiles",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("current_stage", sa.String(40), nullable=False),
        sa.Column("four_week_goal", sa.Text(), nullable=True),
        sa.Column("weekly_hours", sa.Integer(), nullable=False),
        _json_list("free_days"),
        sa.Column("university_weight", sa.Integer(), nullable=False),
        sa.Column("industry_weight", sa.Integer(), nullable=False),
        *_timestamps(),
        _user_fk(),
        sa.UniqueConstraint("user_id", name="uq_my_path_profiles_user_id"),
        sa.CheckConstraint(
            "university_weight BETWEEN 0 AND 100",
            name="ck_my_path_profiles_university_weight",
        ),
    )

    op.create_table(
        "my_path_goals",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("priority", sa.Integer(), nullable=False),
        sa.Column(
            "status", sa.String(20), nullable=False, server_default=sa.text("'active'")
        ),
        _json_list("success_metrics"),
        sa.Column(
            "progress_percent",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("0"),
        ),
        *_timestamps(),
        _user_fk(),
        sa.CheckConstraint(
            "priority BETWEEN 1 AND 5", name="ck_my_path_goals_priority"
        ),
    )
    op.create_index("idx_path_goal_user", "my_path_goals", ["user_id"])

    op.create_table(
        "my_path_tasks",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("estimated_minutes", sa.Integer(), nullable=False),
        sa.Column("priority", sa.Integer(), nullable=False),
        sa.Column(
            "status", sa.String(20), nullable=False, server_default=sa.text("'todo'")
        ),
        *_timestamps(),
        _user_fk(),
        sa.CheckConstraint(
            "priority BETWEEN 1 AND 5", name="ck_my_path_tasks_priority"
        ),
        sa.CheckConstraint(
            "estimated_minutes >= 10", name="ck_my_path_tasks_estimated_minutes"
        ),
    )
    op.create_index("idx_path_task_user", "my_path_tasks", ["user_id"])

    op.create_table(
        "my_path_artifacts",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("url", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
        _user_fk(),
    )
    op.create_index("idx_path_artifact_user", "my_path_artifacts", ["user_id"])


def downgrade() -> None:
    op.drop_index("idx_path_artifact_user")
    op.drop_table("my_path_artifacts")
    op.drop_index("idx_path_task_user")
    op.drop_table("my_path_tasks")
    op.drop_index("idx_path_goal_user")
    op.drop_table("my_path_goals")
    op.drop_table("my_path_profiles")
    op.drop_table("admin_notifications")
    op.drop_index("idx_submission_status")
    op.drop_index("idx_submission_user")
    op.drop_table("community_content_submissions")
    op.drop_table("user_profiles")
    op.drop_index("idx_user_telegram_id")
    op.drop_table("users")
