"""Personal "path" planner models.

Written by the onboarding, goal, task and artifact wizards.
"""

from typing import Any

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    ForeignKey,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from fanjobo.models.base import Base, TimestampMixin

_USER_FK = "users.id"


class PathProfile(Base, TimestampMixin):
    """Planner settings, one row per user.

    Attributes:
        current_stage: university, industry or university_and_industry.
        free_days: JSON list of weekday names.
        university_weight: Share of effort on university work (0-100).
        industry_weight: Always 100 - university_weight.
    """

    __tablename__ = "my_path_profiles"
    __table_args__ = (
        CheckConstraint(
            "university_weight BETWEEN 0 AND 100",
            name="ck_my_path_profiles_university_weight",
        ),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey(_USER_FK, ondelete="CASCADE"), unique=True, nullable=False
    )
    current_stage: Mapped[str] = mapped_column(String(40), nullable=False)
    four_week_goal: Mapped[str | None] = mapped_column(Text(), nullable=True)
    weekly_hours: Mapped[int] = mapped_column(Integer, nullable=False)
    free_days: Mapped[list[Any]] = mapped_column(
        JSONB, nullable=False, server_default=text("'[]'::jsonb")
    )
    university_weight: Mapped[int] = mapped_column(Integer, nullable=False)
    industry_weight: Mapped[int] = mapped_column(Integer, nullable=False)


class PathGoal(Base, TimestampMixin):
    """A planner goal (academic, career, project or application)."""

    __tablename__ = "my_path_goals"
    __table_args__ = (
        CheckConstraint("priority BETWEEN 1 AND 5", name="ck_my_path_goals_priority"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey(_USER_FK, ondelete="CASCADE"), nullable=False
    )
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    priority: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, server_default=text("'active'")
    )
    success_metrics: Mapped[list[Any]] = mapped_column(
        JSONB, nullable=False, server_default=text("'[]'::jsonb")
    )
    progress_percent: Mapped[int] = mapped_column(
        Integer, nullable=False, server_default=text("0")
    )


class PathTask(Base, TimestampMixin):
    """A planner task (study, practice, project, apply or interview)."""

    __tablename__ = "my_path_tasks"
    __table_args__ = (
        CheckConstraint("priority BETWEEN 1 AND 5", name="ck_my_path_tasks_priority"),
        CheckConstraint(
            "estimated_minutes >= 10", name="ck_my_path_tasks_estimated_minutes"
        ),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey(_USER_FK, ondelete="CASCADE"), nullable=False
    )
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    estimated_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    priority: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, server_default=text("'todo'")
    )


class PathArtifact(Base, TimestampMixin):
    """Evidence of progress: repository, demo, certificate, resume bullet."""

    __tablename__ = "my_path_artifacts"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey(_USER_FK, ondelete="CASCADE"), nullable=False
    )
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str | None] = mapped_column(Text(), nullable=True)
    description: Mapped[str | None] = mapped_column(Text(), nullable=True)
