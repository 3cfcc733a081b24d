"""User and academic profile models.

users is created lazily the first time a chat actor starts a wizard;
user_profiles is written by the profile wizard (one row per user).
"""

from typing import Any

from sqlalchemy import BigInteger, ForeignKey, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from fanjobo.models.base import Base, TimestampMixin

_EMPTY_JSON_ARRAY = text("'[]'::jsonb")


class User(Base, TimestampMixin):
    """A student known to the platform.

    Attributes:
        id: Integer primary key.
        full_name: Display name (placeholder until the profile wizard runs).
        phone_or_email: Contact, "telegram:<id>" until the profile wizard runs.
        telegram_id: Chat actor identifier. Unique when present.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone_or_email: Mapped[str] = mapped_column(String(255), nullable=False)
    telegram_id: Mapped[str | None] = mapped_column(
        String(64),
        unique=True,
        nullable=True,
    )


class UserProfile(Base, TimestampMixin):
    """Academic and career profile collected by the profile wizard.

    Attributes:
        user_id: Owning user (unique, the upsert conflict target).
        major: Academic track. A non-empty major marks the profile complete.
        term: Current term as text ("1".."12").
        short_term_goal: Selected goals joined with " | ".
        interests: JSON list of interest tags.
        skills: JSON list of {"name", "score"} objects.
        passed_courses: JSON list of course names.
    """

    __tablename__ = "user_profiles"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    university: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str | None] = mapped_column(String(255), nullable=True)
    major: Mapped[str | None] = mapped_column(String(255), nullable=True)
    level: Mapped[str | None] = mapped_column(String(50), nullable=True)
    term: Mapped[str | None] = mapped_column(String(10), nullable=True)
    skill_level: Mapped[str | None] = mapped_column(String(20), nullable=True)
    short_term_goal: Mapped[str | None] = mapped_column(Text(), nullable=True)
    weekly_hours: Mapped[int | None] = mapped_column(Integer, nullable=True)
    interests: Mapped[list[Any]] = mapped_column(
        JSONB, nullable=False, server_default=_EMPTY_JSON_ARRAY
    )
    skills: Mapped[list[Any]] = mapped_column(
        JSONB, nullable=False, server_default=_EMPTY_JSON_ARRAY
    )
    passed_courses: Mapped[list[Any]] = mapped_column(
        JSONB, nullable=False, server_default=_EMPTY_JSON_ARRAY
    )
    resume_url: Mapped[str | None] = mapped_column(Text(), nullable=True)
    github_url: Mapped[str | None] = mapped_column(Text(), nullable=True)
    portfolio_url: Mapped[str | None] = mapped_column(Text(), nullable=True)
