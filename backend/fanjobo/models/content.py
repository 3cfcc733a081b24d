"""Published content model.

contents holds the moderated material the menu lists: university items
(courses, professors, notes, books, resources, exam tips), industry
opportunities and roadmaps. Approved community submissions end up here.
"""

from typing import Any

from sqlalchemy import (
    BigInteger,
    Boolean,
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


class Content(Base, TimestampMixin):
    """A published (or draft) content item.

    Attributes:
        type: university or industry.
        kind: Section within the type (course, professor, note, book,
            resource, exam-tip, roadmap, or an industry kind such as job).
        major: Track the item targets; NULL means every major.
        term: Term the item targets; NULL means every term.
        is_published: Only published items are listed.
    """

    __tablename__ = "contents"
    __table_args__ = (
        CheckConstraint("type IN ('university', 'industry')", name="ck_contents_type"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    created_by_user_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text(), nullable=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    kind: Mapped[str] = mapped_column(String(30), nullable=False)
    major: Mapped[str | None] = mapped_column(String(255), nullable=True)
    term: Mapped[str | None] = mapped_column(String(10), nullable=True)
    skill_level: Mapped[str | None] = mapped_column(String(20), nullable=True)
    tags: Mapped[list[Any]] = mapped_column(
        JSONB, nullable=False, server_default=text("'[]'::jsonb")
    )
    estimated_hours: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_published: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false")
    )
