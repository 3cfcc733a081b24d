"""Community content submission and admin notification models."""

from typing import Any

from sqlalchemy import BigInteger, ForeignKey, String, Text, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from fanjobo.models.base import Base, TimestampMixin


class ContentSubmission(Base, TimestampMixin):
    """A student-submitted university document awaiting moderation.

    Attributes:
        section: Destination area, always "university" for wizard submissions.
        content_kind: course, note, book, resource, video, sample-question,
            summary or exam-tip.
        tags: JSON list of tags; the stored file id and MIME type ride along
            as "_drive_file_id:<id>" and "_drive_mime:<mime>" entries.
        external_link: Public link of the uploaded file.
        status: pending until a moderator acts.
    """

    __tablename__ = "community_content_submissions"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    section: Mapped[str] = mapped_column(String(30), nullable=False)
    content_kind: Mapped[str] = mapped_column(String(30), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text(), nullable=True)
    major: Mapped[str | None] = mapped_column(String(255), nullable=True)
    term: Mapped[str | None] = mapped_column(String(10), nullable=True)
    tags: Mapped[list[Any]] = mapped_column(
        JSONB, nullable=False, server_default=text("'[]'::jsonb")
    )
    external_link: Mapped[str | None] = mapped_column(Text(), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, server_default=text("'pending'")
    )


class AdminNotification(Base, TimestampMixin):
    """Inbox entry for the admin panel.

    Attributes:
        type: Machine-readable type (e.g. "submission-pending").
        payload: JSON object with identifiers of the related records.
        status: open until an admin dismisses it.
    """

    __tablename__ = "admin_notifications"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text(), nullable=False)
    payload: Mapped[dict[str, Any]] = mapped_column(
        JSONB, nullable=False, server_default=text("'{}'::jsonb")
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, server_default=text("'open'")
    )
