"""Tests for the submission wizard: PDF upload, guard and moderation."""

import pytest

from fanjobo.core.file_validation import PDF_ONLY_MESSAGE
from fanjobo.wizards.controller import MISSING_ANSWER_MESSAGE
from fanjobo.wizards.external import RESEND_MESSAGE
from fanjobo.wizards.state import WizardKind, WizardSession, freeze_context
from fanjobo.wizards.submission import (
    SUBMISSION_WIZARD,
    compose_description,
    require_file,
    upload_folder,
)
from fanjobo.wizards.validators import FILE_EXPECTED_MESSAGE

UP_TO_FILE = [
    "/submit",
    "note",
    "Signals week 3",
    "Skip",
    "5",
    "Covers the sampling theorem before the midterm.",
    "Signals, EE, Midterm",
]


async def _walk(send, actor_id, inputs):
    for text in inputs:
        result = await send(actor_id, text)
        assert result.handled, text


def _submission(sessions, actor_id):
    return sessions.get(actor_id, WizardKind.SUBMISSION)


class TestSubmissionHelpers:
    """Tests for folder, guard and description helpers."""

    def _session(self, **answers) -> WizardSession:
        return WizardSession(
            actor_id="actor-1",
            kind=WizardKind.SUBMISSION,
            context=freeze_context({"user_id": 9, "major": None}),
            answers=answers,
        )

    def test_upload_folder_without_major(self):
        """A missing major uses the unknown-major segment."""
        session = self._session(contentKind="book", term="2")
        assert upload_folder(session) == ["book", "unknown-major", "term-2", "user-9"]

    def test_require_file(self):
        """The guard names the file step until a reference exists."""
        assert require_file(self._session()) == "file"
        assert require_file(self._session(file={"file_id": ""})) == "file"
        assert require_file(self._session(file={"file_id": "d-1"})) is None

    def test_compose_description(self):
        """The description has one paragraph per field."""
        session = self._session(contentKind="note", term="5", purpose="Exam prep")
        assert compose_description(session) == (
            "Section: note\n\nCourse: not specified\n\nTarget term: 5\n\nPurpose: Exam prep"
        )


class TestSubmissionWalk:
    """End-to-end submission through the controller."""

    @pytest.mark.asyncio
    async def test_text_at_file_step(self, send, sessions, profiled_actor):
        """Text on the file step asks for a PDF."""
        await _walk(send, profiled_actor, UP_TO_FILE)

        result = await send(profiled_actor, "here is the link")

        assert result.reply.text.startswith(FILE_EXPECTED_MESSAGE)
        session = _submission(sessions, profiled_actor)
        assert session.step_index == SUBMISSION_WIZARD.index_of("file")

    @pytest.mark.asyncio
    async def test_non_pdf_rejected(self, send, send_document, sessions, profiled_actor, fetcher):
        """A non-PDF document is rejected before download."""
        await _walk(send, profiled_actor, UP_TO_FILE)

        result = await send_document(
            profiled_actor, file_name="scan.jpg", mime_type="image/jpeg"
        )

        assert result.reply.text.startswith(PDF_ONLY_MESSAGE)
        assert fetcher.calls == 0

    @pytest.mark.asyncio
    async def test_upload_failure_keeps_step(
        self, send, send_document, sessions, profiled_actor, file_storage, pdf_magic
    ):
        """A failed upload can be retried on the same step."""
        await _walk(send, profiled_actor, UP_TO_FILE)
        file_storage.error = RuntimeError("drive down")

        result = await send_document(profiled_actor)

        assert result.reply.text.startswith(RESEND_MESSAGE)
        session = _submission(sessions, profiled_actor)
        assert "file" not in session.answers

        file_storage.error = None
        await send_document(profiled_actor)
        session = _submission(sessions, profiled_actor)
        assert session.answers["file"]["file_id"] == "drive-1"

    @pytest.mark.asyncio
    async def test_full_submission(
        self,
        send,
        send_document,
        sessions,
        storage,
        notifier,
        file_storage,
        profiled_actor,
        pdf_magic,
    ):
        """Upload, confirm, pending row and moderator notification."""
        await _walk(send, profiled_actor, UP_TO_FILE)

        result = await send_document(profiled_actor, file_name="Week 3.pdf")

        assert "Week 3.pdf" in result.reply.text
        assert file_storage.uploads[0][2] == [
            "note",
            "Computer Engineering - Software",
            "term-5",
            "user-500",
        ]

        result = await send(profiled_actor, "ثبت نهایی")

        assert result.reply.text == "Thanks! Your submission was sent for moderation."
        assert _submission(sessions, profiled_actor) is None

        row = storage.rows("community_content_submissions")[0]
        assert row["status"] == "pending"
        assert row["section"] == "university"
        assert row["content_kind"] == "note"
        assert row["user_id"] == 500
        assert row["major"] == "Computer Engineering - Software"
        assert row["external_link"] == "https://drive.example/drive-1"
        assert row["tags"] == [
            "signals",
            "ee",
            "midterm",
            "_drive_file_id:drive-1",
            "_drive_mime:application/pdf",
        ]
        assert "Course: not specified" in row["description"]

        assert notifier.created == [
            {
                "type": "submission-pending",
                "title": "University submission pending",
                "message": "Signals week 3 requires moderation",
                "payload": {
                    "submissionId": row["id"],
                    "userId": 500,
                    "section": "university",
                    "contentKind": "note",
                },
            }
        ]

    @pytest.mark.asyncio
    async def test_guard_rewinds_to_file_step(self, send, sessions, storage, profiled_actor):
        """Confirm without an upload goes back to the file step."""
        await _walk(send, profiled_actor, UP_TO_FILE)
        session = _submission(sessions, profiled_actor)
        session.step_index = SUBMISSION_WIZARD.index_of("confirm")

        result = await send(profiled_actor, "Confirm")

        assert result.reply.text.startswith(MISSING_ANSWER_MESSAGE.format(label="File"))
        session = _submission(sessions, profiled_actor)
        assert session.step_index == SUBMISSION_WIZARD.index_of("file")
        assert storage.rows("community_content_submissions") == []

    @pytest.mark.asyncio
    async def test_notification_failure_reports_save_failure(
        self, send, send_document, sessions, profiled_actor, notifier, pdf_magic
    ):
        """A notifier error fails the completion and clears the session."""

        async def broken(*args, **kwargs):
            raise RuntimeError("inbox down")

        notifier.create = broken
        await _walk(send, profiled_actor, UP_TO_FILE)
        await send_document(profiled_actor)

        result = await send(profiled_actor, "Confirm")

        assert result.reply.text == "Saving failed. Please start Content submission again."
        assert _submission(sessions, profiled_actor) is None
