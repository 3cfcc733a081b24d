"""Tests for the file-upload step adapter."""

from unittest.mock import patch

import pytest

from fanjobo.core.file_validation import PDF_ONLY_MESSAGE
from fanjobo.wizards.external import (
    NO_FETCHER_MESSAGE,
    RESEND_MESSAGE,
    ExternalStepAdapter,
)
from fanjobo.wizards.state import DocumentRef, WizardKind, WizardSession
from fanjobo.wizards.validators import Accepted, Rejected

FOLDER = ["note", "Computer Engineering - Software", "term-5", "user-500"]


@pytest.fixture
def session() -> WizardSession:
    return WizardSession(actor_id="actor-1", kind=WizardKind.SUBMISSION)


def _document(**kwargs) -> DocumentRef:
    values = {
        "file_id": "tg-1",
        "file_name": "notes.pdf",
        "mime_type": "application/pdf",
        "file_size": 1024,
    }
    values.update(kwargs)
    return DocumentRef(**values)


class TestDeclaredChecks:
    """Rejections that happen before anything is downloaded."""

    @pytest.mark.asyncio
    async def test_rejects_non_pdf_type(self, external, session, fetcher, file_storage):
        """A declared image is rejected without a download."""
        result = await external.handle(
            session, _document(file_name="photo.png", mime_type="image/png"), FOLDER
        )

        assert result == Rejected(PDF_ONLY_MESSAGE)
        assert fetcher.calls == 0
        assert file_storage.uploads == []

    @pytest.mark.asyncio
    async def test_rejects_declared_oversize(self, file_storage, fetcher, session):
        """A declared size above the limit is rejected without a download."""
        adapter = ExternalStepAdapter(file_storage, fetcher, max_size_bytes=100)

        result = await adapter.handle(session, _document(file_size=101), FOLDER)

        assert isinstance(result, Rejected)
        assert "File too large" in result.message
        assert fetcher.calls == 0


class TestUpload:
    """Tests for the fetch, validate and upload path."""

    @pytest.mark.asyncio
    async def test_accepts_pdf(self, external, session, file_storage, pdf_magic):
        """A valid PDF is uploaded and its reference returned."""
        result = await external.handle(session, _document(), FOLDER)

        assert result == Accepted(
            {
                "file_id": "drive-1",
                "link": "https://drive.example/drive-1",
                "mime": "application/pdf",
                "file_name": "notes.pdf",
            }
        )
        name, mime, folder, _ = file_storage.uploads[0]
        assert (name, mime, folder) == ("notes.pdf", "application/pdf", FOLDER)

    @pytest.mark.asyncio
    async def test_uses_inline_content(self, external, session, fetcher, pdf_magic):
        """Inline bytes are used without calling the fetcher."""
        result = await external.handle(
            session, _document(content=b"%PDF-1.4 inline"), FOLDER
        )

        assert isinstance(result, Accepted)
        assert fetcher.calls == 0

    @pytest.mark.asyncio
    async def test_generic_mime_with_pdf_name(self, external, session, pdf_magic):
        """octet-stream with a .pdf name passes the declared check."""
        result = await external.handle(
            session, _document(mime_type="application/octet-stream"), FOLDER
        )
        assert isinstance(result, Accepted)

    @pytest.mark.asyncio
    async def test_missing_name_gets_default(self, external, session, file_storage, pdf_magic):
        """A document without a name is stored as <file_id>.pdf."""
        result = await external.handle(session, _document(file_name=None), FOLDER)

        assert isinstance(result, Accepted)
        assert file_storage.uploads[0][0] == "tg-1.pdf"

    @pytest.mark.asyncio
    async def test_rejects_fake_pdf_content(self, external, session, file_storage):
        """Content that is not a PDF is rejected after download."""
        with patch(
            "fanjobo.core.file_validation.magic.from_buffer",
            return_value="application/zip",
        ):
            result = await external.handle(session, _document(), FOLDER)

        assert result == Rejected(PDF_ONLY_MESSAGE)
        assert file_storage.uploads == []

    @pytest.mark.asyncio
    async def test_rejects_actual_oversize(self, file_storage, fetcher, session, pdf_magic):
        """Downloaded content larger than the limit is rejected."""
        fetcher.content = b"%PDF" + b"0" * 200
        adapter = ExternalStepAdapter(file_storage, fetcher, max_size_bytes=100)

        result = await adapter.handle(session, _document(file_size=None), FOLDER)

        assert isinstance(result, Rejected)
        assert "File too large" in result.message

    @pytest.mark.asyncio
    async def test_upload_failure_asks_to_resend(self, external, session, file_storage, pdf_magic):
        """A file store error becomes a resend message."""
        file_storage.error = RuntimeError("drive down")

        result = await external.handle(session, _document(), FOLDER)

        assert result == Rejected(RESEND_MESSAGE)

    @pytest.mark.asyncio
    async def test_timeout_asks_to_resend(self, file_storage, fetcher, session, pdf_magic):
        """An upload slower than the timeout is abandoned."""
        file_storage.delay = 0.5
        adapter = ExternalStepAdapter(file_storage, fetcher, timeout_seconds=0.05)

        result = await adapter.handle(session, _document(), FOLDER)

        assert result == Rejected(RESEND_MESSAGE)
        assert file_storage.uploads == []

    @pytest.mark.asyncio
    async def test_no_fetcher_without_inline_content(self, file_storage, session):
        """Without a fetcher, only inline documents can be read."""
        adapter = ExternalStepAdapter(file_storage)

        result = await adapter.handle(session, _document(), FOLDER)

        assert result == Rejected(NO_FETCHER_MESSAGE)
