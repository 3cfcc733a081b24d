"""External step adapter: file-upload steps.

A FILE_ONLY step advances only after its document has been validated and
stored in the file store. Every failure leaves the session exactly as it
was; the actor just sends the file again.

Flow:
    declared name/MIME not PDF ──► reject (nothing downloaded)
    declared size too large    ──► reject (nothing downloaded)
    fetch bytes ─► size check ─► magic-byte check ─► upload (bounded by timeout)
    any fetch/upload exception or timeout ──► "resend the file"
"""

import asyncio
from collections.abc import Sequence
from typing import Any

import structlog

from fanjobo.core.errors import ValidationError
from fanjobo.core.file_validation import (
    MAX_FILE_SIZE_BYTES,
    PDF_MIME,
    PDF_ONLY_MESSAGE,
    ensure_size_limit,
    is_declared_pdf,
    sanitize_filename,
    validate_pdf_content,
)
from fanjobo.wizards.collaborators import DocumentFetcher, FileStorage
from fanjobo.wizards.state import DocumentRef, WizardSession
from fanjobo.wizards.validators import Accepted, Rejected, ValidationResult

logger = structlog.get_logger()

RESEND_MESSAGE = "Uploading the file failed. Please send the PDF again."
NO_FETCHER_MESSAGE = "This file could not be read. Please send it again."

DEFAULT_UPLOAD_TIMEOUT_SECONDS = 60.0


class ExternalStepAdapter:
    """Validates and uploads documents for FILE_ONLY steps."""

    def __init__(
        self,
        file_storage: FileStorage,
        fetcher: DocumentFetcher | None = None,
        *,
        timeout_seconds: float = DEFAULT_UPLOAD_TIMEOUT_SECONDS,
        max_size_bytes: int = MAX_FILE_SIZE_BYTES,
    ) -> None:
        """Initialize the adapter.

        Args:
            file_storage: Destination file store.
            fetcher: Downloads documents that arrive without inline bytes.
            timeout_seconds: Upper bound for fetch + upload.
            max_size_bytes: Largest accepted document.
        """
        self._file_storage = file_storage
        self._fetcher = fetcher
        self._timeout_seconds = timeout_seconds
        self._max_size_bytes = max_size_bytes

    async def handle(
        self,
        session: WizardSession,
        document: DocumentRef,
        folder_path: Sequence[str],
    ) -> ValidationResult:
        """Validate, fetch and upload one document.

        Args:
            session: Session the document belongs to (read only, for logs).
            document: Document as delivered by the transport.
            folder_path: Destination folder segments in the file store.

        Returns:
            Accepted with the stored reference
            ({"file_id", "link", "mime", "file_name"}), or Rejected with the
            message to show.
        """
        log = logger.bind(actor_id=session.actor_id, wizard_kind=session.kind.value)

        if not is_declared_pdf(document.file_name, document.mime_type):
            log.info(
                "Upload rejected",
                reason="declared_type",
                mime_type=document.mime_type,
            )
            return Rejected(PDF_ONLY_MESSAGE)

        try:
            ensure_size_limit(document.file_size, self._max_size_bytes)
        except ValidationError as exc:
            log.info("Upload rejected", reason="declared_size", size=document.file_size)
            return Rejected(exc.message)

        file_name = sanitize_filename(document.file_name or f"{document.file_id}.pdf")

        try:
            async with asyncio.timeout(self._timeout_seconds):
                content = await self._read(document)
                ensure_size_limit(len(content), self._max_size_bytes)
                validate_pdf_content(content, file_name)
                stored = await self._file_storage.upload(
                    content, file_name, PDF_MIME, list(folder_path)
                )
        except ValidationError as exc:
            log.info("Upload rejected", reason=exc.details or exc.code)
            return Rejected(exc.message)
        except TimeoutError:
            log.warning("Upload timed out", timeout_seconds=self._timeout_seconds)
            return Rejected(RESEND_MESSAGE)
        except Exception:
            log.exception("Upload failed")
            return Rejected(RESEND_MESSAGE)

        log.info("Upload stored", external_id=stored.external_id)
        reference: dict[str, Any] = {
            "file_id": stored.external_id,
            "link": stored.public_link,
            "mime": PDF_MIME,
            "file_name": file_name,
        }
        return Accepted(reference)

    async def _read(self, document: DocumentRef) -> bytes:
        if document.content is not None:
            return document.content
        if self._fetcher is None:
            raise ValidationError(NO_FETCHER_MESSAGE)
        return await self._fetcher.fetch(document)
