"""File validation utilities for wizard document uploads.

Security: Checks the declared name and MIME type before anything is
downloaded, then validates the downloaded content (magic bytes) and size,
and sanitizes the filename used for the stored copy.
"""

import re
from typing import TYPE_CHECKING

import magic
import structlog

if TYPE_CHECKING:
    from fastapi import UploadFile

from fanjobo.core.errors import ValidationError

logger = structlog.get_logger()

PDF_MIME = "application/pdf"

# Default maximum file size (20 MB), overridden by WIZARD_UPLOAD_MAX_SIZE_MB
MAX_FILE_SIZE_BYTES = 20 * 1024 * 1024

# Chunk size for reading files (64 KB)
CHUNK_SIZE_BYTES = 64 * 1024

# Declared types that still need the extension to decide
_GENERIC_MIMES = frozenset({"", "application/octet-stream", "binary/octet-stream"})

PDF_ONLY_MESSAGE = "Only PDF files are accepted. Please send the file as a PDF."


def is_declared_pdf(file_name: str | None, mime_type: str | None) -> bool:
    """Check the client-declared name and MIME type of a document.

    A document passes when it declares application/pdf, or when it declares
    no specific type and its name ends in .pdf. Content is checked later
    with validate_pdf_content().

    Args:
        file_name: Original filename as sent by the client.
        mime_type: MIME type as declared by the client.

    Returns:
        True if the declared metadata allows a PDF.
    """
    mime = (mime_type or "").split(";")[0].strip().lower()
    if mime == PDF_MIME:
        return True
    if mime not in _GENERIC_MIMES:
        return False
    return (file_name or "").strip().lower().endswith(".pdf")


def ensure_size_limit(size: int | None, max_size: int = MAX_FILE_SIZE_BYTES) -> None:
    """Reject a document whose (declared or actual) size exceeds the limit.

    Args:
        size: Size in bytes, or None when unknown.
        max_size: Maximum allowed size in bytes.

    Raises:
        ValidationError: If size is known and too large.
    """
    if size is not None and size > max_size:
        raise ValidationError(
            message=f"File too large. Maximum size: {max_size // (1024 * 1024)}MB",
            details=[{"field": "file", "error": "FILE_TOO_LARGE"}],
        )


async def read_file_with_size_limit(
    file: "UploadFile",
    max_size: int = MAX_FILE_SIZE_BYTES,
) -> bytes:
    """Read an uploaded file with a size limit to prevent DoS.

    Args:
        file: UploadFile from FastAPI.
        max_size: Maximum allowed file size in bytes.

    Returns:
        File content as bytes.

    Raises:
        ValidationError: If file exceeds size limit.
    """
    content = b""
    total_size = 0

    while True:
        chunk = await file.read(CHUNK_SIZE_BYTES)
        if not chunk:
            break
        total_size += len(chunk)
        ensure_size_limit(total_size, max_size)
        content += chunk

    return content


def validate_pdf_content(content: bytes, filename: str) -> None:
    """Validate file content using magic bytes (not just extension).

    Args:
        content: File binary content.
        filename: Original filename (for logging).

    Raises:
        ValidationError: If the content is not a PDF.
    """
    detected_mime = magic.from_buffer(content, mime=True)

    if detected_mime != PDF_MIME:
        # Log detected MIME for server-side debugging; do NOT expose to client
        logger.warning(
            "File content validation failed",
            detected_mime=detected_mime,
            filename=filename,
        )
        raise ValidationError(
            message=PDF_ONLY_MESSAGE,
            details=[{"field": "file", "error": "INVALID_FILE_CONTENT"}],
        )


def sanitize_filename(filename: str, max_length: int = 200) -> str:
    """Sanitize a filename before storing it in the file store.

    Removes characters that are unsafe in headers and folder listings and
    keeps the extension when truncating.

    Args:
        filename: Original filename.
        max_length: Maximum allowed filename length.

    Returns:
        Sanitized filename, "document.pdf" if nothing usable remains.
    """
    # Quotes, newlines, backslashes, semicolons and path separators
    safe = re.sub(r'["\r\n\\;/]', "", filename)

    # Control characters
    safe = re.sub(r"[\x00-\x1f\x7f]", "", safe).strip()

    if len(safe) > max_length:
        if "." in safe:
            name, ext = safe.rsplit(".", 1)
            ext = f".{ext}"
            safe = name[: max_length - len(ext)] + ext
        else:
            safe = safe[:max_length]

    if not safe:
        safe = "document.pdf"

    return safe
