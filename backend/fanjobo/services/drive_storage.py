"""Google Drive file store.

Uploads wizard documents into a nested folder path below the configured
university (or root) folder, creating missing folders on the way, and
shares each uploaded file as "anyone with the link can view".

The Drive client is synchronous, so every API call runs in a worker thread
via asyncio.to_thread. httplib2 connections are not thread-safe: each
blocking call builds its own client over its own Http object, and every
request carries a socket timeout.
"""

import asyncio
import base64
import io
import json
import re
import threading
from collections.abc import Callable, Sequence
from typing import Any

import httplib2
import structlog
from google.oauth2 import service_account
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build
from googleapiclient.http import MediaIoBaseUpload

from fanjobo.core.config import Settings
from fanjobo.wizards.collaborators import StoredFile

logger = structlog.get_logger()

DRIVE_SCOPES = ["https://www.googleapis.com/auth/drive"]
FOLDER_MIME = "application/vnd.google-apps.folder"
MAX_SEGMENT_LENGTH = 100

_UNSAFE_SEGMENT_CHARS = re.compile(r'[\\/:*?"<>|]+')
_WHITESPACE = re.compile(r"\s+")


class DriveConfigurationError(RuntimeError):
    """Drive credentials or folder ids are missing or invalid."""


# =============================================================================
# Credentials
# =============================================================================


def load_service_account_info(settings: Settings) -> dict[str, Any]:
    """Read the service-account JSON from a file path or a base64 value.

    A raw JSON string in the base64 setting is accepted as well.

    Args:
        settings: Application settings.

    Returns:
        Service-account info dict with a normalized private key.

    Raises:
        DriveConfigurationError: If no credentials are configured or the
            JSON is not a service-account key.
    """
    if settings.google_service_account_json_path:
        try:
            with open(settings.google_service_account_json_path, encoding="utf-8") as fh:
                info = json.load(fh)
        except (OSError, ValueError) as exc:
            msg = "GOOGLE_SERVICE_ACCOUNT_JSON_PATH must point to a service-account JSON file."
            raise DriveConfigurationError(msg) from exc
    else:
        raw = settings.google_service_account_json_base64.get_secret_value().strip()
        if not raw:
            msg = (
                "Missing Google credentials. Set GOOGLE_SERVICE_ACCOUNT_JSON_PATH "
                "or GOOGLE_SERVICE_ACCOUNT_JSON_BASE64."
            )
            raise DriveConfigurationError(msg)
        try:
            text = raw if raw.startswith("{") else base64.b64decode(raw).decode("utf-8")
            info = json.loads(text)
        except ValueError as exc:
            msg = "GOOGLE_SERVICE_ACCOUNT_JSON_BASE64 must be base64-encoded service-account JSON."
            raise DriveConfigurationError(msg) from exc

    return normalize_service_account_info(info)


def normalize_service_account_info(info: dict[str, Any]) -> dict[str, Any]:
    """Fix escaped newlines in the private key and check required fields."""
    normalized = dict(info)
    key = normalized.get("private_key")
    if isinstance(key, str):
        normalized["private_key"] = key.strip('"').replace("\\n", "\n").strip()
    email = normalized.get("client_email")
    if isinstance(email, str):
        normalized["client_email"] = email.strip()

    if normalized.get("type", "service_account") != "service_account":
        msg = "Invalid Google credentials type. Expected service_account JSON."
        raise DriveConfigurationError(msg)
    if not normalized.get("client_email") or not normalized.get("private_key"):
        msg = "Missing client_email/private_key in service account JSON."
        raise DriveConfigurationError(msg)
    return normalized


class DriveServiceFactory:
    """Builds a fresh Drive v3 client per call.

    Credentials are loaded once and shared; each client gets its own
    AuthorizedHttp over its own httplib2.Http with a socket timeout, so
    worker threads never share a connection.
    """

    def __init__(self, settings: Settings, timeout_seconds: float) -> None:
        self._settings = settings
        self._timeout_seconds = timeout_seconds
        self._credentials: service_account.Credentials | None = None
        self._lock = threading.Lock()

    def credentials(self) -> service_account.Credentials:
        """Service-account credentials, loaded on first use."""
        with self._lock:
            if self._credentials is None:
                info = load_service_account_info(self._settings)
                self._credentials = service_account.Credentials.from_service_account_info(
                    info, scopes=DRIVE_SCOPES
                )
            return self._credentials

    def __call__(self) -> Any:
        http = AuthorizedHttp(
            self.credentials(), http=httplib2.Http(timeout=self._timeout_seconds)
        )
        return build("drive", "v3", http=http, cache_discovery=False)


# =============================================================================
# Folder helpers
# =============================================================================


def normalize_folder_segment(value: str) -> str | None:
    """Make one folder name safe for Drive; None when nothing is left."""
    cleaned = _UNSAFE_SEGMENT_CHARS.sub("-", str(value or "").strip())
    cleaned = _WHITESPACE.sub(" ", cleaned).lstrip(".").strip()
    return cleaned[:MAX_SEGMENT_LENGTH] or None


def escape_query_value(value: str) -> str:
    """Escape a value for a single-quoted Drive query literal."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


# =============================================================================
# Storage
# =============================================================================


class GoogleDriveStorage:
    """FileStorage implementation on Google Drive."""

    def __init__(self, service_factory: Callable[[], Any], parent_folder_id: str) -> None:
        """Initialize the store.

        The factory is called once per blocking operation, so missing
        credentials show up as failed uploads (logged) instead of a failed
        startup.

        Args:
            service_factory: Returns a new Drive v3 client (googleapiclient
                resource) that the caller may use from one thread.
            parent_folder_id: Folder under which all paths are created.
        """
        self._service_factory = service_factory
        self._parent_folder_id = parent_folder_id
        self._cleanups: set[asyncio.Task[None]] = set()

    @classmethod
    def from_settings(cls, settings: Settings) -> "GoogleDriveStorage":
        """Build the store from application settings."""
        parent = settings.drive_university_folder_id or settings.drive_root_folder_id
        factory = DriveServiceFactory(settings, settings.wizard_upload_timeout_seconds)
        return cls(factory, parent)

    async def upload(
        self,
        buffer: bytes,
        file_name: str,
        mime_type: str,
        folder_path: Sequence[str],
    ) -> StoredFile:
        """Upload bytes under a nested folder path and share it by link.

        Cancelling the await (e.g. a caller timeout) cannot stop the worker
        thread. If that thread still creates the file, the file is deleted
        once it finishes.

        Args:
            buffer: File content.
            file_name: Name of the created file.
            mime_type: Content type of the file.
            folder_path: Folder segments below the parent folder.

        Returns:
            StoredFile with the Drive file id and its web view link.
        """
        work = asyncio.ensure_future(
            asyncio.to_thread(
                self._upload_sync, buffer, file_name, mime_type, list(folder_path)
            )
        )
        try:
            return await asyncio.shield(work)
        except asyncio.CancelledError:
            cleanup = asyncio.ensure_future(self._discard_late_upload(work))
            self._cleanups.add(cleanup)
            cleanup.add_done_callback(self._cleanups.discard)
            raise

    async def download(self, external_id: str) -> bytes:
        """Download a stored file's content."""
        return await asyncio.to_thread(self._download_sync, external_id)

    async def drain(self) -> None:
        """Wait for pending deletions of abandoned uploads."""
        if self._cleanups:
            await asyncio.gather(*self._cleanups, return_exceptions=True)

    async def _discard_late_upload(self, work: "asyncio.Future[StoredFile]") -> None:
        try:
            stored = await work
        except Exception:
            logger.warning("Abandoned upload failed in its worker thread", exc_info=True)
            return
        logger.warning(
            "Deleting upload that finished after cancellation",
            file_id=stored.external_id,
        )
        try:
            await asyncio.to_thread(self._delete_sync, stored.external_id)
        except Exception:
            logger.exception("Failed to delete abandoned upload", file_id=stored.external_id)

    # -------------------------------------------------------------------------
    # Blocking implementation
    # -------------------------------------------------------------------------

    def _drive(self) -> Any:
        if not self._parent_folder_id:
            msg = "Drive folder id is missing. Set DRIVE_UNIVERSITY_FOLDER_ID or DRIVE_ROOT_FOLDER_ID."
            raise DriveConfigurationError(msg)
        return self._service_factory()

    def _upload_sync(
        self,
        buffer: bytes,
        file_name: str,
        mime_type: str,
        folder_path: list[str],
    ) -> StoredFile:
        drive = self._drive()
        folder_id = self._ensure_folder_path(drive, folder_path)

        media = MediaIoBaseUpload(io.BytesIO(buffer), mimetype=mime_type, resumable=False)
        created = drive.files().create(
            body={"name": file_name, "parents": [folder_id]},
            media_body=media,
            fields="id,name,webViewLink",
            supportsAllDrives=True,
        ).execute()
        file_id = created["id"]

        drive.permissions().create(
            fileId=file_id,
            body={"role": "reader", "type": "anyone"},
            supportsAllDrives=True,
        ).execute()

        link = created.get("webViewLink") or f"https://drive.google.com/file/d/{file_id}/view"
        logger.info("Drive upload complete", file_id=file_id, folder_id=folder_id)
        return StoredFile(external_id=file_id, public_link=link)

    def _download_sync(self, external_id: str) -> bytes:
        if not external_id.strip():
            msg = "download requires a file id"
            raise ValueError(msg)
        request = self._drive().files().get_media(
            fileId=external_id.strip(),
            supportsAllDrives=True,
        )
        return request.execute()

    def _delete_sync(self, external_id: str) -> None:
        self._drive().files().delete(fileId=external_id, supportsAllDrives=True).execute()

    def _ensure_folder_path(self, drive: Any, segments: Sequence[str]) -> str:
        current = self._parent_folder_id
        for raw in segments:
            segment = normalize_folder_segment(raw)
            if segment is None:
                continue
            current = self._find_folder(drive, current, segment) or self._create_folder(
                drive, current, segment
            )
        return current

    def _find_folder(self, drive: Any, parent_id: str, name: str) -> str | None:
        query = (
            f"'{escape_query_value(parent_id)}' in parents "
            f"and mimeType = '{FOLDER_MIME}' "
            f"and name = '{escape_query_value(name)}' and trashed = false"
        )
        result = (
            drive.files()
            .list(
                q=query,
                fields="files(id,name)",
                pageSize=5,
                supportsAllDrives=True,
                includeItemsFromAllDrives=True,
            )
            .execute()
        )
        found = result.get("files") or []
        return found[0]["id"] if found else None

    def _create_folder(self, drive: Any, parent_id: str, name: str) -> str:
        created = (
            drive.files()
            .create(
                body={"name": name, "mimeType": FOLDER_MIME, "parents": [parent_id]},
                fields="id,name",
                supportsAllDrives=True,
            )
            .execute()
        )
        folder_id = created.get("id")
        if not folder_id:
            msg = f"Failed to create Drive folder segment: {name}"
            raise RuntimeError(msg)
        logger.info("Drive folder created", folder_id=folder_id, name=name)
        return folder_id
