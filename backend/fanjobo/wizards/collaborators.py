"""Interfaces of the services the wizard engine talks to.

The engine never imports a database driver, the Drive client or the chat
library directly. Production wiring passes SqlStorage, GoogleDriveStorage,
AdminNotificationSink, ContentRepository and the Telegram document fetcher;
tests pass fakes.

Type Notes:
    Rows are plain dict[str, Any]. The storage layer already validates
    columns against the ORM tables, so duplicating per-table schemas here
    would only add coupling.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from fanjobo.wizards.state import DocumentRef, WizardSession


class Storage(Protocol):
    """Relational storage: parameterized single-table writes and reads."""

    async def insert(self, table: str, values: Mapping[str, Any]) -> dict[str, Any]:
        """Insert one row and return it (including generated id)."""
        ...

    async def update(
        self,
        table: str,
        values: Mapping[str, Any],
        where: Mapping[str, Any],
    ) -> dict[str, Any] | None:
        """Update rows matching where; return the first updated row."""
        ...

    async def upsert(
        self,
        table: str,
        values: Mapping[str, Any],
        conflict_keys: Sequence[str],
    ) -> dict[str, Any]:
        """Insert or update on conflict_keys; return the resulting row."""
        ...

    async def fetch_one(
        self,
        table: str,
        where: Mapping[str, Any],
    ) -> dict[str, Any] | None:
        """Return the first row matching where, or None."""
        ...


@dataclass(frozen=True)
class StoredFile:
    """Reference returned by the file store after an upload.

    Attributes:
        external_id: File id inside the store.
        public_link: Shareable link to the file.
    """

    external_id: str
    public_link: str


class FileStorage(Protocol):
    """External file store (upload/download by buffer)."""

    async def upload(
        self,
        buffer: bytes,
        file_name: str,
        mime_type: str,
        folder_path: Sequence[str],
    ) -> StoredFile:
        """Upload bytes under a nested folder path."""
        ...

    async def download(self, external_id: str) -> bytes:
        """Download a stored file."""
        ...


class DocumentFetcher(Protocol):
    """Transport-side download of a document the actor sent."""

    async def fetch(self, document: "DocumentRef") -> bytes:
        """Return the document's bytes."""
        ...


class NotificationSink(Protocol):
    """Admin notification inbox."""

    async def create(
        self,
        type: str,
        title: str,
        message: str,
        payload: Mapping[str, Any],
    ) -> None:
        """Record a notification for moderators."""
        ...


class CompletionWriter(Protocol):
    """Domain write performed when a wizard is confirmed."""

    async def __call__(
        self,
        session: "WizardSession",
        storage: Storage,
        notifier: NotificationSink,
    ) -> None:
        """Persist the session's answers; raise on any failure."""
        ...


class ContentCatalog(Protocol):
    """Read-only listings of published content for the plain menu."""

    async def list_university(
        self,
        kind: str,
        major: str | None,
        term: str | None,
        limit: int,
    ) -> list[dict[str, Any]]:
        """Newest university items of a section for a major and term.

        Items with no major (or no term) apply to everyone.
        """
        ...

    async def list_industry(self, limit: int) -> list[dict[str, Any]]:
        """Newest industry opportunities."""
        ...

    async def list_roadmaps(self, major: str | None, limit: int) -> list[dict[str, Any]]:
        """Newest roadmaps for a major (or for every major)."""
        ...
