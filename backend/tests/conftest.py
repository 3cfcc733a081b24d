"""Shared fixtures for wizard engine tests.

The engine talks to its collaborators through small interfaces, so the
tests run against in-memory fakes: no database, no Drive, no Telegram.
"""

import asyncio
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any
from unittest.mock import patch

import pytest

from fanjobo.wizards.catalog import build_default_catalog
from fanjobo.wizards.collaborators import StoredFile
from fanjobo.wizards.controller import WizardController
from fanjobo.wizards.external import ExternalStepAdapter
from fanjobo.wizards.session_store import SessionStore, reset_session_store
from fanjobo.wizards.state import (
    DocumentEvent,
    DocumentRef,
    HandleResult,
    TextEvent,
)

PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\n%%EOF"

# =============================================================================
# Fakes
# =============================================================================


class FakeStorage:
    """In-memory Storage; records every write.

    Attributes:
        tables: Table name -> list of row dicts.
        writes: (operation, table, values) for every insert/update/upsert.
        fail_tables: Writes to these tables raise RuntimeError.
    """

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.writes: list[tuple[str, str, dict[str, Any]]] = []
        self.fail_tables: set[str] = set()
        self._next_id = 1

    def rows(self, table: str) -> list[dict[str, Any]]:
        return self.tables.setdefault(table, [])

    def _check(self, table: str) -> None:
        if table in self.fail_tables:
            msg = f"{table} is unavailable"
            raise RuntimeError(msg)

    async def insert(self, table: str, values: Mapping[str, Any]) -> dict[str, Any]:
        self._check(table)
        row = {"id": self._next_id, **values}
        self._next_id += 1
        self.rows(table).append(row)
        self.writes.append(("insert", table, dict(values)))
        return dict(row)

    async def update(
        self,
        table: str,
        values: Mapping[str, Any],
        where: Mapping[str, Any],
    ) -> dict[str, Any] | None:
        self._check(table)
        self.writes.append(("update", table, dict(values)))
        updated = None
        for row in self.rows(table):
            if all(row.get(k) == v for k, v in where.items()):
                row.update(values)
                updated = updated or dict(row)
        return updated

    async def upsert(
        self,
        table: str,
        values: Mapping[str, Any],
        conflict_keys: Sequence[str],
    ) -> dict[str, Any]:
        self._check(table)
        self.writes.append(("upsert", table, dict(values)))
        for row in self.rows(table):
            if all(row.get(k) == values.get(k) for k in conflict_keys):
                row.update(values)
                return dict(row)
        row = {"id": self._next_id, **values}
        self._next_id += 1
        self.rows(table).append(row)
        return dict(row)

    async def fetch_one(
        self,
        table: str,
        where: Mapping[str, Any],
    ) -> dict[str, Any] | None:
        for row in self.rows(table):
            if all(row.get(k) == v for k, v in where.items()):
                return dict(row)
        return None


class FakeFileStorage:
    """In-memory FileStorage.

    Attributes:
        uploads: (file_name, mime_type, folder_path, size) per upload.
        error: Raised by upload() when set.
        delay: Seconds upload() sleeps before storing.
    """

    def __init__(self) -> None:
        self.uploads: list[tuple[str, str, list[str], int]] = []
        self.error: Exception | None = None
        self.delay: float = 0.0

    async def upload(
        self,
        buffer: bytes,
        file_name: str,
        mime_type: str,
        folder_path: Sequence[str],
    ) -> StoredFile:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        self.uploads.append((file_name, mime_type, list(folder_path), len(buffer)))
        file_id = f"drive-{len(self.uploads)}"
        return StoredFile(
            external_id=file_id,
            public_link=f"https://drive.example/{file_id}",
        )

    async def download(self, external_id: str) -> bytes:
        return PDF_BYTES


class FakeFetcher:
    """DocumentFetcher returning fixed bytes and counting calls."""

    def __init__(self, content: bytes = PDF_BYTES) -> None:
        self.content = content
        self.calls = 0

    async def fetch(self, document: DocumentRef) -> bytes:
        self.calls += 1
        return self.content


class FakeContentCatalog:
    """ContentCatalog over in-memory rows, filtered like the SQL queries.

    Attributes:
        items: Content rows; the newest item is last.
        calls: (method, args) per listing call.
    """

    def __init__(self) -> None:
        self.items: list[dict[str, Any]] = []
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def add(
        self, title: str, *, type: str = "university", kind: str = "course", **fields: Any
    ) -> None:
        self.items.append(
            {"title": title, "type": type, "kind": kind, "is_published": True, **fields}
        )

    def _newest(self, rows: list[dict[str, Any]], limit: int) -> list[dict[str, Any]]:
        return list(reversed(rows))[:limit]

    async def list_university(
        self,
        kind: str,
        major: str | None,
        term: str | None,
        limit: int,
    ) -> list[dict[str, Any]]:
        self.calls.append(("list_university", (kind, major, term, limit)))
        rows = [
            row
            for row in self.items
            if row["type"] == "university"
            and row["kind"] == kind
            and row["is_published"]
            and row.get("major") in (major, None)
            and row.get("term") in (term, None)
        ]
        return self._newest(rows, limit)

    async def list_industry(self, limit: int) -> list[dict[str, Any]]:
        self.calls.append(("list_industry", (limit,)))
        rows = [row for row in self.items if row["type"] == "industry" and row["is_published"]]
        return self._newest(rows, limit)

    async def list_roadmaps(self, major: str | None, limit: int) -> list[dict[str, Any]]:
        self.calls.append(("list_roadmaps", (major, limit)))
        rows = [
            row
            for row in self.items
            if row["kind"] == "roadmap"
            and row["is_published"]
            and row.get("major") in (major, None)
        ]
        return self._newest(rows, limit)


class FakeNotifier:
    """NotificationSink that records notifications."""

    def __init__(self) -> None:
        self.created: list[dict[str, Any]] = []

    async def create(
        self,
        type: str,
        title: str,
        message: str,
        payload: Mapping[str, Any],
    ) -> None:
        self.created.append(
            {"type": type, "title": title, "message": message, "payload": dict(payload)}
        )


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _reset_session_store_singleton():
    """Keep the process-wide session store empty between tests."""
    reset_session_store()
    yield
    reset_session_store()


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def file_storage() -> FakeFileStorage:
    return FakeFileStorage()


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def contents() -> FakeContentCatalog:
    return FakeContentCatalog()


@pytest.fixture
def sessions() -> SessionStore:
    return SessionStore()


@pytest.fixture
def external(file_storage: FakeFileStorage, fetcher: FakeFetcher) -> ExternalStepAdapter:
    return ExternalStepAdapter(file_storage, fetcher, timeout_seconds=1.0)


@pytest.fixture
def controller(
    storage: FakeStorage,
    notifier: FakeNotifier,
    sessions: SessionStore,
    external: ExternalStepAdapter,
) -> WizardController:
    """Controller over the default catalog and in-memory fakes."""
    return WizardController(
        build_default_catalog(),
        sessions,
        storage=storage,
        notifier=notifier,
        external=external,
    )


@pytest.fixture
def build_controller() -> Callable[[], tuple[WizardController, SessionStore, FakeStorage]]:
    """Factory for a fresh controller over fresh fakes.

    Property tests run many conversations inside one test function, so
    each conversation needs its own store and storage.
    """

    def _build() -> tuple[WizardController, SessionStore, FakeStorage]:
        storage = FakeStorage()
        sessions = SessionStore()
        controller = WizardController(
            build_default_catalog(),
            sessions,
            storage=storage,
            notifier=FakeNotifier(),
            external=ExternalStepAdapter(FakeFileStorage(), FakeFetcher(), timeout_seconds=1.0),
        )
        return controller, sessions, storage

    return _build


@pytest.fixture
def pdf_magic():
    """Make magic-byte detection report a PDF."""
    with patch(
        "fanjobo.core.file_validation.magic.from_buffer",
        return_value="application/pdf",
    ) as mock_magic:
        yield mock_magic


@pytest.fixture
def profiled_actor(storage: FakeStorage) -> str:
    """Actor whose user and completed profile already exist."""
    storage.rows("users").append(
        {
            "id": 500,
            "full_name": "Sara Ahmadi",
            "phone_or_email": "sara@example.com",
            "telegram_id": "actor-profiled",
        }
    )
    storage.rows("user_profiles").append(
        {
            "id": 501,
            "user_id": 500,
            "major": "Computer Engineering - Software",
            "term": "5",
        }
    )
    return "actor-profiled"


@pytest.fixture
def send(controller: WizardController) -> Callable[[str, str], Awaitable[HandleResult]]:
    """Deliver one text event and return the HandleResult."""

    async def _send(actor_id: str, text: str) -> HandleResult:
        return await controller.handle_event(actor_id, TextEvent(text))

    return _send


@pytest.fixture
def send_document(
    controller: WizardController,
) -> Callable[..., Awaitable[HandleResult]]:
    """Deliver one document event and return the HandleResult."""

    async def _send(
        actor_id: str,
        *,
        file_name: str = "notes.pdf",
        mime_type: str = "application/pdf",
        file_size: int | None = len(PDF_BYTES),
    ) -> HandleResult:
        document = DocumentRef(
            file_id="tg-file-1",
            file_name=file_name,
            mime_type=mime_type,
            file_size=file_size,
        )
        return await controller.handle_event(actor_id, DocumentEvent(document))

    return _send
