"""In-memory wizard session store.

Sessions are keyed by (actor_id, wizard kind) and live until they are
deleted, or until they have not been written for the TTL. Expired entries
are dropped lazily on read and in bulk by cleanup_expired().

Note: Safe for async/await usage (single-threaded event loop) but not for
multi-threaded access. Sessions are not persisted across restarts.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from fanjobo.core.config import settings
from fanjobo.wizards.state import DISPATCH_ORDER, WizardKind, WizardSession

# Default TTL for idle wizard sessions (60 minutes)
DEFAULT_SESSION_TTL_MINUTES = 60

SessionKey = tuple[str, WizardKind]


@dataclass
class SessionEntry:
    """A stored session and its expiry.

    Attributes:
        session: The wizard session.
        expires_at: When the session is dropped if not written again.
    """

    session: WizardSession
    expires_at: datetime


class SessionStore:
    """Map from (actor_id, kind) to the active WizardSession."""

    def __init__(self, ttl_minutes: int = DEFAULT_SESSION_TTL_MINUTES) -> None:
        """Initialize the session store.

        Args:
            ttl_minutes: Idle time after which a session expires.
        """
        self._entries: dict[SessionKey, SessionEntry] = {}
        self._ttl_minutes = ttl_minutes

    def get(self, actor_id: str, kind: WizardKind) -> WizardSession | None:
        """Get the active session, if any.

        Args:
            actor_id: Conversing user.
            kind: Wizard kind.

        Returns:
            The session, or None when absent or expired.
        """
        key = (actor_id, kind)
        entry = self._entries.get(key)
        if entry is None:
            return None

        if datetime.now(UTC) > entry.expires_at:
            del self._entries[key]
            return None

        return entry.session

    def set(self, actor_id: str, kind: WizardKind, session: WizardSession) -> None:
        """Store (or replace) a session and restart its TTL."""
        self._entries[(actor_id, kind)] = SessionEntry(
            session=session,
            expires_at=datetime.now(UTC) + timedelta(minutes=self._ttl_minutes),
        )

    def delete(self, actor_id: str, kind: WizardKind) -> bool:
        """Remove a session.

        Returns:
            True if a session was removed.
        """
        return self._entries.pop((actor_id, kind), None) is not None

    def active_kinds(self, actor_id: str) -> list[WizardKind]:
        """Kinds with a live session for the actor, in dispatch order."""
        return [kind for kind in DISPATCH_ORDER if self.get(actor_id, kind) is not None]

    def entries(self) -> list[SessionEntry]:
        """All live entries, oldest expiry first."""
        self.cleanup_expired()
        return sorted(self._entries.values(), key=lambda entry: entry.expires_at)

    def cleanup_expired(self) -> int:
        """Remove all expired sessions.

        Returns:
            Number of sessions removed.
        """
        now = datetime.now(UTC)
        expired = [key for key, entry in self._entries.items() if now > entry.expires_at]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def clear(self) -> None:
        """Clear all sessions (for testing)."""
        self._entries.clear()


# Singleton instance for the application
_session_store: SessionStore | None = None


def get_session_store() -> SessionStore:
    """Get the singleton session store instance.

    Returns:
        The SessionStore singleton.
    """
    global _session_store
    if _session_store is None:
        _session_store = SessionStore(ttl_minutes=settings.wizard_session_ttl_minutes)
    return _session_store


def reset_session_store() -> None:
    """Reset the session store singleton (for testing)."""
    global _session_store
    if _session_store is not None:
        _session_store.clear()
    _session_store = None
