"""Completion persister: the terminal confirm step.

Runs the catalog's guard and writer, then clears the session. A failed
write is fatal for the session: it is deleted anyway and the actor starts
over. There is no retry and no partial-answer recovery.
"""

from dataclasses import dataclass
from enum import Enum

import structlog

from fanjobo.wizards.collaborators import NotificationSink, Storage
from fanjobo.wizards.session_store import SessionStore
from fanjobo.wizards.state import WizardSession
from fanjobo.wizards.steps import WizardCatalog

logger = structlog.get_logger()


class PersistStatus(str, Enum):
    """Outcome of a completion attempt."""

    SAVED = "saved"
    """Writer succeeded; session deleted."""

    BLOCKED = "blocked"
    """Guard refused; nothing written, session kept."""

    FAILED = "failed"
    """Writer raised; session deleted."""


@dataclass(frozen=True)
class PersistResult:
    """Completion outcome.

    Attributes:
        status: What happened.
        rewind_to: Step key the guard asked to go back to (BLOCKED only).
    """

    status: PersistStatus
    rewind_to: str | None = None


class CompletionPersister:
    """Performs the final write for a confirmed wizard."""

    def __init__(
        self,
        storage: Storage,
        notifier: NotificationSink,
        sessions: SessionStore,
    ) -> None:
        self._storage = storage
        self._notifier = notifier
        self._sessions = sessions

    async def persist(self, catalog: WizardCatalog, session: WizardSession) -> PersistResult:
        """Write a confirmed session.

        Args:
            catalog: The session's wizard catalog.
            session: Session at its confirm step.

        Returns:
            PersistResult. Never raises for writer failures.
        """
        log = logger.bind(actor_id=session.actor_id, wizard_kind=session.kind.value)

        if catalog.guard is not None:
            missing = catalog.guard(session)
            if missing is not None:
                log.warning("Completion blocked", missing_step=missing)
                return PersistResult(PersistStatus.BLOCKED, rewind_to=missing)

        try:
            await catalog.writer(session, self._storage, self._notifier)
        except Exception:
            log.exception("Wizard persistence failed")
            self._sessions.delete(session.actor_id, session.kind)
            return PersistResult(PersistStatus.FAILED)

        self._sessions.delete(session.actor_id, session.kind)
        log.info("Wizard completed")
        return PersistResult(PersistStatus.SAVED)
