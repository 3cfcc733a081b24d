"""Wizard controller: the engine's single entry point.

handle_event() takes one transport event for one actor and returns a
HandleResult. When handled is False no wizard is active (and the text is
not a wizard start command), so the caller falls through to the plain menu.

State machine (per actor and wizard kind):
    Idle ──start──► Active(0)
    Active(i) ──valid answer──► Active(i+1)
    Active(i) ──toggle / page / invalid / failed upload──► Active(i)
    Active(last) ──confirm──► Idle   (saved, or failed and discarded)
    Active(i) ──cancel──► Idle       (no storage calls)

Every state change is computed on a clone of the session and only stored
once it is complete, so a rejected input never leaves partial changes.
Events for one actor are serialized with a per-actor lock.
"""

import asyncio
from weakref import WeakValueDictionary

import structlog

from fanjobo.wizards.collaborators import NotificationSink, Storage
from fanjobo.wizards.context import ActorContextLoader
from fanjobo.wizards.external import ExternalStepAdapter
from fanjobo.wizards.keyboards import (
    MAIN_MENU_KEYBOARD,
    render_prompt,
    selection_notice,
    step_page,
)
from fanjobo.wizards.normalizer import (
    CANCEL,
    GLOBAL_MENU_TOKENS,
    NEXT_PAGE,
    PREVIOUS_PAGE,
    normalize,
)
from fanjobo.wizards.persistence import CompletionPersister, PersistStatus
from fanjobo.wizards.selection import SelectionAction, apply_selection
from fanjobo.wizards.session_store import SessionStore
from fanjobo.wizards.state import (
    NOT_HANDLED,
    DocumentEvent,
    DocumentRef,
    HandleResult,
    Reply,
    WizardEvent,
    WizardKind,
    WizardSession,
)
from fanjobo.wizards.steps import StepCatalog, StepDefinition, ValidatorKind, WizardCatalog
from fanjobo.wizards.validators import Rejected, validate

logger = structlog.get_logger()

# =============================================================================
# Messages
# =============================================================================

FINISH_OR_CANCEL_MESSAGE = (
    "You are in the middle of {title}. Answer the current question, "
    "or send Cancel to stop."
)
CANCELLED_MESSAGE = "{title} cancelled."
START_HINT = "Send Skip to leave out optional questions, or Cancel to stop."
PROFILE_REQUIRED_MESSAGE = "Complete your profile first, then try again."
PERSIST_FAILED_MESSAGE = "Saving failed. Please start {title} again."
MISSING_ANSWER_MESSAGE = "{label} is missing. Please provide it again."
UNEXPECTED_DOCUMENT_MESSAGE = "A file is not expected here."


class WizardController:
    """Routes events to the actor's active wizard session."""

    def __init__(
        self,
        catalog: StepCatalog,
        sessions: SessionStore,
        *,
        storage: Storage,
        notifier: NotificationSink,
        external: ExternalStepAdapter,
        context_loader: ActorContextLoader | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            catalog: Registered wizards.
            sessions: Session store (injected, one per process).
            storage: Relational storage collaborator.
            notifier: Admin notification collaborator.
            external: Adapter for file-upload steps.
            context_loader: Builds the session context at start; defaults
                to an ActorContextLoader over storage.
        """
        self._catalog = catalog
        self._sessions = sessions
        self._external = external
        self._persister = CompletionPersister(storage, notifier, sessions)
        self._context_loader = context_loader or ActorContextLoader(storage)
        self._locks: WeakValueDictionary[str, asyncio.Lock] = WeakValueDictionary()

    @property
    def sessions(self) -> SessionStore:
        """The session store this controller writes to."""
        return self._sessions

    @property
    def catalog(self) -> StepCatalog:
        """Registered wizards."""
        return self._catalog

    # -------------------------------------------------------------------------
    # Public entry points
    # -------------------------------------------------------------------------

    async def handle_event(
        self,
        actor_id: str,
        event: WizardEvent,
        *,
        display_name: str | None = None,
    ) -> HandleResult:
        """Handle one inbound event.

        Args:
            actor_id: Conversing user.
            event: TextEvent or DocumentEvent.
            display_name: Name reported by the transport (used when the
                user row is created at wizard start).

        Returns:
            HandleResult; handled=False means no wizard took the event.
        """
        async with self._lock_for(actor_id):
            session = self.active_session(actor_id)

            if isinstance(event, DocumentEvent):
                if session is None:
                    return NOT_HANDLED
                return await self._on_document(session, event.document)

            text = normalize(event.text)
            if session is not None:
                return await self._on_text(session, text)

            wizard = self._catalog.for_start_command(text)
            if wizard is None:
                return NOT_HANDLED
            return await self._start(actor_id, wizard, display_name)

    async def start(
        self,
        actor_id: str,
        kind: WizardKind,
        *,
        display_name: str | None = None,
    ) -> HandleResult:
        """Start a wizard directly (without a menu token)."""
        async with self._lock_for(actor_id):
            return await self._start(actor_id, self._catalog.get(kind), display_name)

    async def cancel(self, actor_id: str, kind: WizardKind) -> bool:
        """Drop a session from outside the chat (admin force-cancel).

        Returns:
            True if a session was removed.
        """
        async with self._lock_for(actor_id):
            removed = self._sessions.delete(actor_id, kind)
        if removed:
            logger.info("Wizard force-cancelled", actor_id=actor_id, wizard_kind=kind.value)
        return removed

    def active_session(self, actor_id: str) -> WizardSession | None:
        """First active session of the actor in dispatch order."""
        kinds = self._sessions.active_kinds(actor_id)
        return self._sessions.get(actor_id, kinds[0]) if kinds else None

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def _lock_for(self, actor_id: str) -> asyncio.Lock:
        lock = self._locks.get(actor_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[actor_id] = lock
        return lock

    async def _start(
        self,
        actor_id: str,
        wizard: WizardCatalog,
        display_name: str | None,
    ) -> HandleResult:
        active = self.active_session(actor_id)
        if active is not None:
            # One wizard at a time per actor, whatever its kind
            return self._busy(active)

        context = await self._context_loader.load(actor_id, display_name)
        if wizard.requires_profile and not context.get("profile_complete"):
            return HandleResult(
                handled=True,
                reply=Reply(PROFILE_REQUIRED_MESSAGE, MAIN_MENU_KEYBOARD),
            )

        session = WizardSession(actor_id=actor_id, kind=wizard.kind, context=context)
        self._sessions.set(actor_id, wizard.kind, session)
        logger.info("Wizard started", actor_id=actor_id, wizard_kind=wizard.kind.value)
        return HandleResult(
            handled=True,
            reply=render_prompt(wizard, session, notice=f"{wizard.intro}\n{START_HINT}"),
        )

    def _cancel(self, wizard: WizardCatalog, session: WizardSession) -> HandleResult:
        self._sessions.delete(session.actor_id, session.kind)
        logger.info(
            "Wizard cancelled",
            actor_id=session.actor_id,
            wizard_kind=session.kind.value,
            step_index=session.step_index,
        )
        return HandleResult(
            handled=True,
            reply=Reply(CANCELLED_MESSAGE.format(title=wizard.title), MAIN_MENU_KEYBOARD),
        )

    def _busy(self, session: WizardSession) -> HandleResult:
        wizard = self._catalog.get(session.kind)
        notice = FINISH_OR_CANCEL_MESSAGE.format(title=wizard.title)
        return self._reprompt(wizard, session, notice)

    # -------------------------------------------------------------------------
    # Step handling
    # -------------------------------------------------------------------------

    async def _on_text(self, session: WizardSession, text: str) -> HandleResult:
        wizard = self._catalog.get(session.kind)

        if text == CANCEL:
            return self._cancel(wizard, session)
        if text in GLOBAL_MENU_TOKENS:
            return self._busy(session)

        step = wizard.step_at(session.step_index)

        if step.page_size and text in (PREVIOUS_PAGE, NEXT_PAGE):
            return self._turn_page(wizard, session, step, forward=text == NEXT_PAGE)

        if step.validator is ValidatorKind.MULTI_SELECT:
            return self._on_selection(wizard, session, step, text)

        result = validate(step, text, session)
        if isinstance(result, Rejected):
            return self._reprompt(wizard, session, result.message)

        if step.validator is ValidatorKind.CONFIRM:
            return await self._complete(wizard, session)

        working = session.clone()
        self._accept(wizard, working, step, result.value)
        return self._advance(wizard, working)

    def _turn_page(
        self,
        wizard: WizardCatalog,
        session: WizardSession,
        step: StepDefinition,
        *,
        forward: bool,
    ) -> HandleResult:
        page = step_page(step, session)
        available = page.has_next if forward else page.has_previous
        if not available:
            return self._reprompt(wizard, session)

        working = session.clone()
        working.set_page(step.key, page.current_page + (1 if forward else -1))
        self._sessions.set(working.actor_id, working.kind, working)
        return HandleResult(handled=True, reply=render_prompt(wizard, working))

    def _on_selection(
        self,
        wizard: WizardCatalog,
        session: WizardSession,
        step: StepDefinition,
        text: str,
    ) -> HandleResult:
        outcome = apply_selection(step, text, session)

        if outcome.action is SelectionAction.REJECTED:
            return self._reprompt(wizard, session, outcome.message)

        working = session.clone()
        if outcome.action is SelectionAction.TOGGLED:
            working.answers[step.key] = outcome.selections
            self._sessions.set(working.actor_id, working.kind, working)
            return HandleResult(
                handled=True,
                reply=render_prompt(
                    wizard, working, notice=selection_notice(outcome.selections)
                ),
            )

        self._accept(wizard, working, step, outcome.selections)
        return self._advance(wizard, working)

    async def _on_document(
        self, session: WizardSession, document: DocumentRef
    ) -> HandleResult:
        wizard = self._catalog.get(session.kind)
        step = wizard.step_at(session.step_index)

        if step.validator is not ValidatorKind.FILE_ONLY:
            return self._reprompt(wizard, session, UNEXPECTED_DOCUMENT_MESSAGE)

        if wizard.upload_folder is not None:
            folder_path = wizard.upload_folder(session)
        else:
            folder_path = [session.kind.value, f"user-{session.actor_id}"]

        result = await self._external.handle(session, document, folder_path)
        if isinstance(result, Rejected):
            return self._reprompt(wizard, session, result.message)

        working = session.clone()
        self._accept(wizard, working, step, result.value)
        return self._advance(wizard, working)

    async def _complete(self, wizard: WizardCatalog, session: WizardSession) -> HandleResult:
        result = await self._persister.persist(wizard, session)

        if result.status is PersistStatus.SAVED:
            return HandleResult(
                handled=True,
                reply=Reply(wizard.success_message, MAIN_MENU_KEYBOARD),
            )

        if result.status is PersistStatus.FAILED:
            return HandleResult(
                handled=True,
                reply=Reply(
                    PERSIST_FAILED_MESSAGE.format(title=wizard.title),
                    MAIN_MENU_KEYBOARD,
                ),
            )

        working = session.clone()
        index = wizard.index_of(result.rewind_to or "")
        missing = wizard.step_at(index)
        working.answers.pop(missing.key, None)
        working.step_index = index
        self._sessions.set(working.actor_id, working.kind, working)
        return HandleResult(
            handled=True,
            reply=render_prompt(
                wizard,
                working,
                notice=MISSING_ANSWER_MESSAGE.format(label=missing.display_label),
            ),
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _accept(
        self,
        wizard: WizardCatalog,
        working: WizardSession,
        step: StepDefinition,
        value: object,
    ) -> None:
        working.answers[step.key] = value
        for dependent in wizard.dependents_of(step.key):
            working.set_page(dependent.key, 0)

    def _advance(self, wizard: WizardCatalog, working: WizardSession) -> HandleResult:
        working.step_index = min(working.step_index + 1, len(wizard) - 1)
        self._sessions.set(working.actor_id, working.kind, working)
        return HandleResult(handled=True, reply=render_prompt(wizard, working))

    def _reprompt(
        self,
        wizard: WizardCatalog,
        session: WizardSession,
        notice: str | None = None,
    ) -> HandleResult:
        return HandleResult(handled=True, reply=render_prompt(wizard, session, notice=notice))
