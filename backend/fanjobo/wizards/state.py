"""Wizard session and event types.

A WizardSession is the per-(actor, wizard kind) dialogue state. Events are
what the transport delivers (a text message or a document), and a
HandleResult is what the engine gives back to the transport.

Architecture:
    transport event ──► normalize ──► WizardController.handle_event
                                           │
              ┌────────────────────────────┼──────────────────────┐
              ▼                            ▼                      ▼
        validate / toggle /         ExternalStepAdapter    CompletionPersister
        paginate (same step)        (file steps)           (confirm step)
              │                            │                      │
              └───────────► SessionStore.set / delete ◄───────────┘
"""

import copy
import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any


class WizardKind(str, Enum):
    """The six guided dialogues."""

    PROFILE = "profile"
    """Academic profile completion."""

    SUBMISSION = "submission"
    """University content submission with a PDF upload."""

    ONBOARDING = "onboarding"
    """Personal path planner setup."""

    GOAL = "goal"
    """Add a planner goal."""

    TASK = "task"
    """Add a planner task."""

    ARTIFACT = "artifact"
    """Add a planner artifact."""


PATH_KINDS = (
    WizardKind.ONBOARDING,
    WizardKind.GOAL,
    WizardKind.TASK,
    WizardKind.ARTIFACT,
)

# Order in which active sessions are consulted for an incoming event
DISPATCH_ORDER = (WizardKind.SUBMISSION, *PATH_KINDS, WizardKind.PROFILE)


def freeze_context(values: Mapping[str, Any]) -> Mapping[str, Any]:
    """Return a read-only snapshot of actor context values."""
    return MappingProxyType(dict(values))


@dataclass
class WizardSession:
    """Dialogue state for one actor in one wizard.

    Attributes:
        actor_id: Opaque identifier of the conversing user.
        kind: Which wizard this session belongs to.
        context: Read-only actor snapshot taken at start (user_id, major,
            term, profile_complete, ...). Never mutated.
        step_index: Cursor into the wizard's step list.
        answers: Step key -> accepted value. Multi-select steps hold the
            ordered list of currently selected options.
        ui_state: View state that is never persisted, e.g.
            {"page": {"major": 1}}.
    """

    actor_id: str
    kind: WizardKind
    context: Mapping[str, Any] = field(default_factory=lambda: freeze_context({}))
    step_index: int = 0
    answers: dict[str, Any] = field(default_factory=dict)
    ui_state: dict[str, Any] = field(default_factory=dict)

    def clone(self) -> "WizardSession":
        """Copy for speculative mutation; context is shared (read-only)."""
        return dataclasses.replace(
            self,
            answers=copy.deepcopy(self.answers),
            ui_state=copy.deepcopy(self.ui_state),
        )

    def page_for(self, step_key: str) -> int:
        """Current keyboard page of a paged step (0 when never paged)."""
        return int(self.ui_state.get("page", {}).get(step_key, 0))

    def set_page(self, step_key: str, page: int) -> None:
        """Record the keyboard page of a paged step."""
        self.ui_state.setdefault("page", {})[step_key] = page


@dataclass(frozen=True)
class DocumentRef:
    """A document delivered by the transport.

    Attributes:
        file_id: Transport-side identifier used to download the bytes.
        file_name: Name as sent by the client.
        mime_type: MIME type as declared by the client.
        file_size: Declared size in bytes, when the transport knows it.
        content: Inline bytes, when the transport already has them
            (e.g. a multipart upload to the admin API).
    """

    file_id: str
    file_name: str | None = None
    mime_type: str | None = None
    file_size: int | None = None
    content: bytes | None = field(default=None, repr=False)


@dataclass(frozen=True)
class TextEvent:
    """A text message or keyboard button press."""

    text: str


@dataclass(frozen=True)
class DocumentEvent:
    """A document (file) message."""

    document: DocumentRef


WizardEvent = TextEvent | DocumentEvent


@dataclass(frozen=True)
class Reply:
    """Outbound message: text plus an optional reply keyboard.

    Attributes:
        text: Message body.
        keyboard: Button rows, or None to leave the current keyboard.
    """

    text: str
    keyboard: list[list[str]] | None = None


@dataclass(frozen=True)
class HandleResult:
    """Outcome of WizardController.handle_event.

    Attributes:
        handled: True when a wizard consumed the event; other dispatchers
            must then skip their own handling.
        reply: Message for the actor when handled.
    """

    handled: bool
    reply: Reply | None = None


NOT_HANDLED = HandleResult(handled=False)
