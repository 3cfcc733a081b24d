"""Admin API schemas for bot events and wizard sessions."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from fanjobo.wizards.session_store import SessionEntry
from fanjobo.wizards.state import Reply, WizardKind


class TextEventRequest(BaseModel):
    """Text message delivered on behalf of a chat actor.

    Attributes:
        actor_id: Chat actor identifier.
        text: Message text or button label.
        display_name: Optional name used if the user row is created.
    """

    model_config = ConfigDict(extra="forbid")

    actor_id: str = Field(min_length=1, max_length=64)
    text: str = Field(max_length=4096)
    display_name: str | None = Field(default=None, max_length=255)


class ReplyResponse(BaseModel):
    """Outbound message with its reply keyboard."""

    text: str
    keyboard: list[list[str]] | None = None

    @classmethod
    def from_reply(cls, reply: Reply) -> "ReplyResponse":
        """Build from an engine Reply."""
        return cls(text=reply.text, keyboard=reply.keyboard)


class EventResult(BaseModel):
    """Outcome of a delivered event.

    Attributes:
        handled: True when a wizard consumed the event (False means the
            plain menu answered).
        reply: Message for the actor.
    """

    handled: bool
    reply: ReplyResponse


class WizardSessionSummary(BaseModel):
    """One active wizard session.

    Attributes:
        actor_id: Chat actor identifier.
        kind: Wizard kind.
        step_index: Current step (0-indexed).
        step_key: Key of the current step.
        answers: Answers collected so far.
        expires_at: When the session expires if left idle.
    """

    actor_id: str
    kind: WizardKind
    step_index: int
    step_key: str
    answers: dict[str, Any]
    expires_at: datetime

    @classmethod
    def from_entry(cls, entry: SessionEntry, step_key: str) -> "WizardSessionSummary":
        """Build from a session store entry."""
        session = entry.session
        return cls(
            actor_id=session.actor_id,
            kind=session.kind,
            step_index=session.step_index,
            step_key=step_key,
            answers=dict(session.answers),
            expires_at=entry.expires_at,
        )
