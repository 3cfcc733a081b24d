"""Multi-select toggle semantics.

A MULTI_SELECT step stays on the same cursor position while the actor
toggles options. The current selection lives in answers[step.key] as an
ordered list; the done marker advances only when it is non-empty.
"""

from dataclasses import dataclass, field
from enum import Enum

from fanjobo.wizards.state import WizardSession
from fanjobo.wizards.steps import StepDefinition
from fanjobo.wizards.validators import (
    CHOOSE_MESSAGE,
    SELECT_AT_LEAST_ONE_MESSAGE,
    Rejected,
    check_presence,
)


class SelectionAction(str, Enum):
    """What one multi-select input did."""

    TOGGLED = "toggled"
    DONE = "done"
    SKIPPED = "skipped"
    REJECTED = "rejected"


@dataclass(frozen=True)
class SelectionResult:
    """Outcome of one multi-select input.

    Attributes:
        action: What happened.
        selections: Selection after the input (unchanged on REJECTED).
        message: Rejection message for REJECTED.
    """

    action: SelectionAction
    selections: list[str] = field(default_factory=list)
    message: str | None = None


def toggle(selections: list[str], option: str) -> list[str]:
    """Add the option if absent, remove it if present.

    Toggling the same option twice returns the original list.
    """
    if option in selections:
        return [item for item in selections if item != option]
    return [*selections, option]


def current_selections(step: StepDefinition, session: WizardSession) -> list[str]:
    """Selection recorded so far for a multi-select step."""
    return list(session.answers.get(step.key) or [])


def apply_selection(
    step: StepDefinition, text: str, session: WizardSession
) -> SelectionResult:
    """Interpret one input on a multi-select step.

    Order of checks: done marker, option toggle, then the shared skip and
    required rules, then "choose from the buttons".

    Args:
        step: The MULTI_SELECT step.
        text: Normalized input.
        session: Current session (not mutated).

    Returns:
        SelectionResult describing the new selection.
    """
    selected = current_selections(step, session)

    if step.done_marker is not None and text == step.done_marker:
        if not selected:
            return SelectionResult(
                SelectionAction.REJECTED, selected, SELECT_AT_LEAST_ONE_MESSAGE
            )
        return SelectionResult(SelectionAction.DONE, selected)

    option = step.match_option(text, session.answers)
    if option is not None:
        return SelectionResult(SelectionAction.TOGGLED, toggle(selected, option))

    presence = check_presence(step, text)
    if isinstance(presence, Rejected):
        return SelectionResult(SelectionAction.REJECTED, selected, presence.message)
    if presence is not None:
        return SelectionResult(SelectionAction.SKIPPED, [])

    return SelectionResult(SelectionAction.REJECTED, selected, CHOOSE_MESSAGE)
