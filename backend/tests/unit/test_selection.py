"""Tests for multi-select toggle semantics."""

from fanjobo.wizards.selection import SelectionAction, apply_selection, toggle
from fanjobo.wizards.state import WizardKind, WizardSession
from fanjobo.wizards.steps import StepDefinition, ValidatorKind
from fanjobo.wizards.validators import (
    CHOOSE_MESSAGE,
    REQUIRED_MESSAGE,
    SELECT_AT_LEAST_ONE_MESSAGE,
)

DONE = "Save goals"


def _step(required: bool = True) -> StepDefinition:
    return StepDefinition(
        key="goals",
        prompt="?",
        validator=ValidatorKind.MULTI_SELECT,
        options=("Internship", "Job", "Pass courses"),
        aliases={"شغل": "Job"},
        done_marker=DONE,
        required=required,
    )


def _session(selected=None) -> WizardSession:
    answers = {} if selected is None else {"goals": list(selected)}
    return WizardSession(actor_id="actor-1", kind=WizardKind.PROFILE, answers=answers)


class TestToggle:
    """Tests for the toggle helper."""

    def test_adds_missing_option(self):
        """An absent option is appended."""
        assert toggle(["Job"], "Internship") == ["Job", "Internship"]

    def test_removes_present_option(self):
        """A present option is removed."""
        assert toggle(["Job", "Internship"], "Job") == ["Internship"]

    def test_double_toggle_is_identity(self):
        """Toggling the same option twice restores the selection."""
        original = ["Job"]
        assert toggle(toggle(original, "Internship"), "Internship") == original


class TestApplySelection:
    """Tests for apply_selection."""

    def test_toggle_adds_option(self):
        """Choosing an option toggles it on."""
        result = apply_selection(_step(), "Job", _session())
        assert result.action is SelectionAction.TOGGLED
        assert result.selections == ["Job"]

    def test_alias_toggles_option(self):
        """Aliases toggle their option."""
        result = apply_selection(_step(), "شغل", _session(["Job"]))
        assert result.action is SelectionAction.TOGGLED
        assert result.selections == []

    def test_done_with_selection(self):
        """The done marker finishes a non-empty selection."""
        result = apply_selection(_step(), DONE, _session(["Job", "Internship"]))
        assert result.action is SelectionAction.DONE
        assert result.selections == ["Job", "Internship"]

    def test_done_without_selection_is_rejected(self):
        """The done marker with nothing selected is rejected."""
        result = apply_selection(_step(required=False), DONE, _session())
        assert result.action is SelectionAction.REJECTED
        assert result.message == SELECT_AT_LEAST_ONE_MESSAGE

    def test_skip_on_optional_step(self):
        """Skip on an optional step leaves it empty."""
        result = apply_selection(_step(required=False), "Skip", _session(["Job"]))
        assert result.action is SelectionAction.SKIPPED
        assert result.selections == []

    def test_skip_on_required_step_is_rejected(self):
        """Skip on a required step is rejected and keeps the selection."""
        result = apply_selection(_step(), "Skip", _session(["Job"]))
        assert result.action is SelectionAction.REJECTED
        assert result.message == REQUIRED_MESSAGE
        assert result.selections == ["Job"]

    def test_unknown_text_is_rejected(self):
        """Text that is not an option is rejected."""
        result = apply_selection(_step(), "Travel", _session())
        assert result.action is SelectionAction.REJECTED
        assert result.message == CHOOSE_MESSAGE

    def test_session_is_not_mutated(self):
        """apply_selection never writes to the session."""
        session = _session(["Job"])
        apply_selection(_step(), "Internship", session)
        assert session.answers == {"goals": ["Job"]}
