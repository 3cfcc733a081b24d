"""Tests for the declarative step catalog."""

import pytest

from fanjobo.models import (
    ContentSubmission,
    PathArtifact,
    PathGoal,
    PathTask,
    User,
    UserProfile,
)
from fanjobo.wizards.catalog import build_default_catalog
from fanjobo.wizards.normalizer import (
    GOAL_COMMAND,
    GLOBAL_MENU_TOKENS,
    PROFILE_COMMAND,
    START,
    normalize,
)
from fanjobo.wizards.state import WizardKind
from fanjobo.wizards.steps import (
    StepCatalog,
    StepDefinition,
    ValidatorKind,
    WizardCatalog,
    format_answer,
)


async def _noop_writer(session, storage, notifier) -> None:
    return None


def _catalog(kind=WizardKind.GOAL, command="Add goal", steps=None) -> WizardCatalog:
    return WizardCatalog(
        kind=kind,
        title="Test",
        start_command=command,
        intro="Intro",
        steps=steps
        or (
            StepDefinition(key="title", prompt="?", validator=ValidatorKind.FREE_TEXT),
            StepDefinition(key="confirm", prompt="?", validator=ValidatorKind.CONFIRM),
        ),
        writer=_noop_writer,
        success_message="Saved",
    )


class TestWizardCatalog:
    """Tests for WizardCatalog construction and lookups."""

    def test_requires_confirm_last(self):
        """A wizard must end with a confirm step."""
        with pytest.raises(ValueError, match="must end with a confirm step"):
            _catalog(
                steps=(
                    StepDefinition(key="title", prompt="?", validator=ValidatorKind.FREE_TEXT),
                )
            )

    def test_rejects_duplicate_keys(self):
        """Step keys are unique within a wizard."""
        with pytest.raises(ValueError, match="duplicate step keys"):
            _catalog(
                steps=(
                    StepDefinition(key="a", prompt="?", validator=ValidatorKind.FREE_TEXT),
                    StepDefinition(key="a", prompt="?", validator=ValidatorKind.CONFIRM),
                )
            )

    def test_index_of_unknown_key(self):
        """Unknown keys raise KeyError."""
        with pytest.raises(KeyError):
            _catalog().index_of("missing")

    def test_dependents_of(self):
        """Branch steps are found by their upstream key."""
        catalog = build_default_catalog().get(WizardKind.PROFILE)
        assert [step.key for step in catalog.dependents_of("majorFamily")] == ["major"]


class TestStepCatalog:
    """Tests for the StepCatalog registry."""

    def test_default_catalog_has_all_kinds(self):
        """Every wizard kind is registered."""
        assert set(build_default_catalog().kinds()) == set(WizardKind)

    def test_lookup_by_start_command(self):
        """Start commands resolve to their wizard; other tokens do not."""
        catalog = build_default_catalog()
        assert catalog.for_start_command(PROFILE_COMMAND).kind is WizardKind.PROFILE
        assert catalog.for_start_command(GOAL_COMMAND).kind is WizardKind.GOAL
        assert catalog.for_start_command(START) is None

    def test_rejects_duplicate_kind(self):
        """Two catalogs of one kind are a configuration error."""
        with pytest.raises(ValueError, match="Duplicate wizard kind"):
            StepCatalog([_catalog(), _catalog(command="Other")])

    def test_rejects_duplicate_command(self):
        """Two catalogs sharing a start command are a configuration error."""
        with pytest.raises(ValueError, match="Duplicate start command"):
            StepCatalog([_catalog(), _catalog(kind=WizardKind.TASK)])

    def test_every_wizard_ends_with_confirm(self):
        """All shipped wizards end with a confirm step."""
        catalog = build_default_catalog()
        for kind in catalog.kinds():
            wizard = catalog.get(kind)
            assert wizard.step_at(len(wizard) - 1).validator is ValidatorKind.CONFIRM

    def test_options_survive_normalization(self):
        """No option button is read back as a menu command."""
        catalog = build_default_catalog()
        for kind in catalog.kinds():
            for step in catalog.get(kind).steps:
                for option in step.options:
                    assert normalize(option) == option, (kind, step.key, option)
                    assert option not in GLOBAL_MENU_TOKENS


class TestFormatAnswer:
    """Tests for summary formatting."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, "(skipped)"),
            ([], "(skipped)"),
            (["a", "b"], "a, b"),
            ({"file_name": "notes.pdf", "file_id": "x"}, "notes.pdf"),
            ([{"name": "python", "score": 8}], "python:8"),
            (42, "42"),
        ],
    )
    def test_formats(self, value, expected):
        """Values render in a readable form."""
        assert format_answer(value) == expected


class TestTextColumnLimits:
    """Free-text answers are capped at the width of the column they land in."""

    @pytest.mark.parametrize(
        ("kind", "key", "column"),
        [
            (WizardKind.PROFILE, "fullName", User.__table__.c.full_name),
            (WizardKind.PROFILE, "phoneOrEmail", User.__table__.c.phone_or_email),
            (WizardKind.PROFILE, "university", UserProfile.__table__.c.university),
            (WizardKind.PROFILE, "city", UserProfile.__table__.c.city),
            (WizardKind.SUBMISSION, "title", ContentSubmission.__table__.c.title),
            (WizardKind.GOAL, "title", PathGoal.__table__.c.title),
            (WizardKind.TASK, "title", PathTask.__table__.c.title),
            (WizardKind.ARTIFACT, "title", PathArtifact.__table__.c.title),
        ],
    )
    def test_max_length_matches_column(self, kind, key, column):
        """max_length equals the String column length."""
        wizard = build_default_catalog().get(kind)
        step = wizard.step_at(wizard.index_of(key))

        assert step.max_length == column.type.length
