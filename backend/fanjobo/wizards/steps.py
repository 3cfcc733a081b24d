"""Declarative step catalog.

Each wizard is a WizardCatalog: an ordered tuple of StepDefinition entries
plus the hooks the generic engine needs at the edges (folder path for the
upload step, a completion guard, the completion writer). No wizard carries
its own control flow; WizardController interprets the tables.
"""

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from fanjobo.wizards.collaborators import CompletionWriter
from fanjobo.wizards.state import WizardKind, WizardSession


class ValidatorKind(str, Enum):
    """How a step parses and checks its input."""

    ENUM = "enum"
    """Answer must be one of the step's options (or a branch's options)."""

    BOUNDED_INT = "bounded_int"
    """Whole number within [min_value, max_value]."""

    URL = "url"
    """Absolute http(s) URL."""

    CSV_LIST = "csv_list"
    """Comma separated list (Latin or Arabic comma)."""

    SKILL_LIST = "skill_list"
    """Comma separated name:score items, score clamped to 1-10."""

    FREE_TEXT = "free_text"
    """Any text of at least min_length characters."""

    FILE_ONLY = "file_only"
    """Only a document event can answer; handled by ExternalStepAdapter."""

    MULTI_SELECT = "multi_select"
    """Toggle options on and off until the done marker is sent."""

    CONFIRM = "confirm"
    """Terminal step: the confirm marker triggers persistence."""


LIST_VALIDATORS = frozenset(
    {ValidatorKind.CSV_LIST, ValidatorKind.SKILL_LIST, ValidatorKind.MULTI_SELECT}
)

# Width of the String(255) name and title columns
SHORT_TEXT_MAX_LENGTH = 255

BranchResolver = Callable[[Mapping[str, Any]], Sequence[str]]
"""Answers so far -> valid options of a branch step."""


@dataclass(frozen=True)
class StepDefinition:
    """One question of a wizard.

    Attributes:
        key: Answer key; unique within a wizard.
        prompt: Question shown to the actor.
        validator: Parsing and checking rule.
        label: Short name used in the confirmation summary.
        required: Whether empty or skip input is rejected.
        options: Fixed option list for ENUM and MULTI_SELECT steps.
        aliases: Accepted input (case-insensitive) -> option value.
        branch: Resolves the option list from earlier answers; overrides
            options when set.
        depends_on: Key of the upstream step a branch reads from; answering
            that step resets this step's keyboard page.
        page_size: Options per keyboard page; None shows all options.
        done_marker: Canonical token that finishes a MULTI_SELECT step.
        min_value: Lower bound for BOUNDED_INT.
        max_value: Upper bound for BOUNDED_INT.
        min_length: Minimum FREE_TEXT length for required steps.
        max_length: Maximum FREE_TEXT length; the width of the column the
            answer is written to.
        max_items: Cap on CSV_LIST items (extra items are dropped).
        lowercase: Lower-case CSV_LIST items.
        columns: Buttons per keyboard row.
    """

    key: str
    prompt: str
    validator: ValidatorKind
    label: str = ""
    required: bool = True
    options: tuple[str, ...] = ()
    aliases: Mapping[str, str] = field(default_factory=dict)
    branch: BranchResolver | None = None
    depends_on: str | None = None
    page_size: int | None = None
    done_marker: str | None = None
    min_value: int | None = None
    max_value: int | None = None
    min_length: int = 2
    max_length: int | None = None
    max_items: int | None = None
    lowercase: bool = False
    columns: int = 2

    @property
    def display_label(self) -> str:
        """Label for summaries, defaulting to the key."""
        return self.label or self.key

    def resolve_options(self, answers: Mapping[str, Any]) -> list[str]:
        """Valid options given the answers so far."""
        if self.branch is not None:
            return list(self.branch(answers))
        return list(self.options)

    def match_option(self, text: str, answers: Mapping[str, Any]) -> str | None:
        """Map input text to one of the valid options.

        Args:
            text: Normalized input.
            answers: Answers so far (for branch steps).

        Returns:
            The matched option value, or None.
        """
        folded = text.casefold()
        for option in self.resolve_options(answers):
            if option.casefold() == folded:
                return option
        for alias, option in self.aliases.items():
            if alias.casefold() == folded:
                return option
        return None


UploadFolderResolver = Callable[[WizardSession], list[str]]
CompletionGuard = Callable[[WizardSession], str | None]
"""Returns the key of the step to rewind to, or None when persisting is safe."""


@dataclass(frozen=True)
class WizardCatalog:
    """Everything the engine needs to run one wizard kind.

    Attributes:
        kind: Wizard kind.
        title: Human name used in replies ("Profile", "Add goal").
        start_command: Canonical menu token that starts the wizard.
        intro: Message shown before the first question.
        steps: Ordered steps; the last one is always a CONFIRM step.
        writer: Completion writer run on confirm.
        success_message: Reply after a successful write.
        requires_profile: Refuse to start without a completed profile.
        upload_folder: Folder path for the FILE_ONLY step's upload.
        guard: Pre-persist check (see CompletionGuard).
    """

    kind: WizardKind
    title: str
    start_command: str
    intro: str
    steps: tuple[StepDefinition, ...]
    writer: CompletionWriter
    success_message: str
    requires_profile: bool = False
    upload_folder: UploadFolderResolver | None = None
    guard: CompletionGuard | None = None

    def __post_init__(self) -> None:
        if not self.steps or self.steps[-1].validator is not ValidatorKind.CONFIRM:
            msg = f"{self.kind.value} wizard must end with a confirm step"
            raise ValueError(msg)
        keys = [step.key for step in self.steps]
        if len(keys) != len(set(keys)):
            msg = f"{self.kind.value} wizard has duplicate step keys"
            raise ValueError(msg)

    def __len__(self) -> int:
        return len(self.steps)

    def step_at(self, index: int) -> StepDefinition:
        """Step at a cursor position."""
        return self.steps[index]

    def index_of(self, key: str) -> int:
        """Cursor position of a step key.

        Raises:
            KeyError: If no step has that key.
        """
        for index, step in enumerate(self.steps):
            if step.key == key:
                return index
        raise KeyError(key)

    def dependents_of(self, key: str) -> list[StepDefinition]:
        """Steps whose options depend on the given step."""
        return [step for step in self.steps if step.depends_on == key]

    def summarize(self, answers: Mapping[str, Any]) -> str:
        """One line per answered step, for the confirmation prompt."""
        lines = []
        for step in self.steps:
            if step.validator is ValidatorKind.CONFIRM:
                continue
            lines.append(f"{step.display_label}: {format_answer(answers.get(step.key))}")
        return "\n".join(lines)


def format_answer(value: Any) -> str:
    """Render an accepted answer for display."""
    if value is None or value == []:
        return "(skipped)"
    if isinstance(value, dict):
        if "file_name" in value:
            return str(value["file_name"])
        if "name" in value:
            return f"{value['name']}:{value.get('score', '')}"
        return ", ".join(f"{k}={v}" for k, v in value.items())
    if isinstance(value, list):
        return ", ".join(format_answer(item) for item in value)
    return str(value)


class StepCatalog:
    """Registry of wizard catalogs by kind and by start command."""

    def __init__(self, wizards: Sequence[WizardCatalog]) -> None:
        """Initialize the registry.

        Args:
            wizards: One catalog per wizard kind.

        Raises:
            ValueError: If two catalogs share a kind or a start command.
        """
        self._by_kind: dict[WizardKind, WizardCatalog] = {}
        self._by_command: dict[str, WizardCatalog] = {}
        for wizard in wizards:
            if wizard.kind in self._by_kind:
                msg = f"Duplicate wizard kind: {wizard.kind.value}"
                raise ValueError(msg)
            if wizard.start_command in self._by_command:
                msg = f"Duplicate start command: {wizard.start_command}"
                raise ValueError(msg)
            self._by_kind[wizard.kind] = wizard
            self._by_command[wizard.start_command] = wizard

    def get(self, kind: WizardKind) -> WizardCatalog:
        """Catalog for a wizard kind.

        Raises:
            KeyError: If the kind is not registered.
        """
        return self._by_kind[kind]

    def for_start_command(self, token: str) -> WizardCatalog | None:
        """Catalog started by a canonical menu token, if any."""
        return self._by_command.get(token)

    def kinds(self) -> list[WizardKind]:
        """Registered kinds."""
        return list(self._by_kind)
