"""Per-step parsing and bounds checking.

validate() is total: every input yields either Accepted(value) or
Rejected(message), and the message always tells the actor how to fix it.
MULTI_SELECT and FILE_ONLY input is routed elsewhere by the controller,
but validate() still answers for them so callers never hit a missing case.
"""

import re
from dataclasses import dataclass
from typing import Any

from pydantic import AnyHttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from fanjobo.wizards.normalizer import CONFIRM, is_skip
from fanjobo.wizards.state import WizardSession
from fanjobo.wizards.steps import LIST_VALIDATORS, StepDefinition, ValidatorKind

# =============================================================================
# Messages
# =============================================================================

REQUIRED_MESSAGE = "This field is required."
CHOOSE_MESSAGE = "Please choose one of the buttons."
URL_MESSAGE = "That link is not valid. It must start with http:// or https://."
FILE_EXPECTED_MESSAGE = "Please send the file as a PDF document."
CONFIRM_MESSAGE = "Press Confirm to save, or Cancel to discard."
SELECT_AT_LEAST_ONE_MESSAGE = "Select at least one option."

DEFAULT_SKILL_SCORE = 5
MIN_SKILL_SCORE = 1
MAX_SKILL_SCORE = 10

_LIST_SEPARATOR = re.compile(r"[,،]")
_INTEGER = re.compile(r"[+-]?\d+")

_http_url = TypeAdapter(AnyHttpUrl)


@dataclass(frozen=True)
class Accepted:
    """Input accepted; value is what goes into answers."""

    value: Any


@dataclass(frozen=True)
class Rejected:
    """Input rejected; message is shown and the step does not change."""

    message: str


ValidationResult = Accepted | Rejected


# =============================================================================
# Parsers
# =============================================================================


def split_list(raw: str) -> list[str]:
    """Split on Latin or Arabic commas, trim, drop empties."""
    return [item.strip() for item in _LIST_SEPARATOR.split(raw) if item.strip()]


def parse_skills(raw: str) -> list[dict[str, Any]]:
    """Parse "name:score" items.

    A missing or non-numeric score defaults to 5; scores are clamped to
    [1, 10]. Items without a name are dropped.

    Args:
        raw: Comma separated skill items.

    Returns:
        List of {"name": str, "score": int}.
    """
    skills = []
    for item in split_list(raw):
        name, _, score_text = item.partition(":")
        name = name.strip()
        if not name:
            continue
        try:
            score = int(float(score_text.strip()))
        except (ValueError, OverflowError):
            score = DEFAULT_SKILL_SCORE
        skills.append(
            {"name": name, "score": min(MAX_SKILL_SCORE, max(MIN_SKILL_SCORE, score))}
        )
    return skills


def is_http_url(raw: str) -> bool:
    """True for an absolute http:// or https:// URL with a host."""
    try:
        _http_url.validate_python(raw)
    except PydanticValidationError:
        return False
    return True


def parse_bounded_int(
    raw: str, min_value: int | None, max_value: int | None
) -> int | None:
    """Parse a whole number and check it against the bounds.

    Unicode decimal digits (e.g. Persian numerals) are accepted.

    Returns:
        The number, or None when it is not an integer or out of range.
    """
    if not _INTEGER.fullmatch(raw):
        return None
    value = int(raw)
    if min_value is not None and value < min_value:
        return None
    if max_value is not None and value > max_value:
        return None
    return value


def bounded_int_message(step: StepDefinition) -> str:
    """Rejection message that states the bounds."""
    if step.min_value is not None and step.max_value is not None:
        return f"Enter a whole number between {step.min_value} and {step.max_value}."
    if step.min_value is not None:
        return f"Enter a whole number of at least {step.min_value}."
    if step.max_value is not None:
        return f"Enter a whole number of at most {step.max_value}."
    return "Enter a whole number."


# =============================================================================
# Validation
# =============================================================================


def empty_value(step: StepDefinition) -> Any:
    """Value stored for a skipped optional step."""
    return [] if step.validator in LIST_VALIDATORS else None


def check_presence(step: StepDefinition, raw: str) -> ValidationResult | None:
    """Apply the skip and required rules shared by every validator kind.

    Args:
        step: Step being answered.
        raw: Normalized input.

    Returns:
        A final result for skip/empty input, or None to continue parsing.
    """
    skipped = not raw or is_skip(raw)
    if not skipped:
        return None
    if step.required:
        return Rejected(REQUIRED_MESSAGE)
    return Accepted(empty_value(step))


def validate(step: StepDefinition, raw_text: str, session: WizardSession) -> ValidationResult:
    """Validate and coerce one text answer.

    Args:
        step: Step being answered.
        raw_text: Normalized input text.
        session: Current session (branch steps read earlier answers).

    Returns:
        Accepted with the coerced value, or Rejected with a message.
    """
    raw = raw_text.strip()

    if step.validator is ValidatorKind.FILE_ONLY:
        return Rejected(FILE_EXPECTED_MESSAGE)

    if step.validator is ValidatorKind.CONFIRM:
        if raw == CONFIRM:
            return Accepted(True)
        return Rejected(CONFIRM_MESSAGE)

    presence = check_presence(step, raw)
    if presence is not None:
        return presence

    match step.validator:
        case ValidatorKind.ENUM | ValidatorKind.MULTI_SELECT:
            option = step.match_option(raw, session.answers)
            if option is None:
                return Rejected(CHOOSE_MESSAGE)
            return Accepted(option)

        case ValidatorKind.BOUNDED_INT:
            value = parse_bounded_int(raw, step.min_value, step.max_value)
            if value is None:
                return Rejected(bounded_int_message(step))
            return Accepted(value)

        case ValidatorKind.URL:
            if not is_http_url(raw):
                return Rejected(URL_MESSAGE)
            return Accepted(raw)

        case ValidatorKind.CSV_LIST:
            items = split_list(raw)
            if step.lowercase:
                items = [item.lower() for item in items]
            if step.max_items is not None:
                items = items[: step.max_items]
            if step.required and not items:
                return Rejected(REQUIRED_MESSAGE)
            return Accepted(items)

        case ValidatorKind.SKILL_LIST:
            skills = parse_skills(raw)
            if step.required and not skills:
                return Rejected(REQUIRED_MESSAGE)
            return Accepted(skills)

        case _:
            if step.required and len(raw) < step.min_length:
                return Rejected(
                    f"The answer is too short (at least {step.min_length} characters)."
                )
            if step.max_length is not None and len(raw) > step.max_length:
                return Rejected(
                    f"The answer is too long (at most {step.max_length} characters)."
                )
            return Accepted(raw)
