"""Prompt and reply-keyboard rendering.

Rendering is a pure function of (catalog, session). The checkmark on
selected options and the arrows on page navigation are decoration only;
they are stripped again by the normalizer and never read back as state.
"""

from fanjobo.core.pagination import Page, paginate
from fanjobo.wizards.normalizer import (
    ARTIFACT_COMMAND,
    CANCEL,
    CONFIRM,
    GOAL_COMMAND,
    HELP,
    INDUSTRY,
    MAIN_MENU,
    MY_PATH,
    NEXT_PAGE,
    PATH_SETUP_COMMAND,
    PREVIOUS_PAGE,
    PROFILE_COMMAND,
    SKIP,
    START,
    SUBMIT_COMMAND,
    TASK_COMMAND,
    UNIVERSITY,
    UNIVERSITY_BOOKS,
    UNIVERSITY_COURSES,
    UNIVERSITY_EXAM_TIPS,
    UNIVERSITY_NOTES,
    UNIVERSITY_PROFESSORS,
    UNIVERSITY_RESOURCES,
    display_label,
    mark_selected,
)
from fanjobo.wizards.state import Reply, WizardSession
from fanjobo.wizards.steps import StepDefinition, ValidatorKind, WizardCatalog

Keyboard = list[list[str]]

MAIN_MENU_KEYBOARD: Keyboard = [
    [START, PROFILE_COMMAND],
    [UNIVERSITY, INDUSTRY],
    [MY_PATH, SUBMIT_COMMAND],
    [HELP],
]

UNIVERSITY_MENU_KEYBOARD: Keyboard = [
    [UNIVERSITY_COURSES, UNIVERSITY_PROFESSORS],
    [UNIVERSITY_NOTES, UNIVERSITY_BOOKS],
    [UNIVERSITY_RESOURCES, UNIVERSITY_EXAM_TIPS],
    [MAIN_MENU],
]

PATH_MENU_KEYBOARD: Keyboard = [
    [PATH_SETUP_COMMAND, GOAL_COMMAND],
    [TASK_COMMAND, ARTIFACT_COMMAND],
    [MAIN_MENU],
]


def chunk(items: list[str], size: int) -> Keyboard:
    """Split labels into rows of at most size buttons."""
    size = max(1, size)
    return [items[i : i + size] for i in range(0, len(items), size)]


def step_page(step: StepDefinition, session: WizardSession) -> Page[str]:
    """Visible page of a paged step's options."""
    options = step.resolve_options(session.answers)
    return paginate(options, step.page_size or max(1, len(options)), session.page_for(step.key))


def _footer(step: StepDefinition) -> list[str]:
    if step.required:
        return [CANCEL]
    return [SKIP, CANCEL]


def build_keyboard(step: StepDefinition, session: WizardSession) -> Keyboard:
    """Reply keyboard for the current step.

    Args:
        step: Current step.
        session: Current session (selection and page state).

    Returns:
        Button rows; always ends with a Cancel button.
    """
    rows: Keyboard = []

    match step.validator:
        case ValidatorKind.ENUM if step.page_size:
            page = step_page(step, session)
            rows.extend(chunk(page.items, 1))
            nav = []
            if page.has_previous:
                nav.append(display_label(PREVIOUS_PAGE))
            if page.has_next:
                nav.append(display_label(NEXT_PAGE))
            if nav:
                rows.append(nav)

        case ValidatorKind.ENUM:
            rows.extend(chunk(step.resolve_options(session.answers), step.columns))

        case ValidatorKind.BOUNDED_INT if step.options:
            # Quick-pick buttons; any number in range is still accepted
            rows.extend(chunk(list(step.options), step.columns))

        case ValidatorKind.MULTI_SELECT:
            selected = set(session.answers.get(step.key) or [])
            labels = [
                mark_selected(option) if option in selected else option
                for option in step.resolve_options(session.answers)
            ]
            rows.extend(chunk(labels, step.columns))
            if step.done_marker:
                rows.append([step.done_marker])

        case ValidatorKind.CONFIRM:
            return [[CONFIRM], [CANCEL]]

        case ValidatorKind.FILE_ONLY:
            return [[CANCEL]]

    rows.append(_footer(step))
    return rows


def render_prompt(
    catalog: WizardCatalog, session: WizardSession, notice: str | None = None
) -> Reply:
    """Question for the session's current step, with its keyboard.

    The text reads "(i/n) prompt"; a notice (rejection or status message)
    is put in front when given. The confirm step appends the summary.

    Args:
        catalog: Wizard catalog.
        session: Session whose cursor selects the step.
        notice: Optional line shown before the question.

    Returns:
        Reply with text and keyboard.
    """
    step = catalog.step_at(session.step_index)
    text = f"({session.step_index + 1}/{len(catalog)}) {step.prompt}"

    if step.validator is ValidatorKind.CONFIRM:
        text = f"{text}\n\n{catalog.summarize(session.answers)}"
    elif step.validator is ValidatorKind.ENUM and step.page_size:
        page = step_page(step, session)
        if page.total_pages > 1:
            text = f"{text}\nPage {page.current_page + 1}/{page.total_pages}"

    if notice:
        text = f"{notice}\n\n{text}"

    return Reply(text=text, keyboard=build_keyboard(step, session))


def selection_notice(selections: list[str]) -> str:
    """Status line shown after a multi-select toggle."""
    if not selections:
        return "Nothing selected yet."
    return f"Selected: {', '.join(selections)}"
