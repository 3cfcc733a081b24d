"""Input normalization for chat text.

Keyboard buttons are shown decorated (a checkmark on selected options, arrows
on page navigation) and users may type localized command words. Everything
is mapped back to one canonical token before any dispatch happens, so the
engine and the plain menu only ever compare against the constants below.
"""

import re

# =============================================================================
# Canonical tokens
# =============================================================================

CANCEL = "Cancel"
SKIP = "Skip"
CONFIRM = "Confirm"
PREVIOUS_PAGE = "Previous"
NEXT_PAGE = "Next"

START = "Start"
HELP = "Help"
MAIN_MENU = "Main menu"
UNIVERSITY = "University"
INDUSTRY = "Industry"
MY_PATH = "My path"

UNIVERSITY_COURSES = "University courses"
UNIVERSITY_PROFESSORS = "University professors"
UNIVERSITY_NOTES = "University notes"
UNIVERSITY_BOOKS = "University books"
UNIVERSITY_RESOURCES = "University resources"
UNIVERSITY_EXAM_TIPS = "University exam tips"

PROFILE_COMMAND = "Complete profile"
SUBMIT_COMMAND = "Submit content"
PATH_SETUP_COMMAND = "Path setup"
GOAL_COMMAND = "Add goal"
TASK_COMMAND = "Add task"
ARTIFACT_COMMAND = "Add artifact"

SAVE_GOALS = "Save goals"
SAVE_INTERESTS = "Save interests"
SAVE_DAYS = "Save days"

# Menu commands a running wizard intercepts ("finish or cancel first")
GLOBAL_MENU_TOKENS = frozenset(
    {
        START,
        HELP,
        MAIN_MENU,
        UNIVERSITY,
        INDUSTRY,
        MY_PATH,
        UNIVERSITY_COURSES,
        UNIVERSITY_PROFESSORS,
        UNIVERSITY_NOTES,
        UNIVERSITY_BOOKS,
        UNIVERSITY_RESOURCES,
        UNIVERSITY_EXAM_TIPS,
        PROFILE_COMMAND,
        SUBMIT_COMMAND,
        PATH_SETUP_COMMAND,
        GOAL_COMMAND,
        TASK_COMMAND,
        ARTIFACT_COMMAND,
    }
)

SELECTED_MARK = "✅"

# Canonical token -> label shown on the button
DISPLAY_LABELS: dict[str, str] = {
    PREVIOUS_PAGE: "⬅️ Previous",
    NEXT_PAGE: "Next ➡️",
}

# Localized words and slash commands -> canonical token
LOCALIZED_ALIASES: dict[str, str] = {
    "/cancel": CANCEL,
    "لغو": CANCEL,
    "رد": SKIP,
    "ندارم": SKIP,
    "-": SKIP,
    "/confirm": CONFIRM,
    "ثبت نهایی": CONFIRM,
    "⬅️ قبلی": PREVIOUS_PAGE,
    "بعدی ➡️": NEXT_PAGE,
    "/start": START,
    "شروع": START,
    "/help": HELP,
    "راهنما": HELP,
    "بازگشت به منوی اصلی": MAIN_MENU,
    "دانشگاه": UNIVERSITY,
    "صنعت": INDUSTRY,
    "مسیر من": MY_PATH,
    "دروس دانشگاه": UNIVERSITY_COURSES,
    "اساتید دانشگاه": UNIVERSITY_PROFESSORS,
    "جزوه های دانشگاه": UNIVERSITY_NOTES,
    "کتاب های دانشگاه": UNIVERSITY_BOOKS,
    "منابع دانشگاه": UNIVERSITY_RESOURCES,
    "نکات امتحان دانشگاه": UNIVERSITY_EXAM_TIPS,
    "/profile": PROFILE_COMMAND,
    "تکمیل پروفایل": PROFILE_COMMAND,
    "/submit": SUBMIT_COMMAND,
    "ارسال محتوا": SUBMIT_COMMAND,
    "/path": PATH_SETUP_COMMAND,
    "تنظیم مسیر": PATH_SETUP_COMMAND,
    "/goal": GOAL_COMMAND,
    "/task": TASK_COMMAND,
    "/artifact": ARTIFACT_COMMAND,
    "ثبت اهداف": SAVE_GOALS,
    "ثبت علاقه ها": SAVE_INTERESTS,
    "ثبت روزها": SAVE_DAYS,
}

_CANONICAL_TOKENS = (
    CANCEL,
    SKIP,
    CONFIRM,
    PREVIOUS_PAGE,
    NEXT_PAGE,
    SAVE_GOALS,
    SAVE_INTERESTS,
    SAVE_DAYS,
    *GLOBAL_MENU_TOKENS,
)

_ALIASES: dict[str, str] = {
    **{token.casefold(): token for token in _CANONICAL_TOKENS},
    **{label.casefold(): token for token, label in DISPLAY_LABELS.items()},
    **{alias.casefold(): token for alias, token in LOCALIZED_ALIASES.items()},
}

_SELECTED_PREFIX = re.compile(r"^\s*(?:✅|☑️|✔️?)\s*")


def strip_selection_mark(text: str) -> str:
    """Remove a leading "selected" glyph from a button label."""
    return _SELECTED_PREFIX.sub("", text, count=1).strip()


def normalize(text: str | None) -> str:
    """Canonicalize raw chat text.

    Strips surrounding whitespace and any selection glyph, then maps known
    decorated or localized labels to their canonical token. Text that is not
    a known label is returned trimmed but otherwise untouched.

    Args:
        text: Raw message text (None is treated as empty).

    Returns:
        Canonical token or the trimmed text.
    """
    stripped = strip_selection_mark(text or "")
    return _ALIASES.get(stripped.casefold(), stripped)


def display_label(token: str) -> str:
    """Button label for a canonical token."""
    return DISPLAY_LABELS.get(token, token)


def mark_selected(label: str) -> str:
    """Button label for a currently selected multi-select option."""
    return f"{SELECTED_MARK} {label}"


def is_skip(text: str | None) -> bool:
    """True when the text is one of the skip keywords."""
    return normalize(text) == SKIP
