"""Profile wizard: academic profile completion.

Collects contact details, the academic track (a branch step whose options
depend on the chosen major family, paged four per keyboard page), goals,
interests and optional links. Completion updates users and upserts
user_profiles.
"""

from collections.abc import Mapping
from typing import Any

from fanjobo.wizards.collaborators import NotificationSink, Storage
from fanjobo.wizards.normalizer import (
    CONFIRM,
    PROFILE_COMMAND,
    SAVE_GOALS,
    SAVE_INTERESTS,
)
from fanjobo.wizards.state import WizardKind, WizardSession
from fanjobo.wizards.steps import (
    SHORT_TEXT_MAX_LENGTH,
    StepDefinition,
    ValidatorKind,
    WizardCatalog,
)

# =============================================================================
# Option tables
# =============================================================================

MAJOR_FAMILIES = (
    "Industrial Engineering",
    "Electrical Engineering",
    "Mechanical Engineering",
    "Chemical Engineering",
    "Materials Engineering",
    "Surveying Engineering",
    "Civil Engineering",
    "Basic Sciences",
    "Computer Engineering",
    "Marine Engineering",
    "Architecture",
    "Biomedical Engineering",
)

MAJOR_TRACKS: dict[str, tuple[str, ...]] = {
    "Mechanical Engineering": (
        "Mechanical Engineering - Mechatronics",
        "Mechanical Engineering - Naval",
        "Mechanical Engineering - Naval Architecture and Structures",
        "Mechanical Engineering - Applied Design",
        "Mechanical Engineering - Energy Conversion",
        "Mechanical Engineering - Marine Engineering",
        "Mechanical Engineering - Manufacturing",
    ),
    "Computer Engineering": (
        "Computer Engineering - AI and Robotics",
        "Computer Engineering - Software",
        "Computer Engineering - Computer Systems Architecture",
    ),
    "Biomedical Engineering": ("Biomedical Engineering - Bioelectric",),
    "Electrical Engineering": (
        "Electrical Engineering - Telecommunications",
        "Electrical Engineering - Control",
        "Electrical Engineering - Power",
        "Electrical Engineering - Electronics",
    ),
    "Chemical Engineering": (
        "Chemical Engineering - Process Design",
        "Chemical Engineering - Separation Processes",
        "Chemical Engineering - Thermokinetics and Catalysis",
        "Chemical Engineering - Biotechnology",
    ),
}

MAJOR_PAGE_SIZE = 4

LEVEL_OPTIONS = ("Associate", "Bachelor", "Master", "PhD")
LEVEL_ALIASES = {
    "کاردانی": "Associate",
    "کارشناسی": "Bachelor",
    "کارشناسی ارشد": "Master",
    "دکتری": "PhD",
}

TERM_OPTIONS = tuple(str(term) for term in range(1, 13))

SKILL_LEVEL_OPTIONS = ("beginner", "intermediate", "advanced")
SKILL_LEVEL_ALIASES = {
    "مبتدی": "beginner",
    "متوسط": "intermediate",
    "پیشرفته": "advanced",
}

GOAL_OPTIONS = ("Internship", "Job", "Resume project", "Pass courses")
GOAL_ALIASES = {
    "کارآموزی": "Internship",
    "شغل": "Job",
    "پروژه رزومه": "Resume project",
    "قبولی دروس": "Pass courses",
}
GOAL_SEPARATOR = " | "

HOURS_OPTIONS = ("6", "10", "15", "20")
INTEREST_OPTIONS = ("ai", "web", "backend", "frontend", "data", "robotics")


def tracks_for_family(answers: Mapping[str, Any]) -> list[str]:
    """Tracks of the chosen family; a family without tracks offers itself."""
    family = answers.get("majorFamily")
    if not family:
        return []
    return list(MAJOR_TRACKS.get(family, (family,)))


# =============================================================================
# Steps
# =============================================================================

PROFILE_STEPS = (
    StepDefinition(
        key="fullName",
        label="Full name",
        prompt="Please enter your full name.",
        validator=ValidatorKind.FREE_TEXT,
        max_length=SHORT_TEXT_MAX_LENGTH,
    ),
    StepDefinition(
        key="phoneOrEmail",
        label="Phone or email",
        prompt="Please enter your phone number or email address.",
        validator=ValidatorKind.FREE_TEXT,
        max_length=SHORT_TEXT_MAX_LENGTH,
    ),
    StepDefinition(
        key="university",
        label="University",
        prompt="Which university do you attend? (optional)",
        validator=ValidatorKind.FREE_TEXT,
        max_length=SHORT_TEXT_MAX_LENGTH,
        required=False,
    ),
    StepDefinition(
        key="city",
        label="City",
        prompt="In which city do you study? (optional)",
        validator=ValidatorKind.FREE_TEXT,
        max_length=SHORT_TEXT_MAX_LENGTH,
        required=False,
    ),
    StepDefinition(
        key="majorFamily",
        label="Field",
        prompt="Choose your main field of study.",
        validator=ValidatorKind.ENUM,
        options=MAJOR_FAMILIES,
    ),
    StepDefinition(
        key="major",
        label="Track",
        prompt="Choose your track.",
        validator=ValidatorKind.ENUM,
        branch=tracks_for_family,
        depends_on="majorFamily",
        page_size=MAJOR_PAGE_SIZE,
    ),
    StepDefinition(
        key="level",
        label="Degree",
        prompt="Choose your degree level.",
        validator=ValidatorKind.ENUM,
        options=LEVEL_OPTIONS,
        aliases=LEVEL_ALIASES,
    ),
    StepDefinition(
        key="term",
        label="Term",
        prompt="Choose your current term.",
        validator=ValidatorKind.ENUM,
        options=TERM_OPTIONS,
        columns=3,
    ),
    StepDefinition(
        key="skillLevel",
        label="Skill level",
        prompt="What is your current skill level in your field?",
        validator=ValidatorKind.ENUM,
        options=SKILL_LEVEL_OPTIONS,
        aliases=SKILL_LEVEL_ALIASES,
    ),
    StepDefinition(
        key="shortTermGoal",
        label="Goals",
        prompt=f"Select your short-term goals (several allowed), then press {SAVE_GOALS}.",
        validator=ValidatorKind.MULTI_SELECT,
        options=GOAL_OPTIONS,
        aliases=GOAL_ALIASES,
        done_marker=SAVE_GOALS,
    ),
    StepDefinition(
        key="weeklyHours",
        label="Weekly hours",
        prompt="On average, how many free hours do you have per week?",
        validator=ValidatorKind.BOUNDED_INT,
        min_value=1,
        max_value=80,
        options=HOURS_OPTIONS,
        columns=4,
    ),
    StepDefinition(
        key="interests",
        label="Interests",
        prompt=(
            f"Select your interests (several allowed), then press {SAVE_INTERESTS}. "
            "(optional)"
        ),
        validator=ValidatorKind.MULTI_SELECT,
        required=False,
        options=INTEREST_OPTIONS,
        done_marker=SAVE_INTERESTS,
        columns=3,
    ),
    StepDefinition(
        key="skills",
        label="Skills",
        prompt="List your current skills as name:score (1-10), comma separated. (optional)",
        validator=ValidatorKind.SKILL_LIST,
        required=False,
    ),
    StepDefinition(
        key="passedCourses",
        label="Passed courses",
        prompt="List important courses you have passed, comma separated. (optional)",
        validator=ValidatorKind.CSV_LIST,
        required=False,
    ),
    StepDefinition(
        key="resumeUrl",
        label="Resume",
        prompt="Link to your resume. (optional)",
        validator=ValidatorKind.URL,
        required=False,
    ),
    StepDefinition(
        key="githubUrl",
        label="GitHub",
        prompt="Link to your GitHub profile. (optional)",
        validator=ValidatorKind.URL,
        required=False,
    ),
    StepDefinition(
        key="portfolioUrl",
        label="Portfolio",
        prompt="Link to your portfolio. (optional)",
        validator=ValidatorKind.URL,
        required=False,
    ),
    StepDefinition(
        key="confirm",
        prompt=f"Review your profile and press {CONFIRM} to save.",
        validator=ValidatorKind.CONFIRM,
    ),
)


# =============================================================================
# Completion
# =============================================================================


async def save_profile(
    session: WizardSession, storage: Storage, notifier: NotificationSink
) -> None:
    """Update the user's contact fields and upsert the academic profile."""
    answers = session.answers
    user_id = session.context["user_id"]

    await storage.update(
        "users",
        {
            "full_name": answers["fullName"],
            "phone_or_email": answers["phoneOrEmail"],
        },
        where={"id": user_id},
    )
    await storage.upsert(
        "user_profiles",
        {
            "user_id": user_id,
            "university": answers.get("university"),
            "city": answers.get("city"),
            "major": answers.get("major"),
            "level": answers.get("level"),
            "term": answers.get("term"),
            "interests": list(answers.get("interests") or []),
            "skill_level": answers.get("skillLevel"),
            "short_term_goal": GOAL_SEPARATOR.join(answers.get("shortTermGoal") or []),
            "weekly_hours": answers.get("weeklyHours"),
            "resume_url": answers.get("resumeUrl"),
            "github_url": answers.get("githubUrl"),
            "portfolio_url": answers.get("portfolioUrl"),
            "skills": list(answers.get("skills") or []),
            "passed_courses": list(answers.get("passedCourses") or []),
        },
        conflict_keys=("user_id",),
    )


PROFILE_WIZARD = WizardCatalog(
    kind=WizardKind.PROFILE,
    title="Profile completion",
    start_command=PROFILE_COMMAND,
    intro="Let's complete your profile.",
    steps=PROFILE_STEPS,
    writer=save_profile,
    success_message="Your profile has been saved.",
)
