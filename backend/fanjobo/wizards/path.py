"""Path planner wizards: onboarding, goal, task and artifact.

Each is a short table of steps plus one write into the my_path_* tables.
"""

from fanjobo.wizards.collaborators import NotificationSink, Storage
from fanjobo.wizards.normalizer import (
    ARTIFACT_COMMAND,
    CONFIRM,
    GOAL_COMMAND,
    PATH_SETUP_COMMAND,
    SAVE_DAYS,
    TASK_COMMAND,
)
from fanjobo.wizards.state import WizardKind, WizardSession
from fanjobo.wizards.steps import (
    SHORT_TEXT_MAX_LENGTH,
    StepDefinition,
    ValidatorKind,
    WizardCatalog,
)

# Button label -> stored stage; labels must not collide with menu tokens
STAGE_VALUES = {
    "University focus": "university",
    "Industry focus": "industry",
    "University and industry": "university_and_industry",
}
STAGE_OPTIONS = tuple(STAGE_VALUES)
WEEKDAYS = (
    "Saturday",
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
)
GOAL_TYPES = ("academic", "career", "project", "application")
TASK_TYPES = ("study", "practice", "project", "apply", "interview")
ARTIFACT_TYPES = ("github", "demo", "file", "certificate", "resume_bullet")

PRIORITY_OPTIONS = ("1", "2", "3", "4", "5")


def _priority_step() -> StepDefinition:
    return StepDefinition(
        key="priority",
        label="Priority",
        prompt="Priority from 1 (highest) to 5 (lowest)?",
        validator=ValidatorKind.BOUNDED_INT,
        min_value=1,
        max_value=5,
        options=PRIORITY_OPTIONS,
        columns=5,
    )


def _title_step(prompt: str) -> StepDefinition:
    return StepDefinition(
        key="title",
        label="Title",
        prompt=prompt,
        validator=ValidatorKind.FREE_TEXT,
        max_length=SHORT_TEXT_MAX_LENGTH,
    )


def _confirm_step(subject: str) -> StepDefinition:
    return StepDefinition(
        key="confirm",
        prompt=f"Review the {subject} and press {CONFIRM} to save.",
        validator=ValidatorKind.CONFIRM,
    )


# =============================================================================
# Onboarding
# =============================================================================

ONBOARDING_STEPS = (
    StepDefinition(
        key="currentStage",
        label="Stage",
        prompt="Where are you focusing right now?",
        validator=ValidatorKind.ENUM,
        options=STAGE_OPTIONS,
        columns=1,
    ),
    StepDefinition(
        key="fourWeekGoal",
        label="Four-week goal",
        prompt="What do you want to achieve in the next four weeks?",
        validator=ValidatorKind.FREE_TEXT,
    ),
    StepDefinition(
        key="weeklyHours",
        label="Weekly hours",
        prompt="How many hours per week can you spend on it?",
        validator=ValidatorKind.BOUNDED_INT,
        min_value=1,
        max_value=80,
        options=("6", "10", "15", "20"),
        columns=4,
    ),
    StepDefinition(
        key="freeDays",
        label="Free days",
        prompt=f"Select the days you are usually free, then press {SAVE_DAYS}.",
        validator=ValidatorKind.MULTI_SELECT,
        options=WEEKDAYS,
        done_marker=SAVE_DAYS,
        columns=3,
    ),
    StepDefinition(
        key="universityWeight",
        label="University share (%)",
        prompt="What share of your effort goes to university work (0-100)? The rest goes to industry.",
        validator=ValidatorKind.BOUNDED_INT,
        min_value=0,
        max_value=100,
        options=("25", "50", "75"),
        columns=3,
    ),
    _confirm_step("plan"),
)


async def save_path_profile(
    session: WizardSession, storage: Storage, notifier: NotificationSink
) -> None:
    """Upsert the planner settings; industry weight is the complement."""
    answers = session.answers
    university_weight = answers["universityWeight"]
    await storage.upsert(
        "my_path_profiles",
        {
            "user_id": session.context["user_id"],
            "current_stage": STAGE_VALUES[answers["currentStage"]],
            "four_week_goal": answers["fourWeekGoal"],
            "weekly_hours": answers["weeklyHours"],
            "free_days": list(answers["freeDays"]),
            "university_weight": university_weight,
            "industry_weight": 100 - university_weight,
        },
        conflict_keys=("user_id",),
    )


# =============================================================================
# Goal
# =============================================================================

GOAL_STEPS = (
    StepDefinition(
        key="type",
        label="Type",
        prompt="What kind of goal is it?",
        validator=ValidatorKind.ENUM,
        options=GOAL_TYPES,
    ),
    _title_step("Describe the goal in a short title."),
    _priority_step(),
    StepDefinition(
        key="successMetrics",
        label="Success metrics",
        prompt="How will you know you reached it? Comma separated. (optional)",
        validator=ValidatorKind.CSV_LIST,
        required=False,
    ),
    _confirm_step("goal"),
)


async def save_goal(
    session: WizardSession, storage: Storage, notifier: NotificationSink
) -> None:
    """Insert an active goal with zero progress."""
    answers = session.answers
    await storage.insert(
        "my_path_goals",
        {
            "user_id": session.context["user_id"],
            "type": answers["type"],
            "title": answers["title"],
            "priority": answers["priority"],
            "status": "active",
            "success_metrics": list(answers.get("successMetrics") or []),
            "progress_percent": 0,
        },
    )


# =============================================================================
# Task
# =============================================================================

TASK_STEPS = (
    StepDefinition(
        key="type",
        label="Type",
        prompt="What kind of task is it?",
        validator=ValidatorKind.ENUM,
        options=TASK_TYPES,
        columns=3,
    ),
    _title_step("Describe the task in a short title."),
    StepDefinition(
        key="estimatedMinutes",
        label="Estimated minutes",
        prompt="How many minutes will it take (10-600)?",
        validator=ValidatorKind.BOUNDED_INT,
        min_value=10,
        max_value=600,
        options=("30", "60", "90", "120"),
        columns=4,
    ),
    _priority_step(),
    _confirm_step("task"),
)


async def save_task(
    session: WizardSession, storage: Storage, notifier: NotificationSink
) -> None:
    """Insert a task in the todo state."""
    answers = session.answers
    await storage.insert(
        "my_path_tasks",
        {
            "user_id": session.context["user_id"],
            "type": answers["type"],
            "title": answers["title"],
            "estimated_minutes": answers["estimatedMinutes"],
            "priority": answers["priority"],
            "status": "todo",
        },
    )


# =============================================================================
# Artifact
# =============================================================================

ARTIFACT_STEPS = (
    StepDefinition(
        key="type",
        label="Type",
        prompt="What kind of artifact is it?",
        validator=ValidatorKind.ENUM,
        options=ARTIFACT_TYPES,
        columns=3,
    ),
    _title_step("Give the artifact a short title."),
    StepDefinition(
        key="url",
        label="Link",
        prompt="Link to the artifact. (optional)",
        validator=ValidatorKind.URL,
        required=False,
    ),
    StepDefinition(
        key="description",
        label="Description",
        prompt="A short description. (optional)",
        validator=ValidatorKind.FREE_TEXT,
        required=False,
    ),
    _confirm_step("artifact"),
)


async def save_artifact(
    session: WizardSession, storage: Storage, notifier: NotificationSink
) -> None:
    """Insert an artifact."""
    answers = session.answers
    await storage.insert(
        "my_path_artifacts",
        {
            "user_id": session.context["user_id"],
            "type": answers["type"],
            "title": answers["title"],
            "url": answers.get("url"),
            "description": answers.get("description"),
        },
    )


# =============================================================================
# Catalogs
# =============================================================================

ONBOARDING_WIZARD = WizardCatalog(
    kind=WizardKind.ONBOARDING,
    title="Path setup",
    start_command=PATH_SETUP_COMMAND,
    intro="Let's set up your personal path.",
    steps=ONBOARDING_STEPS,
    writer=save_path_profile,
    success_message="Your path settings have been saved.",
)

GOAL_WIZARD = WizardCatalog(
    kind=WizardKind.GOAL,
    title="New goal",
    start_command=GOAL_COMMAND,
    intro="Let's add a goal to your path.",
    steps=GOAL_STEPS,
    writer=save_goal,
    success_message="Goal added to your path.",
)

TASK_WIZARD = WizardCatalog(
    kind=WizardKind.TASK,
    title="New task",
    start_command=TASK_COMMAND,
    intro="Let's add a task to your path.",
    steps=TASK_STEPS,
    writer=save_task,
    success_message="Task added to your path.",
)

ARTIFACT_WIZARD = WizardCatalog(
    kind=WizardKind.ARTIFACT,
    title="New artifact",
    start_command=ARTIFACT_COMMAND,
    intro="Let's record an artifact.",
    steps=ARTIFACT_STEPS,
    writer=save_artifact,
    success_message="Artifact added to your path.",
)

PATH_WIZARDS = (ONBOARDING_WIZARD, GOAL_WIZARD, TASK_WIZARD, ARTIFACT_WIZARD)
